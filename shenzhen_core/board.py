from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence, Tuple

from .cards import COLORS, Card

Stack = Tuple[Card, ...]  # front (index 0) is the top, accessible card

FREE = 'free'
FLOWER_CELL = 'flower'
GOAL = 'goal'
TABLEAU = 'tableau'
ZONES: Tuple[str, ...] = (FREE, FLOWER_CELL, GOAL, TABLEAU)

FREE_CELL_COUNT = 3
TABLEAU_COUNT = 8


@dataclass(frozen=True)
class Location:
    """Addresses the top `count` cards of one stack on the board.

    `index` selects the free cell, tableau column or goal pile (goal piles are
    indexed by color position); it is None for the single flower cell.
    """
    zone: str
    index: Optional[int] = None
    count: int = 1

    def __str__(self) -> str:
        if self.zone == FLOWER_CELL:
            slot = 'flower'
        elif self.zone == GOAL and self.index is not None and 0 <= self.index < len(COLORS):
            slot = f'goal[{COLORS[self.index]}]'
        else:
            slot = f'{self.zone}[{self.index}]'
        return slot if self.count == 1 else f'{slot} x{self.count}'


@dataclass(frozen=True)
class Move:
    src: Location
    dst: Location

    def __str__(self) -> str:
        return f'{self.src} -> {Location(self.dst.zone, self.dst.index)}'


@dataclass(frozen=True)
class Board:
    """Complete game state. Boards are values: every transition builds a new one."""
    free_cells: Tuple[Stack, ...]
    flower: Stack
    goals: Tuple[Stack, ...]  # one pile per color, in COLORS order
    tableau: Tuple[Stack, ...]

    def __post_init__(self) -> None:
        if len(self.free_cells) != FREE_CELL_COUNT:
            raise ValueError(f'Expected {FREE_CELL_COUNT} free cells, got {len(self.free_cells)}')
        if len(self.goals) != len(COLORS):
            raise ValueError(f'Expected {len(COLORS)} goal piles, got {len(self.goals)}')
        if len(self.tableau) != TABLEAU_COUNT:
            raise ValueError(f'Expected {TABLEAU_COUNT} tableau columns, got {len(self.tableau)}')

    def stacks(self, zone: str) -> Tuple[Stack, ...]:
        """All stacks of a zone; the flower cell is a zone with a single stack."""
        if zone == FREE:
            return self.free_cells
        if zone == FLOWER_CELL:
            return (self.flower,)
        if zone == GOAL:
            return self.goals
        if zone == TABLEAU:
            return self.tableau
        raise ValueError(f'Unknown zone: {zone!r}')

    def stack_at(self, zone: str, index: Optional[int] = None) -> Stack:
        stacks = self.stacks(zone)
        if zone == FLOWER_CELL:
            if index not in (None, 0):
                raise ValueError(f'Flower cell has no index {index}')
            return stacks[0]
        if index is None or not 0 <= index < len(stacks):
            raise ValueError(f'Index {index!r} out of range for zone {zone!r}')
        return stacks[index]

    def top(self, zone: str, index: Optional[int] = None) -> Optional[Card]:
        stack = self.stack_at(zone, index)
        return stack[0] if stack else None


def _seq(cards: Optional[Iterable[Card]]) -> Stack:
    return tuple(cards) if cards else tuple()


def make_board(
    free_cells: Sequence[Iterable[Card]] = (),
    flower: Optional[Iterable[Card]] = None,
    goals: Sequence[Iterable[Card]] = (),
    tableau: Sequence[Iterable[Card]] = (),
) -> Board:
    """Builds a board from partial zone lists, padding missing stacks with empties.

    Every stack is given top-first. Goal piles are listed in COLORS order.
    """
    def _pad(stacks: Sequence[Iterable[Card]], size: int, name: str) -> Tuple[Stack, ...]:
        if len(stacks) > size:
            raise ValueError(f'Too many {name}: {len(stacks)} > {size}')
        out = [_seq(s) for s in stacks]
        out.extend(tuple() for _ in range(size - len(out)))
        return tuple(out)

    return Board(
        free_cells=_pad(free_cells, FREE_CELL_COUNT, 'free cells'),
        flower=_seq(flower),
        goals=_pad(goals, len(COLORS), 'goal piles'),
        tableau=_pad(tableau, TABLEAU_COUNT, 'tableau columns'),
    )


def empty_board() -> Board:
    return make_board()


def get_run(board: Board, location: Location) -> Stack:
    """Returns the top `location.count` cards of the addressed stack."""
    stack = board.stack_at(location.zone, location.index)
    if location.count < 1 or location.count > len(stack):
        raise ValueError(f'Cannot take {location.count} card(s) from {location} holding {len(stack)}')
    return stack[:location.count]


def replace_stack(board: Board, zone: str, index: Optional[int], stack: Stack) -> Board:
    """Returns a new board with one stack swapped out."""
    if zone == FLOWER_CELL:
        board.stack_at(zone, index)
        return replace(board, flower=stack)
    stacks = list(board.stacks(zone))
    board.stack_at(zone, index)
    stacks[index] = stack  # type: ignore[index]
    if zone == FREE:
        return replace(board, free_cells=tuple(stacks))
    if zone == GOAL:
        return replace(board, goals=tuple(stacks))
    return replace(board, tableau=tuple(stacks))


def same_slot(a: Location, b: Location) -> bool:
    if a.zone != b.zone:
        return False
    if a.zone == FLOWER_CELL:
        return True
    return a.index == b.index


def transfer(board: Board, move: Move) -> Board:
    """Moves the top `move.src.count` cards onto the destination, keeping their order.

    No legality check is made; callers guarantee the move is valid.
    """
    run = get_run(board, move.src)
    dest = board.stack_at(move.dst.zone, move.dst.index)
    if same_slot(move.src, move.dst):
        return board
    source = board.stack_at(move.src.zone, move.src.index)
    out = replace_stack(board, move.src.zone, move.src.index, source[len(run):])
    return replace_stack(out, move.dst.zone, move.dst.index, run + dest)


def all_cards(board: Board) -> List[Card]:
    """Every card on the board, zone by zone."""
    cards: List[Card] = []
    for zone in ZONES:
        for stack in board.stacks(zone):
            cards.extend(stack)
    return cards


def is_won(board: Board) -> bool:
    """Three dragon quads stowed, tableau cleared, flower placed, every goal pile complete."""
    if sum(len(cell) for cell in board.free_cells) != 12:
        return False
    if any(board.tableau):
        return False
    if len(board.flower) != 1:
        return False
    return all(len(pile) == 9 for pile in board.goals)
