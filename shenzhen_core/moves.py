from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .board import (
    FLOWER_CELL,
    FREE,
    GOAL,
    TABLEAU,
    Board,
    Location,
    Move,
    get_run,
    same_slot,
    transfer,
)
from .cards import Card, color_index, dragon


@dataclass(frozen=True)
class Consolidation:
    """Where the four exposed dragons of one color sit, and the free cell that receives them."""
    color: str
    dragons: Tuple[Location, ...]
    free_cell: int


def valid_sequence(run: Sequence[Card]) -> bool:
    """True if each card sits on one rank higher of a different color (read top-down)."""
    for top, below in zip(run, run[1:]):
        if not (top.is_number and below.is_number):
            return False
        if below.rank != top.rank + 1 or below.color == top.color:
            return False
    return True


def can_stack(board: Board, column: int, run: Sequence[Card]) -> bool:
    """Whether `run` may be placed on tableau column `column`."""
    if not valid_sequence(run):
        return False
    top = board.top(TABLEAU, column)
    if top is None:
        return True
    return valid_sequence(tuple(run) + (top,))


def goal_accepts(board: Board, card: Card) -> bool:
    """A goal pile takes the next number of its own color, starting from 1."""
    if not card.is_number:
        return False
    pile = board.goals[color_index(card.color)]
    if not pile:
        return card.rank == 1
    return pile[0].rank == card.rank - 1


def is_locked(board: Board, location: Location) -> bool:
    """Goal piles, the flower cell and consolidated dragon quads never give cards back."""
    if location.zone in (GOAL, FLOWER_CELL):
        return True
    if location.zone == FREE:
        return len(board.stack_at(FREE, location.index)) == 4
    return False


def valid_destinations(board: Board, location: Location) -> List[Location]:
    """All legal destinations for the top `location.count` cards, in precedence order.

    Single cards try their goal pile, then empty free cells, then tableau
    columns. Runs of two or more only go to tableau columns.
    """
    run = get_run(board, location)
    if is_locked(board, location):
        return []
    count = location.count
    found: List[Location] = []

    def _add(dest: Location) -> None:
        if not same_slot(dest, location) and dest not in found:
            found.append(dest)

    if count == 1:
        card = run[0]
        if card.is_flower:
            if not board.flower:
                _add(Location(FLOWER_CELL, None, 1))
            return found
        if goal_accepts(board, card):
            _add(Location(GOAL, color_index(card.color), 1))
        for i, cell in enumerate(board.free_cells):
            if not cell:
                _add(Location(FREE, i, 1))
    for i in range(len(board.tableau)):
        if can_stack(board, i, run):
            _add(Location(TABLEAU, i, count))
    return found


def consolidation_eligible(board: Board, color: str) -> Optional[Consolidation]:
    """Finds the four exposed dragons of `color` and a free cell to gather them in."""
    target = dragon(color)
    sources: List[Location] = []
    for i, cell in enumerate(board.free_cells):
        if len(cell) == 1 and cell[0] == target:
            sources.append(Location(FREE, i, 1))
    for i, column in enumerate(board.tableau):
        if column and column[0] == target:
            sources.append(Location(TABLEAU, i, 1))
    if len(sources) != 4:
        return None
    for i, cell in enumerate(board.free_cells):
        if not cell or (len(cell) == 4 and all(c == target for c in cell)):
            return Consolidation(color=color, dragons=tuple(sources), free_cell=i)
    return None


def consolidate_dragons(board: Board, color: str) -> Board:
    """Gathers the four exposed dragons of `color` into one free cell in a single step.

    Returns the input board unchanged when the consolidation is not available.
    """
    plan = consolidation_eligible(board, color)
    if plan is None:
        return board
    free_cells = list(board.free_cells)
    tableau = list(board.tableau)
    for loc in plan.dragons:
        if loc.zone == FREE:
            free_cells[loc.index] = free_cells[loc.index][1:]
        else:
            tableau[loc.index] = tableau[loc.index][1:]
    free_cells[plan.free_cell] = (dragon(color),) * 4
    return Board(
        free_cells=tuple(free_cells),
        flower=board.flower,
        goals=board.goals,
        tableau=tuple(tableau),
    )


def apply_validated(board: Board, move: Move) -> Board:
    """Performs the move only if its destination is legal; otherwise returns the board as is."""
    dests = valid_destinations(board, move.src)
    index = None if move.dst.zone == FLOWER_CELL else move.dst.index
    if Location(move.dst.zone, index, move.src.count) not in dests:
        return board
    return transfer(board, move)
