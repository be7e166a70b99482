from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Generator, Iterator, List, Optional, Tuple, Union

from .board import FREE, TABLEAU, Board, Location, Move, is_won, transfer
from .cards import COLORS, FLOWER_CARD, Card
from .hashkey import board_key, canonical_key
from .moves import consolidate_dragons, consolidation_eligible, valid_destinations, valid_sequence

# Heuristic weights. Only the ordering of siblings depends on them.
EMPTY_COLUMN_WEIGHT = 1
WON_CARD_WEIGHT = 4
NEEDED_EXPOSED_WEIGHT = 2
DRAGON_COLOR_WEIGHT = 1
UNLOCK_MULTIPLIER = 2


def _debug_enabled() -> bool:
    return os.getenv('SHENZHEN_DEBUG', '0').lower() in ('1', 'true', 'yes', 'on')


def _trace(msg: str) -> None:
    if _debug_enabled():
        print(f"[solve] {msg}")


@dataclass(frozen=True)
class ConsolidateDragons:
    color: str

    def __str__(self) -> str:
        return f'consolidate {self.color} dragons'


Action = Union[Move, ConsolidateDragons]


@dataclass(frozen=True)
class Candidate:
    """One scored child of a search node."""
    action: Action
    board: Board
    score: int


@dataclass(frozen=True)
class StepEvent:
    """Emitted once per expanded node while stepping: the node, how we got there, and its ordered children."""
    board: Board
    path: Tuple[Action, ...]
    candidates: Tuple[Candidate, ...]


@dataclass(frozen=True)
class WonEvent:
    moves: Tuple[Action, ...]
    board: Board


@dataclass(frozen=True)
class Won:
    moves: Tuple[Action, ...]
    board: Board
    visited: int = 0


@dataclass(frozen=True)
class NoSolution:
    """No winning line was found. `complete` is False when a state limit cut the search short."""
    complete: bool = True
    visited: int = 0


SolveResult = Union[Won, NoSolution]
SearchEvent = Union[StepEvent, WonEvent]


class VisitTable:
    """Per-search visit counters keyed by board.

    With `canonical=True` boards that only differ by the order of free cells
    or tableau columns share a counter.
    """

    def __init__(self, canonical: bool = False) -> None:
        self._key = canonical_key if canonical else board_key
        self._counts: Dict[str, int] = {}

    def touch(self, board: Board) -> int:
        """Increments and returns the counter for `board`."""
        key = self._key(board)
        n = self._counts.get(key, 0) + 1
        self._counts[key] = n
        return n

    def count(self, board: Board) -> int:
        return self._counts.get(self._key(board), 0)

    def __len__(self) -> int:
        return len(self._counts)


def possible_moves(board: Board) -> List[Action]:
    """Enumerates the actions the search considers from `board`."""
    actions: List[Action] = []
    for color in COLORS:
        if consolidation_eligible(board, color) is not None:
            actions.append(ConsolidateDragons(color))

    for i, cell in enumerate(board.free_cells):
        if len(cell) != 1:
            continue
        src = Location(FREE, i, 1)
        for dest in valid_destinations(board, src):
            if dest.zone != FREE:
                actions.append(Move(src, dest))

    for i, column in enumerate(board.tableau):
        for count in range(1, len(column) + 1):
            # Longer runs cannot become valid once a prefix breaks.
            if not valid_sequence(column[:count]):
                break
            src = Location(TABLEAU, i, count)
            took_free_cell = False
            for dest in valid_destinations(board, src):
                if dest.zone == FREE:
                    if took_free_cell:
                        continue
                    took_free_cell = True
                if count == len(column) and dest.zone == TABLEAU and not board.tableau[dest.index]:
                    continue
                actions.append(Move(src, dest))
    return actions


def apply(board: Board, action: Action) -> Board:
    """Applies an action produced by possible_moves."""
    if isinstance(action, ConsolidateDragons):
        return consolidate_dragons(board, action.color)
    return transfer(board, action)


def consolidation_available(board: Board) -> bool:
    return any(consolidation_eligible(board, color) is not None for color in COLORS)


@dataclass(frozen=True)
class _Features:
    empty_columns: int
    won_cards: int
    needed_exposed: int
    dragon_colors: int
    consolidation: bool


def _needed_cards(board: Board) -> List[Card]:
    needed = [FLOWER_CARD]
    for color, pile in zip(COLORS, board.goals):
        top = pile[0].rank if pile else 0
        if top < 9:
            needed.append(Card(color, top + 1))
    return needed


def _features(board: Board) -> _Features:
    tops = [column[0] for column in board.tableau if column]
    needed = _needed_cards(board)
    return _Features(
        empty_columns=len(board.tableau) - len(tops),
        won_cards=len(board.flower) + sum(len(pile) for pile in board.goals),
        needed_exposed=sum(1 for card in tops if card in needed),
        dragon_colors=len({card.color for card in tops if card.is_dragon}),
        consolidation=consolidation_available(board),
    )


def _diff_score(before: _Features, after: _Features) -> int:
    value = (
        EMPTY_COLUMN_WEIGHT * (after.empty_columns - before.empty_columns)
        + WON_CARD_WEIGHT * (after.won_cards - before.won_cards)
        + NEEDED_EXPOSED_WEIGHT * (after.needed_exposed - before.needed_exposed)
        - DRAGON_COLOR_WEIGHT * (after.dragon_colors - before.dragon_colors)
    )
    if after.consolidation and not before.consolidation:
        value *= UNLOCK_MULTIPLIER
    return value


def score(from_board: Board, to_board: Board) -> int:
    """Heuristic value of going from one board to the next; higher is tried first."""
    return _diff_score(_features(from_board), _features(to_board))


def _expand(board: Board, visits: VisitTable) -> List[Candidate]:
    before = _features(board)
    fresh: List[Candidate] = []
    for action in possible_moves(board):
        child = apply(board, action)
        # Counting happens for every child; only first sightings survive.
        if visits.touch(child) > 1:
            continue
        fresh.append(Candidate(action, child, _diff_score(before, _features(child))))
    fresh.sort(key=lambda c: c.score, reverse=True)
    return fresh


@dataclass
class _Frame:
    board: Board
    action: Optional[Action]
    remaining: Iterator[Candidate]


def _path(frames: List[_Frame], via: Optional[Action]) -> Tuple[Action, ...]:
    path = [f.action for f in frames[1:] if f.action is not None]
    if via is not None:
        path.append(via)
    return tuple(path)


def _search(
    root: Board,
    visits: VisitTable,
    *,
    stepping: bool,
    max_states: Optional[int],
) -> Generator[SearchEvent, None, SolveResult]:
    """Depth-first search over best-first ordered siblings, using an explicit frame stack.

    Yields a StepEvent before each node's children are examined (only when
    `stepping`), a WonEvent when a win is found, and returns the result.
    """
    frames: List[_Frame] = []
    node, via = root, None
    while True:
        if max_states is not None and len(visits) >= max_states:
            _trace(f"state limit {max_states} reached")
            return NoSolution(complete=False, visited=len(visits))

        candidates = _expand(node, visits)
        if stepping:
            yield StepEvent(node, _path(frames, via), tuple(candidates))

        for cand in candidates:
            if is_won(cand.board):
                moves = _path(frames, via) + (cand.action,)
                _trace(f"won in {len(moves)} moves, {len(visits)} boards seen")
                yield WonEvent(moves, cand.board)
                return Won(moves=moves, board=cand.board, visited=len(visits))

        frames.append(_Frame(node, via, iter(candidates)))
        nxt: Optional[Candidate] = None
        while frames:
            nxt = next(frames[-1].remaining, None)
            if nxt is not None:
                break
            frames.pop()
        if nxt is None:
            _trace(f"exhausted after {len(visits)} boards")
            return NoSolution(complete=True, visited=len(visits))
        node, via = nxt.board, nxt.action


def iter_steps(
    board: Board,
    *,
    canonical: bool = False,
    max_states: Optional[int] = None,
) -> Generator[SearchEvent, None, SolveResult]:
    """Stepping search: each next() advances to the next node.

    Yields StepEvents, then a single WonEvent if a win is found. When the
    search is exhausted the generator simply ends; its return value carries
    the SolveResult.
    """
    visits = VisitTable(canonical=canonical)
    _trace("stepping search started")
    return _search(board, visits, stepping=True, max_states=max_states)


def solve(
    board: Board,
    interactive: bool = False,
    *,
    canonical: bool = False,
    max_states: Optional[int] = None,
) -> Union[SolveResult, Generator[SearchEvent, None, SolveResult]]:
    """Searches for a winning sequence of actions.

    Returns Won(moves) with the first winning path found or NoSolution.
    With `interactive=True` returns the stepping generator from iter_steps
    instead, leaving the caller to pull each step.
    """
    if interactive:
        return iter_steps(board, canonical=canonical, max_states=max_states)
    visits = VisitTable(canonical=canonical)
    _trace("search started")
    search = _search(board, visits, stepping=False, max_states=max_states)
    while True:
        try:
            next(search)
        except StopIteration as stop:
            return stop.value
