from __future__ import annotations

from dataclasses import replace
from typing import Tuple

from .board import Board, Stack
from .cards import card_code


def _stack_sort_key(stack: Stack) -> Tuple[str, ...]:
    return tuple(card_code(c) for c in stack)


def canonicalize(board: Board) -> Board:
    """Sorts the interchangeable free cells and tableau columns into a fixed order.

    Two boards that differ only by a permutation of free cells or of tableau
    columns canonicalize to the same board. Goal piles are tied to their
    color and are left in place.
    """
    free_cells = tuple(sorted(board.free_cells, key=_stack_sort_key))
    tableau = tuple(sorted(board.tableau, key=_stack_sort_key))
    return replace(board, free_cells=free_cells, tableau=tableau)


def is_canonical(board: Board) -> bool:
    return canonicalize(board) == board
