from __future__ import annotations

from functools import lru_cache

from .board import Board, Stack
from .cards import Card, card_code
from .normalize import canonicalize


@lru_cache(maxsize=None)
def _code(card: Card) -> str:
    return card_code(card)


def _stack_key(stack: Stack) -> str:
    return ''.join(_code(c) for c in stack)


def board_key(board: Board) -> str:
    """Compact text key for a board: zones split by '|', stacks by '/', two characters per card.

    Every card code has the same width so the key is injective: equal keys
    mean structurally equal boards.
    """
    parts = (
        '/'.join(_stack_key(s) for s in board.free_cells),
        _stack_key(board.flower),
        '/'.join(_stack_key(s) for s in board.goals),
        '/'.join(_stack_key(s) for s in board.tableau),
    )
    return '|'.join(parts)


def canonical_key(board: Board) -> str:
    """Key of the canonicalized board; permuted free cells or columns share one key."""
    return board_key(canonicalize(board))
