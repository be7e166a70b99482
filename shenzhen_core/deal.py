from __future__ import annotations

import random
from typing import List, Optional, Sequence

from .board import TABLEAU_COUNT, Board, make_board
from .cards import Card, build_deck


def shuffled_deck(seed: Optional[int] = None) -> List[Card]:
    """Returns the canonical deck shuffled with a seedable RNG."""
    rng = random.Random(seed)
    deck = build_deck()
    rng.shuffle(deck)
    return deck


def deal_board(deck: Sequence[Card]) -> Board:
    """Deals the deck round-robin into the tableau; the last card dealt to a column is its top."""
    if len(deck) % TABLEAU_COUNT != 0:
        raise ValueError(f'Deck of {len(deck)} cards does not split evenly over {TABLEAU_COUNT} columns')
    columns: List[List[Card]] = [[] for _ in range(TABLEAU_COUNT)]
    for i, card in enumerate(deck):
        columns[i % TABLEAU_COUNT].insert(0, card)
    return make_board(tableau=columns)


def new_game(seed: Optional[int] = None) -> Board:
    """Deals a shuffled 40-card deck into 8 columns of 5."""
    return deal_board(shuffled_deck(seed))
