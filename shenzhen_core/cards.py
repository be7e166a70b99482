from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

BLACK = 'black'
GREEN = 'green'
RED = 'red'
COLORS: Tuple[str, ...] = (BLACK, GREEN, RED)

DRAGON = 'dragon'
FLOWER = 'flower'

Rank = Union[int, str]  # 1..9, DRAGON or FLOWER

_COLOR_CODES = {BLACK: 'B', GREEN: 'G', RED: 'R'}
_CODE_COLORS = {v: k for k, v in _COLOR_CODES.items()}


@dataclass(frozen=True)
class Card:
    """A single card. Flowers carry no color; numbered cards and dragons always do."""
    color: Optional[str]
    rank: Rank

    def __post_init__(self) -> None:
        if self.rank == FLOWER:
            if self.color is not None:
                raise ValueError('Flower card cannot have a color')
            return
        if self.color not in COLORS:
            raise ValueError(f'Invalid card color: {self.color!r}')
        if self.rank == DRAGON:
            return
        if isinstance(self.rank, bool) or not isinstance(self.rank, int) or not 1 <= self.rank <= 9:
            raise ValueError(f'Invalid card rank: {self.rank!r}')

    @property
    def is_number(self) -> bool:
        return isinstance(self.rank, int)

    @property
    def is_dragon(self) -> bool:
        return self.rank == DRAGON

    @property
    def is_flower(self) -> bool:
        return self.rank == FLOWER

    def __str__(self) -> str:
        return card_code(self)


FLOWER_CARD = Card(None, FLOWER)


def dragon(color: str) -> Card:
    return Card(color, DRAGON)


def color_index(color: str) -> int:
    """Position of a color in COLORS; also the index of its goal pile."""
    return COLORS.index(color)


def build_deck() -> List[Card]:
    """Canonical 40-card deck: 1..9 per color, four dragons per color, one flower."""
    deck: List[Card] = [Card(color, rank) for color in COLORS for rank in range(1, 10)]
    for _ in range(4):
        deck.extend(dragon(color) for color in COLORS)
    deck.append(FLOWER_CARD)
    return deck


def card_code(card: Card) -> str:
    """Two-character code: rank then color, e.g. '5R', 'DG', 'FF' for the flower."""
    if card.is_flower:
        return 'FF'
    head = 'D' if card.is_dragon else str(card.rank)
    return head + _COLOR_CODES[card.color]


def parse_card(code: str) -> Card:
    """Inverse of card_code."""
    text = code.strip().upper()
    if text == 'FF':
        return FLOWER_CARD
    if len(text) != 2 or text[1] not in _CODE_COLORS:
        raise ValueError(f'Bad card code: {code!r}')
    color = _CODE_COLORS[text[1]]
    if text[0] == 'D':
        return Card(color, DRAGON)
    if not text[0].isdigit():
        raise ValueError(f'Bad card code: {code!r}')
    return Card(color, int(text[0]))
