from game import (
    BLACK,
    COLORS,
    FLOWER_CARD,
    GREEN,
    RED,
    Card,
    dragon,
    make_board,
    parse_card,
)


def cards(*codes):
    """Cards from short codes, top card first: cards('5R', 'DG')."""
    return [parse_card(c) for c in codes]


def goal_pile(color, top=9):
    return [Card(color, r) for r in range(top, 0, -1)]


def dragon_quads():
    return [[dragon(c)] * 4 for c in COLORS]


def near_won_board():
    """Everything finished except the red 9 sitting alone in column 0."""
    return make_board(
        free_cells=dragon_quads(),
        flower=[FLOWER_CARD],
        goals=[goal_pile(BLACK), goal_pile(GREEN), goal_pile(RED, 8)],
        tableau=[cards('9R')],
    )


def three_move_board():
    """Red 9 covers red 8 in column 0; red goal stands at 7."""
    return make_board(
        free_cells=dragon_quads(),
        flower=[FLOWER_CARD],
        goals=[goal_pile(BLACK), goal_pile(GREEN), goal_pile(RED, 7)],
        tableau=[cards('9R', '8R')],
    )


def deadlock_board():
    """One lone dragon of each color in the free cells and nothing else to play."""
    return make_board(free_cells=[cards('DB'), cards('DG'), cards('DR')])
