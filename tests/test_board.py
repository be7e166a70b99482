import unittest
from collections import Counter

from game import (
    BLACK,
    FLOWER_CARD,
    FREE,
    GOAL,
    GREEN,
    RED,
    TABLEAU,
    Location,
    Move,
    all_cards,
    build_deck,
    dragon,
    empty_board,
    get_run,
    is_won,
    make_board,
    transfer,
)
from board_fixtures import cards, dragon_quads, goal_pile, near_won_board


class TestBoardAccess(unittest.TestCase):
    def test_given_column_when_getting_run_then_top_cards_returned_unchanged(self):
        board = make_board(tableau=[cards('4B', '5R', '9G')])
        run = get_run(board, Location(TABLEAU, 0, 2))
        self.assertEqual(run, tuple(cards('4B', '5R')))
        self.assertEqual(len(board.tableau[0]), 3)

    def test_given_count_larger_than_stack_when_getting_run_then_raises(self):
        board = make_board(tableau=[cards('4B')])
        with self.assertRaises(ValueError):
            get_run(board, Location(TABLEAU, 0, 2))
        with self.assertRaises(ValueError):
            get_run(board, Location(TABLEAU, 0, 0))

    def test_given_index_out_of_range_when_addressing_then_raises(self):
        board = empty_board()
        with self.assertRaises(ValueError):
            board.stack_at(TABLEAU, 8)
        with self.assertRaises(ValueError):
            board.stack_at(FREE, -1)
        with self.assertRaises(ValueError):
            board.stack_at('discard', 0)

    def test_given_wrong_topology_when_building_board_then_raises(self):
        with self.assertRaises(ValueError):
            make_board(tableau=[[]] * 9)
        with self.assertRaises(ValueError):
            make_board(free_cells=[[], [], [], []])


class TestTransfer(unittest.TestCase):
    def test_given_run_when_transferring_then_order_kept_and_source_shortened(self):
        board = make_board(tableau=[cards('4B', '5R', '9G'), cards('6G')])
        out = transfer(board, Move(Location(TABLEAU, 0, 2), Location(TABLEAU, 1)))
        self.assertEqual(out.tableau[0], tuple(cards('9G')))
        self.assertEqual(out.tableau[1], tuple(cards('4B', '5R', '6G')))
        # input board is a value and stays untouched
        self.assertEqual(board.tableau[0], tuple(cards('4B', '5R', '9G')))

    def test_given_unchecked_transfer_when_illegal_then_still_performed(self):
        board = make_board(tableau=[cards('4B'), cards('4R')])
        out = transfer(board, Move(Location(TABLEAU, 0), Location(TABLEAU, 1)))
        self.assertEqual(out.tableau[1], tuple(cards('4B', '4R')))

    def test_given_card_when_transferring_to_goal_and_free_cell_then_zones_updated(self):
        board = make_board(tableau=[cards('1G', '7B')])
        out = transfer(board, Move(Location(TABLEAU, 0), Location(GOAL, 1)))
        self.assertEqual(out.goals[1], tuple(cards('1G')))
        out2 = transfer(out, Move(Location(TABLEAU, 0), Location(FREE, 2)))
        self.assertEqual(out2.free_cells[2], tuple(cards('7B')))
        self.assertEqual(Counter(all_cards(out2)), Counter(all_cards(board)))


class TestIsWon(unittest.TestCase):
    def _won_board(self):
        return make_board(
            free_cells=dragon_quads(),
            flower=[FLOWER_CARD],
            goals=[goal_pile(BLACK), goal_pile(GREEN), goal_pile(RED)],
        )

    def test_given_finished_board_when_checking_then_won(self):
        board = self._won_board()
        self.assertTrue(is_won(board))
        self.assertEqual(Counter(all_cards(board)), Counter(build_deck()))

    def test_given_any_deviation_when_checking_then_not_won(self):
        self.assertFalse(is_won(near_won_board()))
        self.assertFalse(is_won(empty_board()))
        # only two quads stowed: 8 free-cell cards
        two_quads = make_board(
            free_cells=dragon_quads()[:2],
            flower=[FLOWER_CARD],
            goals=[goal_pile(BLACK), goal_pile(GREEN), goal_pile(RED)],
            tableau=[[dragon(RED)] * 4],
        )
        self.assertFalse(is_won(two_quads))
        no_flower = make_board(
            free_cells=dragon_quads(),
            goals=[goal_pile(BLACK), goal_pile(GREEN), goal_pile(RED)],
            tableau=[[FLOWER_CARD]],
        )
        self.assertFalse(is_won(no_flower))


class TestLocationText(unittest.TestCase):
    def test_given_locations_when_formatting_then_readable(self):
        self.assertEqual(str(Location(TABLEAU, 2, 3)), 'tableau[2] x3')
        self.assertEqual(str(Location(GOAL, 2)), 'goal[red]')
        self.assertEqual(
            str(Move(Location(TABLEAU, 0, 2), Location(TABLEAU, 5, 2))),
            'tableau[0] x2 -> tableau[5]',
        )


if __name__ == "__main__":
    unittest.main(verbosity=2)
