import unittest
from collections import Counter

from game import (
    BLACK,
    COLORS,
    DRAGON,
    FLOWER,
    FLOWER_CARD,
    RED,
    Card,
    all_cards,
    build_deck,
    card_code,
    deal_board,
    new_game,
    parse_card,
    shuffled_deck,
)


class TestCards(unittest.TestCase):
    def test_given_canonical_deck_when_counted_then_40_cards_with_expected_multiplicities(self):
        deck = build_deck()
        self.assertEqual(len(deck), 40)
        numbered = [c for c in deck if c.is_number]
        dragons = [c for c in deck if c.is_dragon]
        flowers = [c for c in deck if c.is_flower]
        self.assertEqual(len(numbered), 27)
        self.assertEqual(len(dragons), 12)
        self.assertEqual(flowers, [FLOWER_CARD])
        # each numbered card exactly once, each dragon four times
        self.assertEqual(len(set(numbered)), 27)
        counts = Counter(dragons)
        self.assertEqual(set(counts.values()), {4})
        self.assertEqual({c.color for c in counts}, set(COLORS))

    def test_given_bad_color_or_rank_when_constructing_card_then_raises(self):
        with self.assertRaises(ValueError):
            Card(RED, FLOWER)
        with self.assertRaises(ValueError):
            Card(None, 5)
        with self.assertRaises(ValueError):
            Card(None, DRAGON)
        with self.assertRaises(ValueError):
            Card(BLACK, 10)
        with self.assertRaises(ValueError):
            Card(BLACK, 0)
        with self.assertRaises(ValueError):
            Card('blue', 3)

    def test_given_cards_when_coding_and_parsing_then_codes_match(self):
        self.assertEqual(card_code(Card(RED, 5)), '5R')
        self.assertEqual(card_code(Card(BLACK, DRAGON)), 'DB')
        self.assertEqual(card_code(FLOWER_CARD), 'FF')
        self.assertEqual(parse_card('dg'), Card('green', DRAGON))
        self.assertEqual(str(parse_card('9B')), '9B')
        with self.assertRaises(ValueError):
            parse_card('XR')
        with self.assertRaises(ValueError):
            parse_card('5Q')


class TestDeal(unittest.TestCase):
    def test_given_seed_when_dealing_then_eight_columns_of_five(self):
        board = new_game(seed=42)
        self.assertEqual([len(col) for col in board.tableau], [5] * 8)
        self.assertTrue(all(not cell for cell in board.free_cells))
        self.assertEqual(board.flower, tuple())
        self.assertTrue(all(not pile for pile in board.goals))

    def test_given_dealt_board_when_collecting_cards_then_deck_multiset_preserved(self):
        board = new_game(seed=7)
        self.assertEqual(Counter(all_cards(board)), Counter(build_deck()))

    def test_given_same_seed_when_dealing_twice_then_identical_boards(self):
        self.assertEqual(new_game(seed=3), new_game(seed=3))
        self.assertNotEqual(shuffled_deck(seed=1), shuffled_deck(seed=2))

    def test_given_deck_order_when_dealing_then_last_card_dealt_is_on_top(self):
        deck = build_deck()
        board = deal_board(deck)
        self.assertEqual(board.tableau[0][-1], deck[0])
        self.assertEqual(board.tableau[0][0], deck[32])
        self.assertEqual(board.tableau[7][0], deck[39])

    def test_given_uneven_deck_when_dealing_then_raises(self):
        with self.assertRaises(ValueError):
            deal_board(build_deck()[:39])


if __name__ == "__main__":
    unittest.main(verbosity=2)
