import unittest

from llmchess_arena.elo import K_FACTOR, expected_score, outcome_from_result, rating_update
from llmchess_arena.models import GameResult, Outcome


class EloTests(unittest.TestCase):
    def test_equal_ratings_decisive(self):
        self.assertEqual(rating_update(1500, 1500, Outcome.WIN), (1516, 16))
        self.assertEqual(rating_update(1500, 1500, Outcome.LOSS), (1484, -16))

    def test_equal_ratings_draw_is_unchanged(self):
        self.assertEqual(rating_update(1500, 1500, Outcome.DRAW).new_rating, 1500)

    def test_favourite_and_upset(self):
        self.assertEqual(rating_update(1600, 1400, Outcome.WIN).delta, 8)
        self.assertEqual(rating_update(1400, 1600, Outcome.LOSS).delta, -8)
        self.assertEqual(rating_update(1400, 1600, Outcome.WIN).delta, 24)
        self.assertEqual(rating_update(1600, 1400, Outcome.LOSS).delta, -24)
        self.assertEqual(rating_update(1600, 1400, Outcome.DRAW).delta, -8)
        self.assertEqual(rating_update(1400, 1600, Outcome.DRAW).delta, 8)

    def test_expected_scores_sum_to_one(self):
        self.assertAlmostEqual(expected_score(1720, 1480) + expected_score(1480, 1720), 1.0)

    def test_extreme_rating_gap(self):
        self.assertLessEqual(abs(rating_update(2400, 1000, Outcome.LOSS).delta), K_FACTOR)
        self.assertEqual(rating_update(2400, 1000, Outcome.WIN).delta, 0)

    def test_outcome_from_result(self):
        self.assertEqual(outcome_from_result(GameResult.WHITE_WIN, is_white=True), Outcome.WIN)
        self.assertEqual(outcome_from_result(GameResult.WHITE_WIN, is_white=False), Outcome.LOSS)
        self.assertEqual(outcome_from_result(GameResult.BLACK_WIN, is_white=False), Outcome.WIN)
        self.assertEqual(outcome_from_result("1/2-1/2", is_white=True), Outcome.DRAW)


if __name__ == "__main__":
    unittest.main()
