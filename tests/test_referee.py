import unittest

import chess

from llmchess_arena.models import Color, GameResult
from llmchess_arena.move_validator import parse_move
from llmchess_arena.referee import Referee

AFTER_E4 = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"
FOOLS_MATE = "rnb1kbnr/pppp1ppp/4p3/8/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
STALEMATE = "7k/5Q2/6K1/8/8/8/8/8 b - - 0 1"
FIFTY_MOVES = "8/8/8/4k3/8/8/8/R3K3 w - - 100 80"
CASTLE_READY = "r3k2r/pppppppp/8/8/8/8/PPPPPPPP/R3K2R w KQkq - 0 1"


class RefereeTests(unittest.TestCase):
    def setUp(self):
        self.ref = Referee()

    def test_apply_first_move(self):
        applied = self.ref.apply(chess.STARTING_FEN, "e4")
        self.assertEqual(applied.fen, AFTER_E4)
        self.assertEqual(applied.move_log, "1. e4")
        self.assertEqual(applied.san, "e4")

    def test_apply_extends_log(self):
        applied = self.ref.apply(AFTER_E4, "e5", "1. e4")
        self.assertEqual(applied.move_log, "1. e4 e5")
        applied = self.ref.apply(applied.fen, "Nf3", applied.move_log)
        self.assertEqual(applied.move_log, "1. e4 e5 2. Nf3")

    def test_log_started_by_black(self):
        self.assertEqual(self.ref.apply(AFTER_E4, "e5").move_log, "1... e5")

    def test_uci_is_recorded_as_san(self):
        applied = self.ref.apply(chess.STARTING_FEN, "g1f3")
        self.assertEqual(applied.san, "Nf3")

    def test_illegal_move_is_rejected(self):
        self.assertFalse(self.ref.is_legal(chess.STARTING_FEN, "Ke2"))
        self.assertIsNone(self.ref.apply(chess.STARTING_FEN, "Ke2"))
        self.assertIsNone(self.ref.apply(chess.STARTING_FEN, "hello"))

    def test_castling_notations(self):
        self.assertEqual(self.ref.apply(CASTLE_READY, "0-0").san, "O-O")
        self.assertEqual(self.ref.apply(CASTLE_READY, "O-O-O").san, "O-O-O")

    def test_noisy_reply_tokens(self):
        self.assertEqual(parse_move("1. e4!", chess.STARTING_FEN)["san"], "e4")
        self.assertEqual(parse_move("```\nNf3\n```", chess.STARTING_FEN)["san"], "Nf3")
        self.assertEqual(parse_move("", chess.STARTING_FEN)["reason"], "empty_move")
        self.assertEqual(parse_move("e4", "not a fen")["reason"], "invalid_fen")

    def test_legal_moves_from_start(self):
        moves = self.ref.legal_moves(chess.STARTING_FEN)
        self.assertEqual(len(moves), 20)
        self.assertIn("Nf3", moves)

    def test_side_to_move_and_ply(self):
        self.assertEqual(self.ref.side_to_move(chess.STARTING_FEN), Color.WHITE)
        self.assertEqual(self.ref.side_to_move(AFTER_E4), Color.BLACK)
        self.assertEqual(self.ref.ply(chess.STARTING_FEN), 0)
        self.assertEqual(self.ref.ply(AFTER_E4), 1)

    def test_checkmate_result(self):
        self.assertTrue(self.ref.is_terminal(FOOLS_MATE))
        self.assertEqual(self.ref.result(FOOLS_MATE), GameResult.BLACK_WIN)

    def test_stalemate_is_draw(self):
        self.assertTrue(self.ref.is_terminal(STALEMATE))
        self.assertEqual(self.ref.result(STALEMATE), GameResult.DRAW)

    def test_fifty_move_rule_is_draw(self):
        self.assertTrue(self.ref.is_terminal(FIFTY_MOVES))
        self.assertEqual(self.ref.result(FIFTY_MOVES), GameResult.DRAW)

    def test_ongoing_has_no_result(self):
        self.assertFalse(self.ref.is_terminal(AFTER_E4))
        self.assertIsNone(self.ref.result(AFTER_E4))


if __name__ == "__main__":
    unittest.main()
