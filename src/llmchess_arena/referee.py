"""
Referee: chess rules over FEN positions.

- Stateless: every call rebuilds a python-chess Board from the stored FEN, so a
  contest's state is exactly what the store holds and nothing is kept between ticks.
- apply() returns the new FEN plus the move log extended with the SAN move
  ("1. e4 e5 2. Nf3 ...").
- Terminal detection covers python-chess game-over conditions plus the fifty-move rule.

Used by GameAdvancer to validate oracle proposals and to detect finished games.
"""
from __future__ import annotations

from typing import NamedTuple, Optional

import chess

from .models import Color, GameResult
from .move_validator import is_legal, legal_moves, parse_move


class AppliedMove(NamedTuple):
    fen: str
    move_log: str
    san: str


def append_to_log(move_log: str, board: chess.Board, san: str) -> str:
    """Extend a numbered SAN transcript with a move played from `board` (before the push)."""
    if board.turn == chess.WHITE:
        token = f"{board.fullmove_number}. {san}"
    elif not move_log:
        token = f"{board.fullmove_number}... {san}"
    else:
        token = san
    return f"{move_log} {token}" if move_log else token


class Referee:
    """Plain chess referee around python-chess Board, keyed by FEN."""

    def legal_moves(self, fen: str) -> list[str]:
        return legal_moves(fen)

    def is_legal(self, fen: str, move_text: str) -> bool:
        return is_legal(move_text, fen)

    def apply(self, fen: str, move_text: str, move_log: str = "") -> Optional[AppliedMove]:
        """Play move_text on fen. Returns None when the move cannot be applied."""
        parsed = parse_move(move_text, fen)
        if not parsed.get("ok"):
            return None
        board = chess.Board(fen=fen)
        mv = chess.Move.from_uci(parsed["uci"])
        if mv not in board.legal_moves:
            return None
        san = board.san(mv)
        new_log = append_to_log(move_log, board, san)
        board.push(mv)
        return AppliedMove(fen=board.fen(), move_log=new_log, san=san)

    def side_to_move(self, fen: str) -> Color:
        return Color.WHITE if chess.Board(fen=fen).turn == chess.WHITE else Color.BLACK

    def ply(self, fen: str) -> int:
        """Half-moves played before this position, derived from the FEN move counters."""
        return chess.Board(fen=fen).ply()

    def is_terminal(self, fen: str) -> bool:
        board = chess.Board(fen=fen)
        return board.is_game_over() or board.is_fifty_moves()

    def result(self, fen: str) -> Optional[GameResult]:
        board = chess.Board(fen=fen)
        if not (board.is_game_over() or board.is_fifty_moves()):
            return None
        if board.is_checkmate():
            # side to move is mated
            return GameResult.BLACK_WIN if board.turn == chess.WHITE else GameResult.WHITE_WIN
        return GameResult.DRAW
