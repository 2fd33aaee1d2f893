"""
Move parsing/validation helpers for oracle replies.

A proposed move is accepted in either notation:
- SAN (e4, Nf3, O-O, 0-0, exd8=Q+), the notation legal-move lists are rendered in;
- UCI long algebraic (e2e4, e7e8q) as a fallback.
Move numbers ("1. e4", "12...Nf6"), code fences and trailing annotations are tolerated.
"""
from __future__ import annotations

import chess
import re
from functools import lru_cache
from typing import TypedDict

UCI_RE = re.compile(r"^[a-h][1-8][a-h][1-8][qrbn]?$", re.I)
MOVE_NUMBER_RE = re.compile(r"^\d+\.+")
CASTLE_ZERO = {"0-0": "O-O", "0-0-0": "O-O-O", "o-o": "O-O", "o-o-o": "O-O-O"}


class ParsedMove(TypedDict, total=False):
    ok: bool
    uci: str
    san: str
    reason: str


def _strip_code_fence(text: str) -> str:
    """Remove simple ``` fences if present."""
    text = text.strip()
    if text.startswith("```") and text.endswith("```"):
        inner = text.split("\n", 1)
        if len(inner) == 2:
            return inner[1].rsplit("\n", 1)[0].strip()
    return text


def _primary_token(text: str) -> str:
    for token in _strip_code_fence(text).replace("\n", " ").split():
        token = MOVE_NUMBER_RE.sub("", token).rstrip("!?.,;")
        if token:
            return token
    return ""


@lru_cache(maxsize=8192)
def _legal_sans(fen: str) -> tuple[str, ...]:
    """Cache and return the legal SAN moves for a given FEN, in generator order."""
    board = chess.Board(fen=fen)
    return tuple(board.san(m) for m in board.legal_moves)


def legal_moves(fen: str) -> list[str]:
    """Return list of legal SAN moves for the FEN (cached)."""
    return list(_legal_sans(fen))


def parse_move(raw_text: str, fen: str) -> ParsedMove:
    """
    Resolve a proposed move against the position.
    Returns ParsedMove with ok/uci/san or a reason on failure.
    """
    try:
        board = chess.Board(fen=fen)
    except ValueError:
        return {"ok": False, "reason": "invalid_fen"}
    token = _primary_token(raw_text or "")
    if not token:
        return {"ok": False, "reason": "empty_move"}

    token = CASTLE_ZERO.get(token.lower(), token)
    try:
        mv = board.parse_san(token)
        return {"ok": True, "uci": mv.uci(), "san": board.san(mv)}
    except chess.IllegalMoveError:
        return {"ok": False, "reason": "illegal_move"}
    except ValueError:
        pass

    if not UCI_RE.fullmatch(token):
        return {"ok": False, "reason": "bad_notation"}
    mv = chess.Move.from_uci(token.lower())
    if mv not in board.legal_moves:
        return {"ok": False, "reason": "illegal_move"}
    return {"ok": True, "uci": mv.uci(), "san": board.san(mv)}


def is_legal(raw_text: str, fen: str) -> bool:
    return bool(parse_move(raw_text, fen).get("ok"))


__all__ = [
    "parse_move",
    "is_legal",
    "legal_moves",
    "ParsedMove",
]
