"""
Boundary data model(s) for the arena.

These objects travel between the orchestration core and the store
implementations, so neither side depends on the other's representation
(SQLAlchemy rows stay inside sql_store.py).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum
from uuid import uuid4

import chess

STARTING_FEN = chess.STARTING_FEN
DEFAULT_RATING = 1500


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid4().hex


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"


class ContestStatus(StrEnum):
    ACTIVE = "active"
    COMPLETE = "complete"


class GameResult(StrEnum):
    WHITE_WIN = "1-0"
    BLACK_WIN = "0-1"
    DRAW = "1/2-1/2"


class Outcome(StrEnum):
    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"


class TournamentStatus(StrEnum):
    STOPPED = "stopped"
    RUNNING = "running"


@dataclass
class Participant:
    """A model entered in the tournament. `id` is the gateway model id (e.g. 'openai/gpt-5')."""

    id: str
    name: str
    provider: str
    rating: int = DEFAULT_RATING
    games_played: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "provider": self.provider,
            "elo": self.rating,
            "gamesPlayed": self.games_played,
            "wins": self.wins,
            "losses": self.losses,
            "draws": self.draws,
        }


@dataclass
class Contest:
    """One game between two participants. `position` is a FEN, `move_log` a numbered SAN transcript."""

    white_id: str
    black_id: str
    id: str = field(default_factory=new_id)
    position: str = STARTING_FEN
    move_log: str = ""
    status: ContestStatus = ContestStatus.ACTIVE
    result: GameResult | None = None
    started_at: datetime = field(default_factory=utc_now)
    ended_at: datetime | None = None

    def participant_for(self, color: Color) -> str:
        return self.white_id if color == Color.WHITE else self.black_id

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "whiteId": self.white_id,
            "blackId": self.black_id,
            "fen": self.position,
            "pgn": self.move_log,
            "status": str(self.status),
            "result": str(self.result) if self.result else None,
            "startedAt": self.started_at.isoformat() if self.started_at else None,
            "endedAt": self.ended_at.isoformat() if self.ended_at else None,
        }


@dataclass
class MoveEntry:
    """Append-only record of one ply."""

    contest_id: str
    participant_id: str
    ply: int
    move_text: str
    position_after: str
    rationale: str
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "gameId": self.contest_id,
            "modelId": self.participant_id,
            "ply": self.ply,
            "moveSan": self.move_text,
            "fenAfter": self.position_after,
            "reasoning": self.rationale,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass
class TournamentState:
    status: TournamentStatus = TournamentStatus.STOPPED
    tick_count: int = 0
    tick_interval_s: int = 60
    last_tick_at: datetime | None = None
    started_at: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "status": str(self.status),
            "tickCount": self.tick_count,
            "tickIntervalSec": self.tick_interval_s,
            "lastTickAt": self.last_tick_at.isoformat() if self.last_tick_at else None,
            "startedAt": self.started_at.isoformat() if self.started_at else None,
        }
