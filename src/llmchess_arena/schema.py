"""Database tables / schema"""

from datetime import datetime
from typing import Optional

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .models import DEFAULT_RATING, STARTING_FEN, utc_now


class Base(DeclarativeBase):
    pass


class DBParticipant(Base):
    __tablename__ = "models"
    id: Mapped[str] = mapped_column(String(200), primary_key=True)
    name: Mapped[str]
    provider: Mapped[str]
    elo: Mapped[int] = mapped_column(default=DEFAULT_RATING)
    games_played: Mapped[int] = mapped_column(default=0)
    wins: Mapped[int] = mapped_column(default=0)
    losses: Mapped[int] = mapped_column(default=0)
    draws: Mapped[int] = mapped_column(default=0)


class DBContest(Base):
    __tablename__ = "games"
    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    white_id: Mapped[str] = mapped_column(ForeignKey("models.id"))
    black_id: Mapped[str] = mapped_column(ForeignKey("models.id"))
    pgn: Mapped[str] = mapped_column(Text, default="")
    fen: Mapped[str] = mapped_column(String(100), default=STARTING_FEN)
    status: Mapped[str] = mapped_column(String(10), default="active")
    result: Mapped[Optional[str]] = mapped_column(String(10))
    started_at: Mapped[datetime] = mapped_column(default=utc_now)
    ended_at: Mapped[Optional[datetime]]

    __table_args__ = (Index("idx_games_status", "status"),)


class DBMoveEntry(Base):
    __tablename__ = "moves"
    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    game_id: Mapped[str] = mapped_column(ForeignKey("games.id"))
    model_id: Mapped[str] = mapped_column(ForeignKey("models.id"))
    ply: Mapped[int]
    move_san: Mapped[str] = mapped_column(String(20))
    fen_after: Mapped[str] = mapped_column(String(100))
    reasoning: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)

    __table_args__ = (Index("idx_moves_game_ply", "game_id", "ply"),)


class DBTournament(Base):
    __tablename__ = "tournament"
    id: Mapped[int] = mapped_column(primary_key=True, default=1)
    status: Mapped[str] = mapped_column(String(10), default="stopped")
    tick_count: Mapped[int] = mapped_column(default=0)
    tick_interval_sec: Mapped[int] = mapped_column(default=60)
    last_tick_at: Mapped[Optional[datetime]]
    started_at: Mapped[Optional[datetime]]
