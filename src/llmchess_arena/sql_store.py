"""Implementation of TournamentStore using SQLAlchemy"""

from enum import Enum
from functools import wraps
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .config import SETTINGS
from .errors import StoreUnavailable
from .models import (
    Contest,
    ContestStatus,
    GameResult,
    MoveEntry,
    Participant,
    TournamentState,
    TournamentStatus,
)
from .schema import DBContest, DBMoveEntry, DBParticipant, DBTournament
from .store import CONTEST_EXPECT_FIELDS, CONTEST_FIELDS, PARTICIPANT_FIELDS, TOURNAMENT_FIELDS, check_fields

# model field -> column name, where they differ
_CONTEST_COLUMNS = {"position": "fen", "move_log": "pgn"}
_PARTICIPANT_COLUMNS = {"rating": "elo"}
_TOURNAMENT_COLUMNS = {"tick_interval_s": "tick_interval_sec"}


def _columns(fields: dict[str, Any], renames: dict[str, str]) -> dict[str, Any]:
    # StrEnum members are stored as their plain values
    return {renames.get(k, k): (str(v) if isinstance(v, Enum) else v) for k, v in fields.items()}


def _store_errors(func):
    """Surface driver/ORM failures as StoreUnavailable."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SQLAlchemyError as e:
            raise StoreUnavailable(f"{func.__name__} failed: {type(e).__name__}: {e}") from e
    return wrapper


class SQLStore:
    """Data stored using SQL. Every call runs in its own short session so the store can be shared by worker threads."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._sessions = session_factory

    # -- contests --
    @_store_errors
    def get_contest(self, contest_id: str) -> Contest | None:
        with self._sessions() as session:
            row = session.get(DBContest, contest_id)
            return self._to_contest(row) if row else None

    @_store_errors
    def list_contests(self, status: ContestStatus) -> list[Contest]:
        query = select(DBContest).where(DBContest.status == str(status)).order_by(DBContest.started_at.desc())
        with self._sessions() as session:
            return [self._to_contest(row) for row in session.scalars(query)]

    @_store_errors
    def insert_contest(self, contest: Contest) -> Contest:
        row = DBContest(
            id=contest.id,
            white_id=contest.white_id,
            black_id=contest.black_id,
            fen=contest.position,
            pgn=contest.move_log,
            status=str(contest.status),
            result=str(contest.result) if contest.result else None,
            started_at=contest.started_at,
            ended_at=contest.ended_at,
        )
        with self._sessions() as session:
            session.add(row)
            session.commit()
            return self._to_contest(row)

    @_store_errors
    def update_contest(self, contest_id: str, fields: dict[str, Any], expect: dict[str, Any] | None = None) -> bool:
        check_fields(fields, CONTEST_FIELDS)
        check_fields(expect or {}, CONTEST_EXPECT_FIELDS)
        conditions = [DBContest.id == contest_id]
        for key, value in _columns(expect or {}, _CONTEST_COLUMNS).items():
            conditions.append(getattr(DBContest, key) == value)
        stmt = update(DBContest).where(*conditions).values(**_columns(fields, _CONTEST_COLUMNS))
        with self._sessions() as session:
            result = session.execute(stmt)
            session.commit()
            return result.rowcount == 1

    # -- participants --
    @_store_errors
    def get_participant(self, participant_id: str) -> Participant | None:
        with self._sessions() as session:
            row = session.get(DBParticipant, participant_id)
            return self._to_participant(row) if row else None

    @_store_errors
    def list_participants(self) -> list[Participant]:
        with self._sessions() as session:
            return [self._to_participant(row) for row in session.scalars(select(DBParticipant).order_by(DBParticipant.id))]

    @_store_errors
    def insert_participant(self, participant: Participant) -> Participant:
        row = DBParticipant(
            id=participant.id,
            name=participant.name,
            provider=participant.provider,
            elo=participant.rating,
            games_played=participant.games_played,
            wins=participant.wins,
            losses=participant.losses,
            draws=participant.draws,
        )
        with self._sessions() as session:
            session.add(row)
            session.commit()
            return self._to_participant(row)

    @_store_errors
    def update_participant(self, participant_id: str, fields: dict[str, Any]) -> bool:
        check_fields(fields, PARTICIPANT_FIELDS)
        stmt = update(DBParticipant).where(DBParticipant.id == participant_id).values(**_columns(fields, _PARTICIPANT_COLUMNS))
        with self._sessions() as session:
            result = session.execute(stmt)
            session.commit()
            return result.rowcount == 1

    # -- moves --
    @_store_errors
    def insert_move(self, entry: MoveEntry) -> MoveEntry:
        row = DBMoveEntry(
            id=entry.id,
            game_id=entry.contest_id,
            model_id=entry.participant_id,
            ply=entry.ply,
            move_san=entry.move_text,
            fen_after=entry.position_after,
            reasoning=entry.rationale,
            created_at=entry.created_at,
        )
        with self._sessions() as session:
            session.add(row)
            session.commit()
            return self._to_move(row)

    @_store_errors
    def recent_moves(self, contest_id: str, limit: int) -> list[MoveEntry]:
        query = (
            select(DBMoveEntry)
            .where(DBMoveEntry.game_id == contest_id)
            .order_by(DBMoveEntry.ply.desc())
            .limit(limit)
        )
        with self._sessions() as session:
            rows = list(session.scalars(query))
            return [self._to_move(row) for row in reversed(rows)]

    @_store_errors
    def list_moves(self, contest_id: str) -> list[MoveEntry]:
        query = select(DBMoveEntry).where(DBMoveEntry.game_id == contest_id).order_by(DBMoveEntry.ply)
        with self._sessions() as session:
            return [self._to_move(row) for row in session.scalars(query)]

    # -- tournament --
    @_store_errors
    def get_tournament(self) -> TournamentState:
        with self._sessions() as session:
            return self._to_tournament(self._fetch_tournament(session))

    @_store_errors
    def update_tournament(self, fields: dict[str, Any]) -> TournamentState:
        check_fields(fields, TOURNAMENT_FIELDS)
        with self._sessions() as session:
            row = self._fetch_tournament(session)
            for key, value in _columns(fields, _TOURNAMENT_COLUMNS).items():
                setattr(row, key, value)
            session.commit()
            return self._to_tournament(row)

    @_store_errors
    def clear_contests(self) -> None:
        with self._sessions() as session:
            session.execute(delete(DBMoveEntry))
            session.execute(delete(DBContest))
            session.commit()

    # -- Internal helpers --
    def _fetch_tournament(self, session: Session) -> DBTournament:
        row = session.get(DBTournament, 1)
        if row is None:
            row = DBTournament(id=1, status=str(TournamentStatus.STOPPED), tick_count=0, tick_interval_sec=SETTINGS.tick_interval_s)
            session.add(row)
            session.commit()
        return row

    def _to_contest(self, row: DBContest) -> Contest:
        """Convert SQLAlchemy row to data transfer model."""
        return Contest(
            id=row.id,
            white_id=row.white_id,
            black_id=row.black_id,
            position=row.fen,
            move_log=row.pgn,
            status=ContestStatus(row.status),
            result=GameResult(row.result) if row.result else None,
            started_at=row.started_at,
            ended_at=row.ended_at,
        )

    def _to_participant(self, row: DBParticipant) -> Participant:
        return Participant(
            id=row.id,
            name=row.name,
            provider=row.provider,
            rating=row.elo,
            games_played=row.games_played,
            wins=row.wins,
            losses=row.losses,
            draws=row.draws,
        )

    def _to_move(self, row: DBMoveEntry) -> MoveEntry:
        return MoveEntry(
            id=row.id,
            contest_id=row.game_id,
            participant_id=row.model_id,
            ply=row.ply,
            move_text=row.move_san,
            position_after=row.fen_after,
            rationale=row.reasoning,
            created_at=row.created_at,
        )

    def _to_tournament(self, row: DBTournament) -> TournamentState:
        return TournamentState(
            status=TournamentStatus(row.status),
            tick_count=row.tick_count,
            tick_interval_s=row.tick_interval_sec,
            last_tick_at=row.last_tick_at,
            started_at=row.started_at,
        )
