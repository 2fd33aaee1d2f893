"""Persistence contract for the arena (SQLAlchemy and in-memory implementations live beside it)."""

from typing import Any, Protocol

from .models import Contest, ContestStatus, MoveEntry, Participant, TournamentState


class TournamentStore(Protocol):
    """Single-record reads and writes. No call spans more than one record atomically,
    except the administrative clear_contests()."""

    def get_contest(self, contest_id: str) -> Contest | None:
        """Get contest by ID, if record exists."""
        ...

    def list_contests(self, status: ContestStatus) -> list[Contest]:
        """Contests with the given status, newest first."""
        ...

    def insert_contest(self, contest: Contest) -> Contest:
        ...

    def update_contest(self, contest_id: str, fields: dict[str, Any], expect: dict[str, Any] | None = None) -> bool:
        """Write fields to one contest.

        When `expect` is given the write only happens if every expected field still
        holds the given value. Returns False when the record is missing or the
        expectation no longer holds.
        """
        ...

    def get_participant(self, participant_id: str) -> Participant | None:
        ...

    def list_participants(self) -> list[Participant]:
        ...

    def insert_participant(self, participant: Participant) -> Participant:
        ...

    def update_participant(self, participant_id: str, fields: dict[str, Any]) -> bool:
        ...

    def insert_move(self, entry: MoveEntry) -> MoveEntry:
        ...

    def recent_moves(self, contest_id: str, limit: int) -> list[MoveEntry]:
        """The last `limit` moves of a contest, oldest first."""
        ...

    def list_moves(self, contest_id: str) -> list[MoveEntry]:
        ...

    def get_tournament(self) -> TournamentState:
        ...

    def update_tournament(self, fields: dict[str, Any]) -> TournamentState:
        ...

    def clear_contests(self) -> None:
        """Delete every move entry and contest."""
        ...


CONTEST_FIELDS = frozenset({"position", "move_log", "status", "result", "ended_at"})
CONTEST_EXPECT_FIELDS = frozenset({"position", "status"})
PARTICIPANT_FIELDS = frozenset({"name", "provider", "rating", "games_played", "wins", "losses", "draws"})
TOURNAMENT_FIELDS = frozenset({"status", "tick_count", "tick_interval_s", "last_tick_at", "started_at"})


def check_fields(fields: dict[str, Any], allowed: frozenset[str]) -> None:
    unknown = set(fields) - allowed
    if unknown:
        raise ValueError(f"Unknown fields: {sorted(unknown)}")
