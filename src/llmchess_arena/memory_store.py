"""
In-process TournamentStore.

Each call holds one lock for its duration and hands out copies, so callers
see the same single-record semantics as the SQL store. Used for offline dry
runs (`llmchess-arena run --memory`) and in tests.
"""
from __future__ import annotations

import threading
from dataclasses import replace
from typing import Any

from .config import SETTINGS
from .models import Contest, ContestStatus, MoveEntry, Participant, TournamentState
from .store import CONTEST_EXPECT_FIELDS, CONTEST_FIELDS, PARTICIPANT_FIELDS, TOURNAMENT_FIELDS, check_fields


class InMemoryStore:
    def __init__(self, participants: list[Participant] | None = None):
        self._lock = threading.Lock()
        self._participants: dict[str, Participant] = {}
        self._contests: dict[str, Contest] = {}
        self._moves: dict[str, list[MoveEntry]] = {}
        self._tournament = TournamentState(tick_interval_s=SETTINGS.tick_interval_s)
        for p in participants or []:
            self.insert_participant(p)

    # -- contests --
    def get_contest(self, contest_id: str) -> Contest | None:
        with self._lock:
            c = self._contests.get(contest_id)
            return replace(c) if c else None

    def list_contests(self, status: ContestStatus) -> list[Contest]:
        with self._lock:
            found = [replace(c) for c in self._contests.values() if c.status == status]
        return sorted(found, key=lambda c: c.started_at, reverse=True)

    def insert_contest(self, contest: Contest) -> Contest:
        with self._lock:
            if contest.id in self._contests:
                raise ValueError(f"Contest {contest.id} already exists")
            self._contests[contest.id] = replace(contest)
            return replace(contest)

    def update_contest(self, contest_id: str, fields: dict[str, Any], expect: dict[str, Any] | None = None) -> bool:
        check_fields(fields, CONTEST_FIELDS)
        check_fields(expect or {}, CONTEST_EXPECT_FIELDS)
        with self._lock:
            c = self._contests.get(contest_id)
            if c is None:
                return False
            if any(getattr(c, k) != v for k, v in (expect or {}).items()):
                return False
            self._contests[contest_id] = replace(c, **fields)
            return True

    # -- participants --
    def get_participant(self, participant_id: str) -> Participant | None:
        with self._lock:
            p = self._participants.get(participant_id)
            return replace(p) if p else None

    def list_participants(self) -> list[Participant]:
        with self._lock:
            return [replace(p) for _, p in sorted(self._participants.items())]

    def insert_participant(self, participant: Participant) -> Participant:
        with self._lock:
            if participant.id in self._participants:
                raise ValueError(f"Participant {participant.id} already exists")
            self._participants[participant.id] = replace(participant)
            return replace(participant)

    def update_participant(self, participant_id: str, fields: dict[str, Any]) -> bool:
        check_fields(fields, PARTICIPANT_FIELDS)
        with self._lock:
            p = self._participants.get(participant_id)
            if p is None:
                return False
            self._participants[participant_id] = replace(p, **fields)
            return True

    # -- moves --
    def insert_move(self, entry: MoveEntry) -> MoveEntry:
        with self._lock:
            self._moves.setdefault(entry.contest_id, []).append(replace(entry))
            return replace(entry)

    def recent_moves(self, contest_id: str, limit: int) -> list[MoveEntry]:
        if limit <= 0:
            return []
        return self.list_moves(contest_id)[-limit:]

    def list_moves(self, contest_id: str) -> list[MoveEntry]:
        with self._lock:
            moves = [replace(m) for m in self._moves.get(contest_id, [])]
        return sorted(moves, key=lambda m: m.ply)

    # -- tournament --
    def get_tournament(self) -> TournamentState:
        with self._lock:
            return replace(self._tournament)

    def update_tournament(self, fields: dict[str, Any]) -> TournamentState:
        check_fields(fields, TOURNAMENT_FIELDS)
        with self._lock:
            self._tournament = replace(self._tournament, **fields)
            return replace(self._tournament)

    def clear_contests(self) -> None:
        with self._lock:
            self._moves.clear()
            self._contests.clear()
