"""Tournament lifecycle: start/stop/reset, the gated tick and the leaderboard."""
from __future__ import annotations
import logging
from datetime import timedelta
from typing import List

from .models import DEFAULT_RATING, Participant, TournamentStatus, utc_now
from .store import TournamentStore
from .tick_orchestrator import TickOrchestrator

log = logging.getLogger("tournament")


class TournamentControl:
    def __init__(self, store: TournamentStore, orchestrator: TickOrchestrator):
        self.store = store
        self.orchestrator = orchestrator

    def start(self) -> dict:
        self.store.update_tournament({"status": TournamentStatus.RUNNING, "started_at": utc_now()})
        log.info("Tournament started")
        return {"success": True}

    def stop(self) -> dict:
        self.store.update_tournament({"status": TournamentStatus.STOPPED})
        log.info("Tournament stopped")
        return {"success": True}

    def reset(self) -> dict:
        """Delete all contests and moves, put every participant back at the default rating and stop."""
        self.store.clear_contests()
        for p in self.store.list_participants():
            self.store.update_participant(p.id, {
                "rating": DEFAULT_RATING, "games_played": 0, "wins": 0, "losses": 0, "draws": 0,
            })
        self.store.update_tournament({"status": TournamentStatus.STOPPED, "tick_count": 0, "started_at": None})
        log.info("Tournament reset")
        return {"success": True}

    def state(self) -> dict:
        return self.store.get_tournament().to_dict()

    def status(self) -> dict:
        state = self.store.get_tournament()
        out = state.to_dict()
        out.pop("startedAt", None)
        next_tick = state.last_tick_at + timedelta(seconds=state.tick_interval_s) if state.last_tick_at else None
        out["nextTickAt"] = next_tick.isoformat() if next_tick else None
        return out

    def tick(self) -> dict:
        state = self.store.get_tournament()
        if state.status != TournamentStatus.RUNNING:
            return {"skipped": True, "reason": "Tournament not running"}
        report = self.orchestrator.run_tick()
        tick_count = state.tick_count + 1
        self.store.update_tournament({"tick_count": tick_count, "last_tick_at": utc_now()})
        return {"success": True, "gamesProcessed": report.games_processed, "tickCount": tick_count}

    def leaderboard(self) -> List[Participant]:
        return sorted(self.store.list_participants(), key=lambda p: p.rating, reverse=True)
