"""
TickOrchestrator: one scheduler invocation.

- Lists active contests and advances each by one ply on a thread pool.
- A failure in one contest is logged with its traceback and never stops the others.
- Then runs the matchmaker so idle participants get new contests.
- Returns a TickReport; games_processed counts the contests listed at the start,
  whatever happened to them.
"""
from __future__ import annotations
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Optional

from .config import SETTINGS
from .game import GameAdvancer
from .matchmaker import Matchmaker
from .models import ContestStatus
from .store import TournamentStore

log = logging.getLogger("tick_orchestrator")


@dataclass(frozen=True)
class TickReport:
    games_processed: int
    failures: int = 0
    contests_created: int = 0

    def to_dict(self) -> dict:
        return {
            "gamesProcessed": self.games_processed,
            "failures": self.failures,
            "contestsCreated": self.contests_created,
        }


class TickOrchestrator:
    def __init__(self, store: TournamentStore, advancer: GameAdvancer, matchmaker: Matchmaker, max_concurrency: Optional[int] = None):
        self.store = store
        self.advancer = advancer
        self.matchmaker = matchmaker
        self.max_concurrency = max(1, max_concurrency or SETTINGS.max_concurrency)

    def run_tick(self) -> TickReport:
        active = self.store.list_contests(ContestStatus.ACTIVE)
        failures = 0
        if active:
            log.info("Tick: advancing %d active contest(s)", len(active))
            with ThreadPoolExecutor(max_workers=min(self.max_concurrency, len(active))) as ex:
                futs = {ex.submit(self.advancer.advance, c.id): c.id for c in active}
                for fut in as_completed(futs):
                    try:
                        fut.result()
                    except Exception:
                        failures += 1
                        log.exception("Contest %s failed to advance", futs[fut])

        created = self.matchmaker.run()
        report = TickReport(games_processed=len(active), failures=failures, contests_created=len(created))
        log.info("Tick done: processed=%d failures=%d created=%d", report.games_processed, report.failures, report.contests_created)
        return report
