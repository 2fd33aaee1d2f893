"""
Matchmaker: pairs idle participants into new contests.

A participant is engaged while it appears on either side of an active contest.
Engagement is recomputed from the store on every run; nothing is cached across
ticks. Two pairing policies:

- full: every unordered idle pair is a candidate; candidates are shuffled and
  created in that order, skipping any pair with a member already paired in this
  run (so nobody ends up in two active contests).
- adjacent: idle participants are shuffled and neighbours are paired; with an
  odd count the last one waits for the next tick.

Colors are a fair coin flip per pair.

Since nobody may be in two active contests, both policies end up pairing
floor(n/2) of the n idle participants uniformly at random and leave n mod 2
waiting. They differ only in how the random draws are consumed, not in any
observable pairing behaviour.
"""
from __future__ import annotations
import itertools
import logging
import random
from typing import List, Optional, Tuple

from .config import MATCHMAKING_POLICIES, SETTINGS
from .errors import ConfigError
from .models import Contest, ContestStatus
from .store import TournamentStore

log = logging.getLogger("matchmaker")


class Matchmaker:
    def __init__(self, store: TournamentStore, policy: Optional[str] = None, rng: Optional[random.Random] = None):
        policy = (policy or SETTINGS.matchmaking_policy).lower()
        if policy not in MATCHMAKING_POLICIES:
            raise ConfigError(f"Unknown matchmaking policy {policy!r}; expected one of {', '.join(MATCHMAKING_POLICIES)}")
        self.store = store
        self.policy = policy
        self.rng = rng or random.Random()

    def run(self) -> List[Contest]:
        """Create contests for idle participants; returns the contests created."""
        active = self.store.list_contests(ContestStatus.ACTIVE)
        engaged = {c.white_id for c in active} | {c.black_id for c in active}
        idle = [p.id for p in self.store.list_participants() if p.id not in engaged]
        if len(idle) < 2:
            return []

        if self.policy == "adjacent":
            pairs = self._adjacent_pairs(idle)
        else:
            pairs = self._all_pairs(idle)

        created = [self._create(a, b) for a, b in pairs]
        if created:
            log.info("Matchmaker (%s) created %d contest(s) from %d idle participant(s)", self.policy, len(created), len(idle))
        return created

    def _all_pairs(self, idle: List[str]) -> List[Tuple[str, str]]:
        candidates = [tuple(sorted(pair)) for pair in itertools.combinations(idle, 2)]
        self.rng.shuffle(candidates)
        paired: set[str] = set()
        pairs = []
        for a, b in candidates:
            if a in paired or b in paired:
                continue
            paired.update((a, b))
            pairs.append((a, b))
        return pairs

    def _adjacent_pairs(self, idle: List[str]) -> List[Tuple[str, str]]:
        order = list(idle)
        self.rng.shuffle(order)
        return [(order[i], order[i + 1]) for i in range(0, len(order) - 1, 2)]

    def _create(self, a: str, b: str) -> Contest:
        white, black = (a, b) if self.rng.random() < 0.5 else (b, a)
        contest = self.store.insert_contest(Contest(white_id=white, black_id=black))
        log.debug("New contest %s: %s (white) vs %s (black)", contest.id, white, black)
        return contest
