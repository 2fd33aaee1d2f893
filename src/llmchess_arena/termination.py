"""
Contest termination: settle ratings and close the contest exactly once.

Safe to call any number of times for the same contest, from overlapping
ticks or duplicate scheduling. The contest is reloaded and checked first,
then claimed with a conditional write (active -> complete); only the caller
whose claim lands applies the rating updates.
"""
from __future__ import annotations

import logging

from .elo import outcome_from_result, rating_update
from .errors import StoreUnavailable
from .models import ContestStatus, GameResult, Outcome, Participant, utc_now
from .store import TournamentStore

log = logging.getLogger("termination")

_COUNTERS = {Outcome.WIN: "wins", Outcome.LOSS: "losses", Outcome.DRAW: "draws"}


def _settled_fields(me: Participant, opponent: Participant, outcome: Outcome) -> dict:
    change = rating_update(me.rating, opponent.rating, outcome)
    counter = _COUNTERS[outcome]
    return {
        "rating": change.new_rating,
        "games_played": me.games_played + 1,
        counter: getattr(me, counter) + 1,
    }


def terminate(store: TournamentStore, contest_id: str, result: GameResult, reason: str = "game_over") -> bool:
    """Conclude a contest with `result`. Returns False when it was already concluded (or is unknown)."""
    contest = store.get_contest(contest_id)
    if contest is None or contest.status != ContestStatus.ACTIVE:
        return False

    # both snapshots are taken before either update so neither delta sees the other's write
    white = store.get_participant(contest.white_id)
    black = store.get_participant(contest.black_id)
    if white is None or black is None:
        raise LookupError(f"Contest {contest_id} references a missing participant")

    white_fields = _settled_fields(white, black, outcome_from_result(result, is_white=True))
    black_fields = _settled_fields(black, white, outcome_from_result(result, is_white=False))

    claimed = store.update_contest(
        contest_id,
        {"status": ContestStatus.COMPLETE, "result": GameResult(result), "ended_at": utc_now()},
        expect={"status": ContestStatus.ACTIVE},
    )
    if not claimed:
        log.info("Contest %s was concluded concurrently; skipping rating update", contest_id)
        return False

    try:
        store.update_participant(white.id, white_fields)
        store.update_participant(black.id, black_fields)
    except StoreUnavailable:
        # the claim already landed, so no later call will settle this contest
        log.exception("Contest %s concluded but ratings were not written", contest_id)
        raise
    log.info(
        "Contest %s ended %s (%s): %s %d->%d, %s %d->%d",
        contest_id, result, reason,
        white.id, white.rating, white_fields["rating"],
        black.id, black.rating, black_fields["rating"],
    )
    return True
