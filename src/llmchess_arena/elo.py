"""
Elo rating updates.

Fixed K-factor of 32; both sides of a game are rated from the ratings they
held before the game, so the order in which the two updates are written
does not matter.
"""
from __future__ import annotations

import math
from typing import NamedTuple

from .models import GameResult, Outcome

K_FACTOR = 32

_ACTUAL_SCORE = {
    Outcome.WIN: 1.0,
    Outcome.DRAW: 0.5,
    Outcome.LOSS: 0.0,
}


class RatingChange(NamedTuple):
    new_rating: int
    delta: int


def expected_score(rating: int, opponent_rating: int) -> float:
    return 1 / (1 + math.pow(10, (opponent_rating - rating) / 400))


def actual_score(outcome: Outcome) -> float:
    return _ACTUAL_SCORE[Outcome(outcome)]


def _round_half_up(x: float) -> int:
    # Python's round() is banker's rounding; ratings round .5 upwards
    return math.floor(x + 0.5)


def rating_update(rating: int, opponent_rating: int, outcome: Outcome) -> RatingChange:
    """New rating for one side given both pre-game ratings and that side's outcome."""
    delta = _round_half_up(K_FACTOR * (actual_score(outcome) - expected_score(rating, opponent_rating)))
    return RatingChange(new_rating=rating + delta, delta=delta)


def outcome_from_result(result: GameResult, is_white: bool) -> Outcome:
    result = GameResult(result)
    if result == GameResult.DRAW:
        return Outcome.DRAW
    if result == GameResult.WHITE_WIN:
        return Outcome.WIN if is_white else Outcome.LOSS
    return Outcome.LOSS if is_white else Outcome.WIN
