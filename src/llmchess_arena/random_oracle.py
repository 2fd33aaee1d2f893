"""
RandomOracle: picks a uniformly random legal move.

- Useful as a fast, zero-cost stand-in for the LLM oracle in dry runs and load tests.
- Never fails; the rationale just says the move was random.

"""
from __future__ import annotations
import random

from .oracle import MoveProposal, MoveRequest


class RandomOracle:
    """Simple oracle that picks a uniformly random legal move."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def request_move(self, participant_id: str, request: MoveRequest) -> MoveProposal:
        move = self.rng.choice(request.legal_moves) if request.legal_moves else ""
        return MoveProposal(move_text=move, rationale="Random legal move.")
