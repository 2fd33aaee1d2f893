"""
Move oracle contract.

An oracle is asked once per attempt for the next move of a participant. It is
stateless per call and may raise OracleFailure; retry, backoff and
forfeiture policy belong to the caller (GameAdvancer).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol

from .models import Color


@dataclass(frozen=True)
class MoveRequest:
    position: str
    color: Color
    legal_moves: list[str]
    recent_moves: list[str] = field(default_factory=list)
    error_context: Optional[str] = None


@dataclass(frozen=True)
class MoveProposal:
    move_text: str
    rationale: str


class MoveOracle(Protocol):
    def request_move(self, participant_id: str, request: MoveRequest) -> MoveProposal:
        ...
