"""
GameAdvancer: plays one ply of one contest per call.

- Reloads the contest and does nothing unless it is still active, so duplicate or
  overlapping ticks targeting the same contest are harmless.
- Asks the side to move's oracle for a move, up to `attempts` times. A failed call
  is retried as-is; an illegal proposal is retried with an error context naming
  the rejected move and restating the legal moves.
- No legal move within the budget (or a move the referee cannot apply) forfeits
  the game for the side to move.
- The new position is written with a conditional update keyed on the position it
  was computed from, so only one writer can claim a given ply. The MoveEntry is
  appended after the claim and its ply number comes from the FEN counters.
- Terminal positions hand off to termination.terminate().

"""
from __future__ import annotations
import logging
import time
from typing import Callable, Optional

from .config import SETTINGS
from .errors import OracleFailure
from .models import Color, ContestStatus, GameResult, MoveEntry
from .oracle import MoveOracle, MoveProposal, MoveRequest
from .referee import Referee
from .store import TournamentStore
from .termination import terminate


def forfeit_result(losing_color: Color) -> GameResult:
    return GameResult.BLACK_WIN if losing_color == Color.WHITE else GameResult.WHITE_WIN


def illegal_move_context(move_text: str, legal_moves: list[str]) -> str:
    return f'"{move_text}" is illegal. Legal moves: {", ".join(legal_moves)}'


class GameAdvancer:
    def __init__(
        self,
        store: TournamentStore,
        oracle: MoveOracle,
        referee: Referee | None = None,
        attempts: int | None = None,
        backoff_s: float | None = None,
        recent_window: int | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.log = logging.getLogger("GameAdvancer")
        self.store = store
        self.oracle = oracle
        self.referee = referee or Referee()
        self.attempts = max(1, attempts if attempts is not None else SETTINGS.move_attempts)
        self.backoff_s = backoff_s if backoff_s is not None else SETTINGS.retry_backoff_s
        self.recent_window = recent_window if recent_window is not None else SETTINGS.recent_moves_window
        self._sleep = sleep

    def advance(self, contest_id: str) -> None:
        contest = self.store.get_contest(contest_id)
        if contest is None or contest.status != ContestStatus.ACTIVE:
            return

        fen = contest.position
        # a crash between the last position write and its termination leaves an active contest on a finished board
        if self.referee.is_terminal(fen):
            terminate(self.store, contest.id, self.referee.result(fen), reason="resumed_terminal_position")
            return

        color = self.referee.side_to_move(fen)
        participant_id = contest.participant_for(color)
        recent = [m.move_text for m in self.store.recent_moves(contest.id, self.recent_window)]
        legal = self.referee.legal_moves(fen)

        proposal = self._solicit_move(participant_id, fen, color, legal, recent)
        if proposal is None:
            self.log.warning("Contest %s: %s (%s) produced no legal move in %d attempts; forfeit", contest.id, participant_id, color, self.attempts)
            terminate(self.store, contest.id, forfeit_result(color), reason="forfeit")
            return

        applied = self.referee.apply(fen, proposal.move_text, contest.move_log)
        if applied is None:
            self.log.error("Contest %s: referee could not apply accepted move %r; forfeit", contest.id, proposal.move_text)
            terminate(self.store, contest.id, forfeit_result(color), reason="forfeit")
            return

        claimed = self.store.update_contest(
            contest.id,
            {"position": applied.fen, "move_log": applied.move_log},
            expect={"status": ContestStatus.ACTIVE, "position": fen},
        )
        if not claimed:
            self.log.info("Contest %s: ply already played by another invocation", contest.id)
            return

        self.store.insert_move(MoveEntry(
            contest_id=contest.id,
            participant_id=participant_id,
            ply=self.referee.ply(fen) + 1,
            move_text=applied.san,
            position_after=applied.fen,
            rationale=proposal.rationale,
        ))
        self.log.debug("Contest %s: %s played %s", contest.id, participant_id, applied.san)

        if self.referee.is_terminal(applied.fen):
            terminate(self.store, contest.id, self.referee.result(applied.fen), reason="game_over")

    # -------------------- Helpers --------------------
    def _ask(self, participant_id: str, request: MoveRequest) -> Optional[MoveProposal]:
        try:
            return self.oracle.request_move(participant_id, request)
        except OracleFailure as e:
            self.log.info("Oracle failure for %s: %s", participant_id, e)
            return None

    def _solicit_move(self, participant_id: str, fen: str, color: Color, legal: list[str], recent: list[str]) -> Optional[MoveProposal]:
        """Bounded retry loop; the error context is the only state carried between attempts."""
        error_context: Optional[str] = None
        for attempt in range(1, self.attempts + 1):
            if attempt > 1 and self.backoff_s > 0:
                self._sleep(self.backoff_s * (attempt - 1))
            request = MoveRequest(position=fen, color=color, legal_moves=legal, recent_moves=recent, error_context=error_context)
            proposal = self._ask(participant_id, request)
            if proposal is None:
                continue
            if self.referee.is_legal(fen, proposal.move_text):
                return proposal
            self.log.debug("Illegal proposal %r from %s (attempt %d)", proposal.move_text, participant_id, attempt)
            error_context = illegal_move_context(proposal.move_text, legal)
        return None
