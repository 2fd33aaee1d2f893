from __future__ import annotations
"""LLM-backed move oracle: one gateway request per call, JSON reply parsed into a MoveProposal."""
import json
import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from . import llm_client
from .errors import OracleFailure
from .oracle import MoveProposal, MoveRequest
from .prompting import PromptConfig, build_move_messages

log = logging.getLogger("llm_oracle")

JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def parse_move_reply(text: str) -> Optional[MoveProposal]:
    """Extract {"move": ..., "reasoning": ...} from a reply (markdown fences and prose around it are tolerated)."""
    if not text:
        return None
    match = JSON_OBJECT_RE.search(text)
    candidate = match.group(0) if match else text
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None
    move, reasoning = data.get("move"), data.get("reasoning")
    if not isinstance(move, str) or not isinstance(reasoning, str):
        return None
    return MoveProposal(move_text=move.strip(), rationale=reasoning)


@dataclass
class LLMOracle:
    """Asks the participant's own model (participant id == gateway model id) for a move."""

    prompt_cfg: PromptConfig = field(default_factory=PromptConfig)
    timeout_s: Optional[float] = None
    max_tokens: Optional[int] = None

    def request_move(self, participant_id: str, request: MoveRequest) -> MoveProposal:
        messages = build_move_messages(request, self.prompt_cfg)
        raw = llm_client.complete(messages, model=participant_id, timeout_s=self.timeout_s, max_tokens=self.max_tokens)
        proposal = parse_move_reply(raw)
        if proposal is None:
            log.debug("Unparseable reply from %s: %r", participant_id, raw[:200])
            raise OracleFailure(f"{participant_id}: reply is not a JSON move object")
        return proposal
