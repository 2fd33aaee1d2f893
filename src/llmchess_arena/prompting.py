"""
Prompt builders and config for oracle move requests using a modular template.

Callers supply system instructions and a template string with placeholders
that are substituted per turn:
{COLOR}, {FEN}, {RECENT_MOVES}, {LEGAL_MOVES}, {ERROR_CONTEXT}.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from .oracle import MoveRequest

DEFAULT_SYSTEM = "You are a strong chess player. When asked for a move, decide the best legal move and answer in JSON."
DEFAULT_TEMPLATE = """You are playing chess as {COLOR} against another AI model.

Current position (FEN): {FEN}
{RECENT_MOVES}
Legal moves: {LEGAL_MOVES}

{ERROR_CONTEXT}Analyze the position and choose your move. Consider:
- Material balance
- Piece activity
- King safety
- Pawn structure

Respond with valid JSON only:
{"move": "your_move", "reasoning": "brief explanation"}"""


@dataclass
class PromptConfig:
    """Configuration for shaping move prompts using a custom template."""

    system_instructions: str = DEFAULT_SYSTEM
    template: str = DEFAULT_TEMPLATE


def render_custom_prompt(template: str, values: Dict[str, str]) -> str:
    """Replace known placeholders in the template. Unknown tokens are left intact."""
    rendered = template or ""
    for key, val in values.items():
        rendered = rendered.replace(f"{{{key}}}", val)
    return rendered


def build_move_prompt(request: MoveRequest, template: str = DEFAULT_TEMPLATE) -> str:
    values = {
        "COLOR": str(request.color),
        "FEN": request.position,
        "RECENT_MOVES": f"Recent moves: {', '.join(request.recent_moves)}" if request.recent_moves else "This is the first move.",
        "LEGAL_MOVES": ", ".join(request.legal_moves),
        "ERROR_CONTEXT": f"IMPORTANT: {request.error_context}\n\n" if request.error_context else "",
    }
    return render_custom_prompt(template, values)


def build_move_messages(request: MoveRequest, prompt_cfg: PromptConfig | None = None) -> list[dict]:
    cfg = prompt_cfg or PromptConfig()
    return [
        {"role": "system", "content": cfg.system_instructions},
        {"role": "user", "content": build_move_prompt(request, cfg.template)},
    ]
