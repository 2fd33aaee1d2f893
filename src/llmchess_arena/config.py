"""
Configuration and environment loading for LLM Chess Arena.

- Loads settings.yml (YAML) from repo root if present; falls back to environment variables.
- .env is loaded first so its values show up as environment variables.
- Exposes SETTINGS with keys used across the project (gateway credentials, retry knobs, database, tick cadence).
"""
from dataclasses import dataclass
import os
from typing import Any, Callable

import yaml
from dotenv import load_dotenv

load_dotenv()

MATCHMAKING_POLICIES = ("full", "adjacent")


def _repo_root() -> str:
    # this file: src/llmchess_arena/config.py → repo root is two levels up
    return os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))


def _load_yaml(path: str) -> dict:
    if not os.path.isfile(path):
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return data if isinstance(data, dict) else {}


_cfg = _load_yaml(os.environ.get("LLMCHESS_SETTINGS", os.path.join(_repo_root(), "settings.yml")))


def _get(name: str, default: Any, cast: Callable[[Any], Any] | None = None) -> Any:
    if name in _cfg:
        val = _cfg[name]
        return cast(val) if cast else val
    env = os.environ.get(name)
    if env is not None:
        return cast(env) if cast else env
    return default


@dataclass(frozen=True)
class Settings:
    # Auth / endpoint (Vercel AI Gateway, OpenAI-compatible wire format)
    llm_api_key: str
    api_base: str

    # Oracle knobs
    responses_timeout_s: float
    max_output_tokens: int
    move_attempts: int
    retry_backoff_s: float
    recent_moves_window: int

    # Tick knobs
    max_concurrency: int
    matchmaking_policy: str
    tick_interval_s: int

    # Storage / trigger
    database_url: str
    cron_secret: str
    log_level: str


SETTINGS = Settings(
    llm_api_key=_get("LLMCHESS_LLM_API_KEY", _get("AI_GATEWAY_API_KEY", "")),
    api_base=_get("LLMCHESS_LLM_BASE_URL", _get("AI_GATEWAY_BASE_URL", "https://ai-gateway.vercel.sh/v1")),
    responses_timeout_s=float(_get("LLMCHESS_RESPONSES_TIMEOUT_S", 120.0, cast=float)),
    max_output_tokens=int(_get("LLMCHESS_MAX_OUTPUT_TOKENS", 500, cast=int)),
    move_attempts=int(_get("LLMCHESS_MOVE_ATTEMPTS", 3, cast=int)),
    retry_backoff_s=float(_get("LLMCHESS_RETRY_BACKOFF_S", 1.0, cast=float)),
    recent_moves_window=int(_get("LLMCHESS_RECENT_MOVES", 10, cast=int)),
    max_concurrency=int(_get("LLMCHESS_MAX_CONCURRENCY", 8, cast=int)),
    matchmaking_policy=str(_get("LLMCHESS_MATCHMAKING_POLICY", "full")).lower(),
    tick_interval_s=int(_get("LLMCHESS_TICK_INTERVAL_S", 60, cast=int)),
    database_url=_get("DATABASE_URL", "sqlite:///llmchess_arena.db"),
    cron_secret=_get("CRON_SECRET", ""),
    log_level=str(_get("LLMCHESS_LOG_LEVEL", "INFO")).upper(),
)
