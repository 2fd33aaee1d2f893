from __future__ import annotations
"""
LLM client facade over the Vercel AI Gateway (OpenAI-compatible transport; configurable base URL).

The rest of the code should not care which SDK is in use. This module talks to
the Gateway with `model` + `messages` and returns raw text responses. It makes
exactly one request per call; retry policy belongs to the caller.
"""
from functools import lru_cache
from typing import Optional, List, Dict
import logging

from openai import OpenAI

from .config import SETTINGS
from .errors import OracleFailure

log = logging.getLogger("llm_client")


@lru_cache(maxsize=1)
def _client() -> OpenAI:
    return OpenAI(api_key=SETTINGS.llm_api_key or None, base_url=SETTINGS.api_base or None, max_retries=0)


def complete(messages: List[Dict[str, str]], model: str, timeout_s: Optional[float] = None, max_tokens: Optional[int] = None) -> str:
    """Send one chat request and return the reply text. Raises OracleFailure on any transport error or empty reply."""
    if not model:
        raise ValueError("Model is required")
    timeout = timeout_s if timeout_s is not None else SETTINGS.responses_timeout_s
    try:
        rsp = _client().chat.completions.create(
            model=model,
            messages=messages,
            timeout=timeout,
            max_tokens=max_tokens or SETTINGS.max_output_tokens,
        )
    except Exception as e:
        log.warning("Chat request to %s failed: %s", model, type(e).__name__)
        raise OracleFailure(f"{model}: request failed ({type(e).__name__}: {e})") from e
    text = _extract_text(rsp)
    if not text:
        raise OracleFailure(f"{model}: empty response")
    return text.strip()


def _extract_text(rsp) -> str:
    if hasattr(rsp, "choices") and rsp.choices:
        msg = rsp.choices[0].message
        content = getattr(msg, "content", None)
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            parts = []
            for c in content:
                if isinstance(c, dict):
                    if c.get("type") == "text" and isinstance(c.get("text"), str):
                        parts.append(c["text"])
                    continue
                t = getattr(c, "text", None)
                if isinstance(t, str):
                    parts.append(t)
            if parts:
                return "\n".join(parts)
    return ""
