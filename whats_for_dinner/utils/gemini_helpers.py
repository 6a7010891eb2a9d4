"""Shared helpers for reading Gemini responses and debugging empty ones."""

from __future__ import annotations

import logging
from typing import Any, Dict

logger = logging.getLogger(__name__)


def _first_text(parts: Any) -> str:
    for p in parts or []:
        pt = p.get("text") if isinstance(p, dict) else getattr(p, "text", None)
        if isinstance(pt, str) and pt.strip():
            return pt
    return ""


def get_response_text(response: Any) -> str:
    """
    Robust extraction of text from google-genai responses.

    Tries:
    1) response.text
    2) response.parts[*].text
    3) response.candidates[0].content.parts[*].text

    Returns "" when none of them carries text.
    """
    # 1) Preferred. The SDK property can raise on blocked candidates.
    try:
        t = getattr(response, "text", None)
        if isinstance(t, str) and t.strip():
            return t
    except Exception:
        pass

    # 2) response.parts
    try:
        t = _first_text(getattr(response, "parts", None))
        if t:
            return t
    except Exception:
        pass

    # 3) candidates -> content -> parts
    try:
        candidates = getattr(response, "candidates", None) or []
        if candidates:
            content = getattr(candidates[0], "content", None)
            return _first_text(getattr(content, "parts", None))
    except Exception:
        pass

    return ""


def response_debug_summary(response: Any) -> Dict[str, Any]:
    """
    Safe, compact debug info (no huge dumps).
    Helps explain "HTTP 200 but empty text".
    """
    out: Dict[str, Any] = {}

    try:
        candidates = getattr(response, "candidates", None) or []
        out["candidates"] = len(candidates)
        if candidates:
            c0 = candidates[0]
            out["finish_reason"] = getattr(c0, "finish_reason", None)
            out["safety_ratings"] = getattr(c0, "safety_ratings", None)
            content = getattr(c0, "content", None)
            out["parts"] = len(getattr(content, "parts", None) or [])
    except Exception:
        pass

    try:
        feedback = getattr(response, "prompt_feedback", None)
        if feedback is not None:
            out["block_reason"] = getattr(feedback, "block_reason", None)
    except Exception:
        pass

    return out


def log_empty_response(prefix: str, response: Any) -> None:
    summary = response_debug_summary(response)
    logger.warning(f"{prefix} empty response text. summary={summary}")
