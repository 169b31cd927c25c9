from __future__ import annotations

import hashlib
import traceback
from typing import Any

_MAX_LOG_CHARS = 1200
_MAX_STACK_CHARS = 8000


def sanitize_for_log(value: Any) -> Any:
    """Clip a log field to JSON-safe scalars and containers."""
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return value[:_MAX_LOG_CHARS]
    if isinstance(value, (list, tuple)):
        return [sanitize_for_log(v) for v in value]
    if isinstance(value, dict):
        return {str(k)[:128]: sanitize_for_log(v) for k, v in value.items()}
    return type(value).__name__


def scrub_stack(err: BaseException) -> str:
    """
    Frames and the exception type, without the exception message.

    Parse errors (bad dates, pydantic validation) echo the input they
    rejected, which here is journal text.
    """
    frames = "".join(traceback.format_tb(err.__traceback__))
    return f"{frames}{type(err).__name__}"[-_MAX_STACK_CHARS:]


def scrub_sentry_event(event: dict[str, Any], hint: dict[str, Any]) -> dict[str, Any]:
    # before_send hook: same rule as scrub_stack for exceptions sent to Sentry.
    for exc in (event.get("exception") or {}).get("values") or []:
        exc["value"] = ""
    return event


def describe_sections(**sections: str | None) -> dict[str, Any]:
    """Journal text never goes to logs; only its size and a short digest."""
    digest = hashlib.sha256()
    out: dict[str, Any] = {}
    for name, text in sections.items():
        body = text or ""
        out[f"{name}_chars"] = len(body)
        out[f"{name}_lines"] = len(body.splitlines())
        digest.update(name.encode("utf-8"))
        digest.update(b"\0")
        digest.update(body.encode("utf-8"))
        digest.update(b"\0")
    out["digest"] = digest.hexdigest()[:16]
    return out
