from __future__ import annotations

import json
import logging
from typing import Any

import sentry_sdk

from journal_timeline.core.config import settings
from journal_timeline.services.privacy import sanitize_for_log, scrub_stack

logger = logging.getLogger(__name__)


async def log_system_error(
    *,
    route: str,
    message: str,
    err: BaseException | None = None,
    meta: dict[str, Any] | None = None,
) -> None:
    # Best-effort logging; never raise.
    try:
        stack = scrub_stack(err) if err is not None else None

        row: dict[str, Any] = {
            "route": sanitize_for_log(route),
            "message": sanitize_for_log(message),
            "stack": stack,
            "meta": sanitize_for_log(meta or {}),
        }
        logger.error(
            "system error: %s", json.dumps(row, ensure_ascii=False, default=str)
        )
        if err is not None and settings.sentry_dsn:
            sentry_sdk.capture_exception(err)
    except Exception:
        return
