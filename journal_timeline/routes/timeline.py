from __future__ import annotations

from typing import Any
from uuid import uuid4

from fastapi import APIRouter, HTTPException

from journal_timeline.schemas.timeline import (
    LookupTimelineRequest,
    LookupTimelineResponse,
    ParsedEntry,
    ParseTimelineRequest,
    ParseTimelineResponse,
)
from journal_timeline.services.error_log import log_system_error
from journal_timeline.services.parse_entry import (
    find_bullets_at_time,
    format_time_display,
    parse_entry,
)
from journal_timeline.services.privacy import describe_sections

router = APIRouter()

# Set on 500s this router has already logged; the 5xx middleware skips them.
ERROR_REFERENCE_HEADER = "X-Error-Reference"


def _error_payload(
    *,
    code: str,
    message: str,
    request_id: str,
    retryable: bool = False,
) -> dict[str, Any]:
    hint = f"Reference ID: {request_id}"
    if retryable:
        hint = f"{hint}. Please retry once in a few seconds."
    return {
        "code": code,
        "message": message,
        "hint": hint,
        "retryable": retryable,
    }


async def _resolve(body: ParseTimelineRequest, *, route: str) -> ParsedEntry:
    try:
        return parse_entry(body.morning, body.afternoon, body.night, body.date)
    except Exception as exc:
        request_id = uuid4().hex[:12]
        await log_system_error(
            route=route,
            message="Timeline parsing failed",
            err=exc,
            meta={
                "request_id": request_id,
                "date": body.date.isoformat(),
                "code": "TIMELINE_PARSE_FAILURE",
                **describe_sections(
                    morning=body.morning,
                    afternoon=body.afternoon,
                    night=body.night,
                ),
            },
        )
        raise HTTPException(
            status_code=500,
            detail=_error_payload(
                code="TIMELINE_PARSE_FAILURE",
                message="Could not build the timeline for this entry.",
                request_id=request_id,
            ),
            headers={ERROR_REFERENCE_HEADER: request_id},
        )


@router.post("/timeline/parse", response_model=ParseTimelineResponse)
async def parse_timeline(body: ParseTimelineRequest) -> ParseTimelineResponse:
    entry = await _resolve(body, route="/api/timeline/parse")
    return ParseTimelineResponse(
        entry=entry,
        labels=[
            format_time_display(b.time_start) if b.time_start else ""
            for b in entry.all
        ],
    )


@router.post("/timeline/lookup", response_model=LookupTimelineResponse)
async def lookup_timeline(body: LookupTimelineRequest) -> LookupTimelineResponse:
    entry = await _resolve(body, route="/api/timeline/lookup")
    return LookupTimelineResponse(matches=find_bullets_at_time(entry.all, body.at))
