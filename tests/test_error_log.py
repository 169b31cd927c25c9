from __future__ import annotations

import asyncio
import json
import logging
from datetime import date

import pytest

import journal_timeline.services.error_log as error_log
from journal_timeline.services.privacy import (
    describe_sections,
    sanitize_for_log,
    scrub_sentry_event,
    scrub_stack,
)

JOURNAL = "- therapy at 4pm with Dr. Kim\n- rated the day 3/10"


def _raise_with_journal_text() -> BaseException:
    try:
        date.fromisoformat(JOURNAL)
    except ValueError as exc:
        return exc
    raise AssertionError("fromisoformat accepted journal text")


def test_sanitize_for_log_keeps_route_meta_shape() -> None:
    meta = {
        "request_id": "a1b2c3d4e5f6",
        "date": "2024-01-15",
        "code": "TIMELINE_PARSE_FAILURE",
        **describe_sections(morning=JOURNAL, afternoon=None, night=""),
    }

    assert sanitize_for_log(meta) == meta


def test_sanitize_for_log_clips_and_names_unknown_values() -> None:
    out = sanitize_for_log(
        {"message": "a" * 5000, "counts": (1, 2.5, True), "none": None, "obj": object()}
    )

    assert len(out["message"]) == 1200
    assert out["counts"] == [1, 2.5, True]
    assert out["none"] is None
    assert out["obj"] == "object"


def test_scrub_stack_drops_exception_message() -> None:
    err = _raise_with_journal_text()

    stack = scrub_stack(err)

    assert "therapy" not in stack
    assert "_raise_with_journal_text" in stack
    assert stack.endswith("ValueError")


def test_scrub_sentry_event_blanks_exception_values() -> None:
    event = {
        "exception": {"values": [{"type": "ValueError", "value": JOURNAL}]},
        "level": "error",
    }

    out = scrub_sentry_event(event, {})

    assert out["exception"]["values"] == [{"type": "ValueError", "value": ""}]
    assert out["level"] == "error"
    assert scrub_sentry_event({"message": "ok"}, {}) == {"message": "ok"}


def test_describe_sections_hides_text_but_is_stable() -> None:
    first = describe_sections(morning="- secret plans\n- more", afternoon=None)
    second = describe_sections(morning="- secret plans\n- more", afternoon=None)
    other = describe_sections(morning=None, afternoon="- secret plans\n- more")

    assert first == second
    assert first["morning_chars"] == len("- secret plans\n- more")
    assert first["morning_lines"] == 2
    assert first["afternoon_chars"] == 0
    assert "secret" not in str(first)
    assert first["digest"] != other["digest"]


def test_log_system_error_keeps_journal_text_out_of_logs(
    caplog: pytest.LogCaptureFixture,
) -> None:
    err = _raise_with_journal_text()

    with caplog.at_level(logging.ERROR, logger=error_log.__name__):
        asyncio.run(
            error_log.log_system_error(
                route="/api/timeline/parse",
                message="Timeline parsing failed",
                err=err,
                meta={
                    "request_id": "a1b2c3d4e5f6",
                    "code": "TIMELINE_PARSE_FAILURE",
                    **describe_sections(morning=JOURNAL),
                },
            )
        )

    assert len(caplog.records) == 1
    logged = caplog.records[0].getMessage()
    assert "therapy" not in logged
    assert "Dr. Kim" not in logged
    row = json.loads(logged.removeprefix("system error: "))
    assert row["route"] == "/api/timeline/parse"
    assert row["stack"].endswith("ValueError")
    assert row["meta"]["morning_chars"] == len(JOURNAL)


def test_log_system_error_never_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    def _broken(_value):
        raise RuntimeError("sanitizer down")

    monkeypatch.setattr(error_log, "sanitize_for_log", _broken)

    asyncio.run(error_log.log_system_error(route="/x", message="y"))


def test_log_system_error_forwards_to_sentry_when_configured(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    captured: list[BaseException] = []
    monkeypatch.setattr(error_log.settings, "sentry_dsn", "https://key@sentry.invalid/1")
    monkeypatch.setattr(error_log.sentry_sdk, "capture_exception", captured.append)

    err = RuntimeError("boom")
    asyncio.run(error_log.log_system_error(route="/x", message="y", err=err))

    assert captured == [err]
