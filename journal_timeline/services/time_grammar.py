from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from journal_timeline.schemas.timeline import Section, TimeOfDay

_TIME_24_RE = re.compile(r"^(\d{1,2}):(\d{2})$", flags=re.ASCII)
_TIME_12_RE = re.compile(
    r"^(\d{1,2})(?::(\d{2}))?\s*(am|pm)$", flags=re.IGNORECASE | re.ASCII
)

# "9-11am" / "9:30-11:30pm": both bounds share the trailing meridiem.
_RANGE_SHARED_RE = re.compile(
    r"^(\d{1,2}(?::\d{2})?)\s*-\s*(\d{1,2}(?::\d{2})?)\s*(am|pm)\s*[-–:]?\s*(.*)$",
    flags=re.IGNORECASE | re.ASCII,
)
# "9am-2pm" / "9:30am – 2:30pm"
_RANGE_FULL_RE = re.compile(
    r"^(\d{1,2}(?::\d{2})?\s*(?:am|pm))\s*[-–]\s*(\d{1,2}(?::\d{2})?\s*(?:am|pm))"
    r"\s*[-–:]?\s*(.*)$",
    flags=re.IGNORECASE | re.ASCII,
)
# "9am -", "9:30am:", "9am "
_SINGLE_12_RE = re.compile(
    r"^(\d{1,2}(?::\d{2})?\s*(?:am|pm))\s*[-–:]?\s*(.*)$",
    flags=re.IGNORECASE | re.ASCII,
)
# "14:00 -", "9:30:"
_SINGLE_24_RE = re.compile(r"^(\d{1,2}:\d{2})\s*[-–:]?\s*(.*)$", flags=re.ASCII)

_EXPLICIT_TIME_RE = re.compile(
    r"(\d{1,2})(?::(\d{2}))?\s*(am|pm)", flags=re.IGNORECASE | re.ASCII
)
# Bare "7:30" or "at 7". Either side of a rating such as "4/10" is skipped.
_BARE_TIME_RE = re.compile(
    r"\b(?<!\d/)(\d{1,2})(?::(\d{2}))?(?!/\d)\b", flags=re.ASCII
)

_WHITESPACE_RE = re.compile(r"\s")


def _apply_meridiem(hours: int, meridiem: str) -> int:
    if meridiem == "pm" and hours != 12:
        return hours + 12
    if meridiem == "am" and hours == 12:
        return 0
    return hours


def parse_time_string(value: str) -> TimeOfDay | None:
    """Parse "9am", "2:30pm", "9:30 am" or 24-hour "14:00"; None when invalid."""
    m24 = _TIME_24_RE.match(value)
    if m24:
        hours = int(m24.group(1))
        minutes = int(m24.group(2))
        if 0 <= hours <= 23 and 0 <= minutes <= 59:
            return TimeOfDay(hours=hours, minutes=minutes)

    m12 = _TIME_12_RE.match(value)
    if m12:
        hours = int(m12.group(1))
        minutes = int(m12.group(2) or "0")
        if hours < 1 or hours > 12:
            return None
        if minutes < 0 or minutes > 59:
            return None
        return TimeOfDay(
            hours=_apply_meridiem(hours, m12.group(3).lower()), minutes=minutes
        )

    return None


def _compact(value: str) -> str:
    return _WHITESPACE_RE.sub("", value)


@dataclass(frozen=True)
class PrefixMatch:
    start: TimeOfDay
    end: TimeOfDay | None
    rest: str


@dataclass(frozen=True)
class PrefixRule:
    name: str
    pattern: re.Pattern[str]
    build: Callable[[re.Match[str]], PrefixMatch | None]

    def apply(self, line: str) -> PrefixMatch | None:
        match = self.pattern.match(line)
        if match is None:
            return None
        return self.build(match)


def _build_range_shared(match: re.Match[str]) -> PrefixMatch | None:
    meridiem = match.group(3)
    start = parse_time_string(match.group(1) + meridiem)
    if start is None:
        return None
    end = parse_time_string(match.group(2) + meridiem)
    return PrefixMatch(start=start, end=end, rest=match.group(4))


def _build_range_full(match: re.Match[str]) -> PrefixMatch | None:
    start = parse_time_string(_compact(match.group(1)))
    if start is None:
        return None
    end = parse_time_string(_compact(match.group(2)))
    return PrefixMatch(start=start, end=end, rest=match.group(3))


def _build_single(match: re.Match[str]) -> PrefixMatch | None:
    start = parse_time_string(_compact(match.group(1)))
    if start is None:
        return None
    return PrefixMatch(start=start, end=None, rest=match.group(2))


# Precedence is the tuple order; the first rule returning a PrefixMatch wins.
PREFIX_RULES: tuple[PrefixRule, ...] = (
    PrefixRule("range_shared_meridiem", _RANGE_SHARED_RE, _build_range_shared),
    PrefixRule("range_full", _RANGE_FULL_RE, _build_range_full),
    PrefixRule("single_meridiem", _SINGLE_12_RE, _build_single),
    PrefixRule("single_24h", _SINGLE_24_RE, _build_single),
)


def extract_time_prefix(text: str) -> PrefixMatch | None:
    """
    Recognize a time or time range at the start of a bullet.

    Examples:
    - "9am - Had coffee" -> start 09:00, rest "Had coffee"
    - "9-11am - Meeting" -> start 09:00, end 11:00, rest "Meeting"
    - "9:30am Had coffee" -> start 09:30, rest "Had coffee"
    """
    trimmed = text.strip()
    for rule in PREFIX_RULES:
        matched = rule.apply(trimmed)
        if matched is not None:
            return matched
    return None


def extract_time_from_text(text: str, section: Section) -> TimeOfDay | None:
    """
    Find a time anywhere in the text, inferring AM/PM from the section.

    "woke up at 7:30" (morning) -> 07:30, "meeting at 3" (afternoon) -> 15:00,
    "dinner at 7:30" (night) -> 19:30. An explicit am/pm always wins.
    """
    explicit = _EXPLICIT_TIME_RE.search(text)
    if explicit:
        return parse_time_string(_compact(explicit.group(0)))

    bare = _BARE_TIME_RE.search(text)
    if bare:
        hours = int(bare.group(1))
        minutes = int(bare.group(2) or "0")
        if 1 <= hours <= 12 and 0 <= minutes <= 59:
            meridiem = "pm" if section in ("afternoon", "night") else "am"
            return TimeOfDay(hours=_apply_meridiem(hours, meridiem), minutes=minutes)

    return None
