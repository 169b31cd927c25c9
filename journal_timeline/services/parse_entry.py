from __future__ import annotations

import logging
from datetime import date as Date
from datetime import datetime
from typing import Any, Sequence

from journal_timeline.schemas.timeline import (
    BucketRange,
    ParsedBullet,
    ParsedEntry,
    Section,
    TimeOfDay,
)
from journal_timeline.services.bullets import normalize_lines
from journal_timeline.services.interpolation import (
    estimated_window,
    hours_to_time_of_day,
    interpolate_times,
)
from journal_timeline.services.time_grammar import (
    extract_time_from_text,
    extract_time_prefix,
)

logger = logging.getLogger(__name__)

SECTION_RANGES: dict[Section, BucketRange] = {
    "morning": BucketRange(start=6, end=12),  # 6am - 12pm
    "afternoon": BucketRange(start=12, end=18),  # 12pm - 6pm
    "night": BucketRange(start=18, end=23),  # 6pm - 11pm
}


def format_time_display(time: TimeOfDay) -> str:
    """Format for display, e.g. "8:45 PM" or "12 PM"."""
    hour12 = time.hours % 12 or 12
    ampm = "PM" if time.hours >= 12 else "AM"
    if time.minutes == 0:
        return f"{hour12} {ampm}"
    return f"{hour12}:{time.minutes:02d} {ampm}"


def _coerce_date(value: Any) -> Date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, Date):
        return value
    if isinstance(value, str):
        return Date.fromisoformat(value.strip())
    raise TypeError(f"Unsupported entry date: {type(value).__name__}")


def parse_section(
    text: str | None, section: Section, day: Date, start_index: int
) -> list[ParsedBullet]:
    bucket = SECTION_RANGES[section]
    placeholder = hours_to_time_of_day(bucket.midpoint)

    bullets: list[ParsedBullet] = []
    for line in normalize_lines(text):
        time_start: TimeOfDay | None = None
        time_end: TimeOfDay | None = None
        display = line

        prefix = extract_time_prefix(line)
        if prefix is not None:
            time_start = prefix.start
            time_end = prefix.end
            display = prefix.rest or line
        else:
            time_start = extract_time_from_text(line, section)

        bullets.append(
            ParsedBullet(
                text=display,
                raw_text=line,
                time_start=time_start,
                time_end=time_end,
                estimated_time_range=estimated_window(day, time_start or placeholder),
                section=section,
                index=start_index + len(bullets),
            )
        )

    return interpolate_times(bullets, bucket, day)


def parse_entry(
    morning: str | None,
    afternoon: str | None,
    night: str | None,
    date: Date | datetime | str,
) -> ParsedEntry:
    """
    Resolve the three sections of a journal entry into timed bullets.

    ``date`` anchors the estimated windows; strings must be ISO ``YYYY-MM-DD``.
    Indices run continuously across morning, afternoon and night.
    """
    day = _coerce_date(date)

    morning_bullets = parse_section(morning, "morning", day, 0)
    afternoon_bullets = parse_section(
        afternoon, "afternoon", day, len(morning_bullets)
    )
    night_bullets = parse_section(
        night, "night", day, len(morning_bullets) + len(afternoon_bullets)
    )

    logger.debug(
        "parsed entry %s: %d/%d/%d bullets",
        day.isoformat(),
        len(morning_bullets),
        len(afternoon_bullets),
        len(night_bullets),
    )
    return ParsedEntry(
        morning=morning_bullets,
        afternoon=afternoon_bullets,
        night=night_bullets,
        all=[*morning_bullets, *afternoon_bullets, *night_bullets],
    )


def find_bullets_at_time(
    bullets: Sequence[ParsedBullet], at: datetime
) -> list[ParsedBullet]:
    """Every bullet whose estimated window contains ``at`` (both ends inclusive)."""
    # Windows are wall-clock; an aware timestamp is compared by its clock reading.
    moment = at.replace(tzinfo=None)
    return [
        bullet
        for bullet in bullets
        if bullet.estimated_time_range[0] <= moment <= bullet.estimated_time_range[1]
    ]


def get_bullet_time_range(bullet: ParsedBullet) -> tuple[datetime, datetime]:
    return bullet.estimated_time_range
