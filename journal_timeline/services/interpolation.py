from __future__ import annotations

import logging
import math
from datetime import date as Date
from datetime import datetime, time, timedelta
from typing import Sequence

from journal_timeline.schemas.timeline import BucketRange, ParsedBullet, TimeOfDay

logger = logging.getLogger(__name__)

ESTIMATED_DURATION = timedelta(hours=1)


def hours_to_time_of_day(hours: float) -> TimeOfDay:
    whole = math.floor(hours)
    # Round half up; 59.5 minutes carries into the next hour.
    minutes = math.floor((hours - whole) * 60 + 0.5)
    if minutes >= 60:
        return TimeOfDay(hours=whole + 1, minutes=0)
    return TimeOfDay(hours=whole, minutes=minutes)


def estimated_window(day: Date, at: TimeOfDay) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time(at.hours, at.minutes))
    return start, start + ESTIMATED_DURATION


def _spread(lo: float, hi: float, count: int) -> list[float]:
    # count evenly spaced points strictly inside (lo, hi)
    step = (hi - lo) / (count + 1)
    return [lo + step * (i + 1) for i in range(count)]


def interpolate_hours(
    hours: Sequence[float | None], bucket: BucketRange
) -> list[float]:
    """
    Fill the gaps of a piecewise-linear timeline.

    ``hours`` holds the fractional hour of every anchor and ``None`` for the
    records to place. Anchors come back unchanged; gaps are spread evenly
    between the bucket bounds and their neighbouring anchors:

    - no anchors: ``start + step * (i + 1)`` with ``step = (end - start) / (n + 1)``
    - before the first anchor: from ``bucket.start`` up to the anchor
    - between anchors: strictly between the two anchor values
    - after the last anchor: from the anchor up to ``bucket.end``
    """
    if not hours:
        return []

    anchors = [(i, h) for i, h in enumerate(hours) if h is not None]
    if not anchors:
        return _spread(bucket.start, bucket.end, len(hours))

    out: list[float] = [0.0] * len(hours)
    for i, h in anchors:
        out[i] = h

    first_idx, first_hours = anchors[0]
    out[:first_idx] = _spread(bucket.start, first_hours, first_idx)

    for (start_idx, start_hours), (end_idx, end_hours) in zip(anchors, anchors[1:]):
        out[start_idx + 1 : end_idx] = _spread(
            start_hours, end_hours, end_idx - start_idx - 1
        )

    last_idx, last_hours = anchors[-1]
    out[last_idx + 1 :] = _spread(last_hours, bucket.end, len(hours) - last_idx - 1)
    return out


def interpolate_times(
    bullets: Sequence[ParsedBullet], bucket: BucketRange, day: Date
) -> list[ParsedBullet]:
    """Give every untimed bullet an interpolated start time and window."""
    filled = interpolate_hours(
        [b.time_start.as_hours() if b.time_start else None for b in bullets], bucket
    )

    out: list[ParsedBullet] = []
    interpolated = 0
    for bullet, value in zip(bullets, filled):
        if bullet.time_start is not None:
            out.append(bullet)
            continue
        start = hours_to_time_of_day(value)
        out.append(
            bullet.model_copy(
                update={
                    "time_start": start,
                    "estimated_time_range": estimated_window(day, start),
                }
            )
        )
        interpolated += 1

    logger.debug(
        "interpolated %d of %d bullets in [%s, %s)",
        interpolated,
        len(out),
        bucket.start,
        bucket.end,
    )
    return out
