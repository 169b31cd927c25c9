from __future__ import annotations

from datetime import date as Date
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from journal_timeline.core.config import settings

Section = Literal["morning", "afternoon", "night"]


class TimeOfDay(BaseModel):
    model_config = ConfigDict(frozen=True)

    hours: int = Field(ge=0, le=23)
    minutes: int = Field(ge=0, le=59)

    def as_hours(self) -> float:
        return self.hours + self.minutes / 60


class BucketRange(BaseModel):
    """Representative clock window of a section, in fractional hours [start, end)."""

    model_config = ConfigDict(frozen=True)

    start: float
    end: float

    @property
    def midpoint(self) -> float:
        return (self.start + self.end) / 2


class ParsedBullet(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    raw_text: str
    time_start: TimeOfDay | None = None
    time_end: TimeOfDay | None = None
    # Inclusive on both ends; naive wall-clock datetimes on the entry date.
    estimated_time_range: tuple[datetime, datetime]
    section: Section
    index: int = Field(ge=0)


class ParsedEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    morning: list[ParsedBullet] = Field(default_factory=list)
    afternoon: list[ParsedBullet] = Field(default_factory=list)
    night: list[ParsedBullet] = Field(default_factory=list)
    all: list[ParsedBullet] = Field(default_factory=list)


class ParseTimelineRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    date: Date
    morning: str | None = Field(default=None, max_length=settings.max_section_chars)
    afternoon: str | None = Field(
        default=None, max_length=settings.max_section_chars
    )
    night: str | None = Field(default=None, max_length=settings.max_section_chars)


class ParseTimelineResponse(BaseModel):
    entry: ParsedEntry
    # labels[i] is the display label of entry.all[i].time_start
    labels: list[str] = Field(default_factory=list)


class LookupTimelineRequest(ParseTimelineRequest):
    at: datetime


class LookupTimelineResponse(BaseModel):
    matches: list[ParsedBullet] = Field(default_factory=list)
