from __future__ import annotations

import re
from dataclasses import dataclass

TIME_PATTERN = re.compile(r"([01]\d|2[0-3]):[0-5]\d")
MINUTES_PER_DAY = 24 * 60


def parse_time(value: str) -> int:
    """Convert an "HH:MM" 24-hour string to minutes after midnight."""
    if not isinstance(value, str) or not TIME_PATTERN.fullmatch(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def format_time(minutes: int) -> str:
    # Past-midnight values are still rendered (e.g. "24:30") so callers can
    # compare them against the end of the working day.
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def add_minutes(value: str, minutes: int) -> str:
    return format_time(parse_time(value) + minutes)


@dataclass(frozen=True, slots=True)
class TimeRange:
    """Half-open interval [start, end) on a single day, in minutes after midnight."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise ValueError("start time must be before end time")

    @classmethod
    def from_strings(cls, start_time: str, end_time: str) -> "TimeRange":
        return cls(parse_time(start_time), parse_time(end_time))

    @property
    def start_time(self) -> str:
        return format_time(self.start)

    @property
    def end_time(self) -> str:
        return format_time(self.end)

    @property
    def duration(self) -> int:
        return self.end - self.start

    def shifted_to(self, start: int) -> "TimeRange":
        return TimeRange(start, start + self.duration)

    def ends_by(self, limit: int) -> bool:
        return self.end <= limit

    def __str__(self) -> str:
        return f"{self.start_time}-{self.end_time}"


def overlaps(a: TimeRange, b: TimeRange) -> bool:
    # Touching endpoints (09:00-10:00 vs 10:00-11:00) do not overlap.
    return a.start < b.end and b.start < a.end
