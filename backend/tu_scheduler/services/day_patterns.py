from __future__ import annotations

from collections.abc import Iterator

from tu_scheduler.models.schedule import Day
from tu_scheduler.services.time_ranges import parse_time

DayPattern = tuple[Day, ...]

# Common weekly meeting pairs first, then single days. Order is only the
# tie-break seed for suggestions and the search order for auto-resolve.
DAY_PATTERNS: tuple[DayPattern, ...] = (
    (Day.monday, Day.wednesday),
    (Day.tuesday, Day.thursday),
    (Day.monday, Day.friday),
    (Day.tuesday, Day.friday),
    (Day.wednesday, Day.friday),
    (Day.thursday, Day.saturday),
    (Day.monday, Day.thursday),
    (Day.tuesday, Day.wednesday),
    (Day.monday,),
    (Day.tuesday,),
    (Day.wednesday,),
    (Day.thursday,),
    (Day.friday,),
    (Day.saturday,),
)


def two_day_patterns() -> tuple[DayPattern, ...]:
    return tuple(pattern for pattern in DAY_PATTERNS if len(pattern) == 2)


def generate_time_slots(start: str, end: str, step_minutes: int) -> Iterator[int]:
    """Yield candidate start times (minutes after midnight) from ``start`` up to, not including, ``end``."""
    if step_minutes < 1:
        raise ValueError("step_minutes must be positive")
    current = parse_time(start)
    stop = parse_time(end)
    while current < stop:
        yield current
        current += step_minutes
