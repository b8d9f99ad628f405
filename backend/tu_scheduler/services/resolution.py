from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass

from tu_scheduler.core.config import Settings, get_settings
from tu_scheduler.core.exceptions import SearchAbortedError
from tu_scheduler.models.room import Room
from tu_scheduler.schemas.conflict import (
    AlternativeRoom,
    AlternativeTime,
    AutoResolveAssignment,
    AutoResolveResult,
)
from tu_scheduler.schemas.schedule import ProposedAssignment
from tu_scheduler.services.conflict_detector import ConflictDetector
from tu_scheduler.services.day_patterns import DAY_PATTERNS, DayPattern, generate_time_slots, two_day_patterns
from tu_scheduler.services.exclusion import ExclusionSet
from tu_scheduler.services.repository import ScheduleQueries
from tu_scheduler.services.time_ranges import TimeRange, parse_time

logger = logging.getLogger(__name__)

NO_SLOT_MESSAGE = "No conflict-free slot available for 2-day pattern"


@dataclass(frozen=True)
class SearchWindow:
    day_start: str = "08:00"
    last_start: str = "17:00"
    day_end: str = "18:00"
    suggestion_step_minutes: int = 90
    auto_resolve_step_minutes: int = 30
    max_time_suggestions: int = 15

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "SearchWindow":
        settings = settings or get_settings()
        return cls(
            day_start=settings.day_start,
            last_start=settings.last_start,
            day_end=settings.day_end,
            suggestion_step_minutes=settings.suggestion_step_minutes,
            auto_resolve_step_minutes=settings.auto_resolve_step_minutes,
            max_time_suggestions=settings.max_time_suggestions,
        )


class ConflictResolver:
    """Searches for low-conflict or conflict-free variants of a proposal.

    Every candidate is checked with the same ``ConflictDetector`` used for
    plain detection, so an accepted variant always re-checks clean. Searches
    are lazy; ``should_abort`` is polled between candidates and a positive
    answer raises ``SearchAbortedError`` instead of returning partial results.
    """

    def __init__(
        self,
        repository: ScheduleQueries,
        window: SearchWindow | None = None,
        should_abort: Callable[[], bool] | None = None,
    ) -> None:
        self.repository = repository
        self.detector = ConflictDetector(repository)
        self.window = window or SearchWindow.from_settings()
        self.should_abort = should_abort

    def _check_abort(self) -> None:
        if self.should_abort is not None and self.should_abort():
            raise SearchAbortedError()

    def iter_time_candidates(
        self,
        proposal: ProposedAssignment,
        patterns: Sequence[DayPattern],
        step_minutes: int,
    ) -> Iterator[tuple[DayPattern, TimeRange]]:
        original = proposal.time_range
        limit = parse_time(self.window.day_end)
        for pattern in patterns:
            for start in generate_time_slots(self.window.day_start, self.window.last_start, step_minutes):
                candidate = original.shifted_to(start)
                if not candidate.ends_by(limit):
                    continue
                self._check_abort()
                yield pattern, candidate

    def iter_resolution_candidates(
        self,
        proposal: ProposedAssignment,
        rooms: Sequence[Room],
    ) -> Iterator[tuple[DayPattern, TimeRange, Room]]:
        for pattern, candidate in self.iter_time_candidates(
            proposal, two_day_patterns(), self.window.auto_resolve_step_minutes
        ):
            for room in rooms:
                self._check_abort()
                yield pattern, candidate, room

    def suggest_alternative_times(
        self,
        proposal: ProposedAssignment,
        exclude: ExclusionSet | Iterable[int] | None = None,
    ) -> list[AlternativeTime]:
        exclusion = ExclusionSet.of(exclude)
        alternatives: list[AlternativeTime] = []
        for pattern, candidate in self.iter_time_candidates(
            proposal, DAY_PATTERNS, self.window.suggestion_step_minutes
        ):
            # Booking a pattern books every day in it, so every day counts.
            total = sum(
                self.detector.count(proposal.variant(day=day, time_range=candidate), exclusion)
                for day in pattern
            )
            alternatives.append(
                AlternativeTime(
                    days=list(pattern),
                    start_time=candidate.start_time,
                    end_time=candidate.end_time,
                    conflicts=total,
                    section_id=proposal.section_id,
                )
            )

        # Stable sort keeps catalog order as the final tie-break.
        alternatives.sort(key=lambda item: (item.conflicts, -len(item.days), item.start_time))
        return alternatives[: self.window.max_time_suggestions]

    def suggest_alternative_rooms(
        self,
        proposal: ProposedAssignment,
        exclude: ExclusionSet | Iterable[int] | None = None,
    ) -> list[AlternativeRoom]:
        exclusion = ExclusionSet.of(exclude)
        alternatives: list[AlternativeRoom] = []
        for room in self.repository.list_rooms():
            if room.id == proposal.room_id:
                continue
            self._check_abort()
            variant = proposal.variant(room_id=room.id, available_space=room.capacity)
            alternatives.append(
                AlternativeRoom(
                    room_id=room.id,
                    room_name=room.name,
                    capacity=room.capacity,
                    conflicts=self.detector.count(variant, exclusion),
                )
            )

        alternatives.sort(key=lambda item: (item.conflicts, -item.capacity))
        return alternatives

    def auto_resolve(
        self,
        proposal: ProposedAssignment,
        exclude: ExclusionSet | Iterable[int] | None = None,
    ) -> AutoResolveResult:
        exclusion = ExclusionSet.of(exclude)
        rooms = self.repository.list_rooms(order_by_capacity=True)
        if not rooms:
            logger.info("Auto-resolve skipped: no rooms are defined")
            return AutoResolveResult(success=False, message="No rooms available for auto-resolve")

        evaluated = 0
        for pattern, candidate, room in self.iter_resolution_candidates(proposal, rooms):
            evaluated += 1
            if self._is_clear(proposal, pattern, candidate, room, exclusion):
                days = "/".join(day.value for day in pattern)
                logger.info(
                    "Auto-resolve accepted %s %s in %s after %d candidate(s)",
                    days,
                    candidate,
                    room.name,
                    evaluated,
                )
                return AutoResolveResult(
                    success=True,
                    message=f"Conflict-free slot found: {days} at {candidate} in {room.name}",
                    data=AutoResolveAssignment(
                        course_id=proposal.course_id,
                        instructor_id=proposal.instructor_id,
                        room_id=room.id,
                        section_id=proposal.section_id,
                        days=list(pattern),
                        start_time=candidate.start_time,
                        end_time=candidate.end_time,
                        available_space=room.capacity,
                    ),
                )

        logger.info("Auto-resolve exhausted %d candidate(s) without a conflict-free slot", evaluated)
        return AutoResolveResult(success=False, message=NO_SLOT_MESSAGE)

    def _is_clear(
        self,
        proposal: ProposedAssignment,
        pattern: DayPattern,
        candidate: TimeRange,
        room: Room,
        exclusion: ExclusionSet,
    ) -> bool:
        for day in pattern:
            variant = proposal.variant(
                day=day, time_range=candidate, room_id=room.id, available_space=room.capacity
            )
            if self.detector.count(variant, exclusion) > 0:
                return False
        return True


def suggest_alternative_times(
    repository: ScheduleQueries,
    proposal: ProposedAssignment,
    exclude: ExclusionSet | Iterable[int] | None = None,
) -> list[AlternativeTime]:
    return ConflictResolver(repository).suggest_alternative_times(proposal, exclude)


def suggest_alternative_rooms(
    repository: ScheduleQueries,
    proposal: ProposedAssignment,
    exclude: ExclusionSet | Iterable[int] | None = None,
) -> list[AlternativeRoom]:
    return ConflictResolver(repository).suggest_alternative_rooms(proposal, exclude)


def auto_resolve(
    repository: ScheduleQueries,
    proposal: ProposedAssignment,
    exclude: ExclusionSet | Iterable[int] | None = None,
) -> AutoResolveResult:
    return ConflictResolver(repository).auto_resolve(proposal, exclude)
