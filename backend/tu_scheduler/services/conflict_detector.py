from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence

from tu_scheduler.models.schedule import Schedule
from tu_scheduler.schemas.conflict import Conflict, ConflictType
from tu_scheduler.schemas.schedule import ProposedAssignment, ScheduleOut
from tu_scheduler.services.exclusion import ExclusionSet
from tu_scheduler.services.repository import ResourceKind, ScheduleQueries

logger = logging.getLogger(__name__)


class ConflictRule(ABC):
    """One independent check of a proposal against the stored schedule."""

    conflict_type: ConflictType

    def __init__(self, repository: ScheduleQueries) -> None:
        self.repository = repository

    @abstractmethod
    def evaluate(self, proposal: ProposedAssignment, exclude: ExclusionSet) -> list[Conflict]:
        raise NotImplementedError

    @abstractmethod
    def resource_name(self, record: Schedule) -> str:
        raise NotImplementedError

    def _conflicts(self, records: Iterable[Schedule]) -> list[Conflict]:
        return [
            Conflict(
                conflict_type=self.conflict_type,
                resource_name=self.resource_name(record),
                record=ScheduleOut.from_record(record),
            )
            for record in records
        ]


class InstructorOverlapRule(ConflictRule):
    conflict_type = ConflictType.instructor

    def evaluate(self, proposal: ProposedAssignment, exclude: ExclusionSet) -> list[Conflict]:
        records = self.repository.query_overlapping(
            ResourceKind.instructor, proposal.instructor_id, proposal.day, proposal.time_range, exclude
        )
        return self._conflicts(records)

    def resource_name(self, record: Schedule) -> str:
        return record.instructor.name if record.instructor else f"Instructor {record.instructor_id}"


class RoomOverlapRule(ConflictRule):
    conflict_type = ConflictType.room

    def evaluate(self, proposal: ProposedAssignment, exclude: ExclusionSet) -> list[Conflict]:
        records = self.repository.query_overlapping(
            ResourceKind.room, proposal.room_id, proposal.day, proposal.time_range, exclude
        )
        return self._conflicts(records)

    def resource_name(self, record: Schedule) -> str:
        return record.room.name if record.room else f"Room {record.room_id}"


class SectionOverlapRule(ConflictRule):
    """Same section of the same course meeting twice at once.

    Sections are course-scoped, so section 1 of two different courses never
    collide here.
    """

    conflict_type = ConflictType.section

    def evaluate(self, proposal: ProposedAssignment, exclude: ExclusionSet) -> list[Conflict]:
        records = self.repository.query_overlapping(
            ResourceKind.section,
            proposal.section_id,
            proposal.day,
            proposal.time_range,
            exclude,
            course_id=proposal.course_id,
        )
        return self._conflicts(records)

    def resource_name(self, record: Schedule) -> str:
        return record.section.name if record.section else f"Section {record.section_id}"


class DuplicateTimeSlotRule(ConflictRule):
    """A course/instructor/section triple must meet at the same time on every day.

    Compares identity and time range only; the day is irrelevant.
    """

    conflict_type = ConflictType.duplicate_time_slot

    def evaluate(self, proposal: ProposedAssignment, exclude: ExclusionSet) -> list[Conflict]:
        records = self.repository.query_same_identity_different_time(
            proposal.course_id,
            proposal.instructor_id,
            proposal.section_id,
            proposal.time_range,
            exclude,
        )
        return self._conflicts(records)

    def resource_name(self, record: Schedule) -> str:
        return "Duplicate Section Time"


class CourseSectionAssignmentRule(ConflictRule):
    """A section of a course has exactly one instructor across all its meetings."""

    conflict_type = ConflictType.course_section_assignment

    def evaluate(self, proposal: ProposedAssignment, exclude: ExclusionSet) -> list[Conflict]:
        records = self.repository.query_same_course_section(
            proposal.course_id, proposal.section_id, proposal.instructor_id, exclude
        )
        return self._conflicts(records)

    def resource_name(self, record: Schedule) -> str:
        return record.instructor.name if record.instructor else f"Instructor {record.instructor_id}"


DEFAULT_RULES: tuple[type[ConflictRule], ...] = (
    InstructorOverlapRule,
    RoomOverlapRule,
    SectionOverlapRule,
    DuplicateTimeSlotRule,
    CourseSectionAssignmentRule,
)


class ConflictDetector:
    """Runs every rule against a proposal and concatenates the results.

    Rules never short-circuit each other, so one proposal can report several
    conflicts at once. An empty list means the proposal is safe to commit.
    """

    def __init__(
        self,
        repository: ScheduleQueries,
        rules: Sequence[type[ConflictRule]] = DEFAULT_RULES,
    ) -> None:
        self.repository = repository
        self.rules: list[ConflictRule] = [rule(repository) for rule in rules]

    def detect(
        self,
        proposal: ProposedAssignment,
        exclude: ExclusionSet | Iterable[int] | None = None,
    ) -> list[Conflict]:
        exclusion = ExclusionSet.of(exclude)
        conflicts: list[Conflict] = []
        for rule in self.rules:
            conflicts.extend(rule.evaluate(proposal, exclusion))
        logger.debug(
            "Detected %d conflict(s) for %s %s in room %s",
            len(conflicts),
            proposal.day.value,
            proposal.time_range,
            proposal.room_id,
        )
        return conflicts

    def count(
        self,
        proposal: ProposedAssignment,
        exclude: ExclusionSet | Iterable[int] | None = None,
    ) -> int:
        return len(self.detect(proposal, exclude))


def detect_conflicts(
    repository: ScheduleQueries,
    proposal: ProposedAssignment,
    exclude: ExclusionSet | Iterable[int] | None = None,
) -> list[Conflict]:
    return ConflictDetector(repository).detect(proposal, exclude)
