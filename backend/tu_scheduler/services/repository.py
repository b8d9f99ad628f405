from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from typing import Protocol

from sqlalchemy import Select, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tu_scheduler.core.config import get_settings
from tu_scheduler.core.exceptions import ConflictQueryError
from tu_scheduler.models.app_setting import AppSetting
from tu_scheduler.models.room import Room
from tu_scheduler.models.schedule import Day, Schedule
from tu_scheduler.services.exclusion import ExclusionSet
from tu_scheduler.services.time_ranges import TimeRange, overlaps

logger = logging.getLogger(__name__)


class ResourceKind(str, Enum):
    instructor = "instructor"
    room = "room"
    section = "section"


class ScheduleQueries(Protocol):
    """Read-only queries the conflict engine needs from the schedule store."""

    def query_overlapping(
        self,
        kind: ResourceKind,
        resource_id: int,
        day: Day,
        time_range: TimeRange,
        exclude: ExclusionSet,
        *,
        course_id: int | None = None,
    ) -> list[Schedule]: ...

    def query_same_identity_different_time(
        self,
        course_id: int,
        instructor_id: int,
        section_id: int,
        time_range: TimeRange,
        exclude: ExclusionSet,
    ) -> list[Schedule]: ...

    def query_same_course_section(
        self,
        course_id: int,
        section_id: int,
        instructor_id: int,
        exclude: ExclusionSet,
    ) -> list[Schedule]: ...

    def list_rooms(self, *, order_by_capacity: bool = False) -> list[Room]: ...


def get_active_semester(db: Session) -> str:
    fallback = get_settings().default_semester
    try:
        setting = db.get(AppSetting, 1)
    except SQLAlchemyError as exc:
        logger.exception("Failed to read the active semester")
        raise ConflictQueryError("Could not read the active semester") from exc
    if setting is None or not setting.active_semester:
        return fallback
    return setting.active_semester


class ScheduleRepository:
    """SQLAlchemy-backed schedule queries scoped to a single semester.

    All filters are bound parameters; nothing here builds SQL text.
    """

    def __init__(self, db: Session, semester: str) -> None:
        self.db = db
        self.semester = semester

    @classmethod
    def for_active_semester(cls, db: Session) -> "ScheduleRepository":
        return cls(db, get_active_semester(db))

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            logger.exception("Schedule query %s failed", operation)
            raise ConflictQueryError() from exc

    def _base_query(self, exclude: ExclusionSet) -> Select:
        stmt = select(Schedule).where(Schedule.semester == self.semester)
        if exclude:
            stmt = stmt.where(Schedule.id.not_in(list(exclude)))
        return stmt

    def _fetch(self, stmt: Select, operation: str) -> list[Schedule]:
        with self._guard(operation):
            return list(self.db.execute(stmt.order_by(Schedule.id)).unique().scalars())

    def query_overlapping(
        self,
        kind: ResourceKind,
        resource_id: int,
        day: Day,
        time_range: TimeRange,
        exclude: ExclusionSet,
        *,
        course_id: int | None = None,
    ) -> list[Schedule]:
        stmt = self._base_query(exclude).where(Schedule.day == day)
        if kind is ResourceKind.instructor:
            stmt = stmt.where(Schedule.instructor_id == resource_id)
        elif kind is ResourceKind.room:
            stmt = stmt.where(Schedule.room_id == resource_id)
        elif kind is ResourceKind.section:
            if course_id is None:
                raise ValueError("Section overlap queries are scoped to a course")
            stmt = stmt.where(Schedule.section_id == resource_id, Schedule.course_id == course_id)
        else:
            raise ValueError(f"Unsupported resource kind: {kind!r}")
        records = self._fetch(stmt, f"overlapping:{kind.value}")
        return [
            record
            for record in records
            if overlaps(TimeRange.from_strings(record.start_time, record.end_time), time_range)
        ]

    def query_same_identity_different_time(
        self,
        course_id: int,
        instructor_id: int,
        section_id: int,
        time_range: TimeRange,
        exclude: ExclusionSet,
    ) -> list[Schedule]:
        stmt = self._base_query(exclude).where(
            Schedule.course_id == course_id,
            Schedule.instructor_id == instructor_id,
            Schedule.section_id == section_id,
            (Schedule.start_time != time_range.start_time) | (Schedule.end_time != time_range.end_time),
        )
        return self._fetch(stmt, "same-identity-different-time")

    def query_same_course_section(
        self,
        course_id: int,
        section_id: int,
        instructor_id: int,
        exclude: ExclusionSet,
    ) -> list[Schedule]:
        stmt = self._base_query(exclude).where(
            Schedule.course_id == course_id,
            Schedule.section_id == section_id,
            Schedule.instructor_id != instructor_id,
        )
        return self._fetch(stmt, "same-course-section")

    def list_rooms(self, *, order_by_capacity: bool = False) -> list[Room]:
        if order_by_capacity:
            order = (Room.capacity.desc(), Room.name)
        else:
            order = (Room.name,)
        with self._guard("list-rooms"):
            return list(self.db.execute(select(Room).order_by(*order)).scalars())
