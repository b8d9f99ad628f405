from __future__ import annotations

import logging

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tu_scheduler.core.exceptions import (
    ConflictQueryError,
    ResourceNotFoundError,
    ScheduleConflictError,
    ScheduleValidationError,
)
from tu_scheduler.models import Course, Instructor, Room, Section
from tu_scheduler.models.schedule import Day, Schedule
from tu_scheduler.schemas.conflict import Conflict
from tu_scheduler.schemas.schedule import ProposedAssignment, ScheduleCreate, ScheduleFilters, ScheduleUpdate
from tu_scheduler.services.conflict_detector import ConflictDetector
from tu_scheduler.services.exclusion import ExclusionSet
from tu_scheduler.services.repository import ScheduleRepository, get_active_semester

logger = logging.getLogger(__name__)

DAY_ORDER = tuple(Day)

REFERENCES = (
    ("course_id", Course),
    ("instructor_id", Instructor),
    ("room_id", Room),
    ("section_id", Section),
)


def _raise_on_conflicts(conflicts: list[Conflict]) -> None:
    if conflicts:
        raise ScheduleConflictError([conflict.model_dump(mode="json") for conflict in conflicts])


def _get_or_404(db: Session, schedule_id: int) -> Schedule:
    record = db.get(Schedule, schedule_id)
    if record is None:
        raise ResourceNotFoundError("Schedule", schedule_id)
    return record


def _require_references(db: Session, proposal: ProposedAssignment) -> None:
    for field, model in REFERENCES:
        resource_id = getattr(proposal, field)
        if db.get(model, resource_id) is None:
            raise ResourceNotFoundError(model.__name__, resource_id)


def list_schedules(db: Session, filters: ScheduleFilters | None = None) -> list[Schedule]:
    stmt = select(Schedule).where(Schedule.semester == get_active_semester(db))
    filters = filters or ScheduleFilters()
    if filters.course_id is not None:
        stmt = stmt.where(Schedule.course_id == filters.course_id)
    if filters.instructor_id is not None:
        stmt = stmt.where(Schedule.instructor_id == filters.instructor_id)
    if filters.room_id is not None:
        stmt = stmt.where(Schedule.room_id == filters.room_id)
    if filters.section_id is not None:
        stmt = stmt.where(Schedule.section_id == filters.section_id)
    if filters.day is not None:
        stmt = stmt.where(Schedule.day == filters.day)
    try:
        records = list(db.execute(stmt).unique().scalars())
    except SQLAlchemyError as exc:
        logger.exception("Failed to list schedules")
        raise ConflictQueryError("Could not load schedules") from exc
    return sorted(records, key=lambda item: (DAY_ORDER.index(item.day), item.start_time, item.id))


def get_schedule(db: Session, schedule_id: int) -> Schedule:
    return _get_or_404(db, schedule_id)


def create_schedule(db: Session, payload: ScheduleCreate) -> Schedule:
    repository = ScheduleRepository.for_active_semester(db)
    proposal = ProposedAssignment.model_validate(payload.model_dump())
    _require_references(db, proposal)
    _raise_on_conflicts(ConflictDetector(repository).detect(proposal, ExclusionSet.EMPTY))

    record = Schedule(**payload.model_dump(), semester=repository.semester)
    db.add(record)
    db.commit()
    db.refresh(record)
    logger.info(
        "Created schedule %s: course %s section %s on %s %s",
        record.id,
        record.course_id,
        record.section_id,
        record.day.value,
        proposal.time_range,
    )
    return record


def update_schedule(db: Session, schedule_id: int, changes: ScheduleUpdate) -> Schedule:
    record = _get_or_404(db, schedule_id)
    data = changes.model_dump(exclude_unset=True)

    merged = {
        "course_id": record.course_id,
        "instructor_id": record.instructor_id,
        "room_id": record.room_id,
        "section_id": record.section_id,
        "day": record.day,
        "start_time": record.start_time,
        "end_time": record.end_time,
        "available_space": record.available_space,
        "notes": record.notes,
    }
    merged.update(data)
    try:
        proposal = ProposedAssignment.model_validate(merged)
    except ValidationError as exc:
        raise ScheduleValidationError(
            "Updated schedule is invalid",
            details={"errors": [error["msg"] for error in exc.errors()]},
        ) from exc
    _require_references(db, proposal)

    repository = ScheduleRepository(db, record.semester)
    _raise_on_conflicts(ConflictDetector(repository).detect(proposal, ExclusionSet([schedule_id])))

    for key, value in proposal.model_dump().items():
        setattr(record, key, value)
    db.commit()
    db.refresh(record)
    logger.info("Updated schedule %s", record.id)
    return record


def delete_schedule(db: Session, schedule_id: int) -> None:
    record = _get_or_404(db, schedule_id)
    db.delete(record)
    db.commit()
    logger.info("Deleted schedule %s", schedule_id)
