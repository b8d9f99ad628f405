from types import SimpleNamespace

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from tu_scheduler.core.exceptions import ResourceNotFoundError, ScheduleConflictError, ScheduleValidationError
from tu_scheduler.models import AppSetting, Schedule
from tu_scheduler.models.schedule import Day
from tu_scheduler.schemas.schedule import ScheduleCreate, ScheduleFilters, ScheduleUpdate
from tu_scheduler.services import schedule_service
from tu_scheduler.services.repository import get_active_semester


@pytest.fixture
def campus(catalog):
    return SimpleNamespace(
        intro=catalog.course("CS101", "Intro to Computing"),
        algebra=catalog.course("MATH201", "Linear Algebra"),
        reyes=catalog.instructor("Dr. Reyes"),
        okafor=catalog.instructor("Dr. Okafor"),
        small=catalog.room("Room 101", 40),
        hall=catalog.room("Hall A", 100),
        one=catalog.section("1"),
        two=catalog.section("2"),
    )


def payload(campus, **overrides):
    fields = {
        "course_id": campus.intro.id,
        "instructor_id": campus.reyes.id,
        "room_id": campus.small.id,
        "section_id": campus.one.id,
        "day": "Monday",
        "start_time": "09:00",
        "end_time": "10:00",
    }
    fields.update(overrides)
    return ScheduleCreate(**fields)


def test_active_semester_defaults_without_settings_row(db_session):
    assert get_active_semester(db_session) == "Semester 1"


def test_active_semester_reads_settings_row(db_session):
    db_session.add(AppSetting(id=1, active_semester="Semester 2", academic_year="2025-2026"))
    db_session.commit()
    assert get_active_semester(db_session) == "Semester 2"


def test_create_schedule_stores_in_active_semester(db_session, campus):
    record = schedule_service.create_schedule(db_session, payload(campus))

    assert record.id is not None
    assert record.semester == "Semester 1"
    assert record.day == Day.monday


def test_create_schedule_refuses_conflicts(db_session, campus):
    schedule_service.create_schedule(db_session, payload(campus))

    with pytest.raises(ScheduleConflictError) as excinfo:
        schedule_service.create_schedule(
            db_session,
            payload(campus, course_id=campus.algebra.id, section_id=campus.two.id, room_id=campus.hall.id),
        )

    err = excinfo.value
    assert err.status_code == 409
    assert [item["conflict_type"] for item in err.details["conflicts"]] == ["Instructor"]
    assert db_session.query(Schedule).count() == 1


def test_second_meeting_day_with_same_time_is_accepted(db_session, campus):
    schedule_service.create_schedule(db_session, payload(campus))
    schedule_service.create_schedule(db_session, payload(campus, day="Wednesday"))

    with pytest.raises(ScheduleConflictError):
        schedule_service.create_schedule(
            db_session, payload(campus, day="Friday", start_time="13:00", end_time="14:00")
        )


def test_update_does_not_conflict_with_itself(db_session, campus):
    record = schedule_service.create_schedule(db_session, payload(campus))

    updated = schedule_service.update_schedule(
        db_session, record.id, ScheduleUpdate(start_time="09:30", end_time="10:30", notes="moved")
    )

    assert (updated.start_time, updated.end_time) == ("09:30", "10:30")
    assert updated.notes == "moved"


def test_update_refuses_conflicts_with_other_records(db_session, campus):
    schedule_service.create_schedule(db_session, payload(campus))
    other = schedule_service.create_schedule(
        db_session,
        payload(
            campus,
            course_id=campus.algebra.id,
            instructor_id=campus.okafor.id,
            room_id=campus.hall.id,
            section_id=campus.two.id,
        ),
    )

    with pytest.raises(ScheduleConflictError) as excinfo:
        schedule_service.update_schedule(db_session, other.id, ScheduleUpdate(room_id=campus.small.id))
    assert [item["conflict_type"] for item in excinfo.value.details["conflicts"]] == ["Room"]


def test_update_rejects_inverted_time_range(db_session, campus):
    record = schedule_service.create_schedule(db_session, payload(campus))

    with pytest.raises(ScheduleValidationError) as excinfo:
        schedule_service.update_schedule(db_session, record.id, ScheduleUpdate(start_time="11:00"))
    assert excinfo.value.status_code == 400


def test_update_and_delete_missing_schedule(db_session):
    with pytest.raises(ResourceNotFoundError):
        schedule_service.update_schedule(db_session, 404, ScheduleUpdate(notes="x"))
    with pytest.raises(ResourceNotFoundError):
        schedule_service.delete_schedule(db_session, 404)


def test_list_schedules_filters_and_orders(db_session, catalog, campus):
    catalog.schedule(campus.algebra, campus.okafor, campus.hall, campus.two, Day.wednesday, "08:00", "09:00")
    catalog.schedule(campus.intro, campus.reyes, campus.small, campus.one, Day.monday, "13:00", "14:00")
    catalog.schedule(campus.intro, campus.reyes, campus.small, campus.one, Day.monday, "09:00", "10:00")
    catalog.schedule(
        campus.intro, campus.reyes, campus.small, campus.one, Day.tuesday, "09:00", "10:00", semester="Semester 2"
    )

    everything = schedule_service.list_schedules(db_session)
    assert [(item.day.value, item.start_time) for item in everything] == [
        ("Monday", "09:00"),
        ("Monday", "13:00"),
        ("Wednesday", "08:00"),
    ]

    by_instructor = schedule_service.list_schedules(db_session, ScheduleFilters(instructor_id=campus.okafor.id))
    assert [item.course_id for item in by_instructor] == [campus.algebra.id]

    by_day = schedule_service.list_schedules(db_session, ScheduleFilters(day=Day.monday, room_id=campus.small.id))
    assert len(by_day) == 2


def test_delete_schedule(db_session, campus):
    record = schedule_service.create_schedule(db_session, payload(campus))
    schedule_service.delete_schedule(db_session, record.id)
    assert db_session.get(Schedule, record.id) is None


def test_time_with_trailing_newline_is_rejected(db_session, campus):
    with pytest.raises(ValidationError):
        payload(campus, start_time="09:00\n")
    with pytest.raises(ValidationError):
        ScheduleUpdate(end_time="10:00\n")


def test_second_meeting_day_matches_stored_time_exactly(db_session, campus):
    first = schedule_service.create_schedule(db_session, payload(campus))
    second = schedule_service.create_schedule(db_session, payload(campus, day="Wednesday"))

    assert first.start_time == second.start_time == "09:00"


def test_create_schedule_requires_existing_references(db_session, campus):
    with pytest.raises(ResourceNotFoundError) as excinfo:
        schedule_service.create_schedule(db_session, payload(campus, instructor_id=998))

    assert excinfo.value.status_code == 404
    assert excinfo.value.message == "Instructor with id 998 not found"
    assert db_session.query(Schedule).count() == 0


def test_update_schedule_requires_existing_references(db_session, campus):
    record = schedule_service.create_schedule(db_session, payload(campus))

    with pytest.raises(ResourceNotFoundError) as excinfo:
        schedule_service.update_schedule(db_session, record.id, ScheduleUpdate(room_id=997))

    assert excinfo.value.message == "Room with id 997 not found"
    db_session.refresh(record)
    assert record.room_id == campus.small.id


def test_store_rejects_orphan_records(db_session, campus):
    db_session.add(
        Schedule(
            course_id=999,
            instructor_id=campus.reyes.id,
            room_id=campus.small.id,
            section_id=campus.one.id,
            day=Day.monday,
            start_time="09:00",
            end_time="10:00",
            semester="Semester 1",
        )
    )
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()
