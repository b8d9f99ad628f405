from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

from tu_scheduler.models.schedule import Day, Schedule
from tu_scheduler.services.time_ranges import TIME_PATTERN, TimeRange, parse_time


class ScheduleBase(BaseModel):
    course_id: int = Field(ge=1)
    instructor_id: int = Field(ge=1)
    room_id: int = Field(ge=1)
    section_id: int = Field(ge=1)
    day: Day
    start_time: str
    end_time: str
    available_space: int | None = Field(default=None, ge=0)
    notes: str | None = Field(default=None, max_length=1000)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        if not TIME_PATTERN.fullmatch(value):
            raise ValueError("Time must be in HH:MM 24-hour format")
        return value

    @model_validator(mode="after")
    def validate_time_order(self) -> "ScheduleBase":
        if parse_time(self.end_time) <= parse_time(self.start_time):
            raise ValueError("end_time must be after start_time")
        return self

    @property
    def time_range(self) -> TimeRange:
        return TimeRange.from_strings(self.start_time, self.end_time)


class ProposedAssignment(ScheduleBase):
    """A candidate class meeting that has not been persisted."""

    def variant(
        self,
        *,
        day: Day | None = None,
        time_range: TimeRange | None = None,
        room_id: int | None = None,
        available_space: int | None = None,
    ) -> "ProposedAssignment":
        update: dict = {}
        if day is not None:
            update["day"] = day
        if time_range is not None:
            update["start_time"] = time_range.start_time
            update["end_time"] = time_range.end_time
        if room_id is not None:
            update["room_id"] = room_id
        if available_space is not None:
            update["available_space"] = available_space
        return self.model_copy(update=update)


class ScheduleCreate(ScheduleBase):
    pass


class ScheduleUpdate(BaseModel):
    course_id: int | None = Field(default=None, ge=1)
    instructor_id: int | None = Field(default=None, ge=1)
    room_id: int | None = Field(default=None, ge=1)
    section_id: int | None = Field(default=None, ge=1)
    day: Day | None = None
    start_time: str | None = None
    end_time: str | None = None
    available_space: int | None = Field(default=None, ge=0)
    notes: str | None = Field(default=None, max_length=1000)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: str | None) -> str | None:
        if value is not None and not TIME_PATTERN.fullmatch(value):
            raise ValueError("Time must be in HH:MM 24-hour format")
        return value


class ScheduleFilters(BaseModel):
    course_id: int | None = None
    instructor_id: int | None = None
    room_id: int | None = None
    section_id: int | None = None
    day: Day | None = None


class ScheduleOut(BaseModel):
    id: int
    course_id: int
    instructor_id: int
    room_id: int
    section_id: int
    day: Day
    start_time: str
    end_time: str
    available_space: int | None = None
    notes: str | None = None
    semester: str
    course_code: str | None = None
    course_title: str | None = None
    instructor_name: str | None = None
    room_name: str | None = None
    room_capacity: int | None = None
    section_name: str | None = None

    @classmethod
    def from_record(cls, record: Schedule) -> "ScheduleOut":
        return cls(
            id=record.id,
            course_id=record.course_id,
            instructor_id=record.instructor_id,
            room_id=record.room_id,
            section_id=record.section_id,
            day=record.day,
            start_time=record.start_time,
            end_time=record.end_time,
            available_space=record.available_space,
            notes=record.notes,
            semester=record.semester,
            course_code=record.course.code if record.course else None,
            course_title=record.course.title if record.course else None,
            instructor_name=record.instructor.name if record.instructor else None,
            room_name=record.room.name if record.room else None,
            room_capacity=record.room.capacity if record.room else None,
            section_name=record.section.name if record.section else None,
        )
