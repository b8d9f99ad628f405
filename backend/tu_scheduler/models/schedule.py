from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from tu_scheduler.db.base import Base
from tu_scheduler.models.course import Course
from tu_scheduler.models.instructor import Instructor
from tu_scheduler.models.room import Room
from tu_scheduler.models.section import Section


class Day(str, Enum):
    monday = "Monday"
    tuesday = "Tuesday"
    wednesday = "Wednesday"
    thursday = "Thursday"
    friday = "Friday"
    saturday = "Saturday"


class Schedule(Base):
    __tablename__ = "schedules"
    __table_args__ = (
        Index("ix_schedules_semester_day", "semester", "day"),
        Index("ix_schedules_course_section", "course_id", "section_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    course_id: Mapped[int] = mapped_column(ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    instructor_id: Mapped[int] = mapped_column(ForeignKey("instructors.id", ondelete="CASCADE"), nullable=False)
    room_id: Mapped[int] = mapped_column(ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False)
    section_id: Mapped[int] = mapped_column(ForeignKey("sections.id", ondelete="CASCADE"), nullable=False)
    day: Mapped[Day] = mapped_column(
        SAEnum(Day, name="schedule_day", values_callable=lambda days: [item.value for item in days]),
        nullable=False,
    )
    # Zero-padded "HH:MM" so lexical order matches clock order.
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    available_space: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    semester: Mapped[str] = mapped_column(String(50), nullable=False, default="Semester 1")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())

    course: Mapped[Course] = relationship(lazy="joined")
    instructor: Mapped[Instructor] = relationship(lazy="joined")
    room: Mapped[Room] = relationship(lazy="joined")
    section: Mapped[Section] = relationship(lazy="joined")
