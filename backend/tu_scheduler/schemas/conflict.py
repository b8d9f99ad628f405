from enum import Enum

from pydantic import BaseModel, Field

from tu_scheduler.models.schedule import Day
from tu_scheduler.schemas.schedule import ProposedAssignment, ScheduleOut


class ConflictType(str, Enum):
    instructor = "Instructor"
    room = "Room"
    section = "Section"
    duplicate_time_slot = "Duplicate Time Slot"
    course_section_assignment = "Course-Section Assignment"


class Conflict(BaseModel):
    conflict_type: ConflictType
    resource_name: str
    record: ScheduleOut


class ConflictCheckRequest(BaseModel):
    proposal: ProposedAssignment
    exclude_ids: list[int] = Field(default_factory=list, max_length=500)


class ConflictReport(BaseModel):
    has_conflicts: bool
    conflicts: list[Conflict]


class AlternativeTime(BaseModel):
    days: list[Day]
    start_time: str
    end_time: str
    conflicts: int
    section_id: int


class AlternativeRoom(BaseModel):
    room_id: int
    room_name: str
    capacity: int
    conflicts: int


class AutoResolveAssignment(BaseModel):
    course_id: int
    instructor_id: int
    room_id: int
    section_id: int
    days: list[Day]
    start_time: str
    end_time: str
    available_space: int


class AutoResolveResult(BaseModel):
    success: bool
    message: str
    data: AutoResolveAssignment | None = None
