from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tu_scheduler.api.deps import get_db
from tu_scheduler.models.schedule import Day
from tu_scheduler.schemas.schedule import ScheduleCreate, ScheduleFilters, ScheduleOut, ScheduleUpdate
from tu_scheduler.services import schedule_service

router = APIRouter()


@router.get("/", response_model=list[ScheduleOut])
def list_schedules(
    course_id: int | None = None,
    instructor_id: int | None = None,
    room_id: int | None = None,
    section_id: int | None = None,
    day: Day | None = None,
    db: Session = Depends(get_db),
) -> list[ScheduleOut]:
    filters = ScheduleFilters(
        course_id=course_id,
        instructor_id=instructor_id,
        room_id=room_id,
        section_id=section_id,
        day=day,
    )
    return [ScheduleOut.from_record(record) for record in schedule_service.list_schedules(db, filters)]


@router.get("/{schedule_id}", response_model=ScheduleOut)
def get_schedule(schedule_id: int, db: Session = Depends(get_db)) -> ScheduleOut:
    return ScheduleOut.from_record(schedule_service.get_schedule(db, schedule_id))


@router.post("/", response_model=ScheduleOut, status_code=status.HTTP_201_CREATED)
def create_schedule(payload: ScheduleCreate, db: Session = Depends(get_db)) -> ScheduleOut:
    return ScheduleOut.from_record(schedule_service.create_schedule(db, payload))


@router.put("/{schedule_id}", response_model=ScheduleOut)
def update_schedule(schedule_id: int, payload: ScheduleUpdate, db: Session = Depends(get_db)) -> ScheduleOut:
    return ScheduleOut.from_record(schedule_service.update_schedule(db, schedule_id, payload))


@router.delete("/{schedule_id}")
def delete_schedule(schedule_id: int, db: Session = Depends(get_db)) -> dict:
    schedule_service.delete_schedule(db, schedule_id)
    return {"success": True}
