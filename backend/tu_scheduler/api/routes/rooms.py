from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from tu_scheduler.api.deps import get_db, get_repository
from tu_scheduler.models.room import Room
from tu_scheduler.schemas.room import RoomCreate, RoomOut
from tu_scheduler.services.repository import ScheduleRepository

router = APIRouter()


@router.get("/", response_model=list[RoomOut])
def list_rooms(repository: ScheduleRepository = Depends(get_repository)) -> list[RoomOut]:
    return repository.list_rooms()


@router.post("/", response_model=RoomOut, status_code=status.HTTP_201_CREATED)
def create_room(payload: RoomCreate, db: Session = Depends(get_db)) -> RoomOut:
    existing = db.execute(select(Room).where(Room.name == payload.name)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Room name already exists")
    room = Room(**payload.model_dump())
    db.add(room)
    db.commit()
    db.refresh(room)
    return room
