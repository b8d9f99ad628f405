from pydantic import BaseModel, Field


class RoomBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    capacity: int = Field(ge=1, le=1000)
    building: str | None = Field(default=None, max_length=200)
    equipment: str | None = Field(default=None, max_length=1000)


class RoomCreate(RoomBase):
    pass


class RoomOut(RoomBase):
    id: int

    model_config = {"from_attributes": True}
