import os

# Point the default engine at an in-memory database before settings are cached.
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite://")

import pytest
from fastapi.testclient import TestClient #fake http client that calls the FastAPI routes without a real server
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tu_scheduler.api.deps import get_db
from tu_scheduler.db.base import Base
from tu_scheduler.db.session import enable_sqlite_foreign_keys
from tu_scheduler.main import app
from tu_scheduler.models import Course, Instructor, Room, Schedule, Section


class Catalog:
    """Inserts records directly, bypassing conflict checks, to set up a timetable."""

    def __init__(self, db):
        self.db = db

    def _save(self, record):
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        return record

    def course(self, code="CS101", title="Intro to Computing", credits=3, semester="Semester 1"):
        return self._save(Course(code=code, title=title, credits=credits, semester=semester))

    def instructor(self, name="Dr. Reyes"):
        return self._save(Instructor(name=name))

    def room(self, name="Room 101", capacity=40):
        return self._save(Room(name=name, capacity=capacity))

    def section(self, name="1"):
        return self._save(Section(name=name))

    def schedule(self, course, instructor, room, section, day, start_time, end_time, semester="Semester 1"):
        return self._save(
            Schedule(
                course_id=course.id,
                instructor_id=instructor.id,
                room_id=room.id,
                section_id=section.id,
                day=day,
                start_time=start_time,
                end_time=end_time,
                available_space=room.capacity,
                semester=semester,
            )
        )


@pytest.fixture()
def engine():
    engine = create_engine( #isolated in-memory DB shared across sessions
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def catalog(db_session):
    return Catalog(db_session)


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
