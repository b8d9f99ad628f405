from collections.abc import Callable, Generator

import anyio
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from tu_scheduler.db.session import SessionLocal
from tu_scheduler.services.repository import ScheduleRepository


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_repository(db: Session = Depends(get_db)) -> ScheduleRepository:
    return ScheduleRepository.for_active_semester(db)


def get_abort_check(request: Request) -> Callable[[], bool]:
    """Abort hook for candidate searches: stop once the client has disconnected.

    Sync routes run in a worker thread, so the check hops back to the event
    loop to poll the connection.
    """

    def client_disconnected() -> bool:
        return anyio.from_thread.run(request.is_disconnected)

    return client_disconnected
