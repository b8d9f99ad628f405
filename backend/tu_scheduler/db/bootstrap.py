from __future__ import annotations

import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

import tu_scheduler.models  # noqa: F401
from tu_scheduler.core.config import get_settings
from tu_scheduler.db.base import Base
from tu_scheduler.models.app_setting import AppSetting

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "settings": {"id", "active_semester", "academic_year"},
    "rooms": {"id", "name", "capacity"},
    "schedules": {
        "id",
        "course_id",
        "instructor_id",
        "room_id",
        "section_id",
        "day",
        "start_time",
        "end_time",
        "semester",
    },
}


def missing_schema_items(engine: Engine) -> tuple[list[str], dict[str, list[str]]]:
    with engine.connect() as connection:
        inspector = inspect(connection)
        table_names = set(inspector.get_table_names())
        missing_tables: list[str] = []
        missing_columns: dict[str, list[str]] = {}
        for table_name, columns in REQUIRED_COLUMNS.items():
            if table_name not in table_names:
                missing_tables.append(table_name)
                continue
            existing = {item["name"] for item in inspector.get_columns(table_name)}
            missing = sorted(columns - existing)
            if missing:
                missing_columns[table_name] = missing
    return missing_tables, missing_columns


def _ensure_default_settings_row(engine: Engine) -> None:
    settings = get_settings()
    with Session(engine) as session:
        if session.get(AppSetting, 1) is not None:
            return
        session.add(
            AppSetting(
                id=1,
                active_semester=settings.default_semester,
                academic_year=settings.default_academic_year,
            )
        )
        session.commit()
        logger.info("Initialized settings row with active semester %s", settings.default_semester)


def ensure_database_ready(engine: Engine | None = None) -> None:
    if engine is None:
        from tu_scheduler.db.session import engine as default_engine

        engine = default_engine
    Base.metadata.create_all(bind=engine)
    _ensure_default_settings_row(engine)
    missing_tables, missing_columns = missing_schema_items(engine)
    if missing_tables or missing_columns:
        logger.warning(
            "Database schema is out of date (missing tables: %s, missing columns: %s); run the migrations",
            missing_tables,
            missing_columns,
        )
