from functools import lru_cache
import json
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


BACKEND_ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class Settings(BaseSettings):
    # Resolve to backend/.env so `uvicorn --app-dir backend` works from any cwd.
    model_config = SettingsConfigDict(env_file=str(BACKEND_ENV_FILE), env_file_encoding="utf-8")

    project_name: str = "TU Scheduler API"
    api_prefix: str = "/api"
    log_level: str = "INFO"

    database_url: str = "sqlite+pysqlite:///./tu_scheduler.db"

    default_semester: str = "Semester 1"
    default_academic_year: str = "2024-2025"

    # Search window for suggestions and auto-resolve.
    day_start: str = "08:00"
    last_start: str = "17:00"
    day_end: str = "18:00"
    suggestion_step_minutes: int = 90
    auto_resolve_step_minutes: int = 30
    max_time_suggestions: int = 15

    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_cors_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            stripped = value.strip()
            if stripped.startswith("["):
                try:
                    parsed = json.loads(stripped)
                    if isinstance(parsed, list):
                        return [str(item).strip() for item in parsed if str(item).strip()]
                except json.JSONDecodeError:
                    pass
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @field_validator("suggestion_step_minutes", "auto_resolve_step_minutes", "max_time_suggestions")
    @classmethod
    def require_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("Must be a positive integer")
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()
