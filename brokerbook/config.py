from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings

_PROJECT_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _PROJECT_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Brokerbook Records API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    cors_origins: list[str] = ["http://localhost:5173"]

    # Persistence: "sql" (SQLite / PostgreSQL via SQLAlchemy) or "memory"
    storage_backend: Literal["sql", "memory"] = "sql"
    database_url: str = "sqlite:///./brokerbook.db"
    database_echo: bool = False
    # Upper bound for every persistence / blob call, in seconds
    storage_timeout_seconds: float = 10.0

    # Uploaded photos & documents
    upload_dir: str = "uploads"
    public_base_url: str = "http://localhost:8000/uploads"
    max_upload_size_mb: int = 10

    # Logging: per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_sql: str = "WARNING"           # sqlalchemy.engine: SQL queries
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_records: str = "INFO"          # record store services

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance: reads .env once."""
    return Settings()
