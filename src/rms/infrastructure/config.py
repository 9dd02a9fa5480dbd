"""Runtime configuration, read from ``RMS_*`` environment variables or a
``.env`` file in the working directory."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RMS_", env_file=".env", extra="ignore")

    data_dir: Path = _DEFAULT_DATA_DIR
    # Any SQLAlchemy URL; defaults to a SQLite file inside data_dir.
    database_url: str | None = None
    log_level: str = "WARNING"
    conflict_retries: int = 1
    # Seconds a SQLite writer waits for a competing transaction.
    sqlite_busy_timeout: float = 30.0

    @property
    def reservation_database_url(self) -> str:
        return self.database_url or f"sqlite:///{self.data_dir / 'reservations.db'}"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
