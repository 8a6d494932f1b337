"""Where modelmerge keeps its database."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

APP_DIR_NAME: Final[str] = "modelmerge"
DATABASE_FILENAME: Final[str] = "modelmerge.db"
DATA_DIR_ENV_VAR: Final[str] = "MODELMERGE_DATA_DIR"
DATABASE_URI_ENV_VAR: Final[str] = "DATABASE_URI"
SQLITE_DRIVER: Final[str] = "sqlite+aiosqlite"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path

    def database_path(self) -> Path:
        """Path of the SQLite file; the data directory is created on demand."""

        data_dir = self.data_dir.expanduser().resolve()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir / DATABASE_FILENAME

    def database_uri(self) -> str:
        return f"{SQLITE_DRIVER}:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def _platform_data_home() -> Path:
    if os.name == "nt":
        return Path(os.getenv("LOCALAPPDATA") or Path.home() / "AppData" / "Local")
    return Path(os.getenv("XDG_DATA_HOME") or Path.home() / ".local" / "share")


def get_storage_config() -> StorageConfig:
    configured = optional_env_var(DATA_DIR_ENV_VAR)
    if configured:
        return StorageConfig(data_dir=Path(configured))
    return StorageConfig(data_dir=_platform_data_home() / APP_DIR_NAME)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """Resolve the async database URI, preferring an explicit ``DATABASE_URI``."""

    env_uri = optional_env_var(DATABASE_URI_ENV_VAR)
    if env_uri:
        return DatabaseConfig(uri=env_uri)
    return DatabaseConfig(uri=(storage or get_storage_config()).database_uri())
