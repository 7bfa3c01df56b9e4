"""
Configuration Management.

Two sources, both resolved from the directory holding the .project_root
marker:

    config/.env             secrets only (JWT_SECRET, DB_PASSWORD)
    config/settings/*.yaml  everything else, one file per AppConfig section

Each YAML section is validated against its schema in config_schema.py when
AppConfig is built, so a typo in a settings file stops the process at start.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from modules.backend.core.config_schema import (
    ApplicationSchema,
    DatabaseSchema,
    LoggingSchema,
    SecuritySchema,
)

PROJECT_MARKER = ".project_root"

# AppConfig section -> (settings file, schema); loaded in this order
SECTIONS: dict[str, tuple[str, type[BaseModel]]] = {
    "application": ("application.yaml", ApplicationSchema),
    "database": ("database.yaml", DatabaseSchema),
    "logging": ("logging.yaml", LoggingSchema),
    "security": ("security.yaml", SecuritySchema),
}


def find_project_root() -> Path:
    """Walk up from the working directory to the .project_root marker."""
    for candidate in (Path.cwd(), *Path.cwd().parents):
        if (candidate / PROJECT_MARKER).exists():
            return candidate
    raise RuntimeError(f"Project root not found. Ensure {PROJECT_MARKER} file exists.")


def validate_project_root() -> Path:
    """
    find_project_root() for entry scripts.

    Exits with a readable message instead of a traceback when the
    marker is missing.
    """
    try:
        return find_project_root()
    except RuntimeError as e:
        raise SystemExit(f"Error: {e}") from e


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Read one file from config/settings/; an empty file yields {}."""
    config_path = find_project_root() / "config" / "settings" / filename
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Secrets read from the environment or config/.env."""

    db_password: str = ""
    jwt_secret: str

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class AppConfig:
    """
    Validated view of config/settings/*.yaml.

    One typed, read-only property per entry in SECTIONS.
    """

    def __init__(self) -> None:
        self._sections: dict[str, BaseModel] = {}
        for section, (filename, schema) in SECTIONS.items():
            try:
                self._sections[section] = schema(**load_yaml_config(filename))
            except ValidationError as e:
                raise ValueError(f"Invalid configuration in {filename}:\n{e}") from e

    @property
    def application(self) -> ApplicationSchema:
        return self._sections["application"]

    @property
    def database(self) -> DatabaseSchema:
        return self._sections["database"]

    @property
    def logging(self) -> LoggingSchema:
        return self._sections["logging"]

    @property
    def security(self) -> SecuritySchema:
        return self._sections["security"]

    def as_dict(self) -> dict[str, dict[str, Any]]:
        """Plain-dict dump of every section, used by ``run.py --action config``."""
        return {name: model.model_dump() for name, model in self._sections.items()}


@lru_cache
def get_settings() -> Settings:
    """Cached secrets; config/.env is optional when the environment has them."""
    return Settings(_env_file=str(find_project_root() / "config" / ".env"))


@lru_cache
def get_app_config() -> AppConfig:
    """Cached AppConfig."""
    return AppConfig()


def get_database_url(async_driver: bool = True) -> str:
    """
    Build the store URL.

    A ``url`` key in database.yaml is used as-is (SQLite in development
    and tests). Otherwise a PostgreSQL URL is composed from host, port,
    name and user plus DB_PASSWORD.

    Args:
        async_driver: asyncpg driver if True, plain postgresql otherwise.
    """
    db = get_app_config().database
    if db.url:
        return db.url

    driver = "postgresql+asyncpg" if async_driver else "postgresql"
    password = get_settings().db_password
    return f"{driver}://{db.user}:{password}@{db.host}:{db.port}/{db.name}"


def get_server_base_url() -> str:
    """http://host:port of the API server from application.yaml."""
    server = get_app_config().application.server
    return f"http://{server.host}:{server.port}"
