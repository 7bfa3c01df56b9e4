"""
Configuration Schemas.

One strict pydantic model per file in config/settings/, checked when
AppConfig loads. Unknown keys are rejected (extra="forbid") so a misspelt
setting fails at startup rather than silently falling back to a default.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, model_validator


class _StrictBase(BaseModel):
    """Rejects keys the schema does not declare."""

    model_config = ConfigDict(extra="forbid")


# --- application.yaml ---


class ServerSchema(_StrictBase):
    host: str
    port: int


class CorsSchema(_StrictBase):
    origins: list[str]


class NotesSchema(_StrictBase):
    """Bounds applied to a note body on create and edit."""

    body_min_length: int = 2
    body_max_length: int = 300

    @model_validator(mode="after")
    def _check_bounds(self) -> "NotesSchema":
        if self.body_min_length < 0 or self.body_max_length < self.body_min_length:
            raise ValueError("notes body bounds must satisfy 0 <= min <= max")
        return self


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str
    debug: bool
    api_prefix: str
    server: ServerSchema
    cors: CorsSchema
    notes: NotesSchema = NotesSchema()


# --- database.yaml ---


class DatabaseSchema(_StrictBase):
    url: str | None = None
    host: str
    port: int
    name: str
    user: str
    pool_size: int
    max_overflow: int
    pool_timeout: int
    pool_recycle: int
    echo: bool


# --- logging.yaml ---


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int
    backup_count: int


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    format: Literal["json", "console"]
    handlers: HandlersSchema


# --- security.yaml ---


class JwtSchema(_StrictBase):
    algorithm: str
    access_token_expire_minutes: int
    audience: str
    subject_claim: str = "sub"


class SecretsValidationSchema(_StrictBase):
    jwt_secret_min_length: int


class SecuritySchema(_StrictBase):
    jwt: JwtSchema
    secrets_validation: SecretsValidationSchema
