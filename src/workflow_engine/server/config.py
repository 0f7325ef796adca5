"""Configuration for the REST server."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from workflow_engine.engine.config import EngineSettings


class ServerSettings(EngineSettings):
    """Settings for the REST API.

    Extends :class:`workflow_engine.engine.config.EngineSettings`, so the server reads
    the same `WORKFLOW_DATA_PATH` and `LOG_LEVEL` as the CLI.
    """

    host: str = Field(default="127.0.0.1", validation_alias="WORKFLOW_HOST")
    port: int = Field(default=8000, validation_alias="WORKFLOW_PORT", ge=1, le=65535)

    # Dev-friendly CORS. Override via WORKFLOW_CORS_ORIGINS=...
    cors_origins: str = Field(
        default="http://localhost:5173,http://127.0.0.1:5173",
        validation_alias="WORKFLOW_CORS_ORIGINS",
        description="Comma-separated list of allowed CORS origins.",
    )

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    def parsed_cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
