"""Configuration for the workflow engine.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Settings shared by the CLI and the server.

    Environment variables:
    - LOG_LEVEL           (optional)
    - WORKFLOW_DATA_PATH  (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `EngineSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    data_path: Path = Field(
        default=Path("data"),
        validation_alias="WORKFLOW_DATA_PATH",
        description="Directory where workflow definitions and progress are persisted",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @property
    def workflows_file(self) -> Path:
        """Path of the JSON file holding every workflow."""

        return self.data_path / "workflows.json"
