"""Configuration for the REST server.

The server can start and serve the UI even if no LLM token is configured.
Endpoints and steps that require the LLM validate credentials at request time.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseSettings):
    """Settings for the REST API + UI hosting."""

    host: str = Field(default="127.0.0.1", validation_alias="HOST")
    port: int = Field(default=4000, validation_alias="PORT", ge=1, le=65535)

    # Where the Vite build output lives when serving the UI from the backend.
    ui_dist_path: Path = Field(default=Path("client/dist"), validation_alias="WORKFLOW_UI_DIST")

    # Dev-friendly CORS (Vite). Override via WORKFLOW_CORS_ORIGINS=...
    cors_origins: str = Field(
        default="http://localhost:5173,http://127.0.0.1:5173",
        validation_alias="WORKFLOW_CORS_ORIGINS",
        description="Comma-separated list of allowed CORS origins.",
    )

    model_config = SettingsConfigDict(
        env_prefix="", env_file=".env", extra="ignore", populate_by_name=True
    )

    def parsed_cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
