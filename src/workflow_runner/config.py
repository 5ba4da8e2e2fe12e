"""Configuration for the workflow runner.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

Credentials are optional at startup. Steps and endpoints that need an LLM
validate credentials when they are actually called.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

HF_CHAT_URL = "https://router.huggingface.co/v1/chat/completions"
DEFAULT_HF_MODEL = "meta-llama/Llama-3.2-3B-Instruct"


class LLMConfig(BaseSettings):
    """Configuration for the chat-completion provider."""

    provider: Literal["huggingface", "openai"] = Field(
        default="huggingface",
        validation_alias="LLM_PROVIDER",
        description="LLM provider to use",
    )

    # Hugging Face router settings
    hf_api_token: str = Field(
        default="",
        validation_alias="HF_API_TOKEN",
        description="Bearer token for the Hugging Face router",
    )
    hf_chat_url: str = Field(
        default=HF_CHAT_URL,
        validation_alias="HF_CHAT_URL",
        description="OpenAI-compatible chat completions endpoint",
    )
    hf_model: str = Field(
        default=DEFAULT_HF_MODEL,
        validation_alias="HF_MODEL",
        description="Model identifier sent with every request",
    )

    # OpenAI settings
    openai_api_key: str | None = Field(
        default=None,
        validation_alias="OPENAI_API_KEY",
        description="OpenAI API key",
    )
    openai_model: str = Field(
        default="gpt-4o-mini",
        validation_alias="OPENAI_MODEL",
        description="OpenAI model to use",
    )
    openai_base_url: str | None = Field(
        default=None,
        validation_alias="OPENAI_BASE_URL",
        description="Override for OpenAI-compatible endpoints",
    )

    max_tokens: int = Field(
        default=256,
        gt=0,
        validation_alias="LLM_MAX_TOKENS",
        description="Default completion budget per request",
    )
    timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        validation_alias="LLM_TIMEOUT_SECONDS",
        description="HTTP timeout for chat completion calls",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )


class RunnerSettings(BaseSettings):
    """Settings shared by the CLI and the server.

    Environment variables:
    - LOG_LEVEL              (optional)
    - WORKFLOW_STATE_PATH    (optional)
    - FETCH_TIMEOUT_SECONDS  (optional)
    - FETCH_USER_AGENT       (optional)
    - FETCH_MAX_CHARS        (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `RunnerSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    state_path: Path = Field(
        default=Path("agent_state"),
        validation_alias="WORKFLOW_STATE_PATH",
        description="Directory where workflow documents are persisted",
    )

    fetch_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        validation_alias="FETCH_TIMEOUT_SECONDS",
        description="HTTP timeout for FETCH_URL steps",
    )
    fetch_user_agent: str = Field(
        default="workflow-runner",
        validation_alias="FETCH_USER_AGENT",
    )
    fetch_max_chars: int = Field(
        default=6000,
        gt=0,
        validation_alias="FETCH_MAX_CHARS",
        description="Default truncation for fetched page text",
    )

    llm: LLMConfig = Field(
        default_factory=LLMConfig,
        description="LLM configuration",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def workflows_state_file(self) -> Path:
        """Path where workflow documents are persisted."""

        return self.state_path / "workflows.json"
