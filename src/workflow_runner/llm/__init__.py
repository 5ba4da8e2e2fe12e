"""LLM package initialization."""

from workflow_runner.llm.factory import LLMFactory
from workflow_runner.llm.provider import (
    LLMConfigurationError,
    LLMError,
    LLMProvider,
    LLMRequestError,
)

__all__ = [
    "LLMConfigurationError",
    "LLMError",
    "LLMFactory",
    "LLMProvider",
    "LLMRequestError",
]
