"""OpenAI LLM provider implementation."""

import logging

import openai
from openai import OpenAI

from workflow_runner.config import LLMConfig
from workflow_runner.llm.provider import LLMConfigurationError, LLMProvider, LLMRequestError

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """OpenAI API provider implementation.

    ``OPENAI_BASE_URL`` can point this at any OpenAI-compatible router.
    """

    def __init__(self, config: LLMConfig, client: OpenAI | None = None) -> None:
        """Initialize the OpenAI provider.

        Args:
            config: LLM configuration.
            client: Optional pre-built client (mainly for tests).

        Raises:
            LLMConfigurationError: If API key is not provided.
        """
        if client is None and not config.openai_api_key:
            raise LLMConfigurationError("OPENAI_API_KEY is missing")

        self.config = config
        self.client = client or OpenAI(
            api_key=config.openai_api_key,
            base_url=config.openai_base_url,
            timeout=config.timeout_seconds,
        )
        self.model = config.openai_model

        logger.info(f"OpenAI provider initialized with model: {self.model}")

    def chat(
        self,
        messages: list[dict[str, str]],
        max_tokens: int | None = None,
    ) -> str:
        """Generate chat completion using OpenAI API.

        Args:
            messages: List of message dicts with 'role' and 'content'.
            max_tokens: Maximum tokens to generate.

        Returns:
            Generated chat response.
        """
        logger.debug(f"Generating chat completion with {len(messages)} messages")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,  # type: ignore
                max_tokens=max_tokens or self.config.max_tokens,
            )
        except openai.APIStatusError as e:
            raise LLMRequestError(
                f"OpenAI API error: {e.status_code} {e.message}",
                status_code=e.status_code,
                body=e.response.text,
            ) from e
        except openai.APIConnectionError as e:
            # Also covers APITimeoutError.
            raise LLMRequestError(f"OpenAI request failed: {e}") from e

        content = response.choices[0].message.content or ""
        logger.debug(f"Generated {len(content)} characters")

        return content
