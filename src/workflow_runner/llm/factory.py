"""Factory for creating LLM providers."""

import logging

from workflow_runner.config import LLMConfig
from workflow_runner.llm.huggingface_provider import HuggingFaceProvider
from workflow_runner.llm.openai_provider import OpenAIProvider
from workflow_runner.llm.provider import LLMProvider

logger = logging.getLogger(__name__)


class LLMFactory:
    """Maps `LLM_PROVIDER` names to provider classes."""

    providers: dict[str, type[LLMProvider]] = {
        "huggingface": HuggingFaceProvider,
        "openai": OpenAIProvider,
    }

    @classmethod
    def create(cls, config: LLMConfig) -> LLMProvider:
        """Instantiate the provider named by `config.provider`.

        Raises:
            ValueError: If no provider is registered under that name.
            LLMConfigurationError: If the provider rejects the configuration.
        """
        provider_cls = cls.providers.get(config.provider)
        if provider_cls is None:
            supported = ", ".join(sorted(cls.providers))
            raise ValueError(
                f"Unsupported LLM provider: {config.provider} (supported: {supported})"
            )

        logger.info("Creating LLM provider", extra={"provider": config.provider})
        return provider_cls(config)
