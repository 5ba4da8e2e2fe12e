"""Abstract base class for LLM providers."""

from __future__ import annotations

from abc import ABC, abstractmethod

ASSISTANT_SYSTEM_MESSAGE = "You are a helpful assistant."

SUMMARIZER_SYSTEM_MESSAGE = (
    "You are a concise summarization assistant. "
    "Given a long text, you produce a clear summary in 3-5 bullet points."
)


class LLMError(RuntimeError):
    """Base error for chat completion failures."""


class LLMConfigurationError(LLMError):
    """Raised when a provider is called without the credentials it needs."""


class LLMRequestError(LLMError):
    """Raised when the completion endpoint is unreachable or answers with an error."""

    def __init__(self, message: str, *, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    Subclasses implement a single chat round-trip. Prompting conventions for
    workflow steps (system instructions, token budgets) live here so every
    backend behaves the same way.
    """

    @abstractmethod
    def chat(
        self,
        messages: list[dict[str, str]],
        max_tokens: int | None = None,
    ) -> str:
        """Generate a chat completion from messages.

        Args:
            messages: List of message dicts with 'role' and 'content'.
            max_tokens: Maximum tokens to generate (provider default if None).

        Returns:
            The assistant reply text.

        Raises:
            LLMConfigurationError: If the provider has no usable credentials.
            LLMRequestError: If the endpoint answers with a non-success status.
        """
        pass

    def complete(
        self,
        user_message: str,
        system_message: str | None = None,
        max_tokens: int | None = None,
    ) -> str:
        messages: list[dict[str, str]] = []
        if system_message:
            messages.append({"role": "system", "content": system_message})
        messages.append({"role": "user", "content": user_message})
        return self.chat(messages, max_tokens=max_tokens)

    def generate(self, prompt: str) -> str:
        """Send a free-form prompt with the default assistant instruction."""
        return self.complete(prompt, ASSISTANT_SYSTEM_MESSAGE)

    def summarize(self, text: str) -> str:
        """Summarize a long block of text into a few bullet points."""
        user_message = f"Summarize the following text:\n\n{text}"
        return self.complete(user_message, SUMMARIZER_SYSTEM_MESSAGE, max_tokens=256)
