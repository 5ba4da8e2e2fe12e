"""Hugging Face router provider (OpenAI-compatible chat completions)."""

from __future__ import annotations

import json
import logging
from typing import Any

import requests

from workflow_runner.config import LLMConfig
from workflow_runner.llm.provider import LLMConfigurationError, LLMProvider, LLMRequestError

logger = logging.getLogger(__name__)


class HuggingFaceProvider(LLMProvider):
    """Chat completions over the Hugging Face inference router.

    The token is checked per request rather than at construction time so the
    server can start (and serve non-LLM steps) without credentials.
    """

    def __init__(self, config: LLMConfig, session: requests.Session | None = None) -> None:
        self.config = config
        self.url = config.hf_chat_url
        self.model = config.hf_model
        self._session = session or requests.Session()

        logger.info("Hugging Face provider initialized", extra={"model": self.model})

    def chat(
        self,
        messages: list[dict[str, str]],
        max_tokens: int | None = None,
    ) -> str:
        token = self.config.hf_api_token.strip()
        if not token:
            raise LLMConfigurationError("HF_API_TOKEN is missing")

        payload = {
            "model": self.model,
            "messages": messages,
            "max_tokens": max_tokens or self.config.max_tokens,
        }

        logger.debug(f"Generating chat completion with {len(messages)} messages")

        try:
            resp = self._session.post(
                self.url,
                headers={
                    "Authorization": f"Bearer {token}",
                    "Content-Type": "application/json",
                },
                json=payload,
                timeout=self.config.timeout_seconds,
            )
        except requests.RequestException as e:
            logger.error("HuggingFace request failed", extra={"error": str(e)})
            raise LLMRequestError(f"HuggingFace request failed: {e}") from e

        if not resp.ok:
            logger.error(
                "HuggingFace error",
                extra={"status_code": resp.status_code, "body": resp.text[:2000]},
            )
            raise LLMRequestError(
                f"HuggingFace API error: {resp.status_code} {resp.reason}: {resp.text}",
                status_code=resp.status_code,
                body=resp.text,
            )

        try:
            data: Any = resp.json()
        except ValueError as e:
            raise LLMRequestError(
                f"HuggingFace API returned invalid JSON: {resp.text[:200]}",
                status_code=resp.status_code,
                body=resp.text,
            ) from e
        content = _extract_content(data)
        if content is None:
            content = json.dumps(data, ensure_ascii=False)

        logger.debug(f"Generated {len(content)} characters")
        return content

    def close(self) -> None:
        self._session.close()


def _extract_content(data: Any) -> str | None:
    # OpenAI-style shape: {"choices": [{"message": {"content": "..."}}]}
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    if content is None:
        return None
    return str(content)
