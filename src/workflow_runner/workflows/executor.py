"""Sequential step executor.

Each step receives a shallow copy of the context produced by the previous step
and returns the updated copy. `run_steps` stops at the first failing step and
returns the context as it was before that step.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

import requests

from workflow_runner.llm.provider import LLMProvider
from workflow_runner.workflows.models import (
    Step,
    StepRunResult,
    StepType,
    WorkflowContext,
)
from workflow_runner.workflows.text import TRANSFORMS, render_template, strip_html

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHARS = 6000


class StepExecutionError(Exception):
    """A step could not satisfy its contract (bad input, failed fetch, unknown type)."""


class StepExecutor:
    """Runs individual workflow steps against a context.

    Network access is injected: `llm` for chat completions and `session` for
    page fetches, so tests can substitute both.
    """

    def __init__(
        self,
        *,
        llm: LLMProvider,
        session: requests.Session | None = None,
        fetch_timeout_seconds: float = 30.0,
        default_max_chars: int = DEFAULT_MAX_CHARS,
        user_agent: str = "workflow-runner",
    ) -> None:
        self.llm = llm
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": user_agent})
        self._fetch_timeout = fetch_timeout_seconds
        self._default_max_chars = default_max_chars

        self._handlers: dict[str, Callable[[WorkflowContext, dict[str, Any]], None]] = {
            StepType.FETCH_URL.value: self._fetch_url,
            StepType.LLM_SUMMARIZE.value: self._summarize,
            StepType.LLM_GENERAL.value: self._general_prompt,
            StepType.TRANSFORM_TEXT.value: self._transform_text,
            StepType.ECHO.value: self._echo,
        }

    def close(self) -> None:
        self._session.close()
        close_llm = getattr(self.llm, "close", None)
        if callable(close_llm):
            close_llm()

    def fetch_page_text(self, url: str, *, max_chars: int | None = None) -> str:
        """GET a page and return its visible text, truncated to `max_chars`."""

        try:
            resp = self._session.get(url, timeout=self._fetch_timeout)
        except requests.RequestException as e:
            raise StepExecutionError(f"FETCH_URL: Failed to fetch URL ({e})") from e

        if not resp.ok:
            raise StepExecutionError(f"FETCH_URL: Failed to fetch URL ({resp.status_code})")

        limit = self._default_max_chars if max_chars is None else max_chars
        return strip_html(resp.text)[:limit]

    def execute_step(self, step: Step, context: Mapping[str, Any]) -> WorkflowContext:
        new_context: WorkflowContext = dict(context)
        handler = self._handlers.get(step.type)
        if handler is None:
            raise StepExecutionError(f"Unknown step type: {step.type}")
        handler(new_context, step.config or {})
        return new_context

    def run_steps(
        self,
        steps: Iterable[Step],
        initial_context: Mapping[str, Any] | None = None,
    ) -> tuple[WorkflowContext, list[StepRunResult]]:
        """Execute steps in ascending `order`, stopping at the first failure."""

        ordered = sorted(steps, key=lambda s: s.order)
        context: WorkflowContext = dict(initial_context or {})
        steps_run: list[StepRunResult] = []

        for step in ordered:
            try:
                context = self.execute_step(step, context)
            except Exception as e:
                message = str(e) or type(e).__name__
                logger.warning(
                    "Workflow step failed",
                    extra={"step_id": step.id, "step_type": step.type, "error": message},
                )
                steps_run.append(
                    StepRunResult(id=step.id, type=step.type, status="error", error=message)
                )
                break

            logger.info(
                "Workflow step succeeded", extra={"step_id": step.id, "step_type": step.type}
            )
            steps_run.append(StepRunResult(id=step.id, type=step.type, status="success"))

        return context, steps_run

    def _fetch_url(self, ctx: WorkflowContext, cfg: dict[str, Any]) -> None:
        source_field = cfg.get("sourceField") or "url"
        target_field = cfg.get("targetField") or "pageContent"

        url = ctx.get(source_field) or cfg.get("url")
        if not url or not isinstance(url, str):
            raise StepExecutionError(f'FETCH_URL: No valid URL found in field "{source_field}"')

        max_chars = cfg.get("maxChars")
        ctx[target_field] = self.fetch_page_text(
            url, max_chars=int(max_chars) if max_chars is not None else None
        )

    def _summarize(self, ctx: WorkflowContext, cfg: dict[str, Any]) -> None:
        input_field = cfg.get("inputField") or "pageContent"
        output_field = cfg.get("outputField") or "summary"

        text = ctx.get(input_field)
        if not text or not isinstance(text, str):
            raise StepExecutionError(
                f'LLM_SUMMARIZE: No valid text found in field "{input_field}"'
            )

        ctx[output_field] = self.llm.summarize(text)

    def _general_prompt(self, ctx: WorkflowContext, cfg: dict[str, Any]) -> None:
        template = cfg.get("promptTemplate")
        output_field = cfg.get("outputField") or "llmResult"

        if not template or not isinstance(template, str):
            raise StepExecutionError("LLM_GENERAL: promptTemplate is required")

        ctx[output_field] = self.llm.generate(render_template(template, ctx))

    def _transform_text(self, ctx: WorkflowContext, cfg: dict[str, Any]) -> None:
        input_field = cfg.get("inputField") or "text"
        output_field = cfg.get("outputField") or input_field
        operation = cfg.get("operation") or "uppercase"

        value = ctx.get(input_field)
        if not isinstance(value, str):
            raise StepExecutionError(f'TRANSFORM_TEXT: field "{input_field}" must be a string')

        transform = TRANSFORMS.get(operation)
        if transform is None:
            logger.warning(
                "Unknown TRANSFORM_TEXT operation; value left unchanged",
                extra={"operation": operation},
            )
            ctx[output_field] = value
            return
        ctx[output_field] = transform(value)

    def _echo(self, ctx: WorkflowContext, cfg: dict[str, Any]) -> None:
        message = cfg.get("message") or "Echo step ran."
        output_field = cfg.get("outputField") or "echo"
        ctx[output_field] = message
