"""Run persisted workflows by id."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from workflow_runner.workflows.executor import StepExecutor
from workflow_runner.workflows.models import Step, Workflow, WorkflowRunResult
from workflow_runner.workflows.store import WorkflowStore

logger = logging.getLogger(__name__)


def run_workflow(
    *,
    store: WorkflowStore,
    executor: StepExecutor,
    workflow_id: str,
    initial_context: Mapping[str, Any] | None = None,
) -> WorkflowRunResult:
    """Load a workflow and execute its steps against `initial_context`.

    Raises:
        WorkflowNotFound: If no workflow has the given id.
    """

    workflow = store.get(workflow_id)
    logger.info(
        "Running workflow",
        extra={"workflow_id": workflow.id, "step_count": len(workflow.steps)},
    )

    context, steps_run = executor.run_steps(workflow.steps, initial_context)
    result = WorkflowRunResult(workflow_id=workflow.id, context=context, steps_run=steps_run)

    logger.info(
        "Workflow run finished",
        extra={
            "workflow_id": workflow.id,
            "steps_run": len(steps_run),
            "succeeded": result.succeeded,
        },
    )
    return result


def sample_workflow_steps() -> list[Step]:
    """Fetch a URL from the context and summarize its content."""

    return [
        Step(
            id="step1",
            type="FETCH_URL",
            order=1,
            config={"sourceField": "url", "targetField": "pageContent"},
        ),
        Step(
            id="step2",
            type="LLM_SUMMARIZE",
            order=2,
            config={"inputField": "pageContent", "outputField": "summary"},
        ),
    ]


SAMPLE_WORKFLOW_NAME = "Sample: Summarize URL"
SAMPLE_WORKFLOW_DESCRIPTION = "Fetch a URL and summarize its content using LLM."


def create_sample_workflow(store: WorkflowStore) -> Workflow:
    return store.create(
        name=SAMPLE_WORKFLOW_NAME,
        description=SAMPLE_WORKFLOW_DESCRIPTION,
        trigger="manual",
        steps=sample_workflow_steps(),
    )
