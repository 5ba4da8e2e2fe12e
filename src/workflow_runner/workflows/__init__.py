"""Workflow domain: documents, persistence and the sequential step executor."""

from workflow_runner.workflows.executor import StepExecutionError, StepExecutor
from workflow_runner.workflows.models import (
    Step,
    StepRunResult,
    StepType,
    Workflow,
    WorkflowContext,
    WorkflowRunResult,
)
from workflow_runner.workflows.runner import create_sample_workflow, run_workflow
from workflow_runner.workflows.store import WorkflowNotFound, WorkflowStore

__all__ = [
    "Step",
    "StepExecutionError",
    "StepExecutor",
    "StepRunResult",
    "StepType",
    "Workflow",
    "WorkflowContext",
    "WorkflowNotFound",
    "WorkflowRunResult",
    "WorkflowStore",
    "create_sample_workflow",
    "run_workflow",
]
