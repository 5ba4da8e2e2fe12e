"""Workflow documents and run results."""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

WorkflowContext = dict[str, Any]

Trigger = Literal["manual", "schedule"]
StepStatus = Literal["success", "error"]


class StepType(str, Enum):
    FETCH_URL = "FETCH_URL"
    LLM_SUMMARIZE = "LLM_SUMMARIZE"
    LLM_GENERAL = "LLM_GENERAL"
    TRANSFORM_TEXT = "TRANSFORM_TEXT"
    ECHO = "ECHO"


STEP_TYPES: frozenset[str] = frozenset(t.value for t in StepType)


class Step(BaseModel):
    """One unit of work.

    `type` is kept as a plain string so documents written by other tools still
    load; the executor rejects tags it does not know.
    """

    id: str
    type: str
    order: int | float
    config: dict[str, Any] = Field(default_factory=dict)

    @field_validator("config", mode="before")
    @classmethod
    def _none_config_is_empty(cls, value: object) -> object:
        return {} if value is None else value


class StepDefinition(Step):
    """A step submitted through the API; only known step types are accepted."""

    @field_validator("type")
    @classmethod
    def _known_type(cls, value: str) -> str:
        if value not in STEP_TYPES:
            allowed = ", ".join(sorted(STEP_TYPES))
            raise ValueError(f"Unknown step type {value!r} (expected one of: {allowed})")
        return value


class Workflow(BaseModel):
    """A named, persisted, ordered collection of steps.

    Serialised as a document with `_id`, `createdAt` and `updatedAt`, as the web
    client expects; the Python attribute names are accepted on input too.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    name: str
    description: str | None = None
    trigger: Trigger = "manual"
    steps: list[Step] = Field(default_factory=list)

    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")


class StepRunResult(BaseModel):
    id: str
    type: str
    status: StepStatus
    error: str | None = None


class WorkflowRunResult(BaseModel):
    """Outcome of one execution.

    Serialised with the camelCase names the web client reads.
    """

    model_config = ConfigDict(populate_by_name=True)

    workflow_id: str = Field(alias="workflowId")
    context: WorkflowContext = Field(default_factory=dict)
    steps_run: list[StepRunResult] = Field(default_factory=list, alias="stepsRun")

    @property
    def succeeded(self) -> bool:
        return all(step.status == "success" for step in self.steps_run)
