"""Pydantic models for the REST server."""

from __future__ import annotations

from pydantic import BaseModel, Field

from workflow_runner.workflows.models import StepDefinition, Trigger


class PromptRequest(BaseModel):
    prompt: str = Field(min_length=1)


class PromptResponse(BaseModel):
    prompt: str
    result: str


class SummarizeUrlRequest(BaseModel):
    url: str = Field(min_length=1)


class SummarizeUrlResponse(BaseModel):
    url: str
    summary: str


class WorkflowCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str | None = None
    trigger: Trigger = "manual"
    steps: list[StepDefinition] = Field(default_factory=list)


class WorkflowUpdate(BaseModel):
    """Partial update; omitted fields keep their stored values."""

    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    trigger: Trigger | None = None
    steps: list[StepDefinition] | None = None
