"""REST API used by the React client.

All routes are mounted under `/api`.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, HTTPException, Request, Response

from workflow_runner.llm.provider import LLMConfigurationError, LLMError
from workflow_runner.server.models import (
    PromptRequest,
    PromptResponse,
    SummarizeUrlRequest,
    SummarizeUrlResponse,
    WorkflowCreate,
    WorkflowUpdate,
)
from workflow_runner.workflows.executor import StepExecutionError, StepExecutor
from workflow_runner.workflows.models import Workflow, WorkflowRunResult
from workflow_runner.workflows.runner import create_sample_workflow, run_workflow
from workflow_runner.workflows.store import WorkflowNotFound, WorkflowStore

logger = logging.getLogger(__name__)

router = APIRouter()


def _store(request: Request) -> WorkflowStore:
    store = getattr(request.app.state, "store", None)
    if not isinstance(store, WorkflowStore):
        # This should never happen for the real app, but keeps the API fail-fast.
        raise HTTPException(status_code=500, detail="Workflow store not configured")
    return store


def _executor(request: Request) -> StepExecutor:
    executor = getattr(request.app.state, "executor", None)
    if not isinstance(executor, StepExecutor):
        raise HTTPException(status_code=500, detail="Step executor not configured")
    return executor


def _llm_http_error(e: LLMError) -> HTTPException:
    logger.error("LLM call failed", extra={"error": str(e)})
    if isinstance(e, LLMConfigurationError):
        return HTTPException(status_code=503, detail=str(e))
    return HTTPException(status_code=502, detail=str(e))


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/test-llm", response_model=PromptResponse)
def test_llm(req: PromptRequest, request: Request) -> PromptResponse:
    executor = _executor(request)
    try:
        result = executor.llm.generate(req.prompt)
    except LLMError as e:
        raise _llm_http_error(e) from e
    return PromptResponse(prompt=req.prompt, result=result)


@router.post("/summarize-url", response_model=SummarizeUrlResponse)
def summarize_url(req: SummarizeUrlRequest, request: Request) -> SummarizeUrlResponse:
    executor = _executor(request)
    try:
        text = executor.fetch_page_text(req.url)
    except StepExecutionError as e:
        logger.warning("Failed to fetch URL", extra={"url": req.url, "error": str(e)})
        raise HTTPException(status_code=400, detail="Failed to fetch URL") from e

    try:
        summary = executor.llm.summarize(text)
    except LLMError as e:
        raise _llm_http_error(e) from e
    return SummarizeUrlResponse(url=req.url, summary=summary)


@router.get("/workflows", response_model=list[Workflow])
def list_workflows(request: Request) -> list[Workflow]:
    return _store(request).list()


@router.post("/workflows", response_model=Workflow, status_code=201)
def create_workflow(req: WorkflowCreate, request: Request) -> Workflow:
    return _store(request).create(
        name=req.name,
        description=req.description,
        trigger=req.trigger,
        steps=req.steps,
    )


@router.post("/workflows/sample", response_model=Workflow)
def create_sample(request: Request) -> Workflow:
    return create_sample_workflow(_store(request))


@router.get("/workflows/{workflow_id}", response_model=Workflow)
def get_workflow(workflow_id: str, request: Request) -> Workflow:
    try:
        return _store(request).get(workflow_id)
    except WorkflowNotFound as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@router.put("/workflows/{workflow_id}", response_model=Workflow)
def update_workflow(workflow_id: str, req: WorkflowUpdate, request: Request) -> Workflow:
    # An explicit null only clears the description; other fields keep their value.
    updates = {
        key: value
        for key, value in req.model_dump(exclude_unset=True).items()
        if value is not None or key == "description"
    }
    try:
        return _store(request).update(workflow_id, **updates)
    except WorkflowNotFound as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@router.delete("/workflows/{workflow_id}", status_code=204)
def delete_workflow(workflow_id: str, request: Request) -> Response:
    try:
        _store(request).delete(workflow_id)
    except WorkflowNotFound as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return Response(status_code=204)


@router.post("/workflows/{workflow_id}/run", response_model=WorkflowRunResult)
def run(
    workflow_id: str,
    request: Request,
    context: Any = Body(default=None),
) -> WorkflowRunResult:
    # The request body is the initial context; anything but an object means "empty".
    initial_context = context if isinstance(context, dict) else {}
    try:
        return run_workflow(
            store=_store(request),
            executor=_executor(request),
            workflow_id=workflow_id,
            initial_context=initial_context,
        )
    except WorkflowNotFound as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
