"""FastAPI app factory.

Endpoints are intentionally thin wrappers over the workflow services.
"""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from workflow_runner import __version__
from workflow_runner.config import RunnerSettings
from workflow_runner.llm.factory import LLMFactory
from workflow_runner.server.config import ServerSettings
from workflow_runner.server.router import router as api_router
from workflow_runner.workflows.executor import StepExecutor
from workflow_runner.workflows.store import WorkflowStore

logger = logging.getLogger(__name__)


def build_executor(settings: RunnerSettings) -> StepExecutor:
    return StepExecutor(
        llm=LLMFactory.create(settings.llm),
        fetch_timeout_seconds=settings.fetch_timeout_seconds,
        default_max_chars=settings.fetch_max_chars,
        user_agent=settings.fetch_user_agent,
    )


def create_app(
    settings: RunnerSettings | None = None,
    server_settings: ServerSettings | None = None,
) -> FastAPI:
    settings = settings or RunnerSettings()
    server_settings = server_settings or ServerSettings()

    if settings.llm.provider == "huggingface" and not settings.llm.hf_api_token.strip():
        logger.warning("HF_API_TOKEN is not set; LLM steps will fail until it is configured")

    app = FastAPI(
        title="Workflow Runner",
        version=__version__,
        description="REST API for defining and running step workflows.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # Expose shared services for request handlers.
    app.state.settings = settings
    app.state.server_settings = server_settings
    app.state.store = WorkflowStore(settings.workflows_state_file)
    app.state.executor = build_executor(settings)

    # Minimal dev-friendly CORS so a Vite dev server can call the API.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=server_settings.parsed_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _install_error_handlers(app)
    app.include_router(api_router, prefix="/api")

    _maybe_mount_ui(app, server_settings)
    return app


def _install_error_handlers(app: FastAPI) -> None:
    """Render every error body as `{"error": ...}`, the shape the web client reads."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            {"error": exc.detail}, status_code=exc.status_code, headers=exc.headers
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            {"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
            status_code=422,
        )


def _maybe_mount_ui(app: FastAPI, settings: ServerSettings) -> None:
    """Serve the built web client from the same process.

    API routes keep priority under `/api`; any other path returns a file from
    the bundle when one matches, otherwise `index.html` so client-side routing
    works. Without a bundle, `/` answers with a plain-text status line.
    """

    dist = Path(settings.ui_dist_path).resolve()
    index = dist / "index.html"

    if (dist / "assets").is_dir():
        app.mount("/assets", StaticFiles(directory=dist / "assets"), name="ui-assets")

    @app.get("/", include_in_schema=False, response_model=None)
    def ui_index() -> FileResponse | PlainTextResponse:
        if index.exists():
            return FileResponse(index)
        return PlainTextResponse("Server is running\n", status_code=200)

    @app.get("/{full_path:path}", include_in_schema=False, response_model=None)
    def ui_spa_fallback(full_path: str) -> FileResponse:
        if full_path == "api" or full_path.startswith("api/"):
            raise HTTPException(status_code=404, detail="Not Found")

        # Only files inside the bundle are served; `..` segments fall through to index.html.
        candidate = (dist / full_path).resolve()
        if candidate.is_relative_to(dist) and candidate.is_file():
            return FileResponse(candidate)

        if index.exists():
            return FileResponse(index)
        raise HTTPException(status_code=404, detail="UI not built")
