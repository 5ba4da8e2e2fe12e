"""FastAPI server adapter for workflow-runner.

Design intent:
- Keep business logic in `workflow_runner.workflows.*`
- Keep server-specific concerns (routing, CORS, UI hosting) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from workflow_runner.server.app import create_app
