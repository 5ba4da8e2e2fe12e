"""Persisted workflow documents.

Workflows live in a single JSON file under the state directory so definitions
survive restarts without an external database.
"""

from __future__ import annotations

import json
import logging
import threading
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from pydantic import ValidationError

from workflow_runner.workflows.models import Step, Trigger, Workflow

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WorkflowNotFound(Exception):
    workflow_id: str

    def __str__(self) -> str:
        return "Workflow not found"


def _utc_iso_now() -> str:
    return datetime.now(tz=UTC).isoformat()


@dataclass
class WorkflowStore:
    """JSON-file backed store for workflow documents."""

    path: Path

    def __post_init__(self) -> None:
        self._lock = threading.Lock()

    def _load_unlocked(self) -> list[Workflow]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning(
                "Workflow state file is not valid JSON; treating as empty",
                extra={"path": str(self.path)},
            )
            return []
        if not isinstance(raw, list):
            logger.warning(
                "Workflow state file has unexpected shape; treating as empty",
                extra={"path": str(self.path)},
            )
            return []

        workflows: list[Workflow] = []
        for item in raw:
            try:
                workflows.append(Workflow.model_validate(item))
            except ValidationError:
                logger.warning("Skipping invalid workflow document", extra={"path": str(self.path)})
        return workflows

    def _save_unlocked(self, workflows: list[Workflow]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [w.model_dump(mode="json", by_alias=True) for w in workflows]
        self.path.write_text(
            json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
        )

    def list(self) -> list[Workflow]:
        with self._lock:
            return self._load_unlocked()

    def get(self, workflow_id: str) -> Workflow:
        with self._lock:
            for workflow in self._load_unlocked():
                if workflow.id == workflow_id:
                    return workflow
            raise WorkflowNotFound(workflow_id)

    def create(
        self,
        *,
        name: str,
        description: str | None = None,
        trigger: Trigger = "manual",
        steps: Sequence[Step] = (),
    ) -> Workflow:
        with self._lock:
            workflows = self._load_unlocked()
            now = _utc_iso_now()
            record = Workflow(
                id=uuid.uuid4().hex,
                name=name,
                description=description,
                trigger=trigger,
                steps=[Step.model_validate(s.model_dump()) for s in steps],
                created_at=now,
                updated_at=now,
            )
            workflows.append(record)
            self._save_unlocked(workflows)
            logger.info("Workflow created", extra={"workflow_id": record.id, "name": name})
            return record

    def update(self, workflow_id: str, **updates: object) -> Workflow:
        with self._lock:
            workflows = self._load_unlocked()
            for idx, workflow in enumerate(workflows):
                if workflow.id != workflow_id:
                    continue
                merged = Workflow.model_validate(
                    {
                        **workflow.model_dump(),
                        **updates,
                        "id": workflow.id,
                        "created_at": workflow.created_at,
                        "updated_at": _utc_iso_now(),
                    }
                )
                workflows[idx] = merged
                self._save_unlocked(workflows)
                return merged
            raise WorkflowNotFound(workflow_id)

    def delete(self, workflow_id: str) -> None:
        with self._lock:
            workflows = self._load_unlocked()
            remaining = [w for w in workflows if w.id != workflow_id]
            if len(remaining) == len(workflows):
                raise WorkflowNotFound(workflow_id)
            self._save_unlocked(remaining)
            logger.info("Workflow deleted", extra={"workflow_id": workflow_id})
