#!/usr/bin/env python3
"""Programmatic workflow example.

This demonstrates using the workflow components directly:

* load settings from `.env`
* persist a small workflow to `agent_state/workflows.json`
* run it against an initial context and print the run log

The URL to summarize is passed as an argument.
"""

from __future__ import annotations

import argparse
import json
from typing import Sequence

from workflow_runner.config import RunnerSettings
from workflow_runner.logging import configure_logging
from workflow_runner.server.app import build_executor
from workflow_runner.workflows.models import Step
from workflow_runner.workflows.runner import run_workflow
from workflow_runner.workflows.store import WorkflowStore


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch, summarize and shout a web page.")
    parser.add_argument("--url", required=True, help="Page to summarize")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = RunnerSettings()
    configure_logging(settings.log_level)

    store = WorkflowStore(settings.workflows_state_file)
    workflow = store.create(
        name="Example: shouted summary",
        steps=[
            Step(id="fetch", type="FETCH_URL", order=1, config={"maxChars": 4000}),
            Step(id="summarize", type="LLM_SUMMARIZE", order=2),
            Step(
                id="shout",
                type="TRANSFORM_TEXT",
                order=3,
                config={"inputField": "summary", "outputField": "loud", "operation": "uppercase"},
            ),
        ],
    )

    executor = build_executor(settings)
    try:
        result = run_workflow(
            store=store,
            executor=executor,
            workflow_id=workflow.id,
            initial_context={"url": args.url},
        )
    finally:
        executor.close()

    for step in result.steps_run:
        print(f"{step.id:<10} {step.status:<8} {step.error or ''}")
    print(json.dumps(result.context.get("loud"), ensure_ascii=False))
    print(f"Persisted to: {settings.workflows_state_file}")
    return 0 if result.succeeded else 1


if __name__ == "__main__":
    raise SystemExit(main())
