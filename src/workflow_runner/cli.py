"""CLI entrypoint for the workflow runner."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from workflow_runner import __version__
from workflow_runner.config import RunnerSettings
from workflow_runner.llm.provider import LLMConfigurationError, LLMError
from workflow_runner.logging import configure_logging
from workflow_runner.workflows.executor import StepExecutionError
from workflow_runner.workflows.runner import create_sample_workflow, run_workflow
from workflow_runner.workflows.store import WorkflowNotFound, WorkflowStore

logger = logging.getLogger(__name__)


def _parse_context(raw: str | None, path: str | None) -> dict[str, Any]:
    if path:
        raw = Path(path).read_text(encoding="utf-8")
    if not raw:
        return {}
    value = json.loads(raw)
    if not isinstance(value, dict):
        raise ValueError("Initial context must be a JSON object")
    return value


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workflow-runner",
        description="Define, persist and run ordered step workflows",
    )
    parser.add_argument("--version", action="version", version=f"workflow-runner {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Start the REST API (and UI, if built)")
    serve.add_argument("--host", default=None, help="Bind address (defaults to HOST)")
    serve.add_argument("--port", type=int, default=None, help="Bind port (defaults to PORT)")

    subparsers.add_parser("list", help="List persisted workflows")
    subparsers.add_parser("create-sample", help="Create the 'Summarize URL' sample workflow")

    run = subparsers.add_parser("run", help="Run a persisted workflow")
    run.add_argument("--workflow-id", required=True, help="Workflow id")
    context = run.add_mutually_exclusive_group()
    context.add_argument(
        "--context",
        default=None,
        help='Initial context as a JSON object, e.g. \'{"url": "https://example.com"}\'',
    )
    context.add_argument(
        "--context-file", default=None, help="Path to a JSON file holding the initial context"
    )

    test_llm = subparsers.add_parser("test-llm", help="Send a single prompt to the LLM")
    test_llm.add_argument("--prompt", required=True, help="Prompt text")

    summarize = subparsers.add_parser("summarize-url", help="Fetch a URL and summarize it")
    summarize.add_argument("--url", required=True, help="Page to summarize")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = RunnerSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)
    store = WorkflowStore(settings.workflows_state_file)

    try:
        if args.command == "serve":
            import uvicorn

            from workflow_runner.server.app import create_app
            from workflow_runner.server.config import ServerSettings

            server_settings = ServerSettings()
            uvicorn.run(
                create_app(settings, server_settings),
                host=args.host or server_settings.host,
                port=args.port or server_settings.port,
                log_config=None,
            )
            return 0

        if args.command == "list":
            _print_json([w.model_dump(mode="json", by_alias=True) for w in store.list()])
            return 0

        if args.command == "create-sample":
            workflow = create_sample_workflow(store)
            print(f"Created workflow {workflow.id}: {workflow.name}")
            return 0

        # Remaining commands need the executor (and therefore the LLM provider).
        from workflow_runner.server.app import build_executor

        executor = build_executor(settings)
        try:
            if args.command == "run":
                try:
                    initial_context = _parse_context(args.context, args.context_file)
                except ValueError as e:
                    print(f"Invalid context: {e}", file=sys.stderr)
                    return 2

                result = run_workflow(
                    store=store,
                    executor=executor,
                    workflow_id=args.workflow_id,
                    initial_context=initial_context,
                )
                _print_json(result.model_dump(mode="json", by_alias=True))
                return 0 if result.succeeded else 4

            if args.command == "test-llm":
                print(executor.llm.generate(args.prompt))
                return 0

            if args.command == "summarize-url":
                text = executor.fetch_page_text(args.url)
                print(executor.llm.summarize(text))
                return 0
        finally:
            executor.close()

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except WorkflowNotFound as e:
        logger.warning(str(e), extra={"workflow_id": e.workflow_id})
        print(f"{e}: {e.workflow_id}", file=sys.stderr)
        return 3

    except LLMConfigurationError as e:
        logger.error("LLM is not configured", extra={"error": str(e)})
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    except (StepExecutionError, LLMError) as e:
        logger.error("Command failed", extra={"error": str(e)})
        print(str(e), file=sys.stderr)
        return 1

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
