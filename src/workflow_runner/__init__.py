"""Workflow Runner.

A small backend for defining, persisting and running ordered step workflows:
- workflow documents persisted to a local JSON file
- a sequential step executor (fetch URL, LLM summarize/prompt, text transforms, echo)
- a FastAPI server and an argparse CLI over the same services
"""

__version__ = "0.1.0"

from workflow_runner.config import LLMConfig, RunnerSettings

__all__ = ["__version__", "LLMConfig", "RunnerSettings"]
