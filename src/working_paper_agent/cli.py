"""Command-line entry point for the working paper agent.

Usage:
    wpa prompt "Prepare the 2023 M-1 working paper" -f tb_2023.csv tb_2022.csv
    wpa p "Prepare the M-1 working paper" --files tb_2023.csv
    python -m working_paper_agent prompt "..." -f tb.csv
"""

import argparse
import asyncio
import sys
from collections.abc import Sequence

import structlog
from pydantic import ValidationError

from working_paper_agent import __version__
from working_paper_agent.agents.preparer import WorkingPaperAgent
from working_paper_agent.config import FlatSettings, configure_logging, get_settings
from working_paper_agent.loader import (
    TrialBalanceDocument,
    TrialBalanceLoadError,
    load_trial_balance,
)

logger = structlog.get_logger(__name__)

MISSING_API_KEY_MESSAGE = (
    "Error: GOOGLE_API_KEY is not set. Please set it in your environment variables."
)
ALPHA_WARNING = (
    "Warn: This is an alpha version of the working paper agent. "
    "It may not work as expected."
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wpa",
        description="Schedule M-1 working paper agent",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", metavar="<cmd>", required=True)
    prompt = subparsers.add_parser(
        "prompt",
        aliases=["p"],
        help="Ask the agent to perform a task",
    )
    prompt.add_argument("task", help="Task for the agent to perform")
    prompt.add_argument(
        "-f",
        "--files",
        nargs="+",
        default=[],
        metavar="FILE",
        help="CSV trial balance files to pass to the agent",
    )
    return parser


def _load_settings() -> FlatSettings | None:
    """Load settings, printing the reason and returning None when they are unusable."""
    try:
        settings = get_settings()
    except ValidationError as e:
        missing = {str(err["loc"][0]).upper() for err in e.errors() if err["type"] == "missing"}
        if "GOOGLE_API_KEY" in missing:
            print(MISSING_API_KEY_MESSAGE, file=sys.stderr)
        else:
            print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return None

    if not settings.google_api_key.get_secret_value():
        print(MISSING_API_KEY_MESSAGE, file=sys.stderr)
        return None
    return settings


def _load_documents(files: Sequence[str]) -> list[TrialBalanceDocument] | None:
    documents = []
    for file in files:
        try:
            documents.append(load_trial_balance(file))
        except TrialBalanceLoadError as e:
            print(f"Error loading file {file}: {e}", file=sys.stderr)
            return None
    return documents


def _print_outcome(response: str, agent: WorkingPaperAgent) -> None:
    if response:
        print(f"\n{'=' * 60}")
        print("Final agent response:")
        print("=" * 60)
        print(response)

    for result in agent.working_papers:
        if result.get("success"):
            print(f"Working paper generated at: {result['outputFilePath']}")
        else:
            print(f"Working paper error: {result.get('error')}", file=sys.stderr)


async def run_prompt(task: str, files: Sequence[str]) -> int:
    """Load the input files and run the agent on the task.

    Returns:
        Process exit status.
    """
    documents = _load_documents(files)
    if documents is None:
        return 1

    agent = WorkingPaperAgent()
    try:
        response = await agent.run_task(task, documents)
    except Exception as e:
        logger.exception("agent_error", error=str(e), **agent.get_context_summary())
        return 1

    logger.info("agent_finished", **agent.get_context_summary())
    _print_outcome(response, agent)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    settings = _load_settings()
    if settings is None:
        return 1

    configure_logging(level=settings.log_level, format=settings.log_format)
    print(ALPHA_WARNING, file=sys.stderr)

    return asyncio.run(run_prompt(args.task, args.files))


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
