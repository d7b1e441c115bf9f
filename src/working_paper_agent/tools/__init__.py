"""Tools exposed to the working paper agent."""

from working_paper_agent.tools.definitions import (
    GENERATE_WORKING_PAPER,
    GENERATE_WORKING_PAPER_TOOL,
    WORKING_PAPER_TOOLS,
)
from working_paper_agent.tools.executor import ToolExecutionError, ToolExecutor

__all__ = [
    # Tool Definitions
    "GENERATE_WORKING_PAPER",
    "GENERATE_WORKING_PAPER_TOOL",
    "WORKING_PAPER_TOOLS",
    # Tool Executor
    "ToolExecutor",
    "ToolExecutionError",
]
