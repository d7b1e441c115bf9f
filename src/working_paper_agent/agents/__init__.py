"""Agents for the working paper assistant."""

from working_paper_agent.agents.base import (
    AgentAction,
    AgentMessage,
    AgentState,
    BaseAgent,
)
from working_paper_agent.agents.preparer import PREPARER_SYSTEM_PROMPT, WorkingPaperAgent

__all__ = [
    "AgentAction",
    "AgentMessage",
    "AgentState",
    "BaseAgent",
    "PREPARER_SYSTEM_PROMPT",
    "WorkingPaperAgent",
]
