"""Working Paper Agent - LLM-assisted Schedule M-1 working papers from trial balances."""

__version__ = "0.1.0"

from working_paper_agent.agents import WorkingPaperAgent
from working_paper_agent.clients import GeminiClient
from working_paper_agent.config import configure_logging, get_settings
from working_paper_agent.loader import TrialBalanceDocument, load_trial_balance
from working_paper_agent.models import (
    Adjustment,
    AdjustmentType,
    WorkingPaperFailure,
    WorkingPaperRequest,
    WorkingPaperResult,
    WorkingPaperSuccess,
)
from working_paper_agent.tools import GENERATE_WORKING_PAPER_TOOL, ToolExecutor
from working_paper_agent.workbook import generate_working_paper

__all__ = [
    # Version
    "__version__",
    # Agent
    "WorkingPaperAgent",
    # LLM Clients
    "GeminiClient",
    # Loading
    "TrialBalanceDocument",
    "load_trial_balance",
    # Working paper
    "Adjustment",
    "AdjustmentType",
    "WorkingPaperRequest",
    "WorkingPaperResult",
    "WorkingPaperSuccess",
    "WorkingPaperFailure",
    "generate_working_paper",
    # Tools
    "GENERATE_WORKING_PAPER_TOOL",
    "ToolExecutor",
    # Config
    "get_settings",
    "configure_logging",
]
