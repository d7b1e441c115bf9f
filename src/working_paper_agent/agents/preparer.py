"""M-1 preparer agent - proposes book-tax adjustments and writes the working paper."""

import json
from collections.abc import Sequence
from typing import Any
from uuid import UUID

import structlog

from working_paper_agent.agents.base import AgentAction, AgentState, BaseAgent
from working_paper_agent.clients.gemini import GeminiClient
from working_paper_agent.config import get_settings
from working_paper_agent.loader import TrialBalanceDocument
from working_paper_agent.tools.definitions import GENERATE_WORKING_PAPER, WORKING_PAPER_TOOLS
from working_paper_agent.tools.executor import ToolExecutionError, ToolExecutor

logger = structlog.get_logger(__name__)

PREPARER_SYSTEM_PROMPT = """You are a tax accounting assistant helping a CPA prepare
Schedule M-1 working papers for Form 1120.

## Your Task
Given a trial balance in CSV form (and prior year data when provided):
- Identify book-tax differences based on IRS guidance
- Classify each adjustment as Permanent or Temporary
- Reference the appropriate Schedule M-1 line
- Explain each adjustment

## Authoritative Sources
- Instructions for Form 1120 (https://www.irs.gov/instructions/i1120), Schedule M-1 section
- Publication 542, Corporations (https://www.irs.gov/publications/p542)
- Publication 535, Business Expenses (https://www.irs.gov/publications/p535)

## Rules
1. Disallow 50% of meals and entertainment expenses (Pub 535)
2. Disallow fines and penalties (Pub 535)
3. Exclude tax-exempt interest income (Pub 535)
4. Treat book-vs-tax depreciation differences as timing items (Pub 946 if needed)
5. Limit charitable contributions to 10% of taxable income before the deduction (Pub 542)

## Output
Respond with a table listing, for every adjustment:
- Account name
- Adjustment type (Permanent or Temporary)
- Adjustment amount
- M-1 line number (if applicable)
- IRS rule reference (e.g., IRC §274(n))
- Explanation based on the IRS rule

Then generate the working paper by calling the tool 'generate_xlsx_working_paper'
with the adjustments and the trial balance rows exactly as provided. If the tool
reports an error, correct the arguments and call it again."""


class WorkingPaperAgent(BaseAgent):
    """Proposes Schedule M-1 adjustments and writes them to a workbook.

    Uses Gemini for reasoning and has a single tool that generates the
    XLSX working paper.
    """

    def __init__(
        self,
        agent_id: UUID | None = None,
        llm_client: GeminiClient | None = None,
        tool_executor: ToolExecutor | None = None,
        max_iterations: int | None = None,
    ):
        super().__init__(
            agent_id=agent_id,
            name="M-1 Preparer",
            description="Prepares Schedule M-1 working papers from trial balances",
        )

        self._llm_client = llm_client or GeminiClient()
        self._tool_executor = tool_executor or ToolExecutor()
        self._max_iterations = max_iterations or get_settings().max_iterations
        self.working_papers: list[dict[str, Any]] = []
        self._logger = logger.bind(agent_id=str(self.id), agent_name=self.name)

    def _get_system_prompt(self) -> str:
        return PREPARER_SYSTEM_PROMPT

    def _get_tools(self) -> list[dict[str, Any]]:
        return WORKING_PAPER_TOOLS

    def _format_messages_for_llm(self) -> list[dict[str, Any]]:
        """Format conversation history for the LLM client."""
        return [
            {
                "role": msg.role,
                "content": msg.content,
                "tool_calls": msg.tool_calls,
                "tool_call_id": msg.tool_call_id,
                "tool_name": msg.tool_name,
            }
            for msg in self._conversation_history
        ]

    async def _generate_response(self) -> AgentAction:
        """Generate a response using Gemini."""
        self._logger.debug("generating_response")

        response = await self._llm_client.generate(
            system_prompt=self._get_system_prompt(),
            messages=self._format_messages_for_llm(),
            tools=self._get_tools(),
        )

        self.add_assistant_message(
            content=response.content,
            tool_calls=response.tool_calls,
        )

        if response.tool_calls:
            self.state = AgentState.ACTING
            return AgentAction(
                agent_id=self.id,
                action_type="tool_call",
                tool_calls=response.tool_calls,
                message=response.content,
            )

        self.state = AgentState.IDLE
        return AgentAction(
            agent_id=self.id,
            action_type="complete" if response.stop_reason == "end_turn" else "message",
            message=response.content,
        )

    async def execute_tool(self, tool_name: str, tool_args: dict[str, Any]) -> dict[str, Any]:
        """Execute a tool call and return the result."""
        self._logger.info("executing_tool", tool=tool_name)
        result = await self._tool_executor.execute(tool_name, tool_args)
        if tool_name == GENERATE_WORKING_PAPER:
            self.working_papers.append(result)
        return result

    async def _run_tool_call(self, tool_call: dict[str, Any]) -> str:
        """Run one tool call and render its result for the conversation."""
        try:
            result = await self.execute_tool(tool_call["name"], tool_call.get("arguments") or {})
        except ToolExecutionError as e:
            self._logger.error("tool_call_failed", tool=tool_call["name"], error=str(e))
            return f"Error: {e}"
        return json.dumps(result, default=str)

    async def run_task(
        self,
        task: str,
        documents: Sequence[TrialBalanceDocument] = (),
    ) -> str:
        """Run a task to completion, handling tool calls automatically.

        Args:
            task: Free-text instructions from the user.
            documents: Loaded trial balances to include in the conversation.

        Returns:
            The agent's last non-empty text response.
        """
        self._logger.info("starting_task", task=task[:100], documents=len(documents))

        self.add_user_message(f"Task: {task}")
        for document in documents:
            self.add_user_message(
                f"Trial balance data ({document.name}):\n"
                f"{json.dumps(document.rows, indent=2)}"
            )

        final_response = ""
        for iteration in range(self._max_iterations):
            self._logger.debug("iteration", number=iteration + 1)

            action = await self.think()
            if action.message:
                final_response = action.message

            if action.action_type != "tool_call":
                self._logger.info("task_completed", response_length=len(final_response))
                break

            for tool_call in action.tool_calls:
                result = await self._run_tool_call(tool_call)
                self.add_tool_result(
                    tool_call_id=tool_call.get("id", "unknown"),
                    result=result,
                    tool_name=tool_call["name"],
                )
        else:
            self._logger.warning("max_iterations_reached", max_iterations=self._max_iterations)

        return final_response
