"""Base agent class defining the interface for LLM-driven agents."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

import structlog

logger = structlog.get_logger(__name__)


class AgentState(str, Enum):
    """Possible states for an agent."""

    IDLE = "idle"
    THINKING = "thinking"
    ACTING = "acting"
    ERROR = "error"


@dataclass
class AgentMessage:
    """A message in the agent's conversation history."""

    role: str  # "user", "assistant", or "tool_result"
    content: str
    tool_calls: list[dict[str, Any]] = field(default_factory=list)
    tool_call_id: str | None = None
    tool_name: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class AgentAction:
    """An action taken by an agent."""

    agent_id: UUID
    action_type: str  # "tool_call", "message", "complete"
    tool_calls: list[dict[str, Any]] = field(default_factory=list)
    message: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class BaseAgent(ABC):
    """Abstract base class for tool-using agents.

    Implements the Think-Act-Observe loop pattern:
    1. Think: Agent reasons about current state and decides what to do
    2. Act: Agent executes tool calls or sends a message
    3. Observe: Tool results are added to the conversation

    Subclasses must implement:
    - _get_system_prompt(): Returns the agent's persona and instructions
    - _get_tools(): Returns the list of tools available to this agent
    - _generate_response(): Calls the LLM and turns its reply into an action
    """

    def __init__(
        self,
        agent_id: UUID | None = None,
        name: str = "Agent",
        description: str = "",
    ):
        self.id = agent_id or uuid4()
        self.name = name
        self.description = description
        self.state = AgentState.IDLE
        self._conversation_history: list[AgentMessage] = []
        self._action_history: list[AgentAction] = []

        self._logger = logger.bind(agent_id=str(self.id), agent_name=self.name)

    @abstractmethod
    def _get_system_prompt(self) -> str:
        """Get the system prompt defining this agent's persona and behavior."""
        pass

    @abstractmethod
    def _get_tools(self) -> list[dict[str, Any]]:
        """Get the list of tools available to this agent."""
        pass

    def add_user_message(self, content: str) -> None:
        """Add a user message to the conversation history."""
        message = AgentMessage(role="user", content=content)
        self._conversation_history.append(message)
        self._logger.debug("user_message_added", content_length=len(content))

    def add_assistant_message(
        self, content: str, tool_calls: list[dict[str, Any]] | None = None
    ) -> None:
        """Add an assistant message to the conversation history."""
        message = AgentMessage(
            role="assistant",
            content=content,
            tool_calls=tool_calls or [],
        )
        self._conversation_history.append(message)
        self._logger.debug(
            "assistant_message_added",
            content_length=len(content),
            tool_calls=len(tool_calls or []),
        )

    def add_tool_result(
        self, tool_call_id: str, result: str, tool_name: str | None = None
    ) -> None:
        """Add a tool result to the conversation history."""
        message = AgentMessage(
            role="tool_result",
            content=result,
            tool_call_id=tool_call_id,
            tool_name=tool_name,
        )
        self._conversation_history.append(message)
        self._logger.debug("tool_result_added", tool_call_id=tool_call_id, tool=tool_name)

    def record_action(self, action: AgentAction) -> None:
        """Record an action taken by this agent."""
        self._action_history.append(action)
        self._logger.info(
            "action_recorded",
            action_type=action.action_type,
            tools=[call.get("name") for call in action.tool_calls],
        )

    def get_context_summary(self) -> dict[str, Any]:
        """Get a summary of the agent's current context."""
        return {
            "agent_id": str(self.id),
            "name": self.name,
            "state": self.state.value,
            "message_count": len(self._conversation_history),
            "action_count": len(self._action_history),
        }

    async def think(self, prompt: str | None = None) -> AgentAction:
        """Decide on the next action.

        Args:
            prompt: New user input, or None to continue from the existing
                conversation (e.g. after tool results were added).

        Returns:
            The action the agent decided to take.

        Raises:
            Exception: Whatever the LLM call raised; the agent is left in
                ``AgentState.ERROR``.
        """
        self.state = AgentState.THINKING
        self._logger.info("thinking_started", prompt_length=len(prompt or ""))

        if prompt:
            self.add_user_message(prompt)

        try:
            action = await self._generate_response()
        except Exception as e:
            self.state = AgentState.ERROR
            self._logger.error("thinking_failed", error=str(e))
            raise

        self.record_action(action)
        return action

    @abstractmethod
    async def _generate_response(self) -> AgentAction:
        """Generate a response using the LLM.

        Returns:
            The action decided by the agent.
        """
        pass

