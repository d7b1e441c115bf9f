"""Tool executor that bridges LLM tool calls to the working paper writer."""

from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from working_paper_agent.config import get_settings
from working_paper_agent.models import WorkingPaperRequest
from working_paper_agent.tools.definitions import GENERATE_WORKING_PAPER
from working_paper_agent.workbook import generate_working_paper

logger = structlog.get_logger(__name__)


class ToolExecutionError(Exception):
    """Error during tool execution."""

    def __init__(self, tool_name: str, message: str, details: Any = None):
        super().__init__(f"Tool '{tool_name}' failed: {message}")
        self.tool_name = tool_name
        self.details = details


def _format_validation_error(error: ValidationError) -> str:
    """Render pydantic errors as ``field.path: message`` pairs."""
    parts = []
    for err in error.errors():
        location = ".".join(str(part) for part in err["loc"]) or "payload"
        parts.append(f"{location}: {err['msg']}")
    return "; ".join(parts)


class ToolExecutor:
    """Executes LLM tool calls against local handlers."""

    def __init__(self, default_output_dir: str | Path | None = None):
        if default_output_dir is None:
            default_output_dir = get_settings().output_dir
        self.default_output_dir = str(default_output_dir)
        self._tool_handlers: dict[str, Any] = {
            GENERATE_WORKING_PAPER: self._generate_working_paper,
        }

    @property
    def tool_names(self) -> list[str]:
        return list(self._tool_handlers)

    async def execute(self, tool_name: str, arguments: dict[str, Any]) -> dict[str, Any]:
        """Execute a tool call and return the result.

        Raises:
            ToolExecutionError: No handler is registered for ``tool_name``.
        """
        handler = self._tool_handlers.get(tool_name)
        if not handler:
            raise ToolExecutionError(tool_name, f"Unknown tool: {tool_name}")

        logger.info("executing_tool", tool=tool_name, args=sorted(arguments))

        try:
            result = await handler(arguments)
        except ValidationError as e:
            details = _format_validation_error(e)
            logger.warning("tool_arguments_invalid", tool=tool_name, details=details)
            return {
                "success": False,
                "error": f"Invalid arguments for {tool_name}: {details}",
            }
        except Exception as e:
            logger.exception("tool_execution_error", tool=tool_name)
            return {"success": False, "error": str(e) or type(e).__name__}

        logger.info("tool_executed", tool=tool_name, success=result.get("success"))
        return result

    # === Working Paper Handlers ===

    async def _generate_working_paper(self, arguments: dict[str, Any]) -> dict[str, Any]:
        payload = dict(arguments)
        if "outputPath" not in payload and "output_path" not in payload:
            payload["outputPath"] = self.default_output_dir

        request = WorkingPaperRequest.model_validate(payload)
        return generate_working_paper(request).to_dict()
