"""Google Gemini client with function calling support.

Uses the google-genai SDK (v1.26+).
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, cast

import structlog
from google import genai
from google.genai import types

from working_paper_agent.config import get_settings

logger = structlog.get_logger(__name__)


@dataclass
class GeminiResponse:
    """Response from Gemini API."""

    content: str
    tool_calls: list[dict[str, Any]]
    stop_reason: str
    usage: dict[str, int]


class GeminiClient:
    """Client for Google's Gemini API with tool use support."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ):
        settings = get_settings()
        self._api_key = api_key or settings.google_api_key.get_secret_value()
        self._model_name = model or settings.gemini_model
        self._max_tokens = max_tokens or settings.llm_max_tokens
        self._temperature = (
            temperature if temperature is not None else settings.llm_temperature
        )

        self._client = genai.Client(api_key=self._api_key)

        self._logger = logger.bind(client="gemini", model=self._model_name)

    def _convert_tools_to_gemini_format(
        self, tools: list[dict[str, Any]]
    ) -> list[types.Tool]:
        """Convert our tool format to Gemini's expected format.

        Input schemas are passed through as plain JSON Schema. Trial balance
        rows are objects with arbitrary columns, which Gemini's OpenAPI
        ``Schema`` cannot express (it requires ``properties`` on OBJECT).
        """
        function_declarations = []

        for tool in tools:
            func_decl = types.FunctionDeclaration(
                name=tool["name"],
                description=tool["description"],
                parameters_json_schema=tool["input_schema"],
            )
            function_declarations.append(func_decl)

        return [types.Tool(function_declarations=function_declarations)]

    def _convert_messages_to_gemini_format(
        self, messages: list[dict[str, Any]]
    ) -> list[types.Content]:
        """Convert conversation history to Gemini's content format."""
        gemini_contents = []

        for msg in messages:
            if msg["role"] == "user":
                if not msg.get("content"):
                    continue
                gemini_contents.append(
                    types.Content(
                        role="user",
                        parts=[types.Part(text=msg["content"])],
                    )
                )
            elif msg["role"] == "assistant":
                parts = []

                if msg.get("content"):
                    parts.append(types.Part(text=msg["content"]))

                for tool_call in msg.get("tool_calls") or []:
                    parts.append(
                        types.Part(
                            function_call=types.FunctionCall(
                                name=tool_call["name"],
                                args=tool_call["arguments"],
                            )
                        )
                    )

                gemini_contents.append(
                    types.Content(role="model", parts=parts)
                )
            elif msg["role"] == "tool_result":
                part = types.Part(
                    function_response=types.FunctionResponse(
                        name=msg.get("tool_name") or "function",
                        response={"result": msg["content"]},
                    )
                )
                # Results for calls from the same model turn go back together
                previous = gemini_contents[-1] if gemini_contents else None
                if (
                    previous is not None
                    and previous.role == "user"
                    and previous.parts
                    and all(p.function_response for p in previous.parts)
                ):
                    previous.parts.append(part)
                else:
                    gemini_contents.append(types.Content(role="user", parts=[part]))

        return gemini_contents

    def _parse_response(self, response: Any) -> GeminiResponse:
        """Parse Gemini response into our format."""
        texts: list[str] = []
        tool_calls: list[dict[str, Any]] = []
        stop_reason = "end_turn"

        if response.candidates:
            candidate = response.candidates[0]
            parts = candidate.content.parts if candidate.content else None

            for part in parts or []:
                if getattr(part, "function_call", None):
                    fc = part.function_call
                    tool_calls.append({
                        "id": f"call_{fc.name}_{len(tool_calls)}",
                        "name": fc.name,
                        "arguments": dict(fc.args) if fc.args else {},
                    })
                elif getattr(part, "text", None):
                    texts.append(part.text)

            # SDK enums are str subclasses; compare on the raw value
            finish_reason = getattr(candidate.finish_reason, "value", candidate.finish_reason)
            stop_reason_map = {
                "STOP": "end_turn",
                "MAX_TOKENS": "max_tokens",
                "SAFETY": "content_filter",
                "RECITATION": "content_filter",
                "OTHER": "tool_use",
            }
            stop_reason = stop_reason_map.get(str(finish_reason), "end_turn")

            if tool_calls:
                stop_reason = "tool_use"

        usage = {"input_tokens": 0, "output_tokens": 0}
        if getattr(response, "usage_metadata", None):
            usage["input_tokens"] = (
                getattr(response.usage_metadata, "prompt_token_count", 0) or 0
            )
            usage["output_tokens"] = (
                getattr(response.usage_metadata, "candidates_token_count", 0) or 0
            )

        return GeminiResponse(
            content="".join(texts),
            tool_calls=tool_calls,
            stop_reason=stop_reason,
            usage=usage,
        )

    async def generate(
        self,
        system_prompt: str,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
    ) -> GeminiResponse:
        """Generate a response from Gemini.

        Args:
            system_prompt: The system prompt defining agent behavior.
            messages: Conversation history as list of message dicts.
            tools: Optional list of tool definitions for function calling.

        Returns:
            GeminiResponse with content, tool calls, and usage info.
        """
        self._logger.debug(
            "generating_response",
            message_count=len(messages),
            tool_count=len(tools) if tools else 0,
        )

        config = types.GenerateContentConfig(
            max_output_tokens=self._max_tokens,
            temperature=self._temperature,
            system_instruction=system_prompt,
        )

        if tools:
            config.tools = cast(
                list[types.Tool | Callable[..., Any]],
                self._convert_tools_to_gemini_format(tools),
            )

        gemini_contents = self._convert_messages_to_gemini_format(messages)
        contents_payload = cast(list[Any], gemini_contents)

        try:
            response = await self._client.aio.models.generate_content(
                model=self._model_name,
                contents=contents_payload,
                config=config,
            )

            parsed = self._parse_response(response)

            self._logger.info(
                "response_generated",
                stop_reason=parsed.stop_reason,
                tool_calls=len(parsed.tool_calls),
                input_tokens=parsed.usage["input_tokens"],
                output_tokens=parsed.usage["output_tokens"],
            )

            return parsed

        except Exception as e:
            self._logger.error("api_error", error=str(e))
            raise
