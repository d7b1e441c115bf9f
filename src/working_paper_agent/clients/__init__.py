"""LLM client implementations for the working paper agent."""

from working_paper_agent.clients.gemini import GeminiClient, GeminiResponse

__all__ = [
    "GeminiClient",
    "GeminiResponse",
]
