from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from weather_agent.errors import GatewayError
from weather_agent.types import Message, ToolCallRequest


@dataclass
class ChatResponse:
    """Result of one gateway call: either a model message or an error."""

    content: str
    tool_calls: list[ToolCallRequest] | None = None
    raw: Any = None
    error: Optional[str] = None
    original_exc: Optional[Exception] = None

    @classmethod
    def failure(cls, error: str, original_exc: Optional[Exception] = None) -> "ChatResponse":
        return cls(content="", error=error, original_exc=original_exc)

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)

    def raise_for_error(self) -> None:
        if self.is_error:
            raise GatewayError(self.error or "unknown error", self.original_exc)

    def to_message(self) -> Message:
        """Assistant message carrying the content and the requested tool calls."""
        self.raise_for_error()
        return Message.assistant(self.content, self.tool_calls)

    def __bool__(self) -> bool:
        return not self.is_error

    def __repr__(self) -> str:
        if self.is_error:
            return f"{self.__class__.__name__}(error={self.error!r})"
        preview = self.content[:75] + "..." if len(self.content) > 75 else self.content
        calls = [tc.name for tc in self.tool_calls or ()]
        return f"{self.__class__.__name__}(content={preview!r}, tool_calls={calls!r})"
