"""Static mapping from tool name to definition and handler."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, TypeVar

from weather_agent.errors import (
    ToolArgumentsError,
    ToolError,
    ToolExecutionError,
    UnknownToolError,
)
from weather_agent.types import ToolCallRequest, ToolCallResult, ToolDefinition

__all__ = ["Tool", "ToolRegistry"]

logger = logging.getLogger(__name__)

P = TypeVar("P")


@dataclass(frozen=True)
class Tool(Generic[P]):
    """A tool definition bound to its argument decoder and async handler.

    ``decode`` receives the JSON-decoded arguments and returns the handler's
    parameter object; it raises ``ValueError``/``TypeError`` on a bad shape.
    """

    definition: ToolDefinition
    decode: Callable[[Any], P]
    handler: Callable[[P], Awaitable[str]]

    @property
    def name(self) -> str:
        return self.definition.name


class ToolRegistry:
    def __init__(self, tools: list[Tool[Any]] | None = None) -> None:
        self._tools: dict[str, Tool[Any]] = {}
        for tool in tools or ():
            self.register(tool)

    def register(self, tool: Tool[Any]) -> None:
        if tool.name in self._tools:
            raise ValueError(f"Tool {tool.name!r} is already registered")
        self._tools[tool.name] = tool

    def get(self, name: str) -> Tool[Any]:
        """Exact-name lookup."""
        try:
            return self._tools[name]
        except KeyError:
            raise UnknownToolError(
                f"Model requested unknown tool {name!r}; registered: {self.names()}",
                tool_name=name,
            ) from None

    def names(self) -> list[str]:
        return list(self._tools)

    def definitions(self) -> list[dict[str, Any]]:
        """Tool definitions in the shape the chat-completions API expects."""
        return [tool.definition.as_openai_tool() for tool in self._tools.values()]

    def decode(self, name: str, raw_arguments: str) -> Any:
        """
        Decode the raw JSON argument string into the tool's parameter object.

        Raises:
            UnknownToolError: no tool is registered under *name*.
            ToolArgumentsError: the text is not valid JSON or has the wrong shape.
        """
        tool = self.get(name)
        try:
            payload = json.loads(raw_arguments)
        except (json.JSONDecodeError, TypeError) as exc:
            raise ToolArgumentsError(
                f"Failed to decode arguments for {name}: {exc}", tool_name=name
            ) from exc
        try:
            return tool.decode(payload)
        except (TypeError, ValueError) as exc:
            raise ToolArgumentsError(
                f"Invalid arguments for {name}: {exc}", tool_name=name
            ) from exc

    async def invoke(self, call: ToolCallRequest) -> ToolCallResult:
        """Decode the call's arguments, run the handler and key the result by call id."""
        params = self.decode(call.name, call.arguments)
        return await self.execute(call, params)

    async def execute(self, call: ToolCallRequest, params: Any) -> ToolCallResult:
        """Run the handler with already decoded *params*."""
        tool = self.get(call.name)

        logger.info("Calling tool %s (call id %s)", call.name, call.id)
        try:
            content = await tool.handler(params)
        except ToolError:
            raise
        except Exception as exc:
            raise ToolExecutionError(
                f"Tool {call.name} failed: {exc}", tool_name=call.name
            ) from exc

        return ToolCallResult(id=call.id, name=call.name, content=content)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
