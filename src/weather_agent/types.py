"""
Provider-neutral conversation types.

They are intentionally minimal: everything wire-format specific lives in
adapters.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

__all__ = [
    "ChatMessage",
    "Role",
    "Message",
    "ToolCallRequest",
    "ToolCallResult",
    "ToolDefinition",
]


# Wire-level chat message, as sent to the provider
ChatMessage = dict[str, Any]


class Role(StrEnum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


@dataclass(slots=True)
class ToolCallRequest:
    """A request emitted by the model to call a local tool."""

    id: str
    name: str
    arguments: str  # raw JSON text, decoded by the tool registry

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.arguments},
        }


@dataclass(slots=True)
class ToolCallResult:
    """Payload to send back to the model after the tool finished running."""

    id: str  # must match the request id
    name: str
    content: str


@dataclass(slots=True)
class ToolDefinition:
    """Static description of a tool the model may call."""

    name: str
    description: str
    parameters: dict[str, Any]

    def as_openai_tool(self) -> dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": copy.deepcopy(self.parameters),
            },
        }


@dataclass(slots=True)
class Message:
    """One turn of the conversation."""

    role: Role
    content: str | None = None
    tool_calls: list[ToolCallRequest] | None = None
    tool_call_id: str | None = None
    name: str | None = None

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=Role.USER, content=content)

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role=Role.SYSTEM, content=content)

    @classmethod
    def assistant(
        cls,
        content: str | None,
        tool_calls: list[ToolCallRequest] | None = None,
    ) -> "Message":
        return cls(role=Role.ASSISTANT, content=content, tool_calls=tool_calls or None)

    @classmethod
    def tool(cls, result: ToolCallResult) -> "Message":
        return cls(
            role=Role.TOOL,
            content=result.content,
            tool_call_id=result.id,
            name=result.name,
        )

    def as_dict(self) -> ChatMessage:
        """
        Convert to the wire dictionary, leaving out unset fields.

        Returns:
            Dictionary representation of the message
        """
        msg: ChatMessage = {"role": self.role.value, "content": self.content}
        if self.tool_calls:
            msg["tool_calls"] = [tc.as_dict() for tc in self.tool_calls]
        if self.tool_call_id is not None:
            msg["tool_call_id"] = self.tool_call_id
        if self.name is not None:
            msg["name"] = self.name
        return msg
