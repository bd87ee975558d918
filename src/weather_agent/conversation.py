"""Append-only conversation history."""

from __future__ import annotations

import copy
from typing import Iterator, Optional

from weather_agent.errors import ConversationError
from weather_agent.types import ChatMessage, Message, Role, ToolCallRequest, ToolCallResult

__all__ = ["Conversation"]


class Conversation:
    """
    Ordered log of chat turns for a single session.

    The log only grows while a session runs; ``clear`` is meant for the start
    of a new session.
    """

    def __init__(self, messages: Optional[list[Message]] = None) -> None:
        self._messages: list[Message] = []
        for message in messages or ():
            self.append(message)

    def append(self, message: Message) -> None:
        self._messages.append(copy.deepcopy(message))

    def append_system(self, content: str) -> None:
        self.append(Message.system(content))

    def append_user(self, content: str) -> None:
        self.append(Message.user(content))

    def append_assistant(
        self,
        content: str | None,
        tool_calls: list[ToolCallRequest] | None = None,
    ) -> None:
        self.append(Message.assistant(content, tool_calls))

    def append_tool_result(self, result: ToolCallResult) -> None:
        self.append(Message.tool(result))

    def snapshot(self) -> list[Message]:
        """Return a deep copy of the history; changes to it never leak back."""
        return copy.deepcopy(self._messages)

    def as_dicts(self) -> list[ChatMessage]:
        return [m.as_dict() for m in self._messages]

    def clear(self) -> None:
        self._messages = []

    def last(self) -> Message | None:
        return copy.deepcopy(self._messages[-1]) if self._messages else None

    def validate(self) -> None:
        """
        Check that every tool message answers a call of the assistant turn
        right before it (other tool messages of the same turn may sit between).

        Raises:
            ConversationError: naming the first offending message index.
        """
        for index, message in enumerate(self._messages):
            if message.role is not Role.TOOL:
                continue

            owner: Message | None = None
            for previous in reversed(self._messages[:index]):
                if previous.role is not Role.TOOL:
                    owner = previous
                    break

            if owner is None or owner.role is not Role.ASSISTANT or not owner.tool_calls:
                raise ConversationError(
                    f"Tool message #{index} does not follow an assistant tool call"
                )
            call_ids = {tc.id for tc in owner.tool_calls}
            if message.tool_call_id not in call_ids:
                raise ConversationError(
                    f"Tool message #{index} answers unknown call id {message.tool_call_id!r}"
                )

    def describe(self) -> list[str]:
        """One debug line per message: index, role and content length."""
        return [
            f"Message {i}: Role={m.role.value}, Content length={len(m.content or '')}"
            for i, m in enumerate(self._messages)
        ]

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self.snapshot())

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(messages={len(self._messages)})"
