"""OpenAI adapter for pure request/response transformations."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from openai.types.chat import ChatCompletion

from weather_agent.response import ChatResponse
from weather_agent.types import ChatMessage, Message, ToolCallRequest, ToolCallResult

logger = logging.getLogger(__name__)


class OpenAIRequestAdapter:
    """Adapter for converting between conversation types and the OpenAI format."""

    def to_provider(
        self, messages: Sequence[Message | ChatMessage], params: dict[str, Any]
    ) -> dict[str, Any]:
        """Convert messages and normalized params to OpenAI request format."""
        openai_messages: list[dict[str, Any]] = []
        for msg in messages:
            if isinstance(msg, Message):
                msg = msg.as_dict()

            openai_msg: dict[str, Any] = {"role": msg["role"]}

            if msg.get("content") is not None:
                openai_msg["content"] = msg["content"]

            # Assistant turns that requested tools
            if msg.get("tool_calls"):
                openai_msg["tool_calls"] = msg["tool_calls"]
                # OpenAI API: content may be null when tool_calls is present
                if "content" not in openai_msg:
                    openai_msg["content"] = None

            # Tool results
            if msg.get("tool_call_id"):
                openai_msg["tool_call_id"] = msg["tool_call_id"]

            if msg.get("name"):
                openai_msg["name"] = msg["name"]

            if "content" not in openai_msg:
                openai_msg["content"] = ""

            openai_messages.append(openai_msg)

        base_params = dict(params)
        extras = base_params.pop("extra", None) or {}
        if extras:
            base_params["extra_body"] = dict(extras)

        return {"messages": openai_messages, **base_params}

    def from_provider(self, raw: ChatCompletion) -> ChatResponse:
        """Convert an OpenAI completion to a ChatResponse for the first choice."""
        if not raw.choices or raw.choices[0].message is None:
            return ChatResponse.failure("Provider returned no choices")

        message = raw.choices[0].message
        tool_calls: list[ToolCallRequest] | None = None

        if message.tool_calls:
            tool_calls = []
            for tc in message.tool_calls:
                function = getattr(tc, "function", None)
                if function is None:
                    logger.warning("Skipping non-function tool call %s", tc.id)
                    continue
                tool_calls.append(
                    ToolCallRequest(
                        id=tc.id,
                        name=function.name,
                        arguments=function.arguments or "",
                    )
                )

        return ChatResponse(
            content=message.content or "",
            tool_calls=tool_calls or None,
            raw=raw,
        )

    def assistant_message_from(self, response: ChatResponse) -> Message:
        """Assistant message to append to the history for *response*."""
        return response.to_message()

    def tool_result_message(self, result: ToolCallResult) -> Message:
        """Tool message answering the call identified by ``result.id``."""
        return Message.tool(result)
