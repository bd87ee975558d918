"""
Tool-calling loop: model turn, tool turn, model turn ... until an answer.

States::

    AWAITING_MODEL -> HAS_TOOL_CALL -> EXECUTING_TOOL -> AWAITING_MODEL
    AWAITING_MODEL -> DONE

All run state lives in a ``LoopContext`` that ``step`` receives and returns.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Optional, Protocol, Sequence

from weather_agent.conversation import Conversation
from weather_agent.response import ChatResponse
from weather_agent.settings import DEFAULT_MAX_LOOPS
from weather_agent.tools import ToolRegistry
from weather_agent.types import ChatMessage, Message, ToolCallRequest

__all__ = [
    "ChatModel",
    "LoopState",
    "StopReason",
    "LoopContext",
    "LoopResult",
    "ToolCallingAgent",
    "DEFAULT_MAX_LOOPS",
]

_logger = logging.getLogger(__name__)


class ChatModel(Protocol):
    """Anything that can complete a conversation, e.g. ``OpenAILLM``."""

    async def complete(
        self,
        messages: Sequence[Message | ChatMessage],
        tools: Sequence[dict[str, Any]] | None = None,
        *,
        params: dict[str, Any] | None = None,
    ) -> ChatResponse: ...


class LoopState(StrEnum):
    AWAITING_MODEL = "awaiting_model"
    HAS_TOOL_CALL = "has_tool_call"
    EXECUTING_TOOL = "executing_tool"
    DONE = "done"


class StopReason(StrEnum):
    ANSWER = "answer"
    MAX_LOOPS = "max_loops"


@dataclass
class LoopContext:
    """Mutable state of one run."""

    conversation: Conversation
    state: LoopState = LoopState.AWAITING_MODEL
    iteration: int = 0  # completed tool executions
    gateway_calls: int = 0
    response: Optional[ChatResponse] = None
    tool_call: Optional[ToolCallRequest] = None
    tool_params: Any = None
    stop_reason: Optional[StopReason] = None

    @property
    def done(self) -> bool:
        return self.state is LoopState.DONE


@dataclass(frozen=True)
class LoopResult:
    """Outcome of a finished run."""

    content: str
    stop_reason: StopReason
    iterations: int
    gateway_calls: int
    messages: list[Message] = field(default_factory=list)


class ToolCallingAgent:
    """
    Drives the conversation between a chat model and a tool registry.

    Only the first tool call of a model turn is executed; any further calls
    in the same turn are logged and dropped. Argument-decode errors, unknown
    tool names, tool failures and gateway errors all end the run by raising.
    """

    def __init__(
        self,
        llm: ChatModel,
        registry: ToolRegistry,
        *,
        max_loops: int = DEFAULT_MAX_LOOPS,
        system_prompt: Optional[str] = None,
        params: Optional[dict[str, Any]] = None,
        logger: Optional[logging.Logger] = None,
        name: Optional[str] = None,
    ) -> None:
        if max_loops < 0:
            raise ValueError(f"max_loops must not be negative, got {max_loops}")
        self.llm = llm
        self.registry = registry
        self.max_loops = max_loops
        self.system_prompt = system_prompt
        self.params = params
        self.logger = logger or _logger
        self.name = name or self.__class__.__name__

    def start(self, prompt: str) -> LoopContext:
        """New context whose conversation holds the system and user prompts."""
        conversation = Conversation()
        if self.system_prompt:
            conversation.append_system(self.system_prompt)
        conversation.append_user(prompt)
        return LoopContext(conversation=conversation)

    async def step(self, ctx: LoopContext) -> LoopContext:
        """Perform exactly one state transition."""
        if ctx.state is LoopState.AWAITING_MODEL:
            return await self._await_model(ctx)
        if ctx.state is LoopState.HAS_TOOL_CALL:
            return self._select_tool_call(ctx)
        if ctx.state is LoopState.EXECUTING_TOOL:
            return await self._execute_tool(ctx)
        return ctx

    async def run(self, prompt: str) -> LoopResult:
        """Run the loop for *prompt* and return the final answer."""
        return await self.run_context(self.start(prompt))

    async def run_context(self, ctx: LoopContext) -> LoopResult:
        while not ctx.done:
            ctx = await self.step(ctx)

        if ctx.response is None or ctx.stop_reason is None:
            raise RuntimeError("Loop finished without a final response")
        self._log(f"Final response from LLM: {ctx.response.content}")
        return LoopResult(
            content=ctx.response.content,
            stop_reason=ctx.stop_reason,
            iterations=ctx.iteration,
            gateway_calls=ctx.gateway_calls,
            messages=ctx.conversation.snapshot(),
        )

    # --- transitions -------------------------------------------------------
    async def _await_model(self, ctx: LoopContext) -> LoopContext:
        response = await self.llm.complete(
            ctx.conversation.snapshot(),
            self.registry.definitions(),
            params=self.params,
        )
        ctx.gateway_calls += 1
        response.raise_for_error()
        ctx.response = response

        self._log(f"-------------- Round {ctx.iteration} response --------------", logging.DEBUG)
        self._log(f"Number of messages: {len(ctx.conversation)}", logging.DEBUG)
        for line in ctx.conversation.describe():
            self._log(line, logging.DEBUG)

        if not response.has_tool_calls:
            return self._finish(ctx, StopReason.ANSWER)
        if ctx.iteration >= self.max_loops:
            self._log(
                f"Loop limit of {self.max_loops} reached with a pending tool call",
                logging.WARNING,
            )
            return self._finish(ctx, StopReason.MAX_LOOPS)

        ctx.state = LoopState.HAS_TOOL_CALL
        return ctx

    def _select_tool_call(self, ctx: LoopContext) -> LoopContext:
        if ctx.response is None or not ctx.response.tool_calls:
            raise RuntimeError(f"No tool call to select in state {ctx.state}")
        calls = ctx.response.tool_calls
        call = calls[0]
        if len(calls) > 1:
            ignored = ", ".join(f"{c.name}({c.id})" for c in calls[1:])
            self._log(f"Ignoring {len(calls) - 1} extra tool call(s): {ignored}", logging.WARNING)

        self._log(f"Response from LLM: {ctx.response.content}")
        self._log(f"Selected tool by LLM: {call.name}")
        self._log(f"Tool call arguments: {call.arguments}")

        # Raises UnknownToolError / ToolArgumentsError
        ctx.tool_params = self.registry.decode(call.name, call.arguments)
        ctx.tool_call = call
        ctx.state = LoopState.EXECUTING_TOOL
        return ctx

    async def _execute_tool(self, ctx: LoopContext) -> LoopContext:
        if ctx.response is None or ctx.tool_call is None:
            raise RuntimeError(f"No selected tool call to execute in state {ctx.state}")
        call = ctx.tool_call
        result = await self.registry.execute(call, ctx.tool_params)
        self._log(f"Result from tool:\n{result.content}", logging.DEBUG)

        # The assistant turn keeps only the call that gets answered
        ctx.conversation.append_assistant(ctx.response.content, [call])
        ctx.conversation.append_tool_result(result)
        ctx.conversation.validate()

        ctx.iteration += 1
        ctx.tool_call = None
        ctx.tool_params = None
        ctx.response = None
        ctx.state = LoopState.AWAITING_MODEL
        return ctx

    def _finish(self, ctx: LoopContext, reason: StopReason) -> LoopContext:
        ctx.stop_reason = reason
        ctx.state = LoopState.DONE
        return ctx

    def _log(self, message: str, level: int = logging.INFO) -> None:
        self.logger.log(level, f"[{self.name}] {message}")
