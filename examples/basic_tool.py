from __future__ import annotations

import argparse
import asyncio
import logging

from weather_agent import (
    ChatResponse,
    Conversation,
    ToolCallingAgent,
    create_llm,
    default_registry,
    load_settings,
)

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)


async def single_tool_roundtrip(prompt: str) -> None:
    """
    Run one tool-calling roundtrip by hand.

    1) Send user prompt
    2) Let model emit a tool call
    3) Execute the tool, re-inject call + result
    4) Ask model to finish using tool result
    """
    settings = load_settings()
    registry = default_registry()
    tools = registry.definitions()

    conversation = Conversation()
    conversation.append_user(prompt)

    async with create_llm(settings) as llm:
        # Step 1 → get first response
        rsp1: ChatResponse = await llm.complete(conversation.snapshot(), tools)
        rsp1.raise_for_error()

        # Step 2 → the model may answer directly
        if not rsp1.has_tool_calls:
            logger.warning("Model answered directly: %s", rsp1.content)
            return

        # Step 3 → run the first call and append both turns
        call = rsp1.tool_calls[0]
        result = await registry.invoke(call)
        conversation.append(llm.adapter.assistant_message_from(rsp1))
        conversation.append(llm.adapter.tool_result_message(result))

        # Step 4 → final completion
        rsp2 = await llm.complete(conversation.snapshot(), tools)
        rsp2.raise_for_error()
        logger.info("Model says: %s", rsp2.content)


async def agent_loop(prompt: str, max_loops: int) -> None:
    """Same conversation, driven by ToolCallingAgent."""
    settings = load_settings()
    async with create_llm(settings) as llm:
        agent = ToolCallingAgent(llm, default_registry(), max_loops=max_loops)
        result = await agent.run(prompt)
    logger.info("%s (%s, %d tool calls)", result.content, result.stop_reason, result.iterations)


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--prompt",
        default="What's the weather in Shenzhen? Is it suitable for outdoor activities?",
    )
    parser.add_argument("--max-loops", type=int, default=5)
    parser.add_argument("--manual", action="store_true", help="run a single roundtrip by hand")
    args = parser.parse_args()

    if args.manual:
        asyncio.run(single_tool_roundtrip(args.prompt))
    else:
        asyncio.run(agent_loop(args.prompt, args.max_loops))
