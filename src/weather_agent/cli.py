from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Sequence

from weather_agent.client import create_llm
from weather_agent.errors import WeatherAgentError
from weather_agent.loop import ToolCallingAgent
from weather_agent.settings import Settings, load_settings
from weather_agent.tools import OpenMeteoClient, default_registry

logger = logging.getLogger(__name__)

DEFAULT_PROMPT = "What's the weather in Shenzhen? Is it suitable for outdoor activities?"


async def ask(prompt: str, settings: Settings) -> str:
    """Run one tool-calling session for *prompt* and return the final answer."""
    weather = OpenMeteoClient(settings.weather_url, timeout=settings.timeout)
    async with create_llm(settings) as llm:
        agent = ToolCallingAgent(llm, default_registry(weather), max_loops=settings.max_loops)
        result = await agent.run(prompt)
    logger.info(
        "Finished after %d tool call(s), %d model request(s) (%s)",
        result.iterations,
        result.gateway_calls,
        result.stop_reason,
    )
    return result.content


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="weather-agent",
        description="Ask a chat model a question it may answer with the GetWeather tool.",
    )
    parser.add_argument("prompt", nargs="?", default=DEFAULT_PROMPT)
    parser.add_argument("-v", "--verbose", action="store_true", help="log every round")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        settings = load_settings()
        answer = asyncio.run(ask(args.prompt, settings))
    except WeatherAgentError as exc:
        logger.error("%s: %s", type(exc).__name__, exc)
        return 1

    print(answer)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
