"""Shared fixtures: canned provider payloads and mock HTTP transports."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest
from openai import AsyncOpenAI
from openai.types.chat import ChatCompletion

from weather_agent.settings import (
    API_KEY_VAR,
    BASE_URL_VAR,
    MAX_LOOPS_VAR,
    MODEL_VAR,
    TIMEOUT_VAR,
    WEATHER_URL_VAR,
)

SHENZHEN_ARGS = '{"latitude": 22.547, "longitude": 114.058}'

OPEN_METEO_PAYLOAD: dict[str, Any] = {
    "latitude": 22.5,
    "longitude": 114.0,
    "timezone": "Asia/Shanghai",
    "current": {
        "time": "2025-05-01T14:00",
        "temperature_2m": 28.4,
        "relative_humidity_2m": 74,
        "wind_speed_10m": 12.3,
        "weather_code": 2,
    },
}


def completion_dict(
    content: str | None = None,
    tool_calls: list[tuple[str, str, str]] | None = None,
) -> dict[str, Any]:
    """A chat.completion body; tool_calls are (id, name, arguments) tuples."""
    message: dict[str, Any] = {"role": "assistant", "content": content}
    if tool_calls:
        message["tool_calls"] = [
            {"id": id_, "type": "function", "function": {"name": name, "arguments": args}}
            for id_, name, args in tool_calls
        ]
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 0,
        "model": "qwen-plus",
        "choices": [
            {
                "index": 0,
                "finish_reason": "tool_calls" if tool_calls else "stop",
                "message": message,
            }
        ],
    }


def make_completion(
    content: str | None = None,
    tool_calls: list[tuple[str, str, str]] | None = None,
) -> ChatCompletion:
    return ChatCompletion.model_validate(completion_dict(content, tool_calls))


def mock_openai(handler: Callable[[httpx.Request], httpx.Response]) -> AsyncOpenAI:
    """AsyncOpenAI whose HTTP traffic goes to *handler*; no retries."""
    return AsyncOpenAI(
        api_key="test-key",
        base_url="http://llm.test/v1",
        max_retries=0,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def mock_http(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def request_json(request: httpx.Request) -> dict[str, Any]:
    return json.loads(request.content)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every configuration variable for the duration of a test."""
    for var in (API_KEY_VAR, BASE_URL_VAR, MODEL_VAR, MAX_LOOPS_VAR, WEATHER_URL_VAR, TIMEOUT_VAR):
        # setenv first so monkeypatch restores the original state, even "unset"
        monkeypatch.setenv(var, "placeholder")
        monkeypatch.delenv(var)
    return monkeypatch
