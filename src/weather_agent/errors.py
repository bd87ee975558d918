"""
Exception taxonomy for weather-agent.

Provider tracebacks are translated into a concise `GatewayError` while the
original exception is preserved for full tracebacks.
"""

from __future__ import annotations

import logging
from typing import Final, Optional, Type

import openai

__all__: tuple[str, ...] = (
    "WeatherAgentError",
    "ConfigError",
    "GatewayError",
    "ToolError",
    "UnknownToolError",
    "ToolArgumentsError",
    "ToolExecutionError",
    "WeatherAPIError",
    "ConversationError",
    "classify_error",
)


class WeatherAgentError(RuntimeError):
    """Base class for every error raised by this package."""


class ConfigError(WeatherAgentError):
    """Raised when the environment configuration is missing or invalid."""


class GatewayError(WeatherAgentError):
    """The chat-completions request failed.

    Attributes:
        original_exc: The underlying provider exception, if any.
    """

    original_exc: Optional[Exception]

    def __init__(self, message: str, original_exc: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.original_exc = original_exc
        self.__cause__ = original_exc


class ToolError(WeatherAgentError):
    """Base class for failures while resolving or running a tool call."""

    def __init__(self, message: str, *, tool_name: str | None = None) -> None:
        super().__init__(message)
        self.tool_name = tool_name


class UnknownToolError(ToolError):
    """The model asked for a tool that is not registered."""


class ToolArgumentsError(ToolError):
    """The tool call arguments could not be decoded."""


class ToolExecutionError(ToolError):
    """The tool handler raised while running."""


class WeatherAPIError(WeatherAgentError):
    """The weather provider failed or answered with a non-200 status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ConversationError(WeatherAgentError):
    """The conversation violates the assistant/tool pairing rule."""


RATE_LIMIT_ERRORS: Final[tuple[Type[Exception], ...]] = (openai.RateLimitError,)

CONN_ERRORS: Final[tuple[Type[Exception], ...]] = (
    openai.APIConnectionError,
    TimeoutError,
    ConnectionError,
)

API_ERRORS: Final[tuple[Type[Exception], ...]] = (openai.APIError,)


def classify_error(
    exc: Exception,
    logger: Optional[logging.Logger] = None,
) -> str:
    """
    Classify an exception raised by the provider SDK.

    Args:
        exc: The caught exception
        logger: Logger for recording the error

    Returns:
        Formatted error message string
    """
    log = logger or logging.getLogger("weather_agent.errors")

    # Order matters: RateLimitError and APIConnectionError are APIError subclasses
    if isinstance(exc, RATE_LIMIT_ERRORS):
        msg = f"Rate-limit exceeded: {exc}"
    elif isinstance(exc, CONN_ERRORS):
        msg = f"Connection error: unable to reach the LLM provider: {exc}"
    elif isinstance(exc, API_ERRORS):
        status = getattr(exc, "status_code", "unknown")
        msg = f"API error ({status}): {exc}"
    else:
        msg = f"{type(exc).__name__}: {exc}"
        log.exception(msg)
        return msg

    log.error(msg)
    return msg
