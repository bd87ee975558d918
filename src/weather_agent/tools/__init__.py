"""Tools the model may call."""

from .registry import Tool, ToolRegistry
from .weather import (
    WEATHER_TOOL_DEFINITION,
    OpenMeteoClient,
    WeatherParams,
    format_weather,
    weather_tool,
)

__all__ = [
    "Tool",
    "ToolRegistry",
    "WEATHER_TOOL_DEFINITION",
    "OpenMeteoClient",
    "WeatherParams",
    "format_weather",
    "weather_tool",
    "default_registry",
]


def default_registry(client: OpenMeteoClient | None = None) -> ToolRegistry:
    """A registry holding only GetWeather."""
    return ToolRegistry([weather_tool(client)])
