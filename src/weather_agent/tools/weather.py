"""
GetWeather tool backed by the Open-Meteo forecast API.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Final, Optional

import httpx

from weather_agent.errors import WeatherAPIError
from weather_agent.settings import DEFAULT_WEATHER_URL
from weather_agent.tools.registry import Tool
from weather_agent.types import ToolDefinition

__all__ = [
    "WEATHER_TOOL_DEFINITION",
    "WeatherParams",
    "WeatherReport",
    "OpenMeteoClient",
    "format_weather",
    "weather_tool",
]

logger = logging.getLogger(__name__)

DEFAULT_CURRENT_FIELDS: Final = "temperature_2m,relative_humidity_2m,weather_code,wind_speed_10m"
DEFAULT_TIMEZONE: Final = "auto"
HOURLY_LIMIT: Final = 24

WEATHER_TOOL_DEFINITION: Final = ToolDefinition(
    name="GetWeather",
    description=(
        "Use this tool to get current weather and forecast information for a specific location.\n"
        "Example:\n"
        "    \"What's the weather in Shenzhen?\"\n"
        "Then Action Input is: {\"latitude\": 22.547, \"longitude\": 114.058}\n"
        "\n"
        "You can also request specific weather parameters:\n"
        "{\"latitude\": 22.547, \"longitude\": 114.058, "
        "\"current\": [\"temperature_2m\", \"weather_code\"], "
        "\"daily\": [\"temperature_2m_max\", \"temperature_2m_min\"]}"
    ),
    parameters={
        "type": "object",
        "properties": {
            "latitude": {
                "type": "number",
                "description": "Latitude coordinate of the location",
            },
            "longitude": {
                "type": "number",
                "description": "Longitude coordinate of the location",
            },
            "current": {
                "type": "array",
                "items": {"type": "string"},
                "description": (
                    "Current weather parameters to include (e.g., temperature_2m, "
                    "relative_humidity_2m, wind_speed_10m, weather_code)"
                ),
            },
            "hourly": {
                "type": "array",
                "items": {"type": "string"},
                "description": (
                    "Hourly forecast parameters to include (e.g., temperature_2m, "
                    "relative_humidity_2m, wind_speed_10m, weather_code)"
                ),
            },
            "daily": {
                "type": "array",
                "items": {"type": "string"},
                "description": (
                    "Daily forecast parameters to include (e.g., temperature_2m_max, "
                    "temperature_2m_min, precipitation_sum)"
                ),
            },
            "timezone": {
                "type": "string",
                "description": (
                    "Timezone for the data (e.g., 'GMT', 'America/New_York', "
                    "or 'auto' for automatic detection)"
                ),
            },
        },
        "required": ["latitude", "longitude"],
    },
)

# WMO weather interpretation codes
WEATHER_CODES: Final[dict[int, str]] = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    71: "Slight snow fall",
    73: "Moderate snow fall",
    75: "Heavy snow fall",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}


def _number(payload: dict[str, Any], key: str) -> float:
    if key not in payload:
        raise ValueError(f"missing required field {key!r}")
    value = payload[key]
    # bool is an int subclass but never a coordinate
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{key!r} must be a number, got {type(value).__name__}")
    return float(value)


def _string_list(payload: dict[str, Any], key: str) -> list[str]:
    value = payload.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise TypeError(f"{key!r} must be a list of strings")
    return list(value)


@dataclass(slots=True)
class WeatherParams:
    """Arguments accepted by GetWeather."""

    latitude: float
    longitude: float
    current: list[str] = field(default_factory=list)
    hourly: list[str] = field(default_factory=list)
    daily: list[str] = field(default_factory=list)
    timezone: str = ""

    @classmethod
    def from_dict(cls, payload: Any) -> "WeatherParams":
        if not isinstance(payload, dict):
            raise TypeError(f"arguments must be a JSON object, got {type(payload).__name__}")

        timezone = payload.get("timezone") or ""
        if not isinstance(timezone, str):
            raise TypeError("'timezone' must be a string")

        return cls(
            latitude=_number(payload, "latitude"),
            longitude=_number(payload, "longitude"),
            current=_string_list(payload, "current"),
            hourly=_string_list(payload, "hourly"),
            daily=_string_list(payload, "daily"),
            timezone=timezone,
        )

    @classmethod
    def from_arguments(cls, raw: str) -> "WeatherParams":
        """Decode the JSON argument text of a tool call."""
        return cls.from_dict(json.loads(raw))

    def to_arguments(self) -> str:
        """JSON argument text, omitting empty optional fields."""
        payload: dict[str, Any] = {"latitude": self.latitude, "longitude": self.longitude}
        for key in ("current", "hourly", "daily", "timezone"):
            value = getattr(self, key)
            if value:
                payload[key] = value
        return json.dumps(payload)

    def query_params(self) -> dict[str, str]:
        """Query string parameters for the forecast endpoint."""
        query = {
            "latitude": f"{self.latitude:.6f}",
            "longitude": f"{self.longitude:.6f}",
            "current": ",".join(self.current) if self.current else DEFAULT_CURRENT_FIELDS,
        }
        if self.hourly:
            query["hourly"] = ",".join(self.hourly)
        if self.daily:
            query["daily"] = ",".join(self.daily)
        query["timezone"] = self.timezone or DEFAULT_TIMEZONE
        return query


@dataclass(slots=True)
class CurrentWeather:
    time: str = ""
    temperature_2m: float = 0.0
    relative_humidity_2m: float = 0.0
    wind_speed_10m: float = 0.0
    weather_code: int = 0


@dataclass(slots=True)
class HourlyForecast:
    time: list[str] = field(default_factory=list)
    temperature_2m: list[float] = field(default_factory=list)
    relative_humidity_2m: list[float] = field(default_factory=list)
    wind_speed_10m: list[float] = field(default_factory=list)
    weather_code: list[int] = field(default_factory=list)


@dataclass(slots=True)
class DailyForecast:
    time: list[str] = field(default_factory=list)
    temperature_2m_max: list[float] = field(default_factory=list)
    temperature_2m_min: list[float] = field(default_factory=list)
    precipitation_sum: list[float] = field(default_factory=list)


# Zero value for null entries inside forecast arrays, keyed by field annotation
_ZERO_VALUES: Final[dict[str, Any]] = {"list[float]": 0.0, "list[int]": 0, "list[str]": ""}


def _section(cls: type, data: Any) -> Any:
    """Build a section dataclass from the known keys of *data*.

    Null fields fall back to their defaults; null array entries become the
    element type's zero value.
    """
    if not isinstance(data, dict):
        return cls()
    known = cls.__dataclass_fields__
    values: dict[str, Any] = {}
    for key, value in data.items():
        if key not in known or value is None:
            continue
        if isinstance(value, list):
            zero = _ZERO_VALUES.get(str(known[key].type), 0)
            value = [zero if item is None else item for item in value]
        values[key] = value
    return cls(**values)


@dataclass(slots=True)
class WeatherReport:
    """Decoded Open-Meteo forecast response."""

    latitude: float = 0.0
    longitude: float = 0.0
    timezone: str = ""
    current: CurrentWeather = field(default_factory=CurrentWeather)
    hourly: Optional[HourlyForecast] = None
    daily: Optional[DailyForecast] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WeatherReport":
        return cls(
            latitude=data.get("latitude") or 0.0,
            longitude=data.get("longitude") or 0.0,
            timezone=data.get("timezone") or "",
            current=_section(CurrentWeather, data.get("current")),
            hourly=_section(HourlyForecast, data["hourly"]) if data.get("hourly") else None,
            daily=_section(DailyForecast, data["daily"]) if data.get("daily") else None,
        )


def format_weather(report: WeatherReport) -> str:
    """Render a report as the plain-text summary handed back to the model."""
    current = report.current
    lines = [
        "Current Weather:",
        f"Time: {current.time}",
        f"Temperature: {current.temperature_2m:.1f}°C",
    ]
    if current.relative_humidity_2m:
        lines.append(f"Humidity: {current.relative_humidity_2m:.1f}%")
    if current.wind_speed_10m:
        lines.append(f"Wind Speed: {current.wind_speed_10m:.1f} km/h")
    if current.weather_code in WEATHER_CODES:
        lines.append(f"Conditions: {WEATHER_CODES[current.weather_code]}")

    hourly = report.hourly
    if hourly is not None and hourly.time:
        lines.extend(["", f"Hourly Forecast (next {HOURLY_LIMIT} hours):"])
        for i, time in enumerate(hourly.time[:HOURLY_LIMIT]):
            lines.append(f"Time: {time}")
            if i < len(hourly.temperature_2m):
                lines.append(f"  Temperature: {hourly.temperature_2m[i]:.1f}°C")
            if i < len(hourly.relative_humidity_2m):
                lines.append(f"  Humidity: {hourly.relative_humidity_2m[i]:.1f}%")
            if i < len(hourly.wind_speed_10m):
                lines.append(f"  Wind Speed: {hourly.wind_speed_10m[i]:.1f} km/h")
            if i < len(hourly.weather_code) and hourly.weather_code[i] in WEATHER_CODES:
                lines.append(f"  Conditions: {WEATHER_CODES[hourly.weather_code[i]]}")
            lines.append("")

    daily = report.daily
    if daily is not None and daily.time:
        lines.extend(["", "Daily Forecast:"])
        for i, date in enumerate(daily.time):
            lines.append(f"Date: {date}")
            if i < len(daily.temperature_2m_max):
                lines.append(f"  Max Temperature: {daily.temperature_2m_max[i]:.1f}°C")
            if i < len(daily.temperature_2m_min):
                lines.append(f"  Min Temperature: {daily.temperature_2m_min[i]:.1f}°C")
            if i < len(daily.precipitation_sum):
                lines.append(f"  Precipitation: {daily.precipitation_sum[i]:.1f} mm")
            lines.append("")

    return "\n".join(lines) + "\n"


class OpenMeteoClient:
    """
    Thin async client for the Open-Meteo forecast endpoint.

    Pass ``http_client`` to share a connection pool or to inject a transport
    in tests; otherwise a client is created per request.
    """

    def __init__(
        self,
        url: str = DEFAULT_WEATHER_URL,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._http_client = http_client

    async def fetch(self, params: WeatherParams) -> WeatherReport:
        """
        Fetch and decode the forecast for *params*.

        Raises:
            WeatherAPIError: on transport errors, non-200 status or a body
                             that is not the expected JSON.
        """
        query = params.query_params()
        logger.debug("GET %s %s", self.url, query)

        try:
            if self._http_client is not None:
                response = await self._http_client.get(self.url, params=query, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(self.url, params=query)
        except httpx.HTTPError as exc:
            raise WeatherAPIError(f"error making request to Open-Meteo API: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            status = f"{response.status_code} {response.reason_phrase}".strip()
            raise WeatherAPIError(
                f"API error: {status} - {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise WeatherAPIError(f"error parsing JSON response: {exc}") from exc
        if not isinstance(data, dict):
            raise WeatherAPIError("error parsing JSON response: expected an object")

        try:
            return WeatherReport.from_dict(data)
        except TypeError as exc:
            raise WeatherAPIError(f"error parsing JSON response: {exc}") from exc

    async def get_weather(self, params: WeatherParams) -> str:
        return format_weather(await self.fetch(params))


def weather_tool(client: OpenMeteoClient | None = None) -> Tool[WeatherParams]:
    """The GetWeather tool bound to *client* (a default Open-Meteo client if None)."""
    client = client or OpenMeteoClient()
    return Tool(
        definition=WEATHER_TOOL_DEFINITION,
        decode=WeatherParams.from_dict,
        handler=client.get_weather,
    )
