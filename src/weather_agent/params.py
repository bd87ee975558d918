"""
Parameter normalization for chat-completion requests.

Contract
- Standard keys are forwarded as top-level request fields:
  temperature: float
  max_tokens: int
  top_p: float
  tools: list
  tool_choice: str | dict
  stop: str | list[str]
  seed: int
  user: str

- Anything else is provider specific and goes under `extra`; the OpenAI
  adapter sends it as `extra_body`.

Streaming is not supported: a `stream` key is dropped.
"""

from __future__ import annotations

from typing import Any, Sequence

STANDARD_KEYS = {
    "temperature",
    "max_tokens",
    "top_p",
    "tools",
    "tool_choice",
    "stop",
    "frequency_penalty",
    "presence_penalty",
    "parallel_tool_calls",
    "seed",
    "user",
}

# The model decides between answering and calling a tool
DEFAULT_TOOL_CHOICE = "auto"


def normalize_params(params: dict | None) -> dict:
    """
    Normalize a user-supplied params dict to a single internal shape.

    Returns a dict with only standard keys plus an `extra` dict.
    Rules:
      - Keys not in STANDARD_KEYS are moved into extra
      - If the caller already passed an `extra` dict it is merged last
      - None values are dropped

    Example
    -------
    >>> normalize_params({"temperature": 0.2, "enable_search": True})
    {'temperature': 0.2, 'extra': {'enable_search': True}}
    """
    if params is None:
        return {"extra": {}}
    if not isinstance(params, dict):
        raise TypeError(f"params must be a dict, got {type(params).__name__}")

    user_extra = params.get("extra") or {}
    if not isinstance(user_extra, dict):
        raise TypeError("params['extra'] must be a dict")

    std: dict = {}
    extra: dict = {}
    for key, value in params.items():
        if key in ("extra", "stream") or value is None:
            continue
        if key in STANDARD_KEYS:
            std[key] = value
        else:
            extra[key] = value

    std["extra"] = {**extra, **user_extra}
    return std


def with_tools(params: dict | None, tools: Sequence[dict[str, Any]] | None) -> dict:
    """
    Normalize *params* and attach tool definitions.

    When tools are present and the caller did not pick a tool_choice, the
    model is left to decide ("auto").
    """
    normalized = normalize_params(params)
    if tools:
        normalized["tools"] = list(tools)
        normalized.setdefault("tool_choice", DEFAULT_TOOL_CHOICE)
    else:
        normalized.pop("tools", None)
        normalized.pop("tool_choice", None)
    return normalized
