"""
LLM gateway: one ``complete()`` call per model turn.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Self, Sequence

from openai import AsyncOpenAI
from openai.types.chat import ChatCompletion

from weather_agent.adapters import OpenAIRequestAdapter
from weather_agent.errors import classify_error
from weather_agent.params import with_tools
from weather_agent.response import ChatResponse
from weather_agent.settings import Settings
from weather_agent.types import ChatMessage, Message

__all__ = ["OpenAILLM", "create_llm"]


class OpenAILLM:
    """
    Client for an OpenAI-compatible chat-completions endpoint (async-only).

    Use ``OpenAILLM.from_client`` when you already have an ``AsyncOpenAI`` instance.
    """

    def __init__(
        self,
        model: str,
        *,
        api_key: str,
        base_url: Optional[str] = None,
        timeout: float = 60.0,
        max_retries: int = 2,
        logger: Optional[logging.Logger] = None,
        name: Optional[str] = None,
    ) -> None:
        self.model = model
        self.logger = logger or logging.getLogger(__name__)
        self.name = name or self.__class__.__name__
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
        )
        self._adapter = OpenAIRequestAdapter()

    @classmethod
    def from_client(
        cls,
        model: str,
        client: AsyncOpenAI,
        *,
        logger: Optional[logging.Logger] = None,
        name: Optional[str] = None,
    ) -> Self:
        """
        Build an ``OpenAILLM`` around an already-configured ``AsyncOpenAI`` client.
        """
        if not isinstance(client, AsyncOpenAI):
            raise TypeError(
                f"OpenAILLM.from_client expects AsyncOpenAI; got {type(client).__name__}"
            )

        self = cls.__new__(cls)  # bypass __init__
        self.model = model
        self.logger = logger or logging.getLogger(__name__)
        self.name = name or cls.__name__
        self._client = client
        self._adapter = OpenAIRequestAdapter()
        return self

    @property
    def adapter(self) -> OpenAIRequestAdapter:
        return self._adapter

    async def complete(
        self,
        messages: Sequence[Message | ChatMessage],
        tools: Sequence[dict[str, Any]] | None = None,
        *,
        params: dict[str, Any] | None = None,
    ) -> ChatResponse:
        """
        Send the full history (plus tool definitions) and return the model's
        next message.

        Failures never come back as an empty success: the returned
        ``ChatResponse`` has ``error`` set and ``raise_for_error()`` raises
        ``GatewayError``.
        """
        request = self._adapter.to_provider(messages, with_tools(params, tools))
        self._log(
            f"Sending {len(request['messages'])} messages to model {self.model} "
            f"(tools: {len(tools or ())})",
            logging.DEBUG,
        )

        try:
            raw: ChatCompletion = await self._client.chat.completions.create(
                model=self.model, **request
            )
        except Exception as exc:
            return self._wrap_error(exc)

        response = self._adapter.from_provider(raw)
        if response.is_error:
            self._log(response.error or "", logging.ERROR)
        return response

    def _wrap_error(self, exc: Exception) -> ChatResponse:
        """Wrap exception into an error response."""
        msg = classify_error(exc, self.logger)
        return ChatResponse.failure(msg, exc)

    def _log(self, message: str, level: int = logging.INFO) -> None:
        self.logger.log(level, f"[{self.name}] {message}")

    # --- lifecycle ---------------------------------------------------------
    async def aclose(self) -> None:
        """Close the underlying HTTP client. Safe to call multiple times."""
        await self._client.close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


def create_llm(
    settings: Settings,
    *,
    client: AsyncOpenAI | None = None,
    logger: logging.Logger | None = None,
    **provider_kwargs: Any,
) -> OpenAILLM:
    """
    Factory for the gateway described by *settings*.

    Args:
        settings: Loaded configuration (API key, base URL, model, timeout).
        client: Optional pre-configured ``AsyncOpenAI`` instance to use verbatim.
        logger: Optional custom logger.
        **provider_kwargs: Any extra args to pass through (max_retries, name).
    """
    if client is not None:
        return OpenAILLM.from_client(settings.model, client, logger=logger, **provider_kwargs)

    return OpenAILLM(
        settings.model,
        api_key=settings.api_key,
        base_url=settings.base_url,
        timeout=settings.timeout,
        logger=logger,
        **provider_kwargs,
    )
