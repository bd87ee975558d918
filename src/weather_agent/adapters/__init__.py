"""Pure transformation adapters for the provider wire format."""

from .openai import OpenAIRequestAdapter

__all__ = ["OpenAIRequestAdapter"]
