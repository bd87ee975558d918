"""
weather-agent - a function-calling loop over an OpenAI-compatible chat API.
"""

from .client import OpenAILLM, create_llm
from .conversation import Conversation
from .errors import (
    ConfigError,
    ConversationError,
    GatewayError,
    ToolArgumentsError,
    ToolError,
    ToolExecutionError,
    UnknownToolError,
    WeatherAgentError,
    WeatherAPIError,
)
from .loop import LoopContext, LoopResult, LoopState, StopReason, ToolCallingAgent
from .response import ChatResponse
from .settings import Settings, load_settings
from .tools import ToolRegistry, default_registry
from .types import Message, Role, ToolCallRequest, ToolCallResult, ToolDefinition

__version__ = "0.1.0"

__all__ = [
    "OpenAILLM",
    "create_llm",
    "Conversation",
    "ChatResponse",
    "Message",
    "Role",
    "ToolCallRequest",
    "ToolCallResult",
    "ToolDefinition",
    "ToolRegistry",
    "default_registry",
    "ToolCallingAgent",
    "LoopContext",
    "LoopResult",
    "LoopState",
    "StopReason",
    "Settings",
    "load_settings",
    "WeatherAgentError",
    "ConfigError",
    "GatewayError",
    "ToolError",
    "UnknownToolError",
    "ToolArgumentsError",
    "ToolExecutionError",
    "WeatherAPIError",
    "ConversationError",
]
