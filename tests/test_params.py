"""Test suite for parameter normalization and the OpenAI request adapter."""

import pytest

from weather_agent.adapters.openai import OpenAIRequestAdapter
from weather_agent.params import normalize_params, with_tools
from weather_agent.types import Message, ToolCallRequest, ToolCallResult

WEATHER_TOOL = {"type": "function", "function": {"name": "GetWeather"}}


class TestParamsNormalization:
    """Test parameter normalization functionality."""

    def test_basic_params_normalization(self):
        """Test standard parameters are kept."""
        params = normalize_params({"temperature": 0.7, "max_tokens": 100, "top_p": 0.9})

        assert params["temperature"] == 0.7
        assert params["max_tokens"] == 100
        assert params["top_p"] == 0.9
        assert params["extra"] == {}

    def test_unknown_keys_move_to_extra(self):
        """Test unknown parameters move to extra."""
        params = normalize_params({"temperature": 0.2, "enable_search": True})

        assert params == {"temperature": 0.2, "extra": {"enable_search": True}}

    def test_existing_extra_dict_merge(self):
        """Test an existing extra dict is merged."""
        params = normalize_params(
            {"enable_search": False, "extra": {"enable_search": True, "custom": "value"}}
        )

        # Explicit extra wins over moved keys
        assert params["extra"] == {"enable_search": True, "custom": "value"}

    def test_none_and_stream_are_dropped(self):
        """Test None values and stream are dropped."""
        params = normalize_params({"temperature": None, "stream": True, "seed": 0})

        assert params == {"seed": 0, "extra": {}}

    def test_empty_normalization(self):
        """Test normalizing nothing gives an empty extra."""
        assert normalize_params(None) == {"extra": {}}
        assert normalize_params({}) == {"extra": {}}

    def test_type_checks(self):
        """Test non-dict params and extra are rejected."""
        with pytest.raises(TypeError):
            normalize_params([("temperature", 0.1)])
        with pytest.raises(TypeError):
            normalize_params({"extra": "nope"})

    def test_with_tools_defaults_to_auto(self):
        """Test adding tools sets tool_choice to auto."""
        params = with_tools({"temperature": 0.1}, [WEATHER_TOOL])

        assert params["tools"] == [WEATHER_TOOL]
        assert params["tool_choice"] == "auto"

    def test_with_tools_keeps_explicit_choice(self):
        """Test an explicit tool_choice is kept."""
        params = with_tools({"tool_choice": "required"}, [WEATHER_TOOL])

        assert params["tool_choice"] == "required"

    def test_without_tools_drops_tool_keys(self):
        """Test no tools removes tools and tool_choice."""
        params = with_tools({"tools": [WEATHER_TOOL], "tool_choice": "auto"}, None)

        assert "tools" not in params
        assert "tool_choice" not in params


class TestOpenAIRequestAdapter:
    """Test OpenAI request adapter functionality."""

    @pytest.fixture
    def adapter(self):
        return OpenAIRequestAdapter()

    def test_to_provider_basic_functionality(self, adapter):
        """Test basic message conversion."""
        messages = [{"role": "user", "content": "Hello"}]
        result = adapter.to_provider(messages, normalize_params({"temperature": 0.7}))

        assert result["messages"] == [{"role": "user", "content": "Hello"}]
        assert result["temperature"] == 0.7
        assert "extra" not in result
        assert "extra_body" not in result

    def test_extras_become_extra_body(self, adapter):
        """Test extras are sent as extra_body."""
        result = adapter.to_provider([], normalize_params({"enable_search": True}))

        assert result["extra_body"] == {"enable_search": True}

    def test_to_provider_accepts_message_objects(self, adapter):
        """Test Message objects convert to the wire format."""
        call = ToolCallRequest(id="call_1", name="GetWeather", arguments='{"latitude": 1}')
        messages = [
            Message.system("You are a weather expert"),
            Message.user("Weather?"),
            Message.assistant("", [call]),
            Message.tool(ToolCallResult(id="call_1", name="GetWeather", content="sunny")),
        ]

        result = adapter.to_provider(messages, with_tools(None, [WEATHER_TOOL]))
        sent = result["messages"]

        assert [m["role"] for m in sent] == ["system", "user", "assistant", "tool"]
        assert sent[2]["tool_calls"] == [
            {
                "id": "call_1",
                "type": "function",
                "function": {"name": "GetWeather", "arguments": '{"latitude": 1}'},
            }
        ]
        assert sent[3]["tool_call_id"] == "call_1"
        assert sent[3]["name"] == "GetWeather"
        assert result["tools"] == [WEATHER_TOOL]
        assert result["tool_choice"] == "auto"

    def test_tool_calls_without_content_send_null(self, adapter):
        """Test assistant tool calls without content send null content."""
        messages = [
            {
                "role": "assistant",
                "tool_calls": [
                    {"id": "c", "type": "function", "function": {"name": "f", "arguments": "{}"}}
                ],
            }
        ]

        result = adapter.to_provider(messages, normalize_params(None))

        assert result["messages"][0]["content"] is None

    def test_missing_content_becomes_empty_string(self, adapter):
        """Test a message without content sends an empty string."""
        result = adapter.to_provider([{"role": "user"}], normalize_params(None))

        assert result["messages"][0]["content"] == ""
