"""Tests for the conversation store."""

import pytest

from weather_agent.conversation import Conversation
from weather_agent.errors import ConversationError
from weather_agent.types import Message, Role, ToolCallRequest, ToolCallResult


def _call(id_: str = "call_1") -> ToolCallRequest:
    return ToolCallRequest(id=id_, name="GetWeather", arguments="{}")


class TestConversationStore:
    def test_append_preserves_order(self):
        """Test messages come back in append order."""
        conv = Conversation()
        conv.append_system("be brief")
        conv.append_user("hello")
        conv.append_assistant("hi")

        roles = [m.role for m in conv.snapshot()]
        assert roles == [Role.SYSTEM, Role.USER, Role.ASSISTANT]

    @pytest.mark.parametrize("count", [0, 1, 7, 50])
    def test_snapshot_length_matches_appends(self, count):
        """Test snapshot length equals the number of appends."""
        conv = Conversation()
        for i in range(count):
            conv.append_user(f"message {i}")

        assert len(conv.snapshot()) == count
        assert len(conv) == count

    def test_snapshot_is_independent_copy(self):
        """Test mutating a snapshot leaves the history untouched."""
        conv = Conversation()
        conv.append_user("original")
        conv.append_assistant("", [_call()])

        snap = conv.snapshot()
        snap[0].content = "tampered"
        snap[1].tool_calls.append(_call("call_2"))
        snap.append(Message.user("extra"))

        fresh = conv.snapshot()
        assert len(fresh) == 2
        assert fresh[0].content == "original"
        assert [tc.id for tc in fresh[1].tool_calls] == ["call_1"]

    def test_append_copies_the_message(self):
        """Test the store keeps its own copy of appended messages."""
        conv = Conversation()
        msg = Message.user("before")
        conv.append(msg)
        msg.content = "after"

        assert conv.snapshot()[0].content == "before"

    def test_iteration_does_not_expose_history(self):
        """Test iterating yields copies of stored messages."""
        conv = Conversation([Message.user("a")])
        for message in conv:
            message.content = "changed"

        assert conv.last().content == "a"

    def test_clear_resets(self):
        """Test clear empties the history."""
        conv = Conversation()
        conv.append_user("a")
        conv.append_user("b")
        conv.clear()

        assert len(conv) == 0
        assert conv.snapshot() == []
        assert conv.last() is None

    def test_no_deduplication(self):
        """Test identical messages are all kept."""
        conv = Conversation()
        conv.append_user("same")
        conv.append_user("same")

        assert len(conv) == 2

    def test_tool_result_message_shape(self):
        """Test tool results are stored with call id and tool name."""
        conv = Conversation()
        conv.append_assistant("", [_call()])
        conv.append_tool_result(ToolCallResult(id="call_1", name="GetWeather", content="sunny"))

        tool_msg = conv.as_dicts()[-1]
        assert tool_msg == {
            "role": "tool",
            "content": "sunny",
            "tool_call_id": "call_1",
            "name": "GetWeather",
        }

    def test_describe_lists_role_and_length(self):
        """Test the debug description lists each message's role and length."""
        conv = Conversation([Message.user("hello")])

        assert conv.describe() == ["Message 0: Role=user, Content length=5"]


class TestPairingInvariant:
    def test_valid_history_passes(self):
        """Test a correctly paired history validates."""
        conv = Conversation()
        conv.append_user("weather?")
        conv.append_assistant("", [_call("a")])
        conv.append_tool_result(ToolCallResult(id="a", name="GetWeather", content="x"))
        conv.append_assistant("", [_call("b")])
        conv.append_tool_result(ToolCallResult(id="b", name="GetWeather", content="y"))

        conv.validate()

    def test_tool_message_without_assistant_fails(self):
        """Test a tool message without a preceding assistant call is invalid."""
        conv = Conversation()
        conv.append_user("weather?")
        conv.append_tool_result(ToolCallResult(id="a", name="GetWeather", content="x"))

        with pytest.raises(ConversationError, match="#1"):
            conv.validate()

    def test_tool_message_with_foreign_id_fails(self):
        """Test a tool message answering an unknown call id is invalid."""
        conv = Conversation()
        conv.append_assistant("", [_call("a")])
        conv.append_tool_result(ToolCallResult(id="zzz", name="GetWeather", content="x"))

        with pytest.raises(ConversationError, match="zzz"):
            conv.validate()

    def test_id_from_older_assistant_turn_fails(self):
        """Test a tool message may only answer the nearest assistant turn."""
        conv = Conversation()
        conv.append_assistant("", [_call("a")])
        conv.append_tool_result(ToolCallResult(id="a", name="GetWeather", content="x"))
        conv.append_assistant("", [_call("b")])
        conv.append_tool_result(ToolCallResult(id="a", name="GetWeather", content="x"))

        with pytest.raises(ConversationError):
            conv.validate()
