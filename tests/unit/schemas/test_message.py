"""
Tests for relay message schemas.

This module tests decoding of inbound frames and the wire form of
outbound messages.
"""

import pytest
from pydantic import TypeAdapter, ValidationError

from relay.exceptions import MessageDecodeError, UnknownMessageTypeError
from relay.schemas.message import (
    EMPTY_STATE,
    ChatMessage,
    CursorMoveMessage,
    RelayMessage,
    decode_message,
    encode_message,
)


class TestDecodeMessage:
    """Tests for decode_message."""

    def test_decode_chat(self):
        message = decode_message('{"type": "message", "text": "hello"}')

        assert message == ChatMessage(text="hello")

    def test_decode_cursor_move(self):
        message = decode_message('{"type": "user-place", "x": 10, "y": -4}')

        assert message == CursorMoveMessage(x=10, y=-4)

    def test_relay_message_union_dispatches_on_type(self):
        adapter = TypeAdapter(RelayMessage)

        assert isinstance(
            adapter.validate_python({"type": "user-place", "x": 1}),
            CursorMoveMessage,
        )
        assert isinstance(
            adapter.validate_python({"type": "message", "text": "hi"}),
            ChatMessage,
        )
        with pytest.raises(ValidationError):
            adapter.validate_python({"type": "draw"})

    def test_decode_returns_concrete_message_types(self):
        chat = decode_message('{"type": "message", "text": "hi"}')
        move = decode_message('{"type": "user-place", "y": 3}')

        assert type(chat) is ChatMessage
        assert type(move) is CursorMoveMessage

    def test_decode_bytes(self):
        message = decode_message(b'{"type": "message", "text": "bin"}')

        assert message == ChatMessage(text="bin")

    def test_missing_payload_fields_default_to_zero(self):
        assert decode_message('{"type": "message"}') == ChatMessage(text="")
        assert decode_message('{"type": "user-place"}') == CursorMoveMessage()

    def test_null_fields_are_treated_as_absent(self):
        message = decode_message('{"type": "user-place", "x": null, "y": 2}')

        assert message == CursorMoveMessage(y=2)

    def test_extra_fields_are_ignored(self):
        message = decode_message(
            '{"type": "message", "text": "hi", "x": 5, "author": "bob"}'
        )

        assert message == ChatMessage(text="hi")

    @pytest.mark.parametrize(
        "raw, expected_type",
        [
            ('{"type": "draw", "text": "x"}', "draw"),
            ('{"text": "no type"}', ""),
            ('{"type": null}', ""),
            ("{}", ""),
        ],
    )
    def test_unknown_type(self, raw, expected_type):
        with pytest.raises(UnknownMessageTypeError) as exc_info:
            decode_message(raw)

        assert exc_info.value.message_type == expected_type

    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            '{"type": "message", "text": ',
            "[1, 2, 3]",
            '"message"',
            '{"type": 5}',
            '{"type": "message", "text": 42}',
            '{"type": "user-place", "x": "10"}',
            '{"type": "user-place", "x": 1.5}',
            '{"type": "user-place", "x": true}',
        ],
    )
    def test_malformed_payload(self, raw):
        with pytest.raises(MessageDecodeError) as exc_info:
            decode_message(raw)

        assert not isinstance(exc_info.value, UnknownMessageTypeError)


class TestWireForm:
    """Tests for the encoded form of messages."""

    def test_chat(self):
        assert ChatMessage(text="hello").to_wire() == {
            "type": "message",
            "text": "hello",
        }

    def test_empty_fields_are_omitted(self):
        assert ChatMessage().to_wire() == {"type": "message"}
        assert CursorMoveMessage(x=0, y=7).to_wire() == {
            "type": "user-place",
            "y": 7,
        }

    def test_empty_state(self):
        assert EMPTY_STATE.to_wire() == {"type": ""}

    def test_encode_message(self):
        assert (
            encode_message(CursorMoveMessage(x=1, y=2))
            == '{"type": "user-place", "x": 1, "y": 2}'
        )

    def test_messages_are_immutable(self):
        message = ChatMessage(text="hello")

        with pytest.raises(ValidationError):
            message.text = "changed"
