import json
from typing import Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
)
from typing_extensions import Annotated

from relay.constants import MSG_TYPE_CHAT, MSG_TYPE_CURSOR_MOVE
from relay.exceptions import MessageDecodeError, UnknownMessageTypeError


class BaseMessage(BaseModel):  # type: ignore[misc]
    """
    Immutable message relayed between clients.

    The wire form always carries ``type``; payload fields holding their
    zero value are omitted.
    """

    model_config = ConfigDict(frozen=True)

    type: str

    def to_wire(self) -> dict[str, Any]:
        payload = self.model_dump(exclude={"type"}, exclude_defaults=True)
        return {"type": self.type, **payload}


class ChatMessage(BaseMessage):
    type: Literal["message"] = MSG_TYPE_CHAT
    text: StrictStr = ""


class CursorMoveMessage(BaseMessage):
    type: Literal["user-place"] = MSG_TYPE_CURSOR_MOVE
    x: StrictInt = 0
    y: StrictInt = 0


class EmptyState(BaseMessage):
    """Last broadcast state before any chat message has arrived."""

    type: Literal[""] = ""


EMPTY_STATE = EmptyState()

RelayMessage = Annotated[
    Union[ChatMessage, CursorMoveMessage], Field(discriminator="type")
]

_relay_message_adapter: TypeAdapter[RelayMessage] = TypeAdapter(RelayMessage)

_RELAYED_TYPES = frozenset({MSG_TYPE_CHAT, MSG_TYPE_CURSOR_MOVE})


def decode_message(raw: str | bytes) -> RelayMessage:
    """
    Decode one inbound wire frame into a message.

    A missing or null ``type`` is treated as the empty type, and null
    payload fields as absent.

    Args:
        raw: JSON text of the frame.

    Returns:
        The decoded ChatMessage or CursorMoveMessage.

    Raises:
        UnknownMessageTypeError: The frame is well formed but its ``type``
            is not one the relay handles.
        MessageDecodeError: The frame is not a JSON object or a field has
            the wrong type.
    """
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise MessageDecodeError(f"Invalid JSON payload: {exc}") from exc

    if not isinstance(data, dict):
        raise MessageDecodeError(
            f"Expected a JSON object, got {type(data).__name__}"
        )

    data = {key: value for key, value in data.items() if value is not None}
    message_type = data.get("type", "")
    if not isinstance(message_type, str):
        raise MessageDecodeError(
            f"Message type must be a string, got {message_type!r}"
        )

    if message_type not in _RELAYED_TYPES:
        raise UnknownMessageTypeError(message_type)

    try:
        return _relay_message_adapter.validate_python(data)
    except ValidationError as exc:
        raise MessageDecodeError(
            f"Invalid {message_type!r} message: {exc.error_count()} error(s)"
        ) from exc


def encode_message(message: BaseMessage) -> str:
    """Encode a message as a JSON text frame."""
    return json.dumps(message.to_wire())
