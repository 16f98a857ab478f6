"""
Custom exception classes for the relay.

All of these are local to the connection that produced them: they are
handled inside that connection's lifecycle and never escalate further.
"""


class RelayError(Exception):
    """Base class for relay errors."""

    pass


class MessageDecodeError(RelayError):
    """
    Inbound message could not be decoded.

    Raised for invalid JSON, non-object payloads and payload fields of the
    wrong type. Terminates the connection that sent it.
    """

    pass


class UnknownMessageTypeError(MessageDecodeError):
    """
    Inbound message carries an unrecognized ``type``.

    The lifecycle logs and ignores it; the connection keeps receiving.
    """

    def __init__(self, message_type: str):
        super().__init__(f"Unknown message type: {message_type!r}")
        self.message_type = message_type


class SendError(RelayError):
    """
    Sending to a connection failed.

    Raised when the recipient is closed or the transport write fails.
    """

    pass
