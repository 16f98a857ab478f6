from relay.schemas.message import EMPTY_STATE, BaseMessage, ChatMessage


class LastStateHolder:
    """
    Holds the most recent chat message, replayed to newly joined clients.

    Concurrent chat messages race and the last write wins; readers see
    whatever value is current when they read.
    """

    def __init__(self) -> None:
        self._message: BaseMessage = EMPTY_STATE

    def get(self) -> BaseMessage:
        return self._message

    def set(self, message: ChatMessage) -> None:
        self._message = message

    @property
    def is_empty(self) -> bool:
        """True until the first chat message arrives."""
        return self._message is EMPTY_STATE
