import uuid
from typing import Any

from starlette import status
from starlette.endpoints import WebSocketEndpoint
from starlette.websockets import WebSocket, WebSocketState

from relay.constants import WS_DROPPED_CLOSE_CODE, WS_ORDERLY_CLOSE_CODES
from relay.exceptions import MessageDecodeError, UnknownMessageTypeError
from relay.logging import clear_log_context, logger, set_log_context
from relay.managers.broadcaster import client_address, close_quietly
from relay.managers.hub import RelayHub
from relay.schemas.message import EMPTY_STATE, RelayMessage, decode_message
from relay.settings import app_settings
from relay.utils.metrics import (
    ws_connections_active,
    ws_connections_total,
    ws_messages_received_total,
)


class RelayWebSocketEndpoint(WebSocketEndpoint):  # type: ignore[misc]
    """
    WebSocket endpoint bound to the application's RelayHub.

    Manages the connection lifecycle: the connection is registered and sent
    the last broadcast state, then every inbound frame is decoded and passed
    to on_message until the client goes away. Whatever ends the receive loop,
    the connection is removed from the registry and closed.
    """

    encoding = None  # Frames are decoded by decode_message

    @property
    def hub(self) -> RelayHub:
        return self.scope["app"].state.hub

    async def dispatch(self) -> None:
        """
        Runs the lifecycle of one connection.

        The receive loop ends when:
        - the client disconnects (normal or going-away close is logged as a
          disconnect, any other close code as an error),
        - a frame cannot be decoded (closed with 1003),
        - an unexpected error occurs (closed with 1011).

        Errors never propagate out of this method, so a failing connection
        cannot affect any other connection.
        """
        websocket = WebSocket(self.scope, receive=self.receive, send=self.send)
        close_code = status.WS_1000_NORMAL_CLOSURE

        try:
            await self.on_connect(websocket)
            if await self.replay_state(websocket):
                close_code = await self.receive_loop(websocket)
        except Exception:
            logger.exception("Unexpected error in websocket handler")
            close_code = status.WS_1011_INTERNAL_ERROR
        finally:
            await self.on_disconnect(websocket, close_code)

    async def on_connect(self, websocket: WebSocket) -> None:
        """Accepts the connection and registers it with the hub."""
        await websocket.accept()

        self.connection_id = uuid.uuid4().hex[:8]
        client = client_address(websocket)
        set_log_context(connection_id=self.connection_id, client=client)

        await self.hub.registry.add(websocket)
        ws_connections_total.labels(status="accepted").inc()
        ws_connections_active.inc()
        logger.info(f"Connected: {client}")

    async def replay_state(self, websocket: WebSocket) -> bool:
        """
        Sends the last broadcast state to a newly registered connection.

        Returns:
            False if the send failed and the connection was dropped.
        """
        state = self.hub.last_state.get()
        if state is EMPTY_STATE and not app_settings.REPLAY_EMPTY_STATE:
            return True

        if await self.hub.broadcaster.send_to(websocket, state):
            return True

        ws_connections_total.labels(status="replay_failed").inc()
        return False

    async def receive_loop(self, websocket: WebSocket) -> int:
        """
        Receives and dispatches frames until the connection ends.

        Returns:
            The close code to report for the connection.
        """
        while True:
            message = await websocket.receive()

            if self.released(websocket):
                logger.info("Connection was dropped after a failed send")
                return WS_DROPPED_CLOSE_CODE

            if message["type"] == "websocket.disconnect":
                close_code = int(
                    message.get("code") or status.WS_1000_NORMAL_CLOSURE
                )
                if close_code in WS_ORDERLY_CLOSE_CODES:
                    logger.info(f"Client disconnected with code {close_code}")
                else:
                    logger.error(
                        f"Error receiving message: connection closed with code {close_code}"
                    )
                return close_code

            try:
                data = self.decode_frame(message)
            except UnknownMessageTypeError as e:
                ws_messages_received_total.labels(type="unknown").inc()
                logger.warning(f"Unknown message type: {e.message_type!r}")
                continue
            except MessageDecodeError as e:
                ws_messages_received_total.labels(type="invalid").inc()
                logger.error(f"Error receiving message: {e}")
                return status.WS_1003_UNSUPPORTED_DATA

            ws_messages_received_total.labels(type=data.type).inc()
            await self.on_message(websocket, data)

    def released(self, websocket: WebSocket) -> bool:
        """
        True once the connection has been closed by the relay or removed
        from the registry, e.g. by the broadcaster after a failed send.
        Frames still arriving from such a connection are not relayed.
        """
        return (
            websocket.application_state == WebSocketState.DISCONNECTED
            or websocket not in self.hub.registry
        )

    def decode_frame(self, message: dict[str, Any]) -> RelayMessage:
        """Decodes a text or binary frame holding a JSON message."""
        if message.get("text") is not None:
            return decode_message(message["text"])
        return decode_message(message.get("bytes") or b"")

    async def on_message(
        self, websocket: WebSocket, message: RelayMessage
    ) -> None:
        """Handles one decoded message. Implemented by subclasses."""
        raise NotImplementedError()

    async def on_disconnect(self, websocket: WebSocket, close_code: int) -> None:
        """
        Removes the connection from the registry and closes it.

        Runs on every exit path of dispatch. Removing an already removed
        connection (for example one dropped after a failed send) is a no-op.
        """
        await self.hub.registry.remove(websocket)

        if (
            websocket.application_state != WebSocketState.DISCONNECTED
            and websocket.client_state != WebSocketState.DISCONNECTED
        ):
            await close_quietly(websocket, close_code)

        if hasattr(self, "connection_id"):
            ws_connections_active.dec()
            logger.debug(f"Connection closed with code {close_code}")

        clear_log_context()
