from fastapi import APIRouter
from starlette.websockets import WebSocket

from relay.api.ws.websocket import RelayWebSocketEndpoint
from relay.logging import logger
from relay.schemas.message import ChatMessage, CursorMoveMessage, RelayMessage
from relay.settings import app_settings

router = APIRouter()


@router.websocket_route(app_settings.WS_PATH)
class Relay(RelayWebSocketEndpoint):
    """
    Relays every message a client sends to the other connected clients.

    Chat messages also become the hub's last broadcast state, which is
    replayed to clients that join later. Cursor moves are only relayed.
    """

    async def on_message(
        self, websocket: WebSocket, message: RelayMessage
    ) -> None:
        if isinstance(message, ChatMessage):
            logger.debug(f"Received message: {message.text}")
            self.hub.last_state.set(message)
        elif isinstance(message, CursorMoveMessage):
            logger.debug(f"Client moved cursor to ({message.x}, {message.y})")

        exclude = None if app_settings.ECHO_TO_SENDER else websocket
        await self.hub.broadcaster.broadcast(message, exclude=exclude)
