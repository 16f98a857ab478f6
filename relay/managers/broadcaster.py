import asyncio
import time

from starlette.websockets import WebSocket, WebSocketDisconnect

from relay.exceptions import SendError
from relay.logging import logger
from relay.managers.connection_registry import ConnectionRegistry
from relay.schemas.message import BaseMessage, encode_message
from relay.utils.metrics import (
    ws_broadcast_duration_seconds,
    ws_messages_sent_total,
    ws_send_failures_total,
)


async def send_message(websocket: WebSocket, message: BaseMessage) -> None:
    """
    Serializes a message and writes it to one connection.

    Raises:
        SendError: The connection is closed or the write failed.
    """
    try:
        await websocket.send_text(encode_message(message))
    except (WebSocketDisconnect, ConnectionError, RuntimeError) as e:
        # WebSocketDisconnect: Client disconnected
        # ConnectionError: Network errors
        # RuntimeError: WebSocket in invalid state
        raise SendError(str(e) or type(e).__name__) from e
    except Exception as e:
        # Catch-all for unexpected transport errors
        raise SendError(f"Unexpected send error: {e!r}") from e


def client_address(websocket: WebSocket) -> str:
    """Returns the peer address of a connection as host:port."""
    client = websocket.client
    return f"{client.host}:{client.port}" if client else "unknown"


async def close_quietly(websocket: WebSocket, code: int = 1000) -> None:
    """Closes a connection, logging instead of raising on failure."""
    try:
        await websocket.close(code=code)
    except Exception as e:
        # Already closed or transport gone
        logger.debug(f"Ignoring error closing websocket {id(websocket)}: {e}")


class Broadcaster:
    """
    Delivers messages to the members of a connection registry.

    A send failure for one recipient closes that recipient and removes it
    from the registry; delivery to the other recipients is unaffected.
    """

    def __init__(self, registry: ConnectionRegistry) -> None:
        self.registry = registry

    async def send_to(self, websocket: WebSocket, message: BaseMessage) -> bool:
        """
        Sends a message to a single connection.

        On failure the connection is closed and removed from the registry.

        Args:
            websocket: The recipient connection.
            message: The message to deliver.

        Returns:
            True if the message was sent, False if the send failed.
        """
        try:
            await send_message(websocket, message)
        except SendError as e:
            # Log context belongs to the connection that triggered the send
            recipient = client_address(websocket)
            logger.warning(
                f"Failed to send to {recipient}: {e}",
                extra={"recipient": recipient},
            )
            ws_send_failures_total.inc()
            await close_quietly(websocket)
            await self.registry.remove(websocket)
            return False

        ws_messages_sent_total.inc()
        return True

    async def broadcast(
        self, message: BaseMessage, exclude: WebSocket | None = None
    ) -> int:
        """
        Broadcasts a message to every registered connection concurrently.

        The recipients are the registry members at the time of the call.
        Sends run in parallel via asyncio.gather, so one slow or failing
        recipient neither delays nor skips the others.

        Args:
            message: The message to deliver.
            exclude: Optional connection to leave out (the sender).

        Returns:
            Number of recipients the message was delivered to.
        """
        recipients = [
            connection
            for connection in await self.registry.snapshot()
            if connection is not exclude
        ]
        if not recipients:
            return 0

        start_time = time.perf_counter()
        results = await asyncio.gather(
            *[self.send_to(connection, message) for connection in recipients],
            return_exceptions=True,
        )
        ws_broadcast_duration_seconds.observe(time.perf_counter() - start_time)

        for result in results:
            if isinstance(result, BaseException):
                logger.error(f"Unexpected error during broadcast: {result!r}")

        delivered = sum(1 for result in results if result is True)
        logger.debug(
            f"Broadcast {message.type!r} delivered to {delivered}/{len(recipients)} connections"
        )
        return delivered
