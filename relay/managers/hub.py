import asyncio

from relay.constants import WS_CLOSE_TIMEOUT_SECONDS
from relay.logging import logger
from relay.managers.broadcaster import Broadcaster, close_quietly
from relay.managers.connection_registry import ConnectionRegistry
from relay.managers.last_state import LastStateHolder


class RelayHub:
    """
    Shared state of one relay: the connection registry, the last broadcast
    state and the broadcaster delivering to the registry.

    One hub is created per application at startup; independent hubs never
    share connections or state.
    """

    def __init__(self) -> None:
        self.registry = ConnectionRegistry()
        self.last_state = LastStateHolder()
        self.broadcaster = Broadcaster(self.registry)

    async def close_all(self, code: int = 1001) -> None:
        """
        Closes every registered connection, waiting at most
        WS_CLOSE_TIMEOUT_SECONDS for the close handshakes.
        """
        connections = await self.registry.snapshot()
        if not connections:
            return

        logger.info(f"Closing {len(connections)} websocket connections")
        try:
            await asyncio.wait_for(
                asyncio.gather(
                    *[close_quietly(conn, code) for conn in connections],
                    return_exceptions=True,
                ),
                timeout=WS_CLOSE_TIMEOUT_SECONDS,
            )
        except asyncio.TimeoutError:
            logger.warning("Timed out closing websocket connections")

        for conn in connections:
            await self.registry.remove(conn)
