import asyncio
from collections.abc import Hashable

from relay.logging import logger


class ConnectionRegistry:
    """
    Set of currently connected clients.

    Membership is by connection identity; iteration order is unspecified.
    Every mutation and every snapshot copy happens under one asyncio lock,
    and no I/O is performed while it is held, so a slow client never stalls
    connects or disconnects of unrelated clients.
    """

    def __init__(self) -> None:
        self._connections: set[Hashable] = set()
        self._lock = asyncio.Lock()

    async def add(self, connection: Hashable) -> None:
        """
        Registers a connection. Adding an already registered connection
        is a no-op.
        """
        async with self._lock:
            self._connections.add(connection)
        logger.debug(
            f"websocket object ({id(connection)}) added to active connections"
        )

    async def remove(self, connection: Hashable) -> bool:
        """
        Deregisters a connection if it is registered.

        Returns:
            True if the connection was a member, False if it was absent.
        """
        async with self._lock:
            if connection not in self._connections:
                return False
            self._connections.discard(connection)
        logger.debug(
            f"websocket object ({id(connection)}) removed from active connections"
        )
        return True

    async def snapshot(self) -> list[Hashable]:
        """
        Returns a copy of the current members.

        Callers iterate the copy, so connections added or removed while a
        broadcast is in flight never corrupt that broadcast's iteration.
        """
        async with self._lock:
            return list(self._connections)

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, connection: object) -> bool:
        return connection in self._connections
