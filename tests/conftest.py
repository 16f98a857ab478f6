"""
Pytest configuration and fixtures for testing.

This module provides shared fixtures for relay hubs, mocked websockets and
in-memory relay clients.
"""

import asyncio
import os
import tempfile

import pytest
import pytest_asyncio

# Keep the JSON error log out of the working tree during tests
os.environ.setdefault(
    "LOG_FILE_PATH", os.path.join(tempfile.gettempdir(), "relay-tests.log")
)


@pytest.fixture
def hub():
    """
    Provides a fresh RelayHub.

    Returns:
        RelayHub: Hub with an empty registry and no last state
    """
    from relay.managers.hub import RelayHub

    return RelayHub()


@pytest.fixture
def mock_websocket():
    """
    Provides a mock WebSocket connection for testing.

    Returns:
        MagicMock: Mocked WebSocket instance
    """
    from tests.mocks.websocket_mocks import create_mock_websocket

    return create_mock_websocket()


@pytest_asyncio.fixture
async def relay_clients(hub):
    """
    Factory fixture connecting in-memory clients to the Relay endpoint.

    Each call runs a Relay endpoint for a new FakeClient and waits until the
    connection is registered. All connections still open at teardown are
    disconnected and their handlers awaited.

    Yields:
        Callable: async connect(replay=True) -> FakeClient
    """
    from relay.api.ws.consumers.relay import Relay
    from tests.mocks.websocket_mocks import FakeClient, make_scope, wait_until

    tasks: list[asyncio.Task] = []
    clients: list[FakeClient] = []

    async def connect(replay: bool = True) -> FakeClient:
        client = FakeClient(port=50000 + len(clients))
        endpoint = Relay(make_scope(hub, client.port), client.receive, client.send)
        tasks.append(asyncio.create_task(endpoint.dispatch()))
        clients.append(client)

        if replay:
            await wait_until(lambda: len(client.received) > 0)
        else:
            await wait_until(
                lambda: any(
                    ws.client.port == client.port
                    for ws in hub.registry._connections
                )
            )
        return client

    connect.tasks = tasks
    yield connect

    for client in clients:
        client.disconnect()
    await asyncio.wait_for(asyncio.gather(*tasks), timeout=2.0)
