# Uvicorn application factory <https://www.uvicorn.org/#application-factories>
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from relay.logging import logger
from relay.managers.hub import RelayHub
from relay.routing import collect_subrouters
from relay.settings import app_settings


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.

    On startup a fresh RelayHub (connection registry and last broadcast
    state) is attached to ``app.state``. On shutdown every connection still
    registered is closed with 1001 (going away).
    """
    app.state.hub = RelayHub()
    logger.info(
        f"Relay started, accepting websocket connections on {app_settings.WS_PATH}"
    )

    yield

    logger.info("Application shutdown initiated")
    await app.state.hub.close_all()
    logger.info("Application shutdown complete")


def application() -> FastAPI:
    """
    Initializes and configures the FastAPI application.

    Includes the WebSocket relay endpoint and the health and metrics HTTP
    endpoints, and adds `CORSMiddleware` with the origins from
    CORS_ALLOW_ORIGINS.
    """
    app = FastAPI(
        title="Broadcast relay",
        description="WebSocket broadcast relay",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.include_router(collect_subrouters())

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    return app


app = application()  # Need for fastapi cli
