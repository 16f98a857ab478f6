from fastapi import APIRouter

from relay.api.http.health import router as health_router
from relay.api.http.metrics import router as metrics_router
from relay.api.ws.consumers.relay import router as relay_router


def collect_subrouters() -> APIRouter:
    """
    Collects the HTTP and WebSocket routers of the relay.

    Returns:
        APIRouter: Router including every endpoint.
    """
    main_router = APIRouter()

    main_router.include_router(health_router)
    main_router.include_router(metrics_router)
    main_router.include_router(relay_router)

    return main_router
