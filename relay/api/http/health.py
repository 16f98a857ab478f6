"""Health check endpoint for monitoring service status."""

from fastapi import APIRouter, Request, status
from pydantic import BaseModel

router = APIRouter()


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    connections: int
    has_state: bool


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check endpoint",
    tags=["health"],
)
async def health_check(request: Request) -> HealthResponse:
    """
    Report relay status.

    Returns:
        HealthResponse: Number of connected clients and whether a chat
        message is held for replay.
    """
    hub = request.app.state.hub
    return HealthResponse(
        status="healthy",
        connections=len(hub.registry),
        has_state=not hub.last_state.is_empty,
    )
