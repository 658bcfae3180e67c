"""
Health check router.

Provides a simple health endpoint for liveness/readiness probes.
Reports the application version and the active delivery adapter.
"""

from fastapi import APIRouter, Request

from exception_notifier.core.config import settings
from exception_notifier.interfaces.http.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns application health status, version and delivery adapter.",
)
def health_check(request: Request) -> HealthResponse:
    """Return current application health status."""
    delivery = getattr(request.app.state, "notice_delivery", None)
    return HealthResponse(
        status="ok",
        version=settings.version,
        notices_delivered_by=type(delivery).__name__ if delivery is not None else "none",
    )
