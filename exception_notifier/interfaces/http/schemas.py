"""
Pydantic schemas for the notifier's HTTP responses.

Both the health endpoint and the JSON fallback error body are
described here. No business logic belongs here.
"""

from typing import Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    notices_delivered_by: str


class ErrorResponse(BaseModel):
    """JSON body returned for 404 and 500 fallback responses."""

    error: str
    detail: Optional[str] = None
