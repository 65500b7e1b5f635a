"""Pydantic response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for response serialization
and automatic OpenAPI documentation. Slack's own webhook payloads are
handled by bolt and never modeled here.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response body."""

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Liveness check response.

    WHY: Load balancers need a cheap endpoint that answers as long as the
    process is up, without touching the configuration store.
    """

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    message: str = Field(
        description="Friendly status line.",
        json_schema_extra={"example": "Snags are cooking 🌭"},
    )
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})


class ReadyResponse(BaseModel):
    """Readiness check response.

    RULES:
    - status is "ready" when the store answers, "unavailable" otherwise
    - store names the active backend ("memory" or "redis")
    """

    status: str = Field(description="Readiness status.", json_schema_extra={"example": "ready"})
    store: str = Field(description="Configuration store backend.", json_schema_extra={"example": "redis"})


class MessageResponse(BaseModel):
    """Plain message response."""

    message: str = Field(
        description="Greeting text.",
        json_schema_extra={"example": "Hello, world! SnagBot is running."},
    )
