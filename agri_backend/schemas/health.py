"""
Health check endpoint schemas.

The health endpoint is PUBLIC (no authentication required).
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response model for GET /health."""

    status: str = Field(
        default="ok",
        description="Health status of the API (always 'ok' if responding)",
        examples=["ok"]
    )
    service: str = Field(
        default="farm-finance-backend",
        description="Service identifier",
    )
