"""Response schema for GET /health."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness payload; database is reported but never turns the status red."""

    status: Literal["ok"] = Field(default="ok", description="Always 'ok' while the process serves requests")
    timestamp: datetime = Field(description="Server time (UTC) when the check ran")
    environment: str = Field(description="APP_ENV of the running process (dev or prod)")
    database: Literal["connected", "disconnected"] | None = Field(
        default=None,
        description="Result of a SELECT 1 against the configured database",
    )
