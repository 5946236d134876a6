"""
Common schema types used across the API.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorResponse(BaseModel):
    """Standard error response. The offending email or id rides along as an extra field."""

    model_config = ConfigDict(extra="allow")

    detail: str
    code: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str
