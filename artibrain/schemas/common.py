"""
Common schema types used across the API.
"""

from typing import Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""
    
    status: str = "ok"
    version: str
    database: str = "connected"


class UploadResponse(BaseModel):
    """Where an uploaded file is served from."""
    
    url: str


def require_text(value: Optional[str], label: str) -> Optional[str]:
    """Strip surrounding whitespace; a value that is left empty is an error."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError(f"{label} must not be blank")
    return value
