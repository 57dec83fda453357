"""
Response models for the controller HTTP API.
"""
from pydantic import BaseModel


class StatusResponse(BaseModel):
    """Model for the /status response."""
    endpoint: str
    port: int
    scalars: int
    namespaces: int
    uptime: float
