"""
Common Pydantic schemas shared by endpoints.
"""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
