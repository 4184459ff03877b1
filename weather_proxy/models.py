"""Response models for the fixed-shape endpoints."""

from typing import Any, Optional

from pydantic import BaseModel


class Endpoints(BaseModel):
    allCities: str
    cityByName: str
    health: str


class DiscoveryDocument(BaseModel):
    message: str
    endpoints: Endpoints


class HealthResponse(BaseModel):
    status: str = "OK"
    timestamp: str


class ErrorEnvelope(BaseModel):
    error: str
    message: Optional[Any] = None
    details: Optional[Any] = None

    def to_content(self) -> dict:
        # Only fields that were set; `details` may legitimately be null.
        return self.model_dump(exclude_unset=True)
