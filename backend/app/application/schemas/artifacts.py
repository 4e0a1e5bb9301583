"""Pydantic DTOs for the derived-artifact cache endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class ArtifactPutRequest(BaseModel):
    reference: str = Field(..., min_length=1, examples=["Romanos 12:1-2"])
    language: str = Field("Spanish", min_length=2, examples=["Spanish"])
    payload: dict[str, Any]


class ArtifactResponse(BaseModel):
    """Outcome of a cache read or write."""

    key: str
    hit: bool
    source: str | None = None
    payload: dict[str, Any] | None = None
    usage_count: int | None = None
    created_at: datetime | None = None
    last_used_at: datetime | None = None
    error: str | None = None
