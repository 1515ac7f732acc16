"""Pydantic models for the health endpoint."""

from pydantic import BaseModel


class CacheSnapshot(BaseModel):
    """Counters of the response cache; never includes cached payloads."""

    size: int
    capacity: int
    ttl_seconds: float
    policy: str
    hits: int
    misses: int
    expirations: int
    evictions: int


class HealthResponse(BaseModel):
    status: str
    service: str
    cache: CacheSnapshot
