"""API Schemas - Pydantic models for response validation."""

from src.api.schemas.health import CacheSnapshot, HealthResponse

__all__ = ["CacheSnapshot", "HealthResponse"]
