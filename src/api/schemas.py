"""Pydantic response schemas for the cinegate API.

Catalog routes return provider records as-is (opaque dicts), so only the
gateway's own endpoints (provider intro, health, provider listing, errors)
have schemas here.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ProviderIntroResponse(BaseModel):
    """Landing payload for ``GET /movies/{provider}/``."""

    intro: str
    routes: list[str] = Field(default_factory=list)
    documentation: str = ""


class ProviderInfo(BaseModel):
    """One configured provider in ``GET /providers``."""

    name: str
    display_name: str
    website: str = ""
    capabilities: list[str] = Field(default_factory=list)
    cache_enabled: bool = True


class ProvidersResponse(BaseModel):
    """Response for ``GET /providers``."""

    providers: list[ProviderInfo] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Response for ``GET /health``."""

    status: str = "healthy"
    version: str
    cache_backend: str = Field(description="'redis', 'memory' or 'none'")
    cache_reachable: bool = True
    providers: int = 0


class ErrorResponse(BaseModel):
    """Structured error body returned by the error-handling middleware."""

    error: str
    detail: str
