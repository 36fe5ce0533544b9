"""cinegate API layer: routes, schemas and middleware."""

from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from src.api.routes import router, system_router
from src.api.schemas import (
    ErrorResponse,
    HealthResponse,
    ProviderInfo,
    ProviderIntroResponse,
    ProvidersResponse,
)

__all__ = [
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "configure_cors",
    "router",
    "system_router",
    "ErrorResponse",
    "HealthResponse",
    "ProviderInfo",
    "ProviderIntroResponse",
    "ProvidersResponse",
]
