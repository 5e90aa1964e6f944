"""FastAPI application entrypoint."""

import logging

from asgi_correlation_id import CorrelationIdFilter, CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from secure import Secure

from reservation_admin.api import api_router
from reservation_admin.core.config import get_settings
from reservation_admin.security.logging_filters import install_sensitive_filter

settings = get_settings()

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s"


def _configure_logging() -> None:
    logging.basicConfig(level=settings.log_level.upper(), format=_LOG_FORMAT)
    for handler in logging.getLogger().handlers:
        if not any(isinstance(flt, CorrelationIdFilter) for flt in handler.filters):
            handler.addFilter(CorrelationIdFilter(uuid_length=32, default_value="-"))
    install_sensitive_filter("", "uvicorn", "uvicorn.access", "uvicorn.error")


_configure_logging()

_ALLOWED_ORIGINS = [origin for origin in settings.cors_allowlist if origin]

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_ALLOWED_ORIGINS,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "X-Request-ID"],
    expose_headers=["X-Request-ID", "Retry-After"],
)
app.add_middleware(CorrelationIdMiddleware, header_name="X-Request-ID")

_secure_headers = Secure.with_default_headers()


@app.middleware("http")
async def _apply_security_headers(request, call_next):
    response = await call_next(request)
    _secure_headers.set_headers(response)
    return response


app.include_router(api_router)


@app.get("/", include_in_schema=False)
async def root() -> dict[str, str]:
    """Return a simple welcome message."""
    return {"message": settings.app_name}
