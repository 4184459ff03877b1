"""
CWA Weather Proxy - HTTP surface.

Forwards browser requests to the CWA open-data API with the server-held
API key and wraps the upstream JSON in a success envelope.

Endpoints:
- GET /                              - Discovery document
- GET /health                        - Liveness check
- GET /weather                       - 36h forecast, all counties/cities
- GET /weather/city/{location_name}  - 36h forecast, one county/city

Each route also answers HEAD and accepts a trailing slash. Anything else
answers 404 {"error": "route not found"}.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Optional

import httpx
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import Settings
from .errors import ConfigurationError, TransportError, UpstreamError
from .models import DiscoveryDocument, Endpoints, ErrorEnvelope, HealthResponse
from .upstream import CWAClient, build_http_client

logger = logging.getLogger("weather_proxy.server")

LOG_FORMAT = "[WeatherProxy] %(asctime)s - %(levelname)s - %(message)s"

# Envelope wording
CONFIG_ERROR = "server configuration error"
CONFIG_ERROR_MESSAGE = "credential not configured"
UPSTREAM_ERROR = "upstream API error"
UPSTREAM_ERROR_MESSAGE = "unable to retrieve weather data"
SERVER_ERROR = "server error"
TRANSPORT_ERROR_MESSAGE = "unable to retrieve weather data, please try again later"
ROUTE_NOT_FOUND = "route not found"


def configure_logging(level: str = "INFO"):
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S")
    # httpx logs full request URLs at INFO, which include the Authorization query parameter
    logging.getLogger("httpx").setLevel(logging.WARNING)


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision, e.g. 2024-01-01T00:00:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def success_envelope(payload: Any) -> dict:
    """Merge the upstream document under a top-level success flag."""
    if isinstance(payload, dict):
        return {"success": True, **payload}
    # Non-object JSON cannot be merged at the top level
    return {"success": True, "data": payload}


def error_response(status_code: int, error: str, message: Any = None, **extra) -> JSONResponse:
    if message is not None:
        extra["message"] = message
    envelope = ErrorEnvelope(error=error, **extra)
    return JSONResponse(status_code=status_code, content=envelope.to_content())


# =============================================================================
# Dependencies
# =============================================================================

def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def require_credential(settings: Settings = Depends(get_settings)) -> Settings:
    """Credential guard - runs before any upstream call is attempted."""
    if not settings.credential_configured:
        raise ConfigurationError(CONFIG_ERROR_MESSAGE)
    return settings


def get_cwa_client(request: Request, settings: Settings = Depends(require_credential)) -> CWAClient:
    return request.app.state.cwa


# =============================================================================
# Routes
# =============================================================================

router = APIRouter()


def get_route(path: str, **kwargs):
    """Register GET and HEAD on path, with and without a trailing slash."""
    def decorator(func):
        router.api_route(path, methods=["GET", "HEAD"], **kwargs)(func)
        if path != "/":
            router.api_route(path + "/", methods=["GET", "HEAD"], include_in_schema=False, **kwargs)(func)
        return func
    return decorator


@get_route("/", response_model=DiscoveryDocument)
async def root():
    return DiscoveryDocument(
        message="Welcome to the CWA weather proxy API",
        endpoints=Endpoints(
            allCities="/weather",
            cityByName="/weather/city/:locationName",
            health="/health",
        ),
    )


@get_route("/health", response_model=HealthResponse)
async def health():
    return HealthResponse(status="OK", timestamp=utc_timestamp())


@get_route("/weather")
async def all_locations(cwa: CWAClient = Depends(get_cwa_client)):
    """36 hour forecast for every county and city (no locationName filter)."""
    payload = await cwa.fetch_forecast()
    return JSONResponse(content=success_envelope(payload))


@get_route("/weather/city/{location_name}")
async def single_location(location_name: str, cwa: CWAClient = Depends(get_cwa_client)):
    """
    36 hour forecast for one county or city, e.g. /weather/city/臺中市.

    The name is forwarded as-is; an unknown name gets whatever CWA returns
    for it (normally an empty location list).
    """
    payload = await cwa.fetch_forecast(location_name)
    return JSONResponse(content=success_envelope(payload))


# =============================================================================
# Error handlers
# =============================================================================

async def handle_configuration_error(request: Request, exc: ConfigurationError):
    logger.error(f"{request.method} {request.url.path} rejected: CWA_API_KEY is not set")
    return error_response(500, CONFIG_ERROR, CONFIG_ERROR_MESSAGE)


async def handle_upstream_error(request: Request, exc: UpstreamError):
    logger.error(
        f"{request.method} {request.url.path} failed: CWA API returned HTTP {exc.status_code}"
        f" ({exc.message or 'no message'})"
    )
    return error_response(
        exc.status_code,
        UPSTREAM_ERROR,
        exc.message or UPSTREAM_ERROR_MESSAGE,
        details=exc.body,
    )


async def handle_transport_error(request: Request, exc: TransportError):
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return error_response(500, SERVER_ERROR, TRANSPORT_ERROR_MESSAGE)


async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    # Unknown paths and unsupported methods on known paths are both "no route"
    if exc.status_code in (404, 405):
        return error_response(404, ROUTE_NOT_FOUND)
    return error_response(exc.status_code, str(exc.detail))


async def handle_unexpected_error(request: Request, exc: Exception):
    try:
        message = str(exc)
    except Exception:
        message = type(exc).__name__
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {message}")
    return error_response(500, SERVER_ERROR, message)


# =============================================================================
# Application factory
# =============================================================================

def create_app(settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> FastAPI:
    """
    Build the proxy application.

    Args:
        settings: Immutable process configuration.
        transport: Optional httpx transport for the upstream client (tests
            pass an httpx.MockTransport here).
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        http_client = build_http_client(settings, transport)
        app.state.cwa = CWAClient(settings, http_client)
        logger.info(f"Weather proxy v{__version__} started (environment: {settings.environment})")
        logger.info(f"Upstream: {settings.api_url}")
        if not settings.credential_configured:
            logger.warning("CWA_API_KEY is not set - /weather endpoints will answer 500")
        try:
            yield
        finally:
            await http_client.aclose()

    app = FastAPI(
        title="CWA Weather Proxy",
        description="Forwards requests to the CWA 36 hour forecast API",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
    )
    app.state.settings = settings

    # Added before CORSMiddleware so it runs inside it and the 500 keeps CORS headers
    @app.middleware("http")
    async def catch_unhandled_errors(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            return await handle_unexpected_error(request, exc)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["GET", "HEAD"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ConfigurationError, handle_configuration_error)
    app.add_exception_handler(UpstreamError, handle_upstream_error)
    app.add_exception_handler(TransportError, handle_transport_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(router)
    return app
