"""Main FastAPI application."""

import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi_cache import FastAPICache
from fastapi_cache.backends.inmemory import InMemoryBackend
from loguru import logger
from opentelemetry import metrics
from opentelemetry.exporter.prometheus import PrometheusMetricReader
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.resources import Resource
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest

from .api import dashboard, health, routes
from .core.config import settings


def setup_logging():
    """Configure loguru for structured logging.

    Sets up logging with the configured log level from settings.
    Logs are written to stderr with structured format; variable
    values in tracebacks are only shown outside production.
    """
    # Remove default handler
    logger.remove()

    # Add custom handler with structured format
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level> | {extra}",
        level=settings.LOG_LEVEL,
        serialize=False,  # Human-readable format
        colorize=True,
        backtrace=True,
        diagnose=settings.ENVIRONMENT != "production",
    )

    logger.info(
        "Logging configured",
        level=settings.LOG_LEVEL,
    )


def setup_metrics():
    """Configure OpenTelemetry metrics with Prometheus exporter.

    Sets up OpenTelemetry with a Prometheus reader. Request metrics and the
    offline cache fallback counter are exposed at /metrics for scraping.
    """
    # Create Prometheus metric reader
    reader = PrometheusMetricReader()

    # Create resource with service information
    resource = Resource.create(
        {
            "service.name": "climavue-api",
            "service.version": "0.1.0",
        }
    )

    # Create meter provider
    provider = MeterProvider(
        resource=resource,
        metric_readers=[reader],
    )

    # Set global meter provider; meters created at import time delegate to it
    metrics.set_meter_provider(provider)

    logger.info("OpenTelemetry metrics configured")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Handles startup and shutdown events:
    - Startup: Initialize the key-value store backend, log configuration
    - Shutdown: Cleanup resources

    Args:
        app: FastAPI application instance
    """
    # Startup
    logger.info("Starting ClimaVue API")

    # Log active configuration (without sensitive values)
    logger.info(
        "Configuration loaded",
        upstream_timeout=settings.UPSTREAM_TIMEOUT,
        openweather_base_url=settings.OPENWEATHER_BASE_URL,
        # Do NOT log API key
        api_key_configured=bool(settings.OPENWEATHER_API_KEY),
        default_city=settings.DEFAULT_CITY,
        default_units=settings.DEFAULT_UNITS,
        display_timezone=settings.DISPLAY_TIMEZONE,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL,
    )
    if not settings.OPENWEATHER_API_KEY:
        logger.warning("OPENWEATHER_API_KEY is not set; fetches will fail until it is configured")

    # Backend of the key-value store (offline cache, preferences, recent searches)
    FastAPICache.init(
        InMemoryBackend(),
        prefix="climavue:",
    )
    logger.info("Key-value store initialized")

    # Application is now ready
    logger.info("Application ready to serve requests")

    yield

    # Shutdown
    logger.info("Shutting down ClimaVue API")


# Set up logging first
setup_logging()

# Set up metrics
setup_metrics()

# Create FastAPI application
app = FastAPI(
    title="ClimaVue API",
    description="Weather dashboard backend: OpenWeatherMap snapshots with an offline cache fallback",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.LOG_LEVEL == "DEBUG" else None,  # Swagger UI only in debug mode
    redoc_url=None,  # Disable ReDoc
)

# Set up CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allow all origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(routes.router, tags=["Weather"])
app.include_router(dashboard.router, tags=["Dashboard"])


# Metrics endpoint
@app.get("/metrics", include_in_schema=False)
async def metrics_endpoint():
    """Prometheus metrics endpoint.

    Exposes OpenTelemetry metrics, including `climavue_cache_fallbacks_total`,
    in the Prometheus text exposition format.

    Example:
        >>> # GET /metrics
        >>> # Returns: "# HELP ..." lines, one metric family at a time
    """
    return Response(
        content=generate_latest(REGISTRY),
        media_type=CONTENT_TYPE_LATEST,
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors.

    Typed weather errors are mapped to HTTP errors in the routes; anything that
    reaches this handler is logged and answered with a generic 500 so internal
    details are not exposed to clients.
    """
    logger.exception(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
    )

    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
    )


# Instrument with OpenTelemetry
FastAPIInstrumentor.instrument_app(app)

logger.info("FastAPI application created")
