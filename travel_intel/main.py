"""Travel Intelligence API - FastAPI application entry point.

Destination health scores, safety ratings and route risk assessment built
from satellite positioning, Sentinel-2 surface imagery and weather data.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from travel_intel.api.v1 import conditions, destination, routes
from travel_intel.config import get_settings
from travel_intel.core.exceptions import TravelIntelException
from travel_intel.core.logging_config import get_logger, setup_logging
from travel_intel.core.middleware import MetricsMiddleware, RequestLoggingMiddleware, RequestMetrics
from travel_intel.core.rate_limit import limiter
from travel_intel.dependencies import get_cache_service


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan events."""
    # Startup
    settings = get_settings()
    setup_logging()
    logger = get_logger(__name__)
    logger.info(f"Starting Travel Intelligence API in {settings.APP_ENV} mode")
    yield
    # Shutdown
    logger.info("Shutting down Travel Intelligence API")
    await get_cache_service().close()


# Create FastAPI application
app = FastAPI(
    title="Travel Intelligence API",
    description="""Travel Intelligence scores destinations and routes for travel planning.

Features: destination health score (0-100) from surface indices and weather, safety rating from positioning accuracy and surface hazards, route feasibility with per-waypoint analysis, safety recommendations, Redis caching.

Data sources: Copernicus Data Space (Sentinel-2 L2A) for vegetation, water and snow indices, WeatherAPI.com for current weather and air quality, a positioning accuracy model for satellite navigation quality.

When a data source is unavailable, analysis endpoints still answer with neutral fallback values, an `error` message and the `X-Analysis-Degraded: true` header.
    """,
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "health",
            "description": "Health and readiness checks",
        },
        {
            "name": "destinations",
            "description": "Destination health and safety analysis",
        },
        {
            "name": "routes",
            "description": "Route feasibility and risk analysis",
        },
        {
            "name": "conditions",
            "description": "Raw weather, surface and positioning data",
        },
    ],
)

# Get settings
settings = get_settings()

# Add rate limiter state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Metrics are shared between the middleware and the /metrics endpoint
metrics = RequestMetrics()
app.state.metrics = metrics
app.add_middleware(MetricsMiddleware, metrics=metrics)

# Add request logging middleware
app.add_middleware(RequestLoggingMiddleware)

# Add CORS middleware (added last, executes first)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Response-Time", "X-Analysis-Degraded"],
)


# Global exception handler for custom exceptions
@app.exception_handler(TravelIntelException)
async def travel_intel_exception_handler(request: Request, exc: TravelIntelException):
    """Handle application exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.__class__.__name__,
            "message": exc.message,
            "path": request.url.path,
        },
    )


# Health check endpoints
@app.get("/health", tags=["health"])
async def health_check():
    """Basic liveness check."""
    return {"status": "ok"}


@app.get("/ready", tags=["health"])
async def readiness_check():
    """Readiness check with cache and provider configuration status."""
    cache = get_cache_service()

    if not cache.enabled:
        cache_status = "disabled"
    elif await cache.is_available():
        cache_status = "ok"
    else:
        cache_status = "unavailable"

    return {
        "status": "ready",
        "cache": cache_status,
        "providers": {
            "weather": "configured" if settings.WEATHER_API_KEY else "missing_credentials",
            "imagery": (
                "configured"
                if settings.COPERNICUS_CLIENT_ID and settings.COPERNICUS_CLIENT_SECRET
                else "missing_credentials"
            ),
        },
    }


@app.get("/metrics", tags=["health"])
async def get_metrics(request: Request):
    """Get application metrics.

    Returns request counts, response times, status codes and the number of
    degraded (fallback) responses.
    """
    return request.app.state.metrics.snapshot()


# Include API routers
app.include_router(destination.router, prefix="/api/v1/destinations", tags=["destinations"])
app.include_router(routes.router, prefix="/api/v1/routes", tags=["routes"])
app.include_router(conditions.router, prefix="/api/v1/conditions", tags=["conditions"])
