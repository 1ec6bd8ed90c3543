"""
FastAPI main application for the Travel Weather API.
"""
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from tortoise.contrib.fastapi import register_tortoise

from travel_api.database import TORTOISE_ORM
from travel_api.dependencies import ConfigurationError, get_geo_index, get_settings, get_weather_scheduler
from travel_api.routes import health, reference, refresh, travel_weather
from travel_api.services.geo_index import GeoIndex
from weather_feeds.utils.logger import get_logger


settings = get_settings()
api_config = settings['api']
logger = get_logger(config=settings.get('logging'))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI.
    Handles startup and shutdown events.
    """
    logger.section("Starting Travel Weather API")

    # Fail fast on broken reference tables
    geo_index = get_geo_index()
    logger.info(f"  ✓ Loaded {len(geo_index.airports)} airports and {len(geo_index.waypoints)} waypoints")

    scheduler = None
    if settings.get('scheduler', {}).get('enabled', True):
        logger.info("🌤️  Starting weather refresh scheduler...")
        scheduler = get_weather_scheduler()
        await scheduler.start()
    else:
        logger.info("Scheduler disabled, caches fill only through /refresh")

    yield

    if scheduler is not None:
        logger.info("🛑 Stopping weather refresh scheduler...")
        await scheduler.stop()

    logger.info("👋 Shutting down API...")


# Create FastAPI application
app = FastAPI(
    title=api_config['title'],
    version=api_config['version'],
    description=api_config['description'],
    lifespan=lifespan,
)

# Register Tortoise ORM only when the cache lives in the database
if settings.get('cache', {}).get('backend', 'memory') == 'database':
    register_tortoise(
        app,
        config=TORTOISE_ORM,
        generate_schemas=True,
        add_exception_handlers=True,
    )

# Configure CORS
if api_config['cors']['enabled']:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=api_config['cors']['origins'],
        allow_credentials=api_config['cors']['allow_credentials'],
        allow_methods=api_config['cors']['allow_methods'],
        allow_headers=api_config['cors']['allow_headers'],
    )


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error(f"Configuration error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": str(exc)},
    )


# Include routers
app.include_router(health.router, prefix="/api/v1", tags=["Health"])
app.include_router(travel_weather.router, prefix="/api/v1", tags=["Travel Weather"])
app.include_router(reference.router, prefix="/api/v1", tags=["Reference"])
app.include_router(refresh.router, prefix="/api/v1", tags=["Refresh"])


@app.get("/")
async def root(geo_index: GeoIndex = Depends(get_geo_index)):
    """Root endpoint with API information, refresh schedule and coverage."""
    scheduler_config = settings.get('scheduler', {})
    return {
        "name": api_config['title'],
        "version": api_config['version'],
        "description": api_config['description'],
        "docs": "/docs",
        "health": "/api/v1/health",
        "endpoints": {
            "travel_weather": "POST /api/v1/travel-weather",
            "airports": "GET /api/v1/airports",
            "airport": "GET /api/v1/airports/{code}",
            "waypoints": "GET /api/v1/waypoints",
            "waypoint": "GET /api/v1/waypoints/{waypoint_id}",
            "metar": "GET /api/v1/metar",
            "nearest_airport": "GET /api/v1/nearest-airport?lat=..&lon=..",
            "refresh": "POST /api/v1/refresh/{metar|weather|all}",
        },
        "schedule": {
            "enabled": scheduler_config.get('enabled', True),
            "aviation_interval_seconds": scheduler_config.get('aviation_interval_seconds', 900),
            "waypoint_interval_seconds": scheduler_config.get('waypoint_interval_seconds', 1800),
        },
        "coverage": {
            "airports": [airport.code for airport in geo_index.airports],
            "waypoints": len(geo_index.waypoints),
        },
    }
