"""
FastAPI main application
"""
import logging
import random
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from traffictrack.database import connect_to_mongo, close_mongo_connection, get_database
from traffictrack.config import CacheConfig, Settings, settings
from traffictrack.clients.base import build_provider
from traffictrack.exceptions import InvalidQueryError, QueryCancelledError, StoreError
from traffictrack.models.schemas import ApiErrorResponse
from traffictrack.orchestrator import RefreshOrchestrator
from traffictrack.services.synthetic import SyntheticGenerator
from traffictrack.services.traffic_service import TrafficService
from traffictrack.store import MemoryRecordStore, MongoRecordStore
from traffictrack.api.routes import traffic, events, health

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def create_traffic_service(config: Settings, database=None) -> TrafficService:
    """Wire store, provider, generator and orchestrator once"""
    if database is not None:
        store = MongoRecordStore(database)
    else:
        logger.warning("MongoDB unavailable, using in-memory record store")
        store = MemoryRecordStore()

    cache_config = CacheConfig.from_settings(config)
    orchestrator = RefreshOrchestrator(
        store=store,
        provider=build_provider(config),
        generator=SyntheticGenerator(random.Random(config.synthetic_seed)),
        config=cache_config,
    )
    return TrafficService(orchestrator, store, cache_config)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    logger.info("Starting TrafficTrack...")

    await connect_to_mongo()
    app.state.traffic_service = create_traffic_service(settings, get_database())
    logger.info(
        f"Traffic service ready (synthetic mode: {settings.use_synthetic_data}, "
        f"freshness window: {settings.freshness_window_minutes} min)"
    )

    yield

    # Shutdown
    logger.info("Shutting down...")
    await close_mongo_connection()
    logger.info("Shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="TrafficTrack API",
    description="Traffic flow and incident picture for any bounding box, refreshed on demand",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    max_age=3600,
)


def _error(status_code: int, error: str, message: str) -> JSONResponse:
    body = ApiErrorResponse(error=error, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


@app.exception_handler(InvalidQueryError)
async def invalid_query_handler(request: Request, exc: InvalidQueryError):
    return _error(400, exc.code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return _error(400, "INVALID_REQUEST", "Malformed query parameters")


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error(f"Record store failure on {request.url.path}: {exc}", exc_info=exc)
    return _error(503, "STORE_UNAVAILABLE", "Traffic data store is unavailable")


@app.exception_handler(QueryCancelledError)
async def cancelled_handler(request: Request, exc: QueryCancelledError):
    return _error(504, "QUERY_CANCELLED", str(exc))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
    return _error(500, "INTERNAL_ERROR", "An unexpected error occurred")


# Include routers
app.include_router(traffic.router)
app.include_router(events.router)
app.include_router(health.router)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": "TrafficTrack",
        "version": "1.0.0",
        "status": "running",
        "endpoints": {
            "traffic": "/api/traffic",
            "refresh": "/api/traffic/refresh",
            "events": "/api/events",
            "recent_events": "/api/events/recent",
            "event_types": "/api/events/types",
            "severities": "/api/events/severities",
            "health": "/api/health"
        }
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "traffictrack.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
