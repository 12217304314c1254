"""
Health check endpoint
"""
from fastapi import APIRouter, Request

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/")
async def health_check(request: Request):
    """Basic health check plus the wiring chosen at startup"""
    state = request.app.state
    orchestrator = state.traffic_service.orchestrator
    last = orchestrator.last_refresh
    return {
        "status": "healthy",
        "service": "traffictrack",
        "store": type(state.traffic_service.store).__name__,
        "provider": orchestrator.provider.name,
        "synthetic_mode": orchestrator.config.use_synthetic_data,
        "refresh_count": orchestrator.refresh_count,
        "last_refresh_source": last.source if last else None,
    }
