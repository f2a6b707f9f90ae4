"""
Health check routes for the spec gateway
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Health check endpoint"""
    config = request.app.state.config
    store = getattr(request.app.state, "spec_store", None)

    return {
        "service": config.service_name,
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": config.service_version,
        "spec_count": len(store.list()) if store is not None else 0
    }
