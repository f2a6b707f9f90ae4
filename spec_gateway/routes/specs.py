"""
Spec routes
List services and serve their OpenAPI documents verbatim
"""

from typing import List

from fastapi import APIRouter, HTTPException, Response
import structlog

from spec_gateway.services.spec_store import NotFound
from spec_gateway.utils.dependencies import SpecStoreDep

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("", response_model=List[str])
async def list_specs(store: SpecStoreDep):
    """List all service names, sorted"""
    return store.list()


@router.get("/{service}")
async def get_spec(service: str, store: SpecStoreDep):
    """Get the OpenAPI document of a service"""
    try:
        spec = store.get(service)
    except NotFound:
        logger.warning("Spec not found", service=service)
        raise HTTPException(status_code=404, detail="spec not found")

    return Response(content=spec, media_type="application/json")
