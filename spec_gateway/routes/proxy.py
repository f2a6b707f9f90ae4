"""
Proxy routes
Forward requests to service backends described by their specs
"""

from fastapi import APIRouter, HTTPException
import structlog

from spec_gateway.models.proxy import ProxyRequestPayload, ProxyResponsePayload
from spec_gateway.services.forwarding_client import (
    InvalidMethod, ServiceNotFound, UpstreamReadFailure, UpstreamUnreachable
)
from spec_gateway.utils.dependencies import ForwardingClientDep

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post("", response_model=ProxyResponsePayload, response_model_by_alias=True)
async def proxy_request(payload: ProxyRequestPayload, client: ForwardingClientDep):
    """
    Proxy a request to a backend service

    The service's base URL and auth headers come from the ``x-proxy-config``
    field of its spec. Headers given in the request override configured ones.
    The backend status, headers and body are returned inside a 200 response.
    """
    log = logger.bind(service=payload.service, method=payload.method, path=payload.path)
    log.info("Proxying request")

    try:
        response = await client.forward(payload.to_proxy_request())
    except InvalidMethod as e:
        log.warning("Proxy rejected", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))
    except ServiceNotFound as e:
        log.warning("Proxy rejected", error=str(e))
        raise HTTPException(status_code=404, detail=str(e))
    except (UpstreamUnreachable, UpstreamReadFailure) as e:
        log.error("Proxy failed", error=str(e))
        raise HTTPException(status_code=502, detail="proxy request failed")

    log.info("Proxy successful", status=response.status_code)
    return ProxyResponsePayload.from_proxy_response(response)
