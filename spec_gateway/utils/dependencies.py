"""
FastAPI dependencies
Hand the spec store and forwarding client built at startup to the routes
"""

from typing import Annotated

from fastapi import Depends, Request

from spec_gateway.services.forwarding_client import ForwardingClient
from spec_gateway.services.spec_store import SpecStore


def get_spec_store(request: Request) -> SpecStore:
    """Dependency to get the spec store"""
    return request.app.state.spec_store


def get_forwarding_client(request: Request) -> ForwardingClient:
    """Dependency to get the forwarding client"""
    return request.app.state.forwarding_client


# Type aliases for cleaner dependency injection
SpecStoreDep = Annotated[SpecStore, Depends(get_spec_store)]
ForwardingClientDep = Annotated[ForwardingClient, Depends(get_forwarding_client)]
