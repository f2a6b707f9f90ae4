"""
Core services: spec storage and request forwarding
"""

from .spec_store import (
    SpecStore, FileSpecStore, InMemorySpecStore,
    SpecStoreError, DirectoryNotFound, InvalidDocument, NotFound
)
from .forwarding_client import (
    ForwardingClient, ProxyError, InvalidMethod, ServiceNotFound,
    UpstreamUnreachable, UpstreamReadFailure
)

__all__ = [
    "SpecStore",
    "FileSpecStore",
    "InMemorySpecStore",
    "SpecStoreError",
    "DirectoryNotFound",
    "InvalidDocument",
    "NotFound",
    "ForwardingClient",
    "ProxyError",
    "InvalidMethod",
    "ServiceNotFound",
    "UpstreamUnreachable",
    "UpstreamReadFailure"
]
