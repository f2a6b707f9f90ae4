from .proxy import (
    ServiceConfig, ProxyRequest, ProxyResponse,
    ProxyRequestPayload, ProxyResponsePayload
)

__all__ = [
    "ServiceConfig",
    "ProxyRequest",
    "ProxyResponse",
    "ProxyRequestPayload",
    "ProxyResponsePayload",
]
