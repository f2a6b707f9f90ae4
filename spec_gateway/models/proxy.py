"""
Proxy data models and schemas
"""

import json
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# Embedded proxy configuration (x-proxy-config)
class ServiceConfig(BaseModel):
    """How to reach and authenticate to a service backend"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    base_url: str = Field(..., alias="baseURL", description="Backend base URL, joined literally with request paths")
    auth_headers: Optional[Dict[str, str]] = Field(None, alias="authHeaders", description="Default headers sent to the backend")


@dataclass
class ProxyRequest:
    """Logical request to forward to a service backend"""
    service: str
    method: str
    path: str
    headers: Optional[Dict[str, str]] = None
    body: Optional[bytes] = None  # pre-serialized JSON


def _reject_constant(name: str):
    raise ValueError(f"non-standard JSON constant: {name}")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"number out of range: {text}")
    return value


@dataclass
class ProxyResponse:
    """Normalized backend response"""
    status_code: int
    headers: Dict[str, List[str]] = field(default_factory=dict)
    body: bytes = b""

    def body_json(self) -> Any:
        """Body as a JSON value: None when empty, text when it is not JSON"""
        if not self.body:
            return None
        try:
            return json.loads(self.body, parse_float=_finite_float, parse_constant=_reject_constant)
        except ValueError:
            return self.body.decode("utf-8", errors="replace")


# Wire schemas (for the proxy API)
class ProxyRequestPayload(BaseModel):
    """Schema for POST /api/proxy"""
    service: str = Field(..., description="Service name (spec file name without extension)")
    method: str = Field(..., description="HTTP method, uppercase")
    path: str = Field(..., description="Path appended to the service base URL")
    headers: Optional[Dict[str, str]] = Field(None, description="Headers overriding configured auth headers")
    body: Any = Field(None, description="JSON value forwarded as the request body")

    def to_proxy_request(self) -> ProxyRequest:
        """Convert to a ProxyRequest, serializing the JSON body compactly"""
        body = None
        if self.body is not None:
            body = json.dumps(self.body, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
        return ProxyRequest(
            service=self.service,
            method=self.method,
            path=self.path,
            headers=self.headers,
            body=body
        )


class ProxyResponsePayload(BaseModel):
    """Schema for the proxy API response"""
    model_config = ConfigDict(populate_by_name=True)

    status_code: int = Field(..., alias="statusCode")
    headers: Dict[str, List[str]] = Field(default_factory=dict)
    body: Any = None

    @classmethod
    def from_proxy_response(cls, response: ProxyResponse) -> "ProxyResponsePayload":
        return cls(
            status_code=response.status_code,
            headers=response.headers,
            body=response.body_json()
        )
