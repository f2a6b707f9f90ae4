"""
Forwarding Client
Sends proxy requests to service backends and normalizes their responses
"""

import asyncio
from typing import Dict, List, Optional

import httpx
import structlog

from spec_gateway.models.proxy import ProxyRequest, ProxyResponse
from spec_gateway.services.spec_store import NotFound, SpecStore

logger = structlog.get_logger(__name__)

ALLOWED_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"})
REQUEST_TIMEOUT = 30.0
DEFAULT_CONTENT_TYPE = "application/json"


class ProxyError(Exception):
    """Base proxy exception"""
    pass


class InvalidMethod(ProxyError):
    """HTTP method outside the allowed set"""

    def __init__(self, method: str):
        self.method = method
        super().__init__(f"invalid HTTP method: {method}")


class ServiceNotFound(ProxyError):
    """Service unknown or not proxyable"""

    def __init__(self, service: str):
        self.service = service
        super().__init__(f"service not found: {service}")


class UpstreamUnreachable(ProxyError):
    """Backend could not be reached (connect, DNS, timeout, protocol)"""

    def __init__(self, service: str, url: str, reason: str):
        self.service = service
        self.url = url
        self.reason = reason
        super().__init__(f"request to {url} failed: {reason}")


class UpstreamReadFailure(ProxyError):
    """Backend response body could not be read completely"""

    def __init__(self, service: str, url: str, reason: str):
        self.service = service
        self.url = url
        self.reason = reason
        super().__init__(f"failed to read response body from {url}: {reason}")


def is_valid_method(method: str) -> bool:
    return method in ALLOWED_METHODS


class ForwardingClient:
    """HTTP client that forwards proxy requests to configured backends"""

    def __init__(self, store: SpecStore, http_client: Optional[httpx.AsyncClient] = None):
        self.store = store
        self._owns_client = http_client is None
        self.client = http_client or httpx.AsyncClient(timeout=REQUEST_TIMEOUT, follow_redirects=True)

    async def close(self):
        """Close the connection pool if this client created it"""
        if self._owns_client:
            await self.client.aclose()

    def build_headers(self, auth_headers: Optional[Dict[str, str]], request: ProxyRequest) -> httpx.Headers:
        """Merge configured auth headers with request headers; request headers win"""
        headers = httpx.Headers()
        for key, value in (auth_headers or {}).items():
            headers[key] = value
        for key, value in (request.headers or {}).items():
            headers[key] = value

        if request.body and not headers.get("content-type"):
            headers["Content-Type"] = DEFAULT_CONTENT_TYPE
        # Ask for an unencoded body so the bytes returned are the payload itself
        if "accept-encoding" not in headers:
            headers["Accept-Encoding"] = "identity"
        return headers

    async def forward(self, request: ProxyRequest) -> ProxyResponse:
        """
        Forward a request to the backend of ``request.service``

        Args:
            request: The logical proxy request

        Returns:
            ProxyResponse with the upstream status, headers and raw body

        Raises:
            InvalidMethod: Method is not one of GET, POST, PUT, PATCH, DELETE, HEAD, OPTIONS
            ServiceNotFound: No proxy config for the service
            UpstreamUnreachable: Transport-level failure
            UpstreamReadFailure: The response body could not be read
        """
        if not is_valid_method(request.method):
            raise InvalidMethod(request.method)

        try:
            config = self.store.get_config(request.service)
        except NotFound:
            raise ServiceNotFound(request.service) from None

        # No slash normalization between base URL and path
        target_url = config.base_url + request.path
        headers = self.build_headers(config.auth_headers, request)

        # One deadline covers sending and reading the body
        deadline = asyncio.get_running_loop().time() + REQUEST_TIMEOUT
        try:
            outbound = self.client.build_request(
                request.method,
                target_url,
                headers=headers,
                content=request.body or None,
                timeout=REQUEST_TIMEOUT
            )
            upstream = await asyncio.wait_for(
                self.client.send(outbound, stream=True, follow_redirects=True),
                timeout=REQUEST_TIMEOUT
            )
        except asyncio.TimeoutError:
            logger.warning("Upstream request timed out", service=request.service, url=target_url)
            raise UpstreamUnreachable(request.service, target_url, f"no response within {REQUEST_TIMEOUT}s") from None
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Upstream request failed", service=request.service, url=target_url, error=str(e))
            raise UpstreamUnreachable(request.service, target_url, str(e)) from e

        try:
            remaining = max(deadline - asyncio.get_running_loop().time(), 0)
            body = await asyncio.wait_for(read_body(upstream), timeout=remaining)
        except asyncio.TimeoutError:
            logger.warning("Upstream body read timed out", service=request.service, url=target_url)
            raise UpstreamReadFailure(request.service, target_url, f"body not read within {REQUEST_TIMEOUT}s") from None
        except httpx.HTTPError as e:
            logger.warning("Upstream body read failed", service=request.service, url=target_url, error=str(e))
            raise UpstreamReadFailure(request.service, target_url, str(e)) from e
        finally:
            await upstream.aclose()

        logger.debug(
            "Upstream responded",
            service=request.service,
            method=request.method,
            url=target_url,
            status_code=upstream.status_code,
            bytes=len(body)
        )

        return ProxyResponse(
            status_code=upstream.status_code,
            headers=collect_headers(upstream.headers),
            body=body
        )


async def read_body(response: httpx.Response) -> bytes:
    """Read the undecoded response body"""
    return b"".join([chunk async for chunk in response.aiter_raw()])


def collect_headers(headers: httpx.Headers) -> Dict[str, List[str]]:
    """Group header values by name (case-insensitive), keeping upstream order and first-seen spelling"""
    collected: Dict[str, List[str]] = {}
    names: Dict[str, str] = {}
    for raw_key, raw_value in headers.raw:
        key = raw_key.decode(headers.encoding)
        name = names.setdefault(key.lower(), key)
        collected.setdefault(name, []).append(raw_value.decode(headers.encoding))
    return collected
