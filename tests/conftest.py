"""
Pytest fixtures for spec gateway tests
"""

import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from spec_gateway.utils.config import GatewayConfig


@pytest.fixture
def write_spec(tmp_path) -> Callable[..., str]:
    """Write a spec document into the temporary specs directory"""

    def _write(filename: str, document: Any) -> str:
        path = tmp_path / filename
        if isinstance(document, (dict, list)):
            path.write_text(json.dumps(document))
        else:
            path.write_text(document)
        return str(path)

    return _write


@pytest.fixture
def sample_spec() -> Dict[str, Any]:
    """Spec with a proxy config"""
    return {
        "openapi": "3.0.0",
        "info": {"title": "Test API", "version": "1.0.0"},
        "x-proxy-config": {
            "baseURL": "http://backend.test",
            "authHeaders": {"Authorization": "Bearer A", "X-Api-Key": "key-123"}
        },
        "paths": {}
    }


@pytest.fixture
def plain_spec() -> Dict[str, Any]:
    """Spec without a proxy config"""
    return {
        "openapi": "3.0.0",
        "info": {"title": "Docs Only", "version": "1.0.0"},
        "paths": {}
    }


@pytest.fixture
def gateway_config(tmp_path) -> GatewayConfig:
    """Gateway configuration pointing at the temporary specs directory"""
    return GatewayConfig(specs_dir=str(tmp_path), log_level="DEBUG", log_format="json")


class RecordingBackend:
    """Fake backend for httpx.MockTransport that records every request"""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response] = None):
        self.requests: List[httpx.Request] = []
        self.responder = responder or (lambda request: httpx.Response(200, json={"message": "success"}))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def make_backend():
    """Factory for backends with a custom responder"""
    return RecordingBackend


@pytest.fixture
def backend() -> RecordingBackend:
    """Backend answering 200 {"message": "success"}"""
    return RecordingBackend()


@pytest.fixture
def echo_backend() -> RecordingBackend:
    """Backend echoing the request body with status 201"""
    return RecordingBackend(
        lambda request: httpx.Response(
            201,
            headers={"Content-Type": "application/json"},
            content=request.content
        )
    )
