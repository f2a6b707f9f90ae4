"""
Tests for application startup and shutdown
"""

import pytest
from fastapi.testclient import TestClient

from spec_gateway.main import create_app
from spec_gateway.services.forwarding_client import ForwardingClient
from spec_gateway.services.spec_store import DirectoryNotFound, FileSpecStore, InvalidDocument
from spec_gateway.utils.config import GatewayConfig


def test_startup_loads_specs_dir(gateway_config, write_spec, sample_spec, plain_spec):
    """Test the lifespan builds the store and forwarder from configuration"""
    write_spec("orders.json", sample_spec)
    write_spec("catalog.json", plain_spec)
    app = create_app(config=gateway_config)

    with TestClient(app) as client:
        assert isinstance(app.state.spec_store, FileSpecStore)
        assert isinstance(app.state.forwarding_client, ForwardingClient)

        response = client.get("/api/specs")
        assert response.status_code == 200
        assert response.json() == ["catalog", "orders"]

    assert app.state.forwarding_client is None


def test_startup_fails_on_missing_directory(tmp_path):
    """Test a missing specs directory aborts startup"""
    config = GatewayConfig(specs_dir=str(tmp_path / "missing"))
    app = create_app(config=config)

    with pytest.raises(DirectoryNotFound):
        with TestClient(app):
            pass


def test_startup_fails_on_invalid_document(gateway_config, write_spec, sample_spec):
    """Test a malformed spec aborts startup"""
    write_spec("good.json", sample_spec)
    write_spec("bad.json", "{oops")
    app = create_app(config=gateway_config)

    with pytest.raises(InvalidDocument):
        with TestClient(app):
            pass


def test_openapi_spec(gateway_config):
    """Test that the gateway's own OpenAPI spec is accessible"""
    app = create_app(config=gateway_config)

    with TestClient(app) as client:
        response = client.get("/openapi.json")

    assert response.status_code == 200
    spec = response.json()
    assert spec["info"]["title"] == "Spec Gateway"
    assert "/api/proxy" in spec["paths"]
    assert "/api/specs/{service}" in spec["paths"]
