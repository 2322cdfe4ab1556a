"""Tests for the auxiliary endpoints and application wiring."""

from datetime import datetime

from fastapi.testclient import TestClient

from ozwell_proxy.config_loader import GatewaySettings
from ozwell_proxy.main import create_app
from ozwell_proxy.testing import FakeBackend

from conftest import auth_headers, build_chat_request


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "OK"
    assert body["service"] == "Ozwell Proxy"
    assert datetime.fromisoformat(body["timestamp"].replace("Z", "+00:00"))


def test_models_lists_default_label(client):
    response = client.get("/v1/models")

    assert response.status_code == 200
    body = response.json()
    assert body["object"] == "list"
    assert [model["id"] for model in body["data"]] == ["Ozwell"]
    assert body["data"][0]["object"] == "model"
    assert body["data"][0]["owned_by"] == "ozwell"
    assert isinstance(body["data"][0]["created"], int)


def test_models_uses_configured_label():
    app = create_app(GatewaySettings(default_model="Ozwell-Pro", model_owner="acme"))
    with TestClient(app) as client:
        model = client.get("/v1/models").json()["data"][0]
    assert model["id"] == "Ozwell-Pro"
    assert model["owned_by"] == "acme"


def test_unknown_route_is_json_404(client):
    response = client.get("/v1/unknown")

    assert response.status_code == 404
    assert response.json() == {
        "error": {"message": "Not found", "type": "invalid_request_error", "code": 404}
    }


def test_wrong_method_is_json_error(client):
    response = client.get("/v1/chat/completions")

    assert response.status_code == 405
    assert response.json()["error"]["type"] == "invalid_request_error"


def test_cors_preflight(client):
    response = client.options(
        "/v1/chat/completions",
        headers={
            "Origin": "http://chat.example",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Authorization, Content-Type",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    assert "POST" in response.headers["access-control-allow-methods"]


def test_cors_header_on_simple_request(client):
    response = client.get("/health", headers={"Origin": "http://chat.example"})
    assert response.headers["access-control-allow-origin"] == "*"


def test_create_app_builds_gateway_from_settings(settings):
    app = create_app(settings)
    assert app.state.gateway.chunk_delay == 0.0
    assert app.state.gateway.client.backend.completion_url == "http://ozwell.test/api/v1/completion"


def test_each_app_uses_its_own_backend():
    backend_a = FakeBackend()
    backend_b = FakeBackend()
    backend_a.enqueue_content("from A")
    app_a = create_app(
        GatewaySettings(backend_url="http://a.test", stream_chunk_delay=0.0),
        transport=backend_a.transport(),
    )
    create_app(
        GatewaySettings(backend_url="http://b.test", stream_chunk_delay=0.0),
        transport=backend_b.transport(),
    )

    with TestClient(app_a) as client:
        response = client.post("/v1/chat/completions", json=build_chat_request(), headers=auth_headers())

    assert response.json()["choices"][0]["message"]["content"] == "from A"
    assert len(backend_a.received) == 1
    assert backend_b.received == []
