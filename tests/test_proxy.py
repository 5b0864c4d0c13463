import httpx
import pytest
from fastapi.testclient import TestClient

from app.config import settings
from app.main import app


@pytest.fixture
def proxy_client(monkeypatch):
    monkeypatch.setattr(settings, "enable_refresh_scheduler", False)
    monkeypatch.setattr(settings, "upstream_feed_url", "https://feed.test/treasure")
    requested: list[str] = []

    def install(handler):
        def recording_handler(request: httpx.Request):
            requested.append(str(request.url))
            return handler(request)

        transport = httpx.MockTransport(recording_handler)
        real_client = httpx.AsyncClient

        def fake_client(**kwargs):
            return real_client(transport=transport, **kwargs)

        monkeypatch.setattr(httpx, "AsyncClient", fake_client)

    with TestClient(app) as client:
        yield client, install, requested


def test_proxy_relays_json_and_pads_hour(proxy_client):
    client, install, requested = proxy_client
    install(lambda request: httpx.Response(200, json=[[1.0, 2.0, 3.0]]))

    response = client.get("/api/hour/5")

    assert response.status_code == 200
    assert response.json() == [[1.0, 2.0, 3.0]]
    assert requested == ["https://feed.test/treasure/05.json"]


def test_proxy_relays_upstream_status(proxy_client):
    client, install, _ = proxy_client
    install(lambda request: httpx.Response(404, text="missing"))

    response = client.get("/api/hour/07")

    assert response.status_code == 404
    assert response.json() == {"error": "Upstream returned 404"}


def test_proxy_reports_transport_errors(proxy_client):
    client, install, _ = proxy_client

    def handler(request: httpx.Request):
        raise httpx.ConnectError("down", request=request)

    install(handler)

    response = client.get("/api/hour/00")

    assert response.status_code == 500
    assert response.json() == {"error": "Proxy server error"}


def test_proxy_rejects_unknown_hours(proxy_client):
    client, _, requested = proxy_client

    assert client.get("/api/hour/24").status_code == 404
    assert client.get("/api/hour/ab").status_code == 404
    assert requested == []


def test_proxy_rejects_non_ascii_digits_with_error_body(proxy_client):
    client, _, requested = proxy_client

    response = client.get("/api/hour/%C2%B2")

    assert response.status_code == 404
    assert "error" in response.json()
    assert requested == []
