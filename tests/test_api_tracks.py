import httpx
import pytest
from fastapi.testclient import TestClient

from app.config import settings
from app.ingestors import SnapshotFetcher, WeatherIngestor
from app.main import app
from app.services import TrackingService, get_tracking_service


def _snapshot_handler(request: httpx.Request):
    hour = request.url.path.rsplit("/", 1)[-1].removesuffix(".json")
    payloads = {
        "00": [[10, 20, 5000], [91, 20], [40, 50]],
        "01": [[10.1, 20.1, 5010]],
    }
    if hour in payloads:
        return httpx.Response(200, json=payloads[hour])
    return httpx.Response(500, json={"error": "Upstream returned 500"})


def _weather_handler(request: httpx.Request):
    if request.url.params["latitude"] == "10.0":
        return httpx.Response(
            200,
            json={
                "current_weather": {
                    "temperature": 21.3,
                    "windspeed": 5.5,
                    "winddirection": 180,
                }
            },
        )
    return httpx.Response(200, json={"latitude": 0})


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(settings, "enable_refresh_scheduler", False)
    service = TrackingService(
        fetcher=SnapshotFetcher(
            base_url="https://feed.test/treasure",
            transport=httpx.MockTransport(_snapshot_handler),
        ),
        weather_ingestor=WeatherIngestor(
            base_url="https://weather.test/v1/forecast",
            transport=httpx.MockTransport(_weather_handler),
        ),
    )
    app.dependency_overrides[get_tracking_service] = lambda: service
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


def test_health_and_root(client):
    assert client.get("/healthz").json()["status"] == "ok"
    assert client.get("/").status_code == 200


def test_tracks_are_pending_before_first_refresh(client):
    response = client.get("/api/v1/tracks")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "pending"
    assert body["tracks"] == []
    assert body["bounds"] is None


def test_refresh_then_list_tracks(client):
    refreshed = client.post("/api/v1/refresh")

    assert refreshed.status_code == 200
    body = client.get("/api/v1/tracks").json()
    assert body["status"] == "loaded"
    assert body["message"] == "Loaded latest 24h of data."
    assert body["entity_count"] == 2
    assert body["hours_loaded"] == [0, 1]
    assert [track["entity_id"] for track in body["tracks"]] == ["balloon-0"]
    assert body["tracks"][0]["points"] == [[10.1, 20.1], [10.0, 20.0]]
    assert body["bounds"] == {"south": 10.0, "west": 20.0, "north": 10.1, "east": 20.1}


def test_history_includes_non_drawable_entities(client):
    client.post("/api/v1/refresh")

    response = client.get("/api/v1/tracks/balloon-2/history")

    assert response.status_code == 200
    body = response.json()
    assert body["drawable"] is False
    assert len(body["records"]) == 1
    assert client.get("/api/v1/tracks/balloon-1/history").status_code == 404


def test_select_track_with_weather(client):
    client.post("/api/v1/refresh")

    response = client.get("/api/v1/tracks/balloon-0")

    assert response.status_code == 200
    body = response.json()
    assert body["latest"]["hours_ago"] == 0
    assert body["weather"]["temperature"] == 21.3
    assert body["weather_error"] is None
    assert "Altitude (3rd field): 5000.00" in body["lines"]


def test_select_non_drawable_track_is_not_found(client):
    client.post("/api/v1/refresh")

    assert client.get("/api/v1/tracks/balloon-2").status_code == 404
