import asyncio

import httpx
import pytest

from app.ingestors.snapshots import SnapshotFetcher, format_hour


def test_format_hour_pads_and_rejects_out_of_range():
    assert format_hour(0) == "00"
    assert format_hour(7) == "07"
    assert format_hour(23) == "23"
    with pytest.raises(ValueError):
        format_hour(24)
    with pytest.raises(ValueError):
        format_hour(-1)


def test_url_for_uses_two_digit_hour():
    fetcher = SnapshotFetcher(base_url="https://feed.test/treasure/", suffix=".json")
    assert fetcher.url_for(3) == "https://feed.test/treasure/03.json"

    proxied = SnapshotFetcher(base_url="http://localhost:8000/api/hour", suffix="")
    assert proxied.url_for(12) == "http://localhost:8000/api/hour/12"


@pytest.mark.anyio
async def test_fetch_all_isolates_failures_per_hour():
    def handler(request: httpx.Request):
        hour = request.url.path.rsplit("/", 1)[-1].removesuffix(".json")
        if hour == "01":
            return httpx.Response(503, json={"error": "Upstream returned 503"})
        if hour == "02":
            return httpx.Response(200, text="<html>not json</html>")
        if hour == "03":
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json=[[1.0, 2.0, 3.0]])

    fetcher = SnapshotFetcher(
        base_url="https://feed.test/treasure",
        transport=httpx.MockTransport(handler),
    )

    results = await fetcher.fetch_all(range(5))

    assert [result.hours_ago for result in results] == [0, 1, 2, 3, 4]
    assert results[0].ok and results[0].payload == [[1.0, 2.0, 3.0]]
    assert results[1].payload is None and results[1].error == "HTTP 503"
    assert results[2].payload is None and results[2].error == "malformed body"
    assert results[3].payload is None and results[3].error == "request failed"
    assert results[4].ok


@pytest.mark.anyio
async def test_fetch_all_isolates_unexpected_errors_per_hour():
    def handler(request: httpx.Request):
        if request.url.path.endswith("/05.json"):
            raise httpx.InvalidURL("bad redirect target")
        return httpx.Response(200, json=[[10.0, 20.0]])

    fetcher = SnapshotFetcher(
        base_url="https://feed.test/treasure",
        transport=httpx.MockTransport(handler),
    )

    results = await fetcher.fetch_all()

    assert len(results) == 24
    assert results[5].payload is None
    assert results[5].error == "unexpected error"
    assert all(r.ok and r.payload == [[10.0, 20.0]] for r in results if r.hours_ago != 5)


@pytest.mark.anyio
async def test_fetch_all_requests_every_hour_concurrently():
    in_flight = 0
    peak = 0
    seen: list[str] = []

    async def handler(request: httpx.Request):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        seen.append(request.url.path)
        return httpx.Response(200, json=[])

    fetcher = SnapshotFetcher(
        base_url="https://feed.test/treasure",
        transport=httpx.MockTransport(handler),
    )

    results = await fetcher.fetch_all()

    assert len(results) == 24
    assert len(seen) == 24
    assert "/treasure/23.json" in seen
    assert peak > 1


@pytest.mark.anyio
async def test_fetch_hour_handles_timeout():
    def handler(request: httpx.Request):
        raise httpx.ReadTimeout("slow upstream", request=request)

    fetcher = SnapshotFetcher(
        base_url="https://feed.test/treasure",
        transport=httpx.MockTransport(handler),
    )

    result = await fetcher.fetch_hour(5)

    assert result.hours_ago == 5
    assert result.payload is None
    assert result.error == "timeout"
