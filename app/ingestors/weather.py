"""Current surface weather lookups using Open-Meteo."""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from app.config import settings
from app.models.weather import CurrentWeather

logger = logging.getLogger("windtrack.ingestors.weather")


class WeatherLookupError(RuntimeError):
    """Raised when current conditions cannot be obtained for a position."""


class WeatherIngestor:
    """Fetch current surface weather for a single position."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or settings.weather_base_url
        self.timeout = timeout or settings.weather_timeout
        self.transport = transport

    async def get_current_weather(self, lat: float, lon: float) -> CurrentWeather:
        params = {
            "latitude": lat,
            "longitude": lon,
            "current_weather": "true",
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(self.base_url, params=params)
                response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.error("Weather request timed out: %s", exc)
            raise WeatherLookupError("Weather service timeout") from exc
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Weather service returned error: status=%s body=%s",
                exc.response.status_code,
                exc.response.text,
            )
            raise WeatherLookupError(
                f"Weather HTTP {exc.response.status_code}"
            ) from exc
        except httpx.RequestError as exc:
            logger.error("Weather request failed: %s", exc)
            raise WeatherLookupError("Weather request failed") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            logger.error("Weather response was not valid JSON: %s", exc)
            raise WeatherLookupError("Malformed weather response") from exc

        current = payload.get("current_weather") if isinstance(payload, dict) else None
        if not current:
            logger.warning("Weather response for %s,%s lacks current_weather", lat, lon)
            raise WeatherLookupError("Missing current_weather")

        try:
            weather = CurrentWeather.model_validate(current)
        except ValidationError as exc:
            logger.warning("Unexpected current_weather shape: %s", exc)
            raise WeatherLookupError("Invalid current_weather") from exc

        logger.debug("Current weather at %s,%s: %s", lat, lon, weather)
        return weather


__all__ = ["WeatherIngestor", "WeatherLookupError"]
