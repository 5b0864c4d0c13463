"""Weather and selection detail models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.tracks import PositionRecord


class CurrentWeather(BaseModel):
    """Current surface conditions at a point, as reported by Open-Meteo."""

    temperature: float = Field(..., description="Air temperature in Celsius")
    windspeed: float = Field(..., description="Wind speed as reported upstream")
    winddirection: float = Field(..., description="Wind direction in degrees")
    time: Optional[str] = Field(default=None, description="Upstream observation time")

    model_config = ConfigDict(extra="ignore")


class SelectionDetail(BaseModel):
    """Detail panel contents for a selected balloon."""

    entity_id: str
    latest: PositionRecord
    weather: Optional[CurrentWeather] = None
    weather_error: Optional[str] = Field(
        default=None, description="Set when the weather lookup failed"
    )
    lines: list[str] = Field(default_factory=list)

    @classmethod
    def build(
        cls,
        entity_id: str,
        latest: PositionRecord,
        *,
        weather: CurrentWeather | None = None,
        weather_error: str | None = None,
    ) -> "SelectionDetail":
        lines = render_detail_lines(
            entity_id, latest, weather=weather, weather_error=weather_error
        )
        return cls(
            entity_id=entity_id,
            latest=latest,
            weather=weather,
            weather_error=weather_error,
            lines=lines,
        )


def render_detail_lines(
    entity_id: str,
    latest: PositionRecord,
    *,
    weather: CurrentWeather | None = None,
    weather_error: str | None = None,
) -> list[str]:
    """Render the human-readable detail lines shown for a selection."""

    lines = [
        f"Balloon ID: {entity_id}",
        f"Last position: lat {latest.latitude:.3f}, lon {latest.longitude:.3f}",
        f"Last seen: ~{latest.hours_ago} hour(s) ago snapshot",
    ]
    if latest.altitude is not None:
        lines.append(f"Altitude (3rd field): {latest.altitude:.2f}")

    if weather_error is not None:
        lines.append("Failed to load weather data.")
    elif weather is not None:
        lines.extend(
            [
                "Current surface weather",
                f"Temperature: {weather.temperature} °C",
                f"Wind speed: {weather.windspeed} m/s",
                f"Wind direction: {weather.winddirection}°",
            ]
        )
    return lines


__all__ = ["CurrentWeather", "SelectionDetail", "render_detail_lines"]
