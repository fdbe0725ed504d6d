import logging
import random
from datetime import date

import config
from config import FORECAST_URL, HTTP_TIMEOUT_SECONDS
from models import ESTIMATED_LABEL, LIVE_LABEL, WeatherObservation
from sources import ExternalSourceUnavailable, fetch_json

logger = logging.getLogger(__name__)

DAILY_FIELDS = (
    "temperature_2m_max",
    "temperature_2m_min",
    "precipitation_sum",
    "wind_speed_10m_max",
    "relative_humidity_2m_mean",
    "cloud_cover_mean",
)

# Month ranges are inclusive; Dec-Mar wraps the year end.
SEASONAL_BASE_TEMPERATURE: dict[str, tuple[tuple[set[int], float], ...]] = {
    "north": (
        ({12, 1, 2, 3}, 5.0),
        ({4, 5, 6}, 15.0),
        ({7, 8, 9}, 25.0),
        ({10, 11}, 18.0),
    ),
    "south": (
        ({12, 1, 2, 3}, 25.0),
        ({4, 5, 6}, 18.0),
        ({7, 8, 9}, 5.0),
        ({10, 11}, 15.0),
    ),
}
DEFAULT_BASE_TEMPERATURE = 20.0
BASE_PRECIPITATION_MM = 2.0


def _parse_date(date_text: str) -> date | None:
    try:
        return date.fromisoformat((date_text or "").strip())
    except ValueError:
        return None


def seasonal_base_temperature(lat: float, date_text: str) -> float:
    parsed = _parse_date(date_text)
    if parsed is None:
        return DEFAULT_BASE_TEMPERATURE
    hemisphere = "north" if lat > 0 else "south"
    for months, base in SEASONAL_BASE_TEMPERATURE[hemisphere]:
        if parsed.month in months:
            return base
    return DEFAULT_BASE_TEMPERATURE


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def estimate_weather(
    lat: float,
    lon: float,
    date_text: str,
    rng: random.Random | None = None,
) -> WeatherObservation:
    """Synthetic observation from a seasonal climate table plus bounded jitter."""
    rng = rng or random.Random()
    base = seasonal_base_temperature(lat, date_text)
    return WeatherObservation(
        temperature_c=base + rng.uniform(-5.0, 5.0),
        precipitation_mm=max(0.0, BASE_PRECIPITATION_MM + rng.uniform(0.0, 5.0)),
        humidity_pct=_clamp(60.0 + rng.uniform(-15.0, 15.0), 0.0, 100.0),
        wind_speed_kmh=5.0 + rng.uniform(0.0, 15.0),
        cloud_cover_pct=_clamp(rng.uniform(0.0, 100.0), 0.0, 100.0),
        lat=lat,
        lon=lon,
        location_label=ESTIMATED_LABEL,
    )


def _first_value(daily: dict, field: str) -> float:
    values = daily[field]
    if not values or values[0] is None:
        raise ExternalSourceUnavailable(f"forecast field {field} is empty")
    return float(values[0])


async def _live_forecast(
    lat: float,
    lon: float,
    date_text: str,
    forecast_url: str,
    timeout: float,
) -> WeatherObservation:
    data = await fetch_json(
        forecast_url,
        params={
            "latitude": lat,
            "longitude": lon,
            "daily": ",".join(DAILY_FIELDS),
            "timezone": "auto",
            "start_date": date_text,
            "end_date": date_text,
        },
        timeout=timeout,
    )
    daily = data.get("daily")
    if not isinstance(daily, dict) or not daily:
        raise ExternalSourceUnavailable("forecast response has no usable daily block")

    days = daily.get("time") or []
    if days and days[0] != date_text:
        raise ExternalSourceUnavailable(f"forecast returned {days[0]}, expected {date_text}")

    t_max = _first_value(daily, "temperature_2m_max")
    t_min = _first_value(daily, "temperature_2m_min")
    return WeatherObservation(
        temperature_c=(t_max + t_min) / 2,
        precipitation_mm=_first_value(daily, "precipitation_sum"),
        humidity_pct=_first_value(daily, "relative_humidity_2m_mean"),
        wind_speed_kmh=_first_value(daily, "wind_speed_10m_max"),
        cloud_cover_pct=_first_value(daily, "cloud_cover_mean"),
        lat=lat,
        lon=lon,
        location_label=LIVE_LABEL,
    )


async def fetch_forecast(
    lat: float,
    lon: float,
    date_text: str,
    *,
    live: bool | None = None,
    forecast_url: str = FORECAST_URL,
    timeout: float = HTTP_TIMEOUT_SECONDS,
    rng: random.Random | None = None,
) -> WeatherObservation:
    """Daily forecast for one date at (lat, lon). Never raises."""
    if live is None:
        live = config.LIVE_WEATHER_ENABLED
    if live:
        try:
            observation = await _live_forecast(lat, lon, date_text, forecast_url, timeout)
            logger.info("Live forecast for (%.4f, %.4f) on %s", lat, lon, date_text)
            return observation
        except (ExternalSourceUnavailable, KeyError, TypeError, ValueError) as exc:
            logger.warning("Forecast failed for %s, using seasonal estimate: %s", date_text[:80], exc)

    return estimate_weather(lat, lon, date_text, rng=rng)
