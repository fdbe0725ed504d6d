import logging

import config
from config import GEOCODING_URL, HTTP_TIMEOUT_SECONDS
from models import Location
from sources import ExternalSourceUnavailable, fetch_json

logger = logging.getLogger(__name__)

FALLBACK_CITIES: dict[str, Location] = {
    "new york": Location(lat=40.7128, lon=-74.0060, label="New York"),
    "london": Location(lat=51.5074, lon=-0.1278, label="London"),
    "tokyo": Location(lat=35.6762, lon=139.6503, label="Tokyo"),
    "paris": Location(lat=48.8566, lon=2.3522, label="Paris"),
    "sydney": Location(lat=-33.8688, lon=151.2093, label="Sydney"),
    "mumbai": Location(lat=19.0760, lon=72.8777, label="Mumbai"),
}

DEFAULT_LOCATION = FALLBACK_CITIES["new york"]


def fallback_location(place_name: str) -> Location:
    normalized = place_name.lower()
    for city, location in FALLBACK_CITIES.items():
        if city in normalized:
            return location
    return DEFAULT_LOCATION


async def _geocode(place_name: str, geocoding_url: str, timeout: float) -> Location:
    data = await fetch_json(
        geocoding_url,
        params={"name": place_name, "count": 1, "language": "en", "format": "json"},
        timeout=timeout,
    )
    results = data.get("results") or []
    if not results:
        raise ExternalSourceUnavailable(f"no geocoding results for {place_name!r}")
    top = results[0]
    return Location(
        lat=float(top["latitude"]),
        lon=float(top["longitude"]),
        label=str(top.get("name") or place_name),
    )


async def resolve_location(
    place_name: str,
    *,
    live: bool | None = None,
    geocoding_url: str = GEOCODING_URL,
    timeout: float = HTTP_TIMEOUT_SECONDS,
) -> Location:
    """Map a free-text place name to coordinates. Never raises."""
    if live is None:
        live = config.LIVE_WEATHER_ENABLED
    place_name = (place_name or "").strip()
    if live and place_name:
        try:
            location = await _geocode(place_name, geocoding_url, timeout)
            logger.info("Geocoded %r -> %s (%.4f, %.4f)", place_name[:80], location.label, location.lat, location.lon)
            return location
        except (ExternalSourceUnavailable, KeyError, TypeError, ValueError) as exc:
            logger.warning("Geocoding failed for %r, using fallback table: %s", place_name[:80], exc)

    location = fallback_location(place_name)
    logger.info("Fallback location for %r: %s", place_name[:80], location.label)
    return location
