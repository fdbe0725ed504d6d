import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root (one level above bot-backend/)
load_dotenv(dotenv_path=Path(__file__).parent.parent / ".env")

GEOCODING_URL = os.getenv("GEOCODING_URL", "https://geocoding-api.open-meteo.com/v1/search")
FORECAST_URL = os.getenv("FORECAST_URL", "https://api.open-meteo.com/v1/forecast")

BOT_PORT = int(os.getenv("BOT_PORT", "8001"))

_FALSY = {"0", "false", "no", "off"}


def _env_seconds(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() not in _FALSY


HTTP_TIMEOUT_SECONDS = _env_seconds("HTTP_TIMEOUT_SECONDS", 10.0)
SESSION_IDLE_SECONDS = _env_seconds("SESSION_IDLE_SECONDS", 3600.0)
LIVE_WEATHER_ENABLED = _env_flag("LIVE_WEATHER_ENABLED", True)
