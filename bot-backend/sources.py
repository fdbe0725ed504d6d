import logging
from typing import Any

import httpx

from config import HTTP_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class ExternalSourceUnavailable(Exception):
    pass


async def fetch_json(
    url: str,
    params: dict[str, Any],
    timeout: float = HTTP_TIMEOUT_SECONDS,
) -> dict[str, Any]:
    """GET a JSON object. Raises ExternalSourceUnavailable for anything unusable."""
    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(url, params=params, timeout=timeout)
    except httpx.TimeoutException as exc:
        raise ExternalSourceUnavailable(f"timed out calling {url}") from exc
    except httpx.RequestError as exc:
        raise ExternalSourceUnavailable(f"could not reach {url}: {exc}") from exc

    if not response.is_success:
        raise ExternalSourceUnavailable(f"{url} returned HTTP {response.status_code}")

    try:
        data = response.json()
    except ValueError as exc:
        raise ExternalSourceUnavailable(f"{url} returned malformed JSON") from exc

    if not isinstance(data, dict):
        raise ExternalSourceUnavailable(f"{url} returned {type(data).__name__}, expected an object")
    return data
