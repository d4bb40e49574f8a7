"""
Weather ability — current conditions for a city from WeatherAPI.

One GET per lookup. Every failure (HTTP status, transport, malformed body)
surfaces as NotFound; callers never see a raw requests or JSON error.
"""

import logging
from typing import Optional

import requests

from config import WEATHER_API_KEY, WEATHER_API_URL, WEATHER_TIMEOUT
from models import WeatherObservation

log = logging.getLogger(__name__)


class WeatherError(Exception):
    """Base for lookup failures that are shown to the user as-is."""

    message = "Something went wrong. Please try again."

    def __init__(self, message: Optional[str] = None):
        if message:
            self.message = message
        super().__init__(self.message)


class EmptyInput(WeatherError):
    message = "Please enter a valid location."


class NotFound(WeatherError):
    message = "City not found. Please try again."


def validate_location(raw) -> str:
    """Trim the user's input; raise EmptyInput if nothing is left."""
    if not isinstance(raw, str):
        raise EmptyInput()
    query = raw.strip()
    if not query:
        raise EmptyInput()
    return query


def fetch_weather(
    query: str,
    api_key: Optional[str] = None,
    url: Optional[str] = None,
    timeout: Optional[float] = None,
) -> WeatherObservation:
    """Get current weather for an already validated query."""
    params = {
        "key": WEATHER_API_KEY if api_key is None else api_key,
        "q": query,
    }
    log.info(f"Fetching weather for {query!r}")
    try:
        resp = requests.get(
            url or WEATHER_API_URL,
            params=params,
            timeout=WEATHER_TIMEOUT if timeout is None else timeout,
        )
    except requests.RequestException as e:
        log.warning(f"Weather request for {query!r} failed: {e}")
        raise NotFound() from e

    if not resp.ok:
        log.warning(f"Weather provider returned {resp.status_code} for {query!r}")
        raise NotFound()

    try:
        observation = WeatherObservation.from_payload(resp.json())
    except (ValueError, KeyError, TypeError) as e:
        log.warning(f"Malformed weather response for {query!r}: {e!r}")
        raise NotFound() from e

    log.info(f"Weather for {query!r}: {observation.location}, {observation.temperature_c}°C")
    return observation
