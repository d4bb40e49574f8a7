"""
Lookup — per-session weather search state and its transitions.

This is the core of the widget. Both the Telegram bot and the web widget
hand user input to a WeatherLookup and render whatever state it ends in.

Flow:
  validate → fetch → normalize → format → display

State machine (LookupState.phase):
  idle ── submit(non-empty) ──▶ loading ──▶ success | failure
  idle/failure ── submit(empty) ──▶ idle  (error shown, no fetch)
  Toggling the unit never fetches and never touches the stored values.
"""

from __future__ import annotations
import asyncio
import logging
import threading
from collections import OrderedDict
from typing import Callable, Optional

from abilities.messages import format_summary
from abilities.weather import WeatherError, fetch_weather, validate_location
from config import MAX_SESSIONS, WEATHER_API_KEY, WEATHER_API_URL, WEATHER_TIMEOUT
from models import LookupState, WeatherObservation

log = logging.getLogger(__name__)

Fetcher = Callable[..., WeatherObservation]


class WeatherLookup:
    def __init__(
        self,
        api_key: Optional[str] = None,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        fetcher: Fetcher = fetch_weather,
    ):
        self.state = LookupState()
        self._api_key = WEATHER_API_KEY if api_key is None else api_key
        self._url = url or WEATHER_API_URL
        self._timeout = WEATHER_TIMEOUT if timeout is None else timeout
        self._fetcher = fetcher
        # Guards state changes; never held across the fetch itself.
        self._lock = threading.Lock()

    async def submit(self, raw) -> Optional[LookupState]:
        """
        Run one search for the user's raw input.

        Empty input short-circuits before any network call. Otherwise exactly
        one fetch is issued; its outcome replaces the observation or the error.
        Returns None when another submission started while this one was in
        flight: the result is discarded and the state belongs to the newer one.
        """
        state = self.state
        try:
            query = validate_location(raw)
        except WeatherError as e:
            with self._lock:
                state.location = raw if isinstance(raw, str) else ""
                state.generation += 1  # anything still in flight is now stale
                state.error = e.message
                state.observation = None
                state.phase = "idle"
            return state

        with self._lock:
            state.location = raw
            state.generation += 1
            generation = state.generation
            state.phase = "loading"
            state.error = None

        try:
            observation = await asyncio.to_thread(
                self._fetcher, query,
                api_key=self._api_key, url=self._url, timeout=self._timeout,
            )
        except WeatherError as e:
            with self._lock:
                if generation != state.generation:
                    log.info(f"Dropping stale failure for {query!r}")
                    return None
                state.error = e.message
                state.observation = None
                state.phase = "failure"
            return state

        with self._lock:
            if generation != state.generation:
                log.info(f"Dropping stale result for {query!r}")
                return None
            state.observation = observation
            state.error = None
            state.phase = "success"
        return state

    def is_current(self, generation: int) -> bool:
        """True if `generation` is still the latest submission's."""
        return generation == self.state.generation

    def toggle_unit(self) -> bool:
        """Flip between Celsius and Fahrenheit. Returns True if now Celsius."""
        with self._lock:
            self.state.use_celsius = not self.state.use_celsius
            return self.state.use_celsius

    def summary_text(self) -> str:
        """Plain-text rendering of the current state."""
        state = self.state
        if state.is_loading:
            return "Loading..."
        if state.error:
            return state.error
        if state.observation:
            return format_summary(state.observation, state.use_celsius)
        return "Enter a city name to see the current weather."


class LookupManager:
    """
    Hands out one WeatherLookup per session (chat id, browser session).

    At most `max_sessions` are kept; the least recently used one is dropped
    when a new session would exceed the cap.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        fetcher: Fetcher = fetch_weather,
        max_sessions: Optional[int] = None,
    ):
        self._lookups: OrderedDict[str, WeatherLookup] = OrderedDict()
        self._api_key = api_key
        self._url = url
        self._timeout = timeout
        self._fetcher = fetcher
        self._max_sessions = MAX_SESSIONS if max_sessions is None else max_sessions
        self._lock = threading.RLock()

    def get(self, session_id) -> WeatherLookup:
        key = str(session_id)
        with self._lock:
            lookup = self._lookups.get(key)
            if lookup is not None:
                self._lookups.move_to_end(key)
                return lookup
            lookup = WeatherLookup(
                api_key=self._api_key, url=self._url,
                timeout=self._timeout, fetcher=self._fetcher,
            )
            self._lookups[key] = lookup
            log.info(f"New lookup session {key}")
            while len(self._lookups) > self._max_sessions:
                oldest = next(iter(self._lookups))
                self.drop(oldest)
                log.info(f"Evicted idle lookup session {oldest}")
        return lookup

    def drop(self, session_id) -> bool:
        """Forget a session. Returns True if it existed."""
        with self._lock:
            return self._lookups.pop(str(session_id), None) is not None

    def sessions(self) -> list[str]:
        return list(self._lookups)
