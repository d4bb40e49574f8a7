"""
Data models for weather observations and per-session lookup state.
"""

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Optional

from abilities.messages import toggle_label


def _icon_url(icon: str) -> str:
    # The provider hands out protocol-relative paths ("//cdn.weatherapi.com/...")
    if icon.startswith("//"):
        return f"https:{icon}"
    return icon


@dataclass
class WeatherObservation:
    temperature_c: float
    temperature_f: float
    description: str
    location: str  # as resolved by the provider, not the raw query
    icon_url: str
    is_day: bool

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_payload(cls, data: dict) -> WeatherObservation:
        """
        Build an observation from a provider response body.

        Raises KeyError, TypeError or ValueError when the body does not have
        the expected shape.
        """
        current = data["current"]
        condition = current["condition"]
        description = condition["text"]
        icon = condition["icon"]
        name = data["location"]["name"]
        if not all(isinstance(v, str) for v in (description, icon, name)):
            raise TypeError("condition text, icon and location name must be strings")
        return cls(
            temperature_c=float(current["temp_c"]),
            temperature_f=float(current["temp_f"]),
            description=description,
            location=name,
            icon_url=_icon_url(icon),
            is_day=current["is_day"] == 1,
        )


@dataclass
class LookupState:
    location: str = ""
    observation: Optional[WeatherObservation] = None
    error: Optional[str] = None
    phase: str = "idle"  # idle, loading, success, failure
    use_celsius: bool = True
    generation: int = 0  # bumped on every submission; stale completions are dropped

    @property
    def is_loading(self) -> bool:
        return self.phase == "loading"

    @property
    def button_label(self) -> str:
        return "Loading..." if self.is_loading else "Search"

    @property
    def toggle_label(self) -> str:
        return toggle_label(self.use_celsius)

    def to_dict(self) -> dict:
        return {
            "location": self.location,
            "observation": self.observation.to_dict() if self.observation else None,
            "error": self.error,
            "phase": self.phase,
            "use_celsius": self.use_celsius,
        }
