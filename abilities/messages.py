"""
Message formatting — pure functions turning an observation into the
sentences shown to the user.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from models import WeatherObservation

# One template per band, coldest first. Bounds are exclusive upper limits;
# the last band has none.
_BANDS = [
    "It is freezing at {t}{u}! Bundle up!",
    "It's quite cold at {t}{u}. Wear warm clothes.",
    "The temperature is {t}{u}. Light jacket is enough.",
    "It's a pleasant {t}{u}. Enjoy the day!",
    "It's hot at {t}{u}. Stay hydrated!",
]
CELSIUS_BOUNDS = (0, 10, 20, 30)
FAHRENHEIT_BOUNDS = (32, 50, 68, 86)

CONDITIONS = {
    "sunny": "It's a beautiful sunny day.",
    "partly cloudy": "Expect some clouds and sunshine.",
    "cloudy": "It's cloudy today.",
    "overcast": "The sky is overcast.",
    "rain": "Don't forget your umbrella — it's raining.",
    "thunderstorm": "Thunderstorms are expected today.",
    "snow": "Bundle up! It's snowing.",
    "mist": "It's misty outside.",
    "fog": "Be careful — there's fog outside.",
}


def unit_symbol(use_celsius: bool) -> str:
    return "°C" if use_celsius else "°F"


def format_number(value: float) -> str:
    """20.0 -> "20", 20.5 -> "20.5"."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def temperature_message(temp_c: float, temp_f: float, use_celsius: bool = True) -> str:
    """Pick the value for the selected unit and describe how it feels."""
    temp = temp_c if use_celsius else temp_f
    bounds = CELSIUS_BOUNDS if use_celsius else FAHRENHEIT_BOUNDS
    band = len(bounds)
    for i, upper in enumerate(bounds):
        if temp < upper:
            band = i
            break
    return _BANDS[band].format(t=format_number(temp), u=unit_symbol(use_celsius))


def condition_message(description: str) -> str:
    return CONDITIONS.get(description.lower(), description)


def location_message(location: str, is_day: bool) -> str:
    return f"{location} {'during the day' if is_day else 'at night'}"


def toggle_label(use_celsius: bool) -> str:
    """Label for the toggle control: names the unit it switches TO."""
    return f"Switch to {unit_symbol(not use_celsius)}"


def format_summary(observation: WeatherObservation, use_celsius: bool = True) -> str:
    return "\n".join([
        condition_message(observation.description),
        temperature_message(observation.temperature_c, observation.temperature_f, use_celsius),
        location_message(observation.location, observation.is_day),
    ])
