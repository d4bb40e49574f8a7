"""
Tests for abilities/weather.py and WeatherObservation.from_payload
"""
from unittest.mock import patch

import pytest
import requests

from abilities.weather import EmptyInput, NotFound, fetch_weather, validate_location
from models import WeatherObservation


# ── Input validation ───────────────────────────────────────────

@pytest.mark.parametrize("raw", ["", " ", "\t\n  ", None])
def test_empty_input_rejected(raw):
    with pytest.raises(EmptyInput) as exc:
        validate_location(raw)
    assert exc.value.message == "Please enter a valid location."


def test_input_is_trimmed():
    assert validate_location("  Paris \n") == "Paris"


# ── Fetch ──────────────────────────────────────────────────────

@patch("abilities.weather.requests.get")
def test_fetch_success(mock_get, fake_response, provider_body):
    mock_get.return_value = fake_response(200, provider_body())

    obs = fetch_weather("Paris", api_key="secret", url="https://example.test/current.json", timeout=3)

    assert obs == WeatherObservation(
        temperature_c=20.0,
        temperature_f=68.0,
        description="Sunny",
        location="Paris",
        icon_url="https://cdn/x.png",
        is_day=True,
    )
    mock_get.assert_called_once_with(
        "https://example.test/current.json",
        params={"key": "secret", "q": "Paris"},
        timeout=3,
    )


@patch("abilities.weather.requests.get")
def test_resolved_name_comes_from_provider(mock_get, fake_response, provider_body):
    mock_get.return_value = fake_response(200, provider_body(name="London"))
    assert fetch_weather("londn", api_key="k").location == "London"


@patch("abilities.weather.requests.get")
def test_night_flag(mock_get, fake_response, provider_body):
    mock_get.return_value = fake_response(200, provider_body(is_day=0))
    assert fetch_weather("Paris", api_key="k").is_day is False


@pytest.mark.parametrize("status", [400, 401, 403, 404, 500, 503])
@patch("abilities.weather.requests.get")
def test_non_success_status_is_not_found(mock_get, status, fake_response):
    mock_get.return_value = fake_response(status, {"error": {"code": 1006}})
    with pytest.raises(NotFound) as exc:
        fetch_weather("Atlantis", api_key="k")
    assert exc.value.message == "City not found. Please try again."


@patch("abilities.weather.requests.get")
def test_transport_failure_is_not_found(mock_get):
    mock_get.side_effect = requests.ConnectionError("offline")
    with pytest.raises(NotFound) as exc:
        fetch_weather("Paris", api_key="k")
    assert isinstance(exc.value.__cause__, requests.ConnectionError)


@patch("abilities.weather.requests.get")
def test_bad_json_is_not_found(mock_get, fake_response):
    resp = fake_response(200)
    resp.json.side_effect = ValueError("Expecting value")
    mock_get.return_value = resp
    with pytest.raises(NotFound):
        fetch_weather("Paris", api_key="k")


@pytest.mark.parametrize("body", [
    {},
    {"location": {"name": "Paris"}},
    {"current": {"temp_c": 1, "temp_f": 2, "is_day": 1, "condition": {"text": "x", "icon": "//i"}}},
    {"location": {"name": "Paris"}, "current": {"temp_c": "warm", "temp_f": 2, "is_day": 1,
                                                "condition": {"text": "x", "icon": "//i"}}},
    {"location": {"name": None}, "current": {"temp_c": 1, "temp_f": 2, "is_day": 1,
                                             "condition": {"text": "x", "icon": "//i"}}},
    [],
])
@patch("abilities.weather.requests.get")
def test_malformed_body_is_not_found(mock_get, body, fake_response):
    mock_get.return_value = fake_response(200, body)
    with pytest.raises(NotFound):
        fetch_weather("Paris", api_key="k")


# ── Normalization ──────────────────────────────────────────────

def test_absolute_icon_url_kept(provider_body):
    obs = WeatherObservation.from_payload(provider_body(icon="https://cdn/y.png"))
    assert obs.icon_url == "https://cdn/y.png"


def test_integer_temperatures_become_floats(provider_body):
    obs = WeatherObservation.from_payload(provider_body(temp_c=21, temp_f=70))
    assert isinstance(obs.temperature_c, float)
    assert obs.temperature_f == 70.0
