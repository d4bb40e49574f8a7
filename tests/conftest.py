from unittest.mock import Mock

import pytest

from models import WeatherObservation


def _provider_body(temp_c=20.0, temp_f=68.0, text="Sunny", icon="//cdn/x.png", is_day=1, name="Paris"):
    return {
        "location": {"name": name, "country": "France"},
        "current": {
            "temp_c": temp_c,
            "temp_f": temp_f,
            "is_day": is_day,
            "condition": {"text": text, "icon": icon, "code": 1000},
        },
    }


def _fake_response(status=200, body=None):
    resp = Mock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    resp.json.return_value = body if body is not None else _provider_body()
    return resp


def _make_observation(location="Paris", temperature_c=20.0, temperature_f=68.0,
                      description="Sunny", is_day=True):
    return WeatherObservation(
        temperature_c=temperature_c,
        temperature_f=temperature_f,
        description=description,
        location=location,
        icon_url="https://cdn/x.png",
        is_day=is_day,
    )


@pytest.fixture
def provider_body():
    """Factory for WeatherAPI current.json bodies."""
    return _provider_body


@pytest.fixture
def fake_response():
    """Factory for requests.Response stand-ins."""
    return _fake_response


@pytest.fixture
def make_observation():
    return _make_observation


@pytest.fixture
def paris():
    return _make_observation()


@pytest.fixture
def fetcher(paris):
    """Stand-in for fetch_weather that always finds Paris."""
    return Mock(return_value=paris)
