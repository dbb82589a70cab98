"""
Tests for the OpenWeather lookup.
"""
from urllib.parse import parse_qs, urlparse

import pytest
import requests
import responses

from api.constants import OPENWEATHER_URL
from api.errors import ConfigurationError
from api.models import WeatherSource
from api.tests.conftest import WeatherPayloadFactory
from api.weather import (
    WeatherClient,
    extract_city,
    mps_to_kph,
    normalize_city,
    parse_weather_payload,
    round_half_up,
)


class TestCityNormalization:

    @pytest.mark.parametrize("city,expected", [
        ("istanbul", "Istanbul,TR"),
        ("İstanbul", "Istanbul,TR"),
        ("ISTANBUL", "Istanbul,TR"),
        ("İzmir", "Izmir,TR"),
        ("Erfurt", "Erfurt,DE"),
        ("München", "Munich,DE"),
        ("Köln", "Cologne,DE"),
    ])
    def test_known_cities(self, city, expected):
        assert normalize_city(city) == expected

    def test_unknown_city_passes_through(self):
        assert normalize_city("Reykjavik") == "Reykjavik"

    def test_extract_city_strips_case_suffix(self):
        assert extract_city("İstanbul'da hava durumu nasıl?") == "İstanbul"

    def test_extract_city_german(self):
        assert extract_city("Wie ist das Wetter in Erfurt heute?") == "Erfurt"

    def test_extract_city_none(self):
        assert extract_city("Hava nasıl?") is None

    def test_extract_city_unknown_locative_passes_through(self):
        city = extract_city("Paris'te hava nasıl?")
        assert city == "Paris"
        assert normalize_city(city) == "Paris"

    def test_extract_city_known_city_preferred(self):
        assert extract_city("Paris'te mi Erfurt'ta mı daha sıcak?") == "Erfurt"

    def test_extract_city_ignores_lowercase_locatives(self):
        assert extract_city("ev'de hava nasıl?") is None


class TestConversions:

    def test_wind_10_mps_is_36_kph(self):
        assert mps_to_kph(10) == 36

    def test_wind_rounds_to_nearest(self):
        assert mps_to_kph(3.2) == 12

    @pytest.mark.parametrize("value,expected", [
        (21.4, 21),
        (21.5, 22),
        (-0.4, 0),
        (-2.5, -2),
        (-2.6, -3),
    ])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected


class TestParsePayload:

    def test_every_field_mapped(self):
        snapshot = parse_weather_payload(WeatherPayloadFactory.create())
        assert snapshot.city == "Istanbul"
        assert snapshot.country == "TR"
        assert snapshot.temperature_c == 21
        assert snapshot.feels_like_c == 21
        assert snapshot.humidity_pct == 55
        assert snapshot.description == "açık"
        assert snapshot.wind_kph == 12
        assert snapshot.pressure_hpa == 1015
        assert snapshot.source == WeatherSource.PRIMARY_PROVIDER

    def test_missing_main_raises(self):
        with pytest.raises(KeyError):
            parse_weather_payload({"name": "Istanbul"})


class TestWeatherClient:

    def test_missing_api_key(self):
        with pytest.raises(ConfigurationError) as exc_info:
            WeatherClient(None)
        assert "OPENWEATHER_API_KEY" in exc_info.value.message

    @responses.activate
    def test_lookup_success(self):
        responses.add(responses.GET, OPENWEATHER_URL, json=WeatherPayloadFactory.create(), status=200)

        snapshot = WeatherClient("wkey").lookup("İstanbul")

        assert snapshot is not None
        assert snapshot.temperature_c == 21
        params = parse_qs(urlparse(responses.calls[0].request.url).query)
        assert params["q"] == ["Istanbul,TR"]
        assert params["units"] == ["metric"]
        assert params["lang"] == ["tr"]
        assert params["appid"] == ["wkey"]

    @responses.activate
    def test_non_success_status_returns_none(self):
        responses.add(responses.GET, OPENWEATHER_URL, json={"cod": "404", "message": "city not found"}, status=404)
        assert WeatherClient("wkey").lookup("Atlantis") is None

    @responses.activate
    def test_malformed_json_returns_none(self):
        responses.add(responses.GET, OPENWEATHER_URL, body="<html>oops</html>", status=200)
        assert WeatherClient("wkey").lookup("Erfurt") is None

    @responses.activate
    def test_unexpected_shape_returns_none(self):
        responses.add(responses.GET, OPENWEATHER_URL, json={"main": {}}, status=200)
        assert WeatherClient("wkey").lookup("Erfurt") is None

    @responses.activate
    @pytest.mark.parametrize("payload", [
        {"main": {"temp": 20}, "weather": ["clear"]},
        {"main": {"temp": 20}, "sys": "TR"},
        {"main": {"temp": 20}, "wind": [3.2]},
        {"main": {"temp": 20}, "weather": [{"description": ["bulutlu"]}]},
        ["not", "an", "object"],
    ])
    def test_wrong_field_types_return_none(self, payload):
        responses.add(responses.GET, OPENWEATHER_URL, json=payload, status=200)
        assert WeatherClient("wkey").lookup("Erfurt") is None

    @responses.activate
    def test_network_error_returns_none(self):
        responses.add(responses.GET, OPENWEATHER_URL, body=requests.exceptions.ConnectionError("down"))
        assert WeatherClient("wkey").lookup("Erfurt") is None
