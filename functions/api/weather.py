"""
Weather lookup against OpenWeather for the prompt context.
Failures never escalate: callers get a WeatherSnapshot or None.
"""

import logging
import math
import re
from typing import Optional

from .constants import OPENWEATHER_URL
from .errors import ConfigurationError, UpstreamUnavailable
from .http_client import REQUEST_TIMEOUT, ProviderHttpClient
from .models import WeatherSnapshot, WeatherSource
from .text import fold

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

# Folded city token -> OpenWeather "City,CC" query
CITY_QUERIES = {
    "istanbul": "Istanbul,TR",
    "ankara": "Ankara,TR",
    "izmir": "Izmir,TR",
    "bursa": "Bursa,TR",
    "antalya": "Antalya,TR",
    "adana": "Adana,TR",
    "konya": "Konya,TR",
    "gaziantep": "Gaziantep,TR",
    "kayseri": "Kayseri,TR",
    "trabzon": "Trabzon,TR",
    "eskisehir": "Eskisehir,TR",
    "samsun": "Samsun,TR",
    "erfurt": "Erfurt,DE",
    "berlin": "Berlin,DE",
    "munih": "Munich,DE",
    "munchen": "Munich,DE",
    "munich": "Munich,DE",
    "hamburg": "Hamburg,DE",
    "koln": "Cologne,DE",
    "frankfurt": "Frankfurt am Main,DE",
    "stuttgart": "Stuttgart,DE",
    "dusseldorf": "Dusseldorf,DE",
    "leipzig": "Leipzig,DE",
    "dresden": "Dresden,DE",
    "weimar": "Weimar,DE",
    "jena": "Jena,DE",
}

# Apostrophes used to attach Turkish case suffixes ("İstanbul'da")
_APOSTROPHES = "'’`´"
_TOKEN = re.compile(r"[^\W\d_]+(?:[" + _APOSTROPHES + r"][^\W\d_]+)?")
_LOCATIVE_SUFFIXES = frozenset({"da", "de", "ta", "te"})


def normalize_city(city: str) -> str:
    """Map a known city token to its disambiguated form; unknown tokens pass through."""
    token = city.strip()
    return CITY_QUERIES.get(fold(token), token)


def extract_city(prompt: str) -> Optional[str]:
    """
    Find the first known city mentioned in the prompt, else the first
    capitalized token carrying a locative suffix ("Paris'te").
    Returns the token as written (without its case suffix), or None.
    """
    fallback = None
    for match in _TOKEN.finditer(prompt or ""):
        parts = re.split("[" + _APOSTROPHES + "]", match.group(0), maxsplit=1)
        word = parts[0]
        if fold(word) in CITY_QUERIES:
            return word
        suffix = fold(parts[1]) if len(parts) > 1 else ""
        if fallback is None and suffix in _LOCATIVE_SUFFIXES and word[0].isupper():
            fallback = word
    return fallback


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def mps_to_kph(speed_mps: float) -> int:
    return round_half_up(speed_mps * 3.6)


def _optional_int(value) -> Optional[int]:
    if value is None:
        return None
    return round_half_up(float(value))


def parse_weather_payload(data: dict) -> WeatherSnapshot:
    """
    Convert an OpenWeather /weather payload into a snapshot.
    Raises KeyError/TypeError/ValueError/AttributeError on malformed payloads.
    """
    main = data["main"]
    conditions = data.get("weather") or [{}]
    wind = data.get("wind") or {}
    speed = wind.get("speed")

    return WeatherSnapshot(
        city=data.get("name") or "",
        country=(data.get("sys") or {}).get("country", ""),
        temperature_c=round_half_up(float(main["temp"])),
        feels_like_c=_optional_int(main.get("feels_like")),
        humidity_pct=_optional_int(main.get("humidity")),
        description=conditions[0].get("description", ""),
        wind_kph=mps_to_kph(float(speed)) if speed is not None else None,
        pressure_hpa=_optional_int(main.get("pressure")),
        source=WeatherSource.PRIMARY_PROVIDER,
    )


class WeatherClient:
    """OpenWeather current-conditions client (metric units, Turkish descriptions)."""

    def __init__(self, api_key: str | None, http: ProviderHttpClient | None = None,
                 timeout: tuple[float, float] = REQUEST_TIMEOUT):
        if not api_key:
            raise ConfigurationError("Weather API key missing: set OPENWEATHER_API_KEY")
        self.api_key = api_key
        self.http = http or ProviderHttpClient.build("openweather", timeout)

    def lookup(self, city: str) -> Optional[WeatherSnapshot]:
        """
        Current weather for a free-text city name.

        Returns:
            WeatherSnapshot, or None when the provider is unavailable or answers garbage
        """
        query = normalize_city(city)
        params = {
            "q": query,
            "appid": self.api_key,
            "units": "metric",
            "lang": "tr",
        }

        try:
            resp = self.http.get(OPENWEATHER_URL, params=params)
            snapshot = parse_weather_payload(resp.json())
        except UpstreamUnavailable as e:
            logger.warning("Weather unavailable for %s: %s", query, e.message)
            return None
        except (ValueError, KeyError, TypeError, IndexError, AttributeError) as e:
            logger.warning("Malformed weather payload for %s: %s", query, e)
            return None

        logger.info("Weather for %s: %s°C, %s", query, snapshot.temperature_c, snapshot.description)
        return snapshot
