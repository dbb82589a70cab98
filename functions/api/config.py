"""
Environment configuration for the assistant Cloud Functions.
Everything is read from environment variables; optional features
(weather, search) are simply disabled when their keys are absent.
"""

import logging
import os
from enum import Enum
from typing import Mapping, Optional

from pydantic import BaseModel, ValidationError

from .constants import (
    DEFAULT_GEMINI_MODEL,
    DEFAULT_LOCATION_LABEL,
    DEFAULT_ORGANIZATION,
    DEFAULT_TIMEZONE,
    DEFAULT_VERTEX_LOCATION,
    DEFAULT_WEATHER_CITY,
    PREMIUM_VOICE_NAME,
    STANDARD_VOICE_NAME,
)
from .errors import ConfigurationError

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


class SearchPolicy(str, Enum):
    CLASSIFIED = "classified"
    ALWAYS = "always"
    NEVER = "never"


class SearchMode(str, Enum):
    INTELLIGENT = "intelligent"
    BASIC = "basic"


class CredentialTransport(str, Enum):
    MEMORY = "memory"
    FILE = "file"


class Settings(BaseModel):
    # Generation
    service_account_json: Optional[str] = None
    gemini_api_key: Optional[str] = None
    project_id: Optional[str] = None
    vertex_location: str = DEFAULT_VERTEX_LOCATION
    gemini_model: str = DEFAULT_GEMINI_MODEL
    max_output_tokens: int = 1024
    temperature: float = 0.7
    top_p: float = 0.95
    generation_timeout_ms: int = 30000
    credential_transport: CredentialTransport = CredentialTransport.MEMORY

    # Enrichment
    search_api_key: Optional[str] = None
    search_engine_id: Optional[str] = None
    search_policy: SearchPolicy = SearchPolicy.CLASSIFIED
    search_mode: SearchMode = SearchMode.INTELLIGENT
    search_variant_delay_sec: float = 0.3
    search_results_per_query: int = 3
    weather_api_key: Optional[str] = None
    default_weather_city: str = DEFAULT_WEATHER_CITY

    # Prompt context
    timezone: str = DEFAULT_TIMEZONE
    location_label: str = DEFAULT_LOCATION_LABEL
    organization: str = DEFAULT_ORGANIZATION

    # Speech
    tts_api_key: Optional[str] = None
    premium_voice: str = PREMIUM_VOICE_NAME
    standard_voice: str = STANDARD_VOICE_NAME

    # Transport
    http_connect_timeout_sec: float = 5
    http_read_timeout_sec: float = 10

    sentry_dsn: Optional[str] = None

    @property
    def http_timeout(self) -> tuple[float, float]:
        return (self.http_connect_timeout_sec, self.http_read_timeout_sec)

    @property
    def has_generation_credential(self) -> bool:
        return bool(self.service_account_json or self.gemini_api_key)

    @property
    def search_enabled(self) -> bool:
        return bool(self.search_api_key and self.search_engine_id)

    @property
    def weather_enabled(self) -> bool:
        return bool(self.weather_api_key)


# Settings field -> environment variable(s), first non-empty wins
ENV_VARS = {
    "service_account_json": ("GCP_SERVICE_ACCOUNT_JSON",),
    "gemini_api_key": ("GEMINI_API_KEY",),
    "project_id": ("GCP_PROJECT_ID", "GOOGLE_CLOUD_PROJECT"),
    "vertex_location": ("VERTEX_LOCATION",),
    "gemini_model": ("GEMINI_MODEL",),
    "max_output_tokens": ("GENERATION_MAX_OUTPUT_TOKENS",),
    "temperature": ("GENERATION_TEMPERATURE",),
    "top_p": ("GENERATION_TOP_P",),
    "generation_timeout_ms": ("GENERATION_TIMEOUT_MS",),
    "credential_transport": ("VERTEX_CREDENTIALS_TRANSPORT",),
    # The legacy mixed-case name is still set on older deployments
    "search_api_key": ("GOOGLE_SEARCH_API_KEY", "Google_Search_API_KEY"),
    "search_engine_id": ("SEARCH_ENGINE_ID",),
    "search_policy": ("SEARCH_POLICY",),
    "search_mode": ("SEARCH_MODE",),
    "search_variant_delay_sec": ("SEARCH_VARIANT_DELAY_SEC",),
    "search_results_per_query": ("SEARCH_RESULTS_PER_QUERY",),
    "weather_api_key": ("OPENWEATHER_API_KEY",),
    "default_weather_city": ("DEFAULT_WEATHER_CITY",),
    "timezone": ("ASSISTANT_TIMEZONE",),
    "location_label": ("LOCATION_LABEL",),
    "organization": ("ASSISTANT_ORGANIZATION",),
    "tts_api_key": ("GOOGLE_TTS_API_KEY",),
    "premium_voice": ("SPEECH_PREMIUM_VOICE",),
    "standard_voice": ("SPEECH_STANDARD_VOICE",),
    "http_connect_timeout_sec": ("HTTP_CONNECT_TIMEOUT_SEC",),
    "http_read_timeout_sec": ("HTTP_READ_TIMEOUT_SEC",),
    "sentry_dsn": ("SENTRY_DSN",),
}


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Raises:
        ConfigurationError if a value cannot be coerced (e.g. a non-numeric timeout)
    """
    if environ is None:
        environ = os.environ

    values = {}
    for field, names in ENV_VARS.items():
        for name in names:
            value = (environ.get(name) or "").strip()
            if value:
                values[field] = value
                break

    try:
        return Settings(**values)
    except ValidationError as e:
        bad_fields = sorted({str(err["loc"][0]) for err in e.errors()})
        bad_vars = [ENV_VARS[field][0] for field in bad_fields if field in ENV_VARS]
        raise ConfigurationError(
            f"Invalid configuration value for {', '.join(bad_vars) or 'settings'}"
        ) from e


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Process-wide settings, loaded once on first use"""
    global _settings
    if _settings is None:
        _settings = load_settings()
        logger.info(
            "Loaded settings: model=%s search=%s weather=%s tts=%s",
            _settings.gemini_model,
            _settings.search_enabled,
            _settings.weather_enabled,
            bool(_settings.tts_api_key),
        )
    return _settings


def reload_settings() -> Settings:
    """Drop the cached settings and re-read the environment"""
    global _settings
    _settings = None
    return get_settings()
