"""Shared constants for the API layer."""

# Gemini model used for prompt answering
DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"
DEFAULT_VERTEX_LOCATION = "us-central1"
VERTEX_SCOPES = ["https://www.googleapis.com/auth/cloud-platform"]

# Provider endpoints
OPENWEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"
CUSTOM_SEARCH_URL = "https://www.googleapis.com/customsearch/v1"
TTS_SYNTHESIZE_URL = "https://texttospeech.googleapis.com/v1/text:synthesize"

# Prompt context defaults
DEFAULT_TIMEZONE = "Europe/Istanbul"
DEFAULT_LOCATION_LABEL = "Türkiye/Almanya"
DEFAULT_ORGANIZATION = "Löwentech"
DEFAULT_WEATHER_CITY = "Erfurt"

# Search caps per mode
INTELLIGENT_SEARCH_CAP = 8
BASIC_SEARCH_CAP = 4
SEARCH_LANGUAGE = "tr-TR"

# Meteorological sites used when weather falls back to web search
WEATHER_SEARCH_SITES = (
    "mgm.gov.tr",
    "dwd.de",
    "meteoblue.com",
    "accuweather.com",
)

# Speech voices
SPEECH_LANGUAGE_CODE = "tr-TR"
PREMIUM_VOICE_NAME = "tr-TR-Wavenet-E"
STANDARD_VOICE_NAME = "tr-TR-Standard-A"
SPEECH_AUDIO_ENCODING = "MP3"
