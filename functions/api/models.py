from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class WeatherSource(str, Enum):
    PRIMARY_PROVIDER = "PrimaryProvider"
    SEARCH_FALLBACK = "SearchFallback"


class Season(str, Enum):
    SPRING = "Spring"
    SUMMER = "Summer"
    AUTUMN = "Autumn"
    WINTER = "Winter"


class WeatherSnapshot(BaseModel):
    """Current conditions for one city. Search fallbacks only know the temperature."""
    city: str
    country: str = ""
    temperature_c: int
    feels_like_c: Optional[int] = None
    humidity_pct: Optional[int] = None
    description: str = ""
    wind_kph: Optional[int] = None
    pressure_hpa: Optional[int] = None
    source: WeatherSource = WeatherSource.PRIMARY_PROVIDER


class SearchResult(BaseModel):
    title: str
    snippet: str = ""
    link: Optional[str] = None


class PromptContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    generated_at_local: datetime
    season: Season
    location_label: str
    weather: Optional[WeatherSnapshot] = None
    weather_attempted: bool = False
    search_results: List[SearchResult] = Field(default_factory=list)
    search_attempted: bool = False
    freeform_notes: List[str] = Field(default_factory=list)


class ServiceCredential(BaseModel):
    model_config = ConfigDict(frozen=True)

    project_id: str
    client_email: str
    private_key_pem: str
    raw: Dict[str, Any] = Field(default_factory=dict)

    def to_service_account_info(self) -> Dict[str, Any]:
        """Raw fields with the normalized key, in the shape google-auth expects"""
        info = dict(self.raw)
        info.setdefault("type", "service_account")
        info.setdefault("token_uri", "https://oauth2.googleapis.com/token")
        info["project_id"] = self.project_id
        info["client_email"] = self.client_email
        info["private_key"] = self.private_key_pem
        return info


class VoiceProfile(BaseModel):
    name: str
    language_code: str
    speaking_rate: float = 1.0
    pitch: float = 0.0
    volume_gain_db: float = 0.0


class SynthesisResult(BaseModel):
    audio_content: str
    voice_used: str
