"""
Prompt context assembly.
Builds the system-facts preamble (date, time, season, location, weather,
search results) that is prepended to the user's question.
"""

from datetime import datetime
from typing import List, Optional, Sequence
from zoneinfo import ZoneInfo

from .models import PromptContext, SearchResult, Season, WeatherSnapshot, WeatherSource

TURKISH_MONTHS = (
    "Ocak", "Şubat", "Mart", "Nisan", "Mayıs", "Haziran",
    "Temmuz", "Ağustos", "Eylül", "Ekim", "Kasım", "Aralık",
)
TURKISH_WEEKDAYS = ("Pazartesi", "Salı", "Çarşamba", "Perşembe", "Cuma", "Cumartesi", "Pazar")

SEASON_LABELS = {
    Season.SPRING: "İlkbahar",
    Season.SUMMER: "Yaz",
    Season.AUTUMN: "Sonbahar",
    Season.WINTER: "Kış",
}

UNKNOWN = "bilinmiyor"

SEARCH_HEADER = "ARAŞTIRMA SONUÇLARI:"
SEARCH_INSTRUCTION = (
    "Yanıtını yukarıdaki araştırma sonuçlarına dayandır; sonuçlarda olmayan ayrıntıları tahmin etme."
)
NO_SEARCH_RESULTS_NOTE = (
    "İnternette arama yapıldı ancak güncel bilgi bulunamadı. "
    "Emin olmadığın isim, tarih veya rakam uydurma; bilginin sınırlı olduğunu belirt."
)
NO_WEATHER_NOTE = (
    "Güncel hava durumu bilgisi alınamadı. Sıcaklık veya hava koşulu uydurma."
)


def season_for_month(month: int) -> Season:
    """Meteorological season for a 1-based month (northern hemisphere)."""
    if month in (3, 4, 5):
        return Season.SPRING
    if month in (6, 7, 8):
        return Season.SUMMER
    if month in (9, 10, 11):
        return Season.AUTUMN
    if month in (12, 1, 2):
        return Season.WINTER
    raise ValueError(f"Invalid month: {month}")


def current_local_time(timezone: str) -> datetime:
    return datetime.now(ZoneInfo(timezone))


def format_long_date(moment: datetime) -> str:
    """e.g. '19 Ekim 2026 Pazartesi'"""
    return (
        f"{moment.day} {TURKISH_MONTHS[moment.month - 1]} {moment.year} "
        f"{TURKISH_WEEKDAYS[moment.weekday()]}"
    )


def build_prompt_context(
    now: datetime,
    location_label: str,
    weather: Optional[WeatherSnapshot] = None,
    weather_attempted: bool = False,
    search_results: Optional[Sequence[SearchResult]] = None,
    search_attempted: bool = False,
    notes: Sequence[str] = (),
) -> PromptContext:
    return PromptContext(
        generated_at_local=now,
        season=season_for_month(now.month),
        location_label=location_label,
        weather=weather,
        weather_attempted=weather_attempted or weather is not None,
        search_results=list(search_results or []),
        search_attempted=search_attempted or bool(search_results),
        freeform_notes=list(notes),
    )


def _value(value: Optional[int], fmt: str) -> str:
    return fmt.format(value) if value is not None else UNKNOWN


def render_weather_block(weather: WeatherSnapshot) -> List[str]:
    place = f"{weather.city}, {weather.country}" if weather.country else weather.city
    source = "OpenWeather" if weather.source == WeatherSource.PRIMARY_PROVIDER else "internet araması"
    return [
        f"HAVA DURUMU ({place}):",
        f"Sıcaklık: {weather.temperature_c}°C",
        f"Hissedilen: {_value(weather.feels_like_c, '{}°C')}",
        f"Nem: {_value(weather.humidity_pct, '%{}')}",
        f"Durum: {weather.description or UNKNOWN}",
        f"Rüzgar: {_value(weather.wind_kph, '{} km/h')}",
        f"Basınç: {_value(weather.pressure_hpa, '{} hPa')}",
        f"Kaynak: {source}",
    ]


def render_context_block(context: PromptContext) -> str:
    """Labeled text block prepended to the user's question."""
    moment = context.generated_at_local
    lines = [
        "SİSTEM BİLGİLERİ:",
        f"Tarih: {format_long_date(moment)}",
        f"Saat: {moment.strftime('%H:%M')}",
        f"Mevsim: {SEASON_LABELS[context.season]}",
        f"Konum: {context.location_label}",
    ]

    if context.weather is not None:
        lines.append("")
        lines.extend(render_weather_block(context.weather))
    elif context.weather_attempted:
        lines.extend(["", "HAVA DURUMU:", NO_WEATHER_NOTE])

    if context.search_results:
        lines.extend(["", SEARCH_HEADER])
        for result in context.search_results:
            lines.append(f"- {result.title}: {result.snippet}")
        lines.append(SEARCH_INSTRUCTION)
    elif context.search_attempted:
        lines.extend(["", SEARCH_HEADER, NO_SEARCH_RESULTS_NOTE])

    if context.freeform_notes:
        lines.append("")
        lines.extend(f"NOT: {note}" for note in context.freeform_notes)

    return "\n".join(lines)


def build_prompt(context: PromptContext, prompt: str, organization: str) -> str:
    """Persona rules + context block + the user's literal question."""
    return f"""Sen {organization} şirketinin profesyonel ve yardımsever dijital temsilcisisin.

KURALLAR:
- Aşağıdaki sistem bilgilerini ve varsa araştırma sonuçlarını kullan
- Bilgi yoksa bunu dürüstçe söyle, ayrıntı uydurma
- Kısa ama bilgilendirici yanıt ver; yanıt sesli okunacak
- Müşteri odaklı düşün

{render_context_block(context)}

SORU: "{prompt}"

YANIT:"""
