"""
Prompt intent classification.
Decides whether a prompt gets weather data, web search results, or nothing.
Best-effort keyword heuristics; a false positive only costs one extra provider call.
"""

import re
from enum import Enum

from .config import SearchPolicy
from .text import fold


class QueryIntent(str, Enum):
    WEATHER = "weather"
    SEARCH = "search"
    NONE = "none"


# Matched as word prefixes on folded text ("yagmurlu", "ruzgarli")
WEATHER_STEMS = (
    "hava durumu", "havalar", "sicaklik", "yagmur", "yagis", "ruzgar", "bulutlu",
    "gunesli", "derece", "sagnak", "firtina",
)

# Matched as whole words only; as prefixes they hit "karar", "sunucu", "havalimani",
# "Windows", "Cloudflare", "Snowflake"
WEATHER_WORDS = (
    "hava", "havasi", "kar", "karli", "gunes", "sun", "sicak", "soguk",
    "weather", "temperature", "temperatures", "forecast", "forecasts",
    "rain", "rainy", "raining", "snow", "snowy", "snowing", "cloudy",
    "wind", "windy", "sunny",
    "wetter", "temperatur", "regen", "regnet", "schnee", "bewolkt",
)

INTERROGATIVES = (
    "kim", "kimdir", "kimin", "ne", "nedir", "neler", "nerede", "nereden", "ne zaman",
    "nasil", "hangi", "hangisi", "neden", "nicin", "kac",
    "who", "what", "when", "where", "how", "which", "why",
)

RESEARCH_PHRASES = (
    "arastir", "anlat", "acikla", "bilgi ver", "hakkinda", "haber", "son durum",
    "research", "tell me about", "explain", "look up",
)

RECENCY_MARKERS = (
    "bugun", "dun", "guncel", "yeni", "son", "simdi", "bu yil", "gecen",
    "today", "yesterday", "current", "currently", "latest", "new", "recent", "now",
)

_YEAR = re.compile(r"\b(?:19|20)\d{2}\b")
_WORD = re.compile(r"[^\W\d_]+")


def _contains_word(folded: str, word: str) -> bool:
    return re.search(r"(?<!\w)" + re.escape(word) + r"(?!\w)", folded) is not None


def _contains_stem(folded: str, stem: str) -> bool:
    return re.search(r"(?<!\w)" + re.escape(stem), folded) is not None


def is_weather_query(prompt: str) -> bool:
    folded = fold(prompt)
    return (
        any(_contains_stem(folded, stem) for stem in WEATHER_STEMS)
        or any(_contains_word(folded, word) for word in WEATHER_WORDS)
    )


def _has_proper_noun(prompt: str) -> bool:
    """
    Capitalized words after the first one ("Löwentech", "Mustafa"), or
    all-caps acronyms anywhere ("BMW").
    """
    words = _WORD.findall(prompt or "")
    for i, word in enumerate(words):
        if len(word) >= 2 and word.isupper():
            return True
        if i > 0 and len(word) >= 3 and word[0].isupper() and word[1:].islower():
            return True
    return False


def needs_search(prompt: str) -> bool:
    folded = fold(prompt)
    if any(_contains_word(folded, word) for word in INTERROGATIVES):
        return True
    if any(_contains_stem(folded, phrase) for phrase in RESEARCH_PHRASES):
        return True
    if any(_contains_word(folded, marker) for marker in RECENCY_MARKERS):
        return True
    if _YEAR.search(prompt or ""):
        return True
    return _has_proper_noun(prompt)


def classify_query(prompt: str, policy: SearchPolicy = SearchPolicy.CLASSIFIED) -> QueryIntent:
    """
    Weather keywords win; otherwise search when the policy and heuristics allow.
    """
    if is_weather_query(prompt):
        return QueryIntent.WEATHER
    if policy == SearchPolicy.NEVER:
        return QueryIntent.NONE
    if policy == SearchPolicy.ALWAYS or needs_search(prompt):
        return QueryIntent.SEARCH
    return QueryIntent.NONE
