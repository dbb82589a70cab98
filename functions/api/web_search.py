"""
Google Custom Search augmentation for the prompt context.
Broadens recall with query variants, merges and deduplicates the results.
"""

import logging
import re
import time
from typing import Callable, Iterable, List, Optional

from .config import SearchMode
from .constants import (
    BASIC_SEARCH_CAP,
    CUSTOM_SEARCH_URL,
    INTELLIGENT_SEARCH_CAP,
    SEARCH_LANGUAGE,
    WEATHER_SEARCH_SITES,
)
from .errors import ConfigurationError, UpstreamUnavailable
from .http_client import REQUEST_TIMEOUT, ProviderHttpClient
from .models import SearchResult, WeatherSnapshot, WeatherSource
from .weather import round_half_up

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

# Celsius readings like "12°C", "-3 °C", "21,6°"; Fahrenheit readings are skipped
TEMPERATURE_PATTERN = re.compile(r"(?<![\d.,])(-?\d{1,2}(?:[.,]\d+)?)\s*°(?!\s*F)")


def expand_query(query: str, mode: SearchMode = SearchMode.INTELLIGENT) -> List[str]:
    """Reformulations issued for one query, literal query first."""
    query = query.strip()
    if mode == SearchMode.BASIC:
        return [query]
    return [
        query,
        f"{query} company information",
        f"{query} firma",
        f'"{query}" official website',
        f"{query} hakkında nedir kimdir",
    ]


def dedupe_results(results: Iterable[SearchResult], cap: int) -> List[SearchResult]:
    """Keep the first result per title, in order, up to cap."""
    seen = set()
    unique = []
    for result in results:
        key = result.title.strip()
        if key in seen:
            continue
        seen.add(key)
        unique.append(result)
        if len(unique) >= cap:
            break
    return unique


def has_temperature(result: SearchResult) -> bool:
    return bool(TEMPERATURE_PATTERN.search(result.title) or TEMPERATURE_PATTERN.search(result.snippet))


class WebSearchClient:
    """
    Google Custom Search JSON API client.
    Variant queries run sequentially with a fixed pause to stay under the rate limit.
    """

    def __init__(
        self,
        api_key: str | None,
        engine_id: str | None,
        mode: SearchMode = SearchMode.INTELLIGENT,
        results_per_query: int = 3,
        delay_sec: float = 0.3,
        http: ProviderHttpClient | None = None,
        timeout: tuple[float, float] = REQUEST_TIMEOUT,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if not api_key or not engine_id:
            raise ConfigurationError("Search not configured: set GOOGLE_SEARCH_API_KEY and SEARCH_ENGINE_ID")
        self.api_key = api_key
        self.engine_id = engine_id
        self.mode = mode
        self.results_per_query = results_per_query
        self.delay_sec = delay_sec
        self.http = http or ProviderHttpClient.build("google_search", timeout)
        self._sleep = sleep

    @property
    def cap(self) -> int:
        return INTELLIGENT_SEARCH_CAP if self.mode == SearchMode.INTELLIGENT else BASIC_SEARCH_CAP

    def query(self, q: str) -> List[SearchResult]:
        """
        One Custom Search call.
        Raises UpstreamUnavailable on provider failure or a malformed body.
        """
        params = {
            "key": self.api_key,
            "cx": self.engine_id,
            "q": q,
            "hl": SEARCH_LANGUAGE,
            "num": self.results_per_query,
        }
        resp = self.http.get(CUSTOM_SEARCH_URL, params=params)
        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamUnavailable("Search returned invalid JSON", provider="google_search") from e

        items = (data.get("items") if isinstance(data, dict) else None) or []
        if not isinstance(items, list):
            raise UpstreamUnavailable("Search returned an unexpected shape", provider="google_search")

        results = []
        for item in items:
            if not isinstance(item, dict):
                continue
            title = item.get("title")
            if not isinstance(title, str) or not title.strip():
                continue
            snippet = item.get("snippet")
            link = item.get("link")
            results.append(
                SearchResult(
                    title=title.strip(),
                    snippet=snippet.replace("\n", " ").strip() if isinstance(snippet, str) else "",
                    link=link if isinstance(link, str) else None,
                )
            )
        return results

    def _run_variants(self, variants: List[str]) -> Optional[List[SearchResult]]:
        collected = []
        succeeded = 0
        for i, variant in enumerate(variants):
            if i > 0 and self.delay_sec > 0:
                self._sleep(self.delay_sec)
            try:
                collected.extend(self.query(variant))
                succeeded += 1
            except UpstreamUnavailable as e:
                logger.warning("Search variant failed (%s): %s", variant, e.message)
                continue

        if succeeded == 0:
            logger.warning("All %d search variants failed", len(variants))
            return None
        return collected

    def search(self, query: str) -> Optional[List[SearchResult]]:
        """
        Search with query expansion.

        Returns:
            Deduplicated results capped per mode ([] if nothing matched),
            or None if every variant failed
        """
        variants = expand_query(query, self.mode)
        collected = self._run_variants(variants)
        if collected is None:
            return None

        results = dedupe_results(collected, self.cap)
        logger.info(
            "Search for '%s': %d variants, %d raw, %d kept",
            query, len(variants), len(collected), len(results),
        )
        return results

    def search_weather(self, city: str) -> Optional[List[SearchResult]]:
        """
        Weather-flavored search restricted to meteorological sites.
        Results mentioning a temperature come first; returns None unless at least one does.
        """
        sites = " OR ".join(f"site:{site}" for site in WEATHER_SEARCH_SITES)
        collected = self._run_variants([f"{city} hava durumu sıcaklık {sites}"])
        if not collected:
            return None

        results = dedupe_results(collected, self.cap)
        with_temperature = [r for r in results if has_temperature(r)]
        if not with_temperature:
            logger.info("Weather search for %s found no temperature readings", city)
            return None
        return with_temperature + [r for r in results if not has_temperature(r)]


def snapshot_from_results(city: str, results: List[SearchResult]) -> Optional[WeatherSnapshot]:
    """Build a fallback snapshot from the first snippet carrying a temperature reading."""
    for result in results:
        for text in (result.snippet, result.title):
            match = TEMPERATURE_PATTERN.search(text)
            if match:
                return WeatherSnapshot(
                    city=city,
                    temperature_c=round_half_up(float(match.group(1).replace(",", "."))),
                    description=(result.snippet or result.title)[:160],
                    source=WeatherSource.SEARCH_FALLBACK,
                )
    return None
