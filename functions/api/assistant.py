"""
Prompt answering Cloud Function for the voice assistant
Enriches the user's question with date/time, weather or web search results
and answers it with Gemini
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

import sentry_sdk
from firebase_functions.https_fn import on_request, Request
from firebase_functions.options import MemoryOption

from .classifier import QueryIntent, classify_query
from .config import Settings, get_settings
from .context_builder import build_prompt, build_prompt_context, current_local_time
from .errors import AssistantError, ConfigurationError, InputValidationError
from .generation import GenerationClient
from .models import SearchResult, WeatherSnapshot
from .response_schemas import GenerationData, error_response, success_response
from .sentry_utils import with_sentry_trace
from .utils import CORS_POST, get_json_field, is_preflight, preflight_response, require_method
from .weather import WeatherClient, extract_city
from .web_search import WebSearchClient, snapshot_from_results

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

SEARCH_FALLBACK_NOTE = "Hava durumu bilgisi internet aramasından alındı; değerler yaklaşıktır."


def build_search_client(settings: Settings) -> Optional[WebSearchClient]:
    """None when search credentials are absent (enrichment is skipped)"""
    if not settings.search_enabled:
        return None
    return WebSearchClient(
        settings.search_api_key,
        settings.search_engine_id,
        mode=settings.search_mode,
        results_per_query=settings.search_results_per_query,
        delay_sec=settings.search_variant_delay_sec,
        timeout=settings.http_timeout,
    )


def gather_weather(
    prompt: str,
    settings: Settings,
    search_client: Optional[WebSearchClient] = None,
    weather_client: Optional[WeatherClient] = None,
) -> Tuple[Optional[WeatherSnapshot], List[str]]:
    """
    Weather for the city named in the prompt (or the default city).
    Falls back to a meteorological web search when the weather provider is unavailable.

    Returns:
        (snapshot or None, notes for the context block)
    """
    city = extract_city(prompt) or settings.default_weather_city

    snapshot = None
    try:
        client = weather_client or WeatherClient(settings.weather_api_key, timeout=settings.http_timeout)
        snapshot = client.lookup(city)
    except ConfigurationError as e:
        logger.info("Weather lookup skipped: %s", e.message)

    if snapshot is not None:
        return snapshot, []

    if search_client is None:
        return None, []

    logger.info("Falling back to weather search for %s", city)
    results = search_client.search_weather(city)
    snapshot = snapshot_from_results(city, results) if results else None
    if snapshot is None:
        return None, []
    return snapshot, [SEARCH_FALLBACK_NOTE]


def gather_search(prompt: str, search_client: WebSearchClient) -> List[SearchResult]:
    results = search_client.search(prompt)
    if results is None:
        logger.warning("Search augmentation unavailable")
        return []
    return results


def answer_prompt(
    prompt: str,
    settings: Settings,
    *,
    now: Optional[datetime] = None,
    generation_client: Optional[GenerationClient] = None,
    search_client: Optional[WebSearchClient] = None,
    weather_client: Optional[WeatherClient] = None,
) -> str:
    """
    Full pipeline: classify, enrich, assemble context, generate.

    The generation credential is resolved first, so a missing credential fails
    the request before any enrichment call is made.
    """
    generator = generation_client or GenerationClient.from_settings(settings)
    if search_client is None:
        search_client = build_search_client(settings)

    intent = classify_query(prompt, settings.search_policy)
    logger.info("Prompt intent: %s", intent.value)

    weather = None
    weather_attempted = False
    results: List[SearchResult] = []
    search_attempted = False
    notes: List[str] = []

    if intent == QueryIntent.WEATHER:
        weather_attempted = True
        weather, notes = gather_weather(prompt, settings, search_client, weather_client)
    elif intent == QueryIntent.SEARCH and search_client is not None:
        search_attempted = True
        results = gather_search(prompt, search_client)
    elif intent == QueryIntent.SEARCH:
        logger.info("Search augmentation skipped: search credentials not configured")

    context = build_prompt_context(
        now or current_local_time(settings.timezone),
        settings.location_label,
        weather=weather,
        weather_attempted=weather_attempted,
        search_results=results,
        search_attempted=search_attempted,
        notes=notes,
    )
    full_prompt = build_prompt(context, prompt, settings.organization)
    return generator.generate(full_prompt)


@on_request(cors=CORS_POST, timeout_sec=120, memory=MemoryOption.MB_512)
@with_sentry_trace
def ask_gemini(req: Request):
    """
    POST /ask_gemini
    Answer a prompt with Gemini, enriched with live context
    Body:
    - prompt: User's question (required)
    Response:
    - {"text": string} on success, {"error": string, "details"?: string} on failure
    """
    if is_preflight(req):
        return preflight_response()

    try:
        require_method(req, "POST")
        prompt = get_json_field(req, "prompt")
        logger.info("Question: %s", prompt)

        settings = get_settings()
        text = answer_prompt(prompt, settings)
        return success_response(GenerationData(text=text))

    except InputValidationError as e:
        logger.info("Rejected request: %s", e.message)
        return error_response(e.message, e.status_code)

    except AssistantError as e:
        logger.error("Error answering prompt: %s (%s)", e.message, e.details, exc_info=True)
        return error_response(e.message, e.status_code, e.details)

    except Exception as e:
        logger.exception("Unexpected error in /ask_gemini: %s", e)
        sentry_sdk.capture_exception(e)
        return error_response("Internal server error", 500)
