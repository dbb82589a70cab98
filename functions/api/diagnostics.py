"""
Diagnostics Cloud Function.
Reports liveness and which optional features are configured.
Never echoes credential values, only whether they are present.
"""

import logging
import platform
import sys
from datetime import datetime, timezone
from typing import Mapping, Optional

import sentry_sdk
from firebase_functions.https_fn import Request, on_request

from .config import load_settings
from .errors import AssistantError, InputValidationError
from .response_schemas import (
    DiagnosticsData,
    DiagnosticsPayload,
    FeatureFlags,
    error_response,
    success_response,
)
from .sentry_utils import with_sentry_trace
from .utils import CORS_DIAGNOSTICS, is_preflight, preflight_response, require_method

logger = logging.getLogger(__name__)


def feature_flags(environ: Optional[Mapping[str, str]] = None) -> FeatureFlags:
    """Presence of each credential, honoring the same env aliases as the settings loader."""
    settings = load_settings(environ)
    return FeatureFlags(
        GCP_SERVICE_ACCOUNT_JSON=bool(settings.service_account_json),
        GEMINI_API_KEY=bool(settings.gemini_api_key),
        OPENWEATHER_API_KEY=bool(settings.weather_api_key),
        GOOGLE_SEARCH_API_KEY=bool(settings.search_api_key),
        SEARCH_ENGINE_ID=bool(settings.search_engine_id),
        GOOGLE_TTS_API_KEY=bool(settings.tts_api_key),
    )


@on_request(cors=CORS_DIAGNOSTICS)
@with_sentry_trace
def diagnostics(req: Request):
    """
    GET|POST /diagnostics
    Liveness probe for the voice UI. POST echoes the received prompt.
    """
    if is_preflight(req):
        return preflight_response()

    try:
        require_method(req, "GET", "POST")

        received_prompt = None
        if req.method == "POST":
            body = req.get_json(silent=True)
            if isinstance(body, dict) and isinstance(body.get("prompt"), str):
                received_prompt = body["prompt"]
            logger.info("Diagnostics received prompt: %s", received_prompt)

        flags = feature_flags()
        logger.info("Diagnostics environment: %s", flags.model_dump())

        payload = DiagnosticsPayload(
            receivedPrompt=received_prompt,
            timestamp=datetime.now(timezone.utc).isoformat(),
            method=req.method,
            environmentVariables=flags,
            pythonVersion=sys.version.split()[0],
            platform=platform.system().lower(),
        )
        message = (
            "Diagnostics endpoint working"
            if req.method == "POST"
            else "Diagnostics endpoint is alive"
        )
        return success_response(DiagnosticsData(message=message, data=payload))

    except InputValidationError as e:
        return error_response(e.message, e.status_code)

    except AssistantError as e:
        logger.error("Diagnostics error: %s", e.message)
        return error_response(e.message, e.status_code, e.details)

    except Exception as e:
        logger.exception("Unexpected error in /diagnostics: %s", e)
        sentry_sdk.capture_exception(e)
        return error_response("Internal server error", 500)
