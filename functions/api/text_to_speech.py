"""
Text-to-speech Cloud Function for the voice assistant
"""

import logging

import sentry_sdk
from firebase_functions.https_fn import on_request, Request

from .config import Settings, get_settings
from .errors import AssistantError, InputValidationError
from .response_schemas import SpeechData, error_response, success_response
from .sentry_utils import with_sentry_trace
from .speech import SpeechSynthesizer, default_voice_profiles
from .utils import CORS_POST, get_json_field, is_preflight, preflight_response, require_method

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


def build_synthesizer(settings: Settings) -> SpeechSynthesizer:
    return SpeechSynthesizer(
        settings.tts_api_key,
        default_voice_profiles(settings.premium_voice, settings.standard_voice),
        timeout=settings.http_timeout,
    )


@on_request(cors=CORS_POST, timeout_sec=60)
@with_sentry_trace
def text_to_speech(req: Request):
    """
    POST /text_to_speech
    Synthesize Turkish speech for the given text
    Body:
    - text: Text to speak (required)
    Response:
    - {"audioContent": base64, "voiceUsed": string}
    """
    if is_preflight(req):
        return preflight_response()

    try:
        require_method(req, "POST")
        text = get_json_field(req, "text")

        synthesizer = build_synthesizer(get_settings())
        result = synthesizer.synthesize(text)
        return success_response(SpeechData(audioContent=result.audio_content, voiceUsed=result.voice_used))

    except InputValidationError as e:
        logger.info("Rejected request: %s", e.message)
        return error_response(e.message, e.status_code)

    except AssistantError as e:
        logger.error("TTS error: %s (%s)", e.message, e.details)
        return error_response(e.message, e.status_code, e.details)

    except Exception as e:
        logger.exception("Unexpected error in /text_to_speech: %s", e)
        sentry_sdk.capture_exception(e)
        return error_response("Internal server error", 500)
