"""
Firebase Python Cloud Functions for the Löwentech voice assistant
These functions call code from the api/ package
"""

import logging
import os

from firebase_functions.https_fn import on_request, Request
from firebase_functions.options import CorsOptions

# Import all Cloud Functions from other modules so Firebase can discover them
from api.assistant import ask_gemini  # noqa: F401
from api.text_to_speech import text_to_speech  # noqa: F401
from api.diagnostics import diagnostics  # noqa: F401
from api.sentry_utils import init_sentry

# Setup logging for GCP Cloud Functions
# GCP automatically captures stdout/stderr, so we configure logging to use stdout
logging.basicConfig(
    level=logging.INFO,
    format='%(levelname)s:%(name)s:%(message)s',
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger(__name__)

init_sentry(os.getenv("SENTRY_DSN"))


@on_request(cors=CorsOptions(cors_origins="*", cors_methods=["GET"]))
def health(req: Request):
    """
    Health check endpoint
    GET /health

    Returns a simple health status to verify the function is running
    """
    return {
        "status": "ok",
        "message": "Voice assistant Cloud Functions are running!",
    }
