"""
Shared utility functions for the assistant Cloud Functions
Includes request validation and CORS helpers
"""

import logging
from typing import Any

from firebase_functions.https_fn import Request
from firebase_functions.options import CorsOptions

from .errors import InputValidationError

# Setup logging
logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

# Browser-based callers (the voice UI) may live on any origin
CORS_POST = CorsOptions(cors_origins="*", cors_methods=["POST", "OPTIONS"])
CORS_DIAGNOSTICS = CorsOptions(cors_origins="*", cors_methods=["GET", "POST", "OPTIONS"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def is_preflight(req: Request) -> bool:
    return req.method == "OPTIONS"


def preflight_response() -> tuple[str, int, dict]:
    """Empty 204 with permissive CORS headers"""
    return "", 204, CORS_HEADERS


def require_method(req: Request, *allowed: str) -> None:
    """Raises InputValidationError (405) for any method not in allowed"""
    if req.method not in allowed:
        raise InputValidationError(f"Only {', '.join(allowed)} allowed", status_code=405)


def get_json_field(req: Request, field: str) -> str:
    """
    Read a required non-empty string field from the JSON body.

    Raises:
        InputValidationError (400) if the body is not JSON or the field is missing/blank
    """
    data: Any = req.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}

    value = data.get(field)
    if not isinstance(value, str) or not value.strip():
        raise InputValidationError(f"{field.capitalize()} required")
    return value.strip()
