"""
Standardized response schemas for all API endpoints.
Using Pydantic models keeps the browser client's contract in one place.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class GenerationData(BaseModel):
    """Body of a successful ask_gemini call."""
    text: str = Field(..., description="Generated answer text")


class SpeechData(BaseModel):
    """Body of a successful text_to_speech call."""
    audioContent: str = Field(..., description="Base64-encoded MP3 audio")
    voiceUsed: Optional[str] = Field(None, description="Voice that produced the audio")


class FeatureFlags(BaseModel):
    """Which credentials are present in the environment (never their values)."""
    GCP_SERVICE_ACCOUNT_JSON: bool
    GEMINI_API_KEY: bool
    OPENWEATHER_API_KEY: bool
    GOOGLE_SEARCH_API_KEY: bool
    SEARCH_ENGINE_ID: bool
    GOOGLE_TTS_API_KEY: bool


class DiagnosticsPayload(BaseModel):
    receivedPrompt: Optional[str] = None
    timestamp: str
    method: str
    environmentVariables: FeatureFlags
    pythonVersion: str
    platform: str


class DiagnosticsData(BaseModel):
    success: bool = True
    message: str
    data: DiagnosticsPayload


class ErrorBody(BaseModel):
    """Error body. details carries provider messages, never stack traces."""
    error: str
    details: Optional[str] = None


def success_response(data: BaseModel) -> Dict[str, Any]:
    """
    Helper to create a validated success response.

    Args:
        data: Pydantic response model

    Returns:
        Response dict without unset optional fields
    """
    return data.model_dump(exclude_none=True)


def error_response(error: str, status_code: int = 500, details: Optional[str] = None) -> tuple[Dict[str, Any], int]:
    """
    Helper to create a validated error response with status code.

    Args:
        error: Human-readable error message
        status_code: HTTP status code (default 500)
        details: Optional provider message

    Returns:
        Tuple of (response_dict, status_code)
    """
    response = ErrorBody(error=error, details=details)
    return response.model_dump(exclude_none=True), status_code
