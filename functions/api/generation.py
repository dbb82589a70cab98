"""
Gemini text generation, through Vertex AI (service account) or the
Gemini Developer API (API key).
"""

import logging
from dataclasses import dataclass
from typing import Any, Union

import google.auth
from google.auth import exceptions as auth_exceptions
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from google.oauth2 import service_account

from .config import CredentialTransport, Settings
from .constants import VERTEX_SCOPES
from .credentials import get_service_credential, scoped_credential_file
from .errors import ConfigurationError, CredentialFormatError, GenerationFailedError
from .models import ServiceCredential

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


@dataclass(frozen=True)
class GenerationSuccess:
    text: str


@dataclass(frozen=True)
class GenerationEmpty:
    pass


@dataclass(frozen=True)
class GenerationMalformed:
    raw: Any


GenerationResult = Union[GenerationSuccess, GenerationEmpty, GenerationMalformed]


def interpret_response(response: Any) -> GenerationResult:
    """
    Classify a generate_content response.
    Only the first candidate is used; its text parts are joined.
    """
    candidates = getattr(response, "candidates", None)
    if candidates is None:
        return GenerationMalformed(raw=response)
    if not candidates:
        return GenerationEmpty()

    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None)
    if content is None or parts is None:
        return GenerationEmpty()

    texts = []
    for part in parts:
        text = getattr(part, "text", None)
        if text is not None and not isinstance(text, str):
            return GenerationMalformed(raw=response)
        if text:
            texts.append(text)

    joined = "".join(texts).strip()
    if not joined:
        return GenerationEmpty()
    return GenerationSuccess(text=joined)


def _vertex_credentials(credential: ServiceCredential, transport: CredentialTransport):
    try:
        if transport == CredentialTransport.FILE:
            with scoped_credential_file(credential) as path:
                creds, _ = google.auth.load_credentials_from_file(path, scopes=VERTEX_SCOPES)
                return creds
        return service_account.Credentials.from_service_account_info(
            credential.to_service_account_info(),
            scopes=VERTEX_SCOPES,
        )
    except (ValueError, auth_exceptions.DefaultCredentialsError) as e:
        raise CredentialFormatError(f"Service account key could not be loaded: {e}") from e


def build_genai_client(settings: Settings) -> genai.Client:
    """
    Service account (Vertex AI) wins over GEMINI_API_KEY when both are set.

    Raises:
        ConfigurationError when neither credential is configured
    """
    http_options = types.HttpOptions(timeout=settings.generation_timeout_ms)

    if settings.service_account_json:
        credential = get_service_credential(settings.service_account_json)
        creds = _vertex_credentials(credential, settings.credential_transport)
        project = settings.project_id or credential.project_id
        logger.info("Using Vertex AI backend (project=%s, location=%s)", project, settings.vertex_location)
        return genai.Client(
            vertexai=True,
            project=project,
            location=settings.vertex_location,
            credentials=creds,
            http_options=http_options,
        )

    if settings.gemini_api_key:
        logger.info("Using Gemini Developer API backend")
        return genai.Client(api_key=settings.gemini_api_key, http_options=http_options)

    raise ConfigurationError(
        "Generation credential missing: set GCP_SERVICE_ACCOUNT_JSON or GEMINI_API_KEY"
    )


class GenerationClient:
    def __init__(
        self,
        client: genai.Client,
        model: str,
        max_output_tokens: int = 1024,
        temperature: float = 0.7,
        top_p: float = 0.95,
    ):
        self.client = client
        self.model = model
        self.config = types.GenerateContentConfig(
            max_output_tokens=max_output_tokens,
            temperature=temperature,
            top_p=top_p,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "GenerationClient":
        return cls(
            build_genai_client(settings),
            settings.gemini_model,
            max_output_tokens=settings.max_output_tokens,
            temperature=settings.temperature,
            top_p=settings.top_p,
        )

    def generate(self, prompt: str) -> str:
        """
        Generate text for a fully assembled prompt.

        Raises:
            GenerationFailedError unless the first candidate carries non-empty text
        """
        logger.info("Calling %s (%d prompt chars)", self.model, len(prompt))
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=self.config,
            )
        except genai_errors.APIError as e:
            logger.error("Gemini API error %s: %s", e.code, e.message)
            raise GenerationFailedError(
                "Gemini request failed",
                details=f"{e.code} {e.message}" if e.message else str(e.code),
            ) from e
        except Exception as e:
            logger.error("Gemini call failed: %s", e)
            raise GenerationFailedError("Gemini request failed", details=type(e).__name__) from e

        result = interpret_response(response)
        if isinstance(result, GenerationSuccess):
            logger.info("Gemini answered with %d chars", len(result.text))
            return result.text

        if isinstance(result, GenerationEmpty):
            logger.error("Gemini returned no candidate text")
            raise GenerationFailedError("Gemini returned an empty response")

        logger.error("Gemini returned an unexpected response shape: %r", result.raw)
        raise GenerationFailedError("Gemini returned an unexpected response shape")
