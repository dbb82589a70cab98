"""
Error taxonomy shared by the assistant Cloud Functions.
Every error carries the HTTP status the handlers answer with.
"""

from typing import Optional


class AssistantError(Exception):
    """Base class for errors surfaced to callers with a human-readable message."""

    status_code = 500

    def __init__(self, message: str, *, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ConfigurationError(AssistantError):
    """A required environment variable is missing or invalid"""
    pass


class CredentialFormatError(AssistantError):
    """Service-account key material is malformed"""
    pass


class UpstreamUnavailable(AssistantError):
    """
    A third-party provider failed (non-2xx, network error, bad JSON).
    Enrichment stages recover from this locally.
    """

    def __init__(
        self,
        message: str,
        *,
        provider: str,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.upstream_status = status_code
        self.response_body = response_body


class GenerationFailedError(AssistantError):
    """The generation provider returned no usable candidate"""
    pass


class SynthesisFailedError(AssistantError):
    """Both voice tiers were rejected by the speech provider"""

    def __init__(self, message: str, *, provider_message: Optional[str] = None):
        super().__init__(message, details=provider_message)
        self.provider_message = provider_message


class InputValidationError(AssistantError):
    """Missing request field or wrong HTTP method"""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code
