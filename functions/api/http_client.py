"""
Centralized HTTP transport for the third-party providers (weather, search, speech).
Single point for request execution, error normalization, and logging.
"""

import logging
import threading
from typing import Any

import sentry_sdk
import requests
from requests import Session

from .errors import UpstreamUnavailable

logger = logging.getLogger(__name__)

# Timeout (connect, read) in seconds
REQUEST_TIMEOUT = (5, 10)

# Query parameters carrying API keys
REDACT_KEYS = frozenset({"key", "appid", "api_key", "apikey"})

# Max chars of response body to log on error
ERROR_BODY_TRUNCATE = 500

# One pooled session per provider, reused across requests in a warm instance
_sessions: dict[str, Session] = {}
_sessions_lock = threading.Lock()


def _shared_session(provider: str) -> Session:
    with _sessions_lock:
        session = _sessions.get(provider)
        if session is None:
            session = Session()
            session.headers.update({"Accept": "application/json"})
            _sessions[provider] = session
        return session


def close_sessions() -> None:
    """Close and forget every pooled provider session."""
    with _sessions_lock:
        for session in _sessions.values():
            session.close()
        _sessions.clear()


def _redact_for_log(obj: dict | None) -> dict | None:
    """Return a copy of obj with API keys redacted for logging."""
    if obj is None:
        return None
    out = {}
    for k, v in obj.items():
        key_lower = k.lower() if isinstance(k, str) else ""
        if key_lower in REDACT_KEYS or "token" in key_lower:
            out[k] = "[REDACTED]"
        elif isinstance(v, dict):
            out[k] = _redact_for_log(v)
        else:
            out[k] = v
    return out


def _truncate(text: str | None, max_len: int = ERROR_BODY_TRUNCATE) -> str:
    """Truncate string for error logging."""
    if not text:
        return ""
    if len(text) <= max_len:
        return text
    return text[:max_len] + "..."


def extract_provider_message(resp: requests.Response) -> str:
    """
    Google-style error bodies look like {"error": {"message": ...}}.
    Falls back to the truncated raw body.
    """
    try:
        payload = resp.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        if payload.get("message"):
            return str(payload["message"])

    return _truncate(resp.text, 150) or f"HTTP {resp.status_code}"


class ProviderHttpClient:
    """
    HTTP transport for one provider. All calls go through _request.
    Does not retry; callers decide how to recover from UpstreamUnavailable.
    """

    def __init__(self, session: Session, provider: str, timeout: tuple[float, float] = REQUEST_TIMEOUT):
        self.session = session
        self.provider = provider
        self.timeout = timeout

    @classmethod
    def build(cls, provider: str, timeout: tuple[float, float] = REQUEST_TIMEOUT) -> "ProviderHttpClient":
        return cls(_shared_session(provider), provider, timeout)

    def get(self, url: str, params: dict[str, Any] | None = None) -> requests.Response:
        """GET request. Raises UpstreamUnavailable on non-2xx or transport failure."""
        return self._request("GET", url, params=params)

    def post_json(
        self,
        url: str,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> requests.Response:
        """POST with JSON body. Raises UpstreamUnavailable on non-2xx or transport failure."""
        return self._request("POST", url, params=params, json=body)

    def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> requests.Response:
        log_params = _redact_for_log(params)

        with sentry_sdk.start_span(op="http.client", name=f"{self.provider} {method}") as span:
            span.set_tag("http.method", method)
            span.set_tag("provider", self.provider)

            logger.info("%s request %s %s params=%s", self.provider, method, url, log_params)

            try:
                resp = self.session.request(
                    method,
                    url,
                    params=params,
                    json=json,
                    timeout=self.timeout,
                )
            except requests.exceptions.RequestException as e:
                # str(e) can echo the full URL, query-string keys included
                logger.warning("%s request failed %s %s: %s", self.provider, method, url, type(e).__name__)
                span.set_status("internal_error")
                raise UpstreamUnavailable(
                    f"{self.provider} request failed ({type(e).__name__})",
                    provider=self.provider,
                ) from e

            span.set_tag("http.status_code", resp.status_code)

            if resp.ok:
                logger.info("%s response status=%s", self.provider, resp.status_code)
                span.set_status("ok")
                return resp

            body = resp.text or ""
            logger.warning(
                "%s response status=%s body=%s",
                self.provider,
                resp.status_code,
                _truncate(body),
            )
            span.set_status("internal_error" if resp.status_code >= 500 else "invalid_argument")
            raise UpstreamUnavailable(
                extract_provider_message(resp),
                provider=self.provider,
                status_code=resp.status_code,
                response_body=body,
            )
