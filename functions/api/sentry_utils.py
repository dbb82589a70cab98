"""
Sentry utilities for distributed tracing in Cloud Functions
Provides decorator to continue traces from the voice UI
"""

import functools
import logging
from typing import Callable, Any

import sentry_sdk
from firebase_functions.https_fn import Request

from .errors import InputValidationError

logger = logging.getLogger(__name__)


def init_sentry(dsn: str | None) -> bool:
    """Initialize Sentry when a DSN is configured. Returns whether it was initialized."""
    if not dsn:
        return False
    sentry_sdk.init(dsn=dsn, traces_sample_rate=0.2, send_default_pii=False)
    logger.info("✓ Sentry initialized")
    return True


def _parse_trace_header(header: str | None) -> tuple[str | None, str | None, bool | None]:
    """
    Parse sentry-trace header format: trace_id-parent_span_id-sampled
    Example: "566e3688ebcd4638ad8b8f0cdee66e5b-566e3688ebcd4638-1"
    """
    if not header:
        return None, None, None
    parts = header.split("-")
    if len(parts) < 2:
        return None, None, None
    sampled = parts[2] == "1" if len(parts) >= 3 else None
    return parts[0], parts[1], sampled


def with_sentry_trace(func: Callable) -> Callable:
    """
    Decorator to wrap Cloud Functions with Sentry distributed tracing.

    Extracts sentry-trace and baggage headers from incoming requests to continue
    the trace from the browser. Creates a transaction that is a child of the
    browser trace.

    Usage:
        @on_request(cors=CorsOptions(...))
        @with_sentry_trace
        def my_endpoint(req: Request):
            ...
    """
    @functools.wraps(func)
    def wrapper(req: Request, *args: Any, **kwargs: Any) -> Any:
        endpoint_name = func.__name__
        trace_id, parent_span_id, sampled = _parse_trace_header(req.headers.get("sentry-trace"))
        baggage_header = req.headers.get("baggage")

        if trace_id:
            logger.debug(
                "Continuing trace: trace_id=%s, parent_span_id=%s, sampled=%s",
                trace_id,
                parent_span_id,
                sampled,
            )

        with sentry_sdk.start_transaction(
            op="http.server",
            name=f"{req.method} /{endpoint_name}",
            trace_id=trace_id,
            parent_span_id=parent_span_id,
            sampled=sampled,
        ) as transaction:
            transaction.set_tag("http.method", req.method)
            transaction.set_tag("endpoint", endpoint_name)

            if baggage_header:
                transaction.set_context("baggage", {"header": baggage_header})

            try:
                result = func(req, *args, **kwargs)

                # Response tuple: (data, status_code)
                if isinstance(result, tuple) and len(result) >= 2 and isinstance(result[1], int):
                    status_code = result[1]
                    transaction.set_tag("http.status_code", status_code)
                    if status_code >= 500:
                        transaction.set_status("internal_error")
                    elif status_code >= 400:
                        transaction.set_status("invalid_argument")
                    else:
                        transaction.set_status("ok")
                else:
                    transaction.set_status("ok")

                return result

            except Exception as e:
                # Input errors are the caller's problem, not bugs
                if isinstance(e, InputValidationError):
                    transaction.set_status("invalid_argument")
                else:
                    transaction.set_status("internal_error")
                    sentry_sdk.capture_exception(e)
                raise

    return wrapper
