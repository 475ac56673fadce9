"""
Span helpers shared by the HTTP client integrations.
"""
import re
from typing import Optional  # noqa:F401

from opentelemetry.trace import Span  # noqa:F401
from opentelemetry.trace import Status
from opentelemetry.trace import StatusCode

from telehttp._trace.context import ParentSnapshot  # noqa:F401
from telehttp._trace.context import restore_parent_ctx
from telehttp.constants import _HTTP_ERROR_THRESHOLD
from telehttp.constants import HTTP_ERROR_DESCRIPTION
from telehttp.ext import http
from telehttp.internal.logger import get_logger
from telehttp.propagation.http import Headers  # noqa:F401
from telehttp.propagation.http import normalize_headers


log = get_logger(__name__)

_CONTENT_LENGTH_PATTERN = re.compile(r"[0-9]+")


def process_response_status_code(span, status_code):
    # type: (Span, int) -> None
    # https://github.com/open-telemetry/opentelemetry-specification/blob/main/specification/trace/semantic_conventions/http.md#status
    if status_code >= _HTTP_ERROR_THRESHOLD:
        span.set_status(Status(StatusCode.ERROR, HTTP_ERROR_DESCRIPTION))
    span.set_attribute(http.STATUS_CODE, status_code)


def _content_length(headers):
    # type: (Headers) -> Optional[int]
    for header, value in normalize_headers(headers):
        if header.lower() == http.CONTENT_LENGTH_HEADER:
            if _CONTENT_LENGTH_PATTERN.fullmatch(value):
                return int(value)
            return None
    return None


def process_headers(span, headers):
    # type: (Span, Headers) -> None
    content_length = _content_length(headers)
    if content_length is not None:
        span.set_attribute(http.RESPONSE_CONTENT_LENGTH, content_length)


def set_http_meta(span, status_code, headers):
    # type: (Span, int, Headers) -> None
    """Record the response of a traced request on ``span``."""
    try:
        process_response_status_code(span, status_code)
        process_headers(span, headers)
    except Exception:
        log.debug("error adding response attributes", exc_info=True)


def finish_span(snapshot):
    # type: (ParentSnapshot) -> None
    """End the request span and make the parent context current again."""
    try:
        if snapshot.span is not None:
            snapshot.span.end()
    except Exception:
        log.debug("error ending span", exc_info=True)
    finally:
        restore_parent_ctx(snapshot)
