"""
Request interception pipeline shared by the traced client and the httpx integration.

A traced request goes through the following stages::

    save parent -> start span -> inject headers -> send -> process response | record error

``send`` is the transport: any callable taking the header-injected ``Request``
and returning an object with ``status_code`` and ``headers`` attributes, or
raising when the request fails. Its result (or exception) is handed back to
the caller unchanged.
"""
import dataclasses
from typing import Any  # noqa:F401
from typing import Awaitable  # noqa:F401
from typing import Callable  # noqa:F401
from typing import List  # noqa:F401
from typing import Mapping
from typing import Optional  # noqa:F401
from typing import Tuple  # noqa:F401
from typing import TypeVar
from urllib.parse import urlsplit

from opentelemetry import trace
from opentelemetry.trace import SpanKind
from opentelemetry.trace import Status
from opentelemetry.trace import StatusCode

from telehttp import config
from telehttp._trace.context import ParentSnapshot  # noqa:F401
from telehttp._trace.context import activate_span
from telehttp._trace.context import claim
from telehttp._trace.context import save_parent_ctx
from telehttp._trace.tracer import get_tracer
from telehttp.constants import ATTRIBUTES_OPTION
from telehttp.constants import SPAN_NAME_OPTION
from telehttp.contrib import trace_utils
from telehttp.ext import http
from telehttp.ext import net
from telehttp.internal.logger import get_logger
from telehttp.propagation.http import Headers  # noqa:F401
from telehttp.propagation.http import HTTPPropagator


log = get_logger(__name__)

R = TypeVar("R")

Attributes = List[Tuple[str, Any]]


@dataclasses.dataclass(frozen=True)
class Request:
    method: str
    url: str
    body: Any = b""
    headers: Headers = ()
    options: Mapping[str, Any] = dataclasses.field(default_factory=dict)


def _authority(url):
    # type: (str) -> str
    return urlsplit(url).netloc.rpartition("@")[2]


def _host(url):
    # type: (str) -> str
    # urlsplit lowercases hostname; recover the casing used in the URL
    host = urlsplit(url).hostname or ""
    authority = _authority(url)
    start = authority.lower().find(host)
    if not host or start < 0:
        return host
    return authority[start : start + len(host)]


def compute_default_span_name(request):
    # type: (Request) -> str
    """
    Span name used when the request does not carry an ``ot_span_name`` option::

        >>> compute_default_span_name(Request("get", "https://api.example.com/v1/items"))
        'GET api.example.com'
    """
    return "{} {}".format(request.method.upper(), _authority(str(request.url)))


def span_name(request):
    # type: (Request) -> str
    name = request.options.get(SPAN_NAME_OPTION)
    if name is None:
        return compute_default_span_name(request)
    return name


def span_attributes(request):
    # type: (Request) -> Attributes
    """
    Default client attributes followed by the caller supplied ``ot_attributes``.

    Caller attributes are appended, never merged, so a key set twice keeps the
    value the tracer records last.
    """
    url = str(request.url)
    attributes = [
        (http.METHOD, request.method.upper()),
        (http.URL, url),
        (net.PEER_NAME, _host(url)),
    ]  # type: Attributes
    if config.split_by_domain:
        attributes.append((net.PEER_SERVICE, _authority(url)))

    extra = request.options.get(ATTRIBUTES_OPTION) or ()
    if isinstance(extra, Mapping):
        extra = extra.items()
    attributes.extend(extra)
    return attributes


def _start_span(request, tracer):
    # type: (Request, Optional[trace.Tracer]) -> ParentSnapshot
    snapshot = save_parent_ctx()
    try:
        span = (tracer or get_tracer()).start_span(
            span_name(request),
            context=snapshot.parent,
            kind=SpanKind.CLIENT,
            attributes=dict(span_attributes(request)),
        )
    except Exception:
        log.debug("error starting span for %s request", request.method, exc_info=True)
        span = trace.INVALID_SPAN
    activate_span(snapshot, span)
    return snapshot


def _inject_headers(request, snapshot):
    # type: (Request, ParentSnapshot) -> Request
    return dataclasses.replace(request, headers=HTTPPropagator.inject(request.headers, snapshot.span_context()))


def _describe(exc):
    # type: (BaseException) -> str
    return "{}: {}".format(type(exc).__name__, exc)


def _on_error(snapshot, exc):
    # type: (ParentSnapshot, BaseException) -> None
    if not claim(snapshot):
        return
    span = snapshot.span
    try:
        span.set_status(Status(StatusCode.ERROR, _describe(exc)))
        if config.record_exception:
            span.record_exception(exc)
    except Exception:
        log.debug("error recording transport failure on span", exc_info=True)
    trace_utils.finish_span(snapshot)


def _on_response(snapshot, response):
    # type: (ParentSnapshot, Any) -> None
    if not claim(snapshot):
        return
    try:
        status_code, headers = response.status_code, response.headers
    except AttributeError:
        log.debug("transport returned %r without a status code", type(response), exc_info=True)
    else:
        trace_utils.set_http_meta(snapshot.span, status_code, headers)
    trace_utils.finish_span(snapshot)


def trace_request(request, send, tracer=None):
    # type: (Request, Callable[[Request], R], Optional[trace.Tracer]) -> R
    """
    Run ``send(request)`` inside a client span.

    The span is current for the duration of the call, the propagation headers
    of the span are added to the request handed to ``send`` and the previously
    current context is restored once the span ends.
    """
    if not config.enabled:
        return send(request)

    snapshot = _start_span(request, tracer)
    try:
        response = send(_inject_headers(request, snapshot))
    except BaseException as e:
        _on_error(snapshot, e)
        raise
    _on_response(snapshot, response)
    return response


async def trace_request_async(request, send, tracer=None):
    # type: (Request, Callable[[Request], Awaitable[R]], Optional[trace.Tracer]) -> R
    """Same as :func:`trace_request` for coroutine transports."""
    if not config.enabled:
        return await send(request)

    snapshot = _start_span(request, tracer)
    try:
        response = await send(_inject_headers(request, snapshot))
    except BaseException as e:
        _on_error(snapshot, e)
        raise
    _on_response(snapshot, response)
    return response
