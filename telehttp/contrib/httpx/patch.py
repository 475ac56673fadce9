import typing

import httpx
from wrapt import wrap_function_wrapper as _w

from telehttp.constants import _TRACED_EXTENSION
from telehttp.contrib.internal.http_client import Request
from telehttp.contrib.internal.http_client import trace_request
from telehttp.contrib.internal.http_client import trace_request_async
from telehttp.internal.logger import get_logger
from telehttp.internal.utils import ArgumentError
from telehttp.internal.utils import get_argument_value
from telehttp.internal.utils.wrappers import unwrap as _u


if typing.TYPE_CHECKING:
    from wrapt import BoundFunctionWrapper  # noqa:F401


log = get_logger(__name__)


def get_version():
    # type: () -> str
    return getattr(httpx, "__version__", "")


def _get_request(args, kwargs):
    # type: (typing.Tuple[typing.Any, ...], typing.Dict[str, typing.Any]) -> typing.Optional[httpx.Request]
    try:
        req = get_argument_value(args, kwargs, 0, "request")
    except ArgumentError:
        log.debug("httpx: unable to find the request argument", exc_info=True)
        return None
    if req.extensions.get(_TRACED_EXTENSION):
        return None
    return req


def _to_request(req):
    # type: (httpx.Request) -> Request
    return Request(
        method=req.method,
        url=str(req.url),
        body=None,
        headers=req.headers.multi_items(),
        options=req.extensions,
    )


def _with_headers(req, traced):
    # type: (httpx.Request, Request) -> None
    req.headers = httpx.Headers(traced.headers)


async def _wrapped_async_send(
    wrapped,  # type: BoundFunctionWrapper
    instance,  # type: httpx.AsyncClient
    args,  # type: typing.Tuple[httpx.Request]
    kwargs,  # type: typing.Dict[str, typing.Any]
):
    # type: (...) -> httpx.Response
    req = _get_request(args, kwargs)
    if req is None:
        return await wrapped(*args, **kwargs)

    async def send(traced):
        # type: (Request) -> httpx.Response
        _with_headers(req, traced)
        return await wrapped(*args, **kwargs)

    return await trace_request_async(_to_request(req), send)


def _wrapped_sync_send(
    wrapped,  # type: BoundFunctionWrapper
    instance,  # type: httpx.Client
    args,  # type: typing.Tuple[httpx.Request]
    kwargs,  # type: typing.Dict[str, typing.Any]
):
    # type: (...) -> httpx.Response
    req = _get_request(args, kwargs)
    if req is None:
        return wrapped(*args, **kwargs)

    def send(traced):
        # type: (Request) -> httpx.Response
        _with_headers(req, traced)
        return wrapped(*args, **kwargs)

    return trace_request(_to_request(req), send)


def patch():
    # type: () -> None
    if getattr(httpx, "_telehttp_patch", False):
        return

    httpx._telehttp_patch = True

    _w(httpx.AsyncClient, "send", _wrapped_async_send)
    _w(httpx.Client, "send", _wrapped_sync_send)


def unpatch():
    # type: () -> None
    if not getattr(httpx, "_telehttp_patch", False):
        return

    httpx._telehttp_patch = False

    _u(httpx.AsyncClient, "send")
    _u(httpx.Client, "send")
