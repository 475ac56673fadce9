"""
Drop-in traced HTTP client.

``TracedClient`` and ``AsyncTracedClient`` wrap an ``httpx`` client and trace
every request they make::

    from telehttp import TracedClient

    with TracedClient(base_url="https://api.example.com") as client:
        client.get("/v1/items", options={"ot_span_name": "list items"})

Besides ``ot_span_name`` and ``ot_attributes`` the options mapping accepts
``params``, ``timeout`` and ``follow_redirects``, which are passed on to
``httpx``. Responses and exceptions are the ones ``httpx`` produces.
"""
from typing import Any  # noqa:F401
from typing import Mapping  # noqa:F401
from typing import Optional  # noqa:F401

import httpx
from opentelemetry import trace  # noqa:F401

from telehttp.constants import _TRACED_EXTENSION
from telehttp.contrib.internal.http_client import Request
from telehttp.contrib.internal.http_client import trace_request
from telehttp.contrib.internal.http_client import trace_request_async
from telehttp.propagation.http import Headers  # noqa:F401


def _build_request(client, request):
    # type: (httpx._client.BaseClient, Request) -> httpx.Request
    options = request.options
    return client.build_request(
        request.method.upper(),
        request.url,
        content=request.body,
        headers=request.headers,
        params=options.get("params"),
        timeout=options.get("timeout", httpx.USE_CLIENT_DEFAULT),
        extensions={_TRACED_EXTENSION: True},
    )


class _BaseTracedClient(object):
    def __init__(self, client, tracer):
        self._client = client
        self._tracer = tracer

    def process_request_url(self, url):
        # type: (str) -> str
        """
        Hook to rewrite the request URL before it is traced and sent.

        Relative URLs are resolved against the ``base_url`` of the wrapped client.
        """
        merged = httpx.URL(url)
        if merged.is_relative_url:
            # appended to the base path, unlike RFC 3986 joining which replaces it
            base_url = self._client.base_url
            merged = base_url.copy_with(raw_path=base_url.raw_path + merged.raw_path.lstrip(b"/"))
        return str(merged)

    def _request(self, method, url, body, headers, options):
        # type: (str, Any, Any, Headers, Optional[Mapping[str, Any]]) -> Request
        return Request(
            method=method,
            url=self.process_request_url(str(url)),
            body=body,
            headers=headers or (),
            options=options or {},
        )


class TracedClient(_BaseTracedClient):
    """
    Synchronous traced client.

    :param client: The ``httpx.Client`` to send requests with. One is created from
        ``client_kwargs`` when omitted, and closed together with this client.
    :param tracer: The OpenTelemetry tracer used to create spans, the telehttp tracer if omitted
    """

    def __init__(self, client=None, tracer=None, **client_kwargs):
        # type: (Optional[httpx.Client], Optional[trace.Tracer], Any) -> None
        self._owns_client = client is None
        super(TracedClient, self).__init__(client if client is not None else httpx.Client(**client_kwargs), tracer)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self):
        # type: () -> None
        if self._owns_client:
            self._client.close()

    def _send(self, request):
        # type: (Request) -> httpx.Response
        return self._client.send(
            _build_request(self._client, request),
            follow_redirects=request.options.get("follow_redirects", httpx.USE_CLIENT_DEFAULT),
        )

    def request(self, method, url, body=b"", headers=None, options=None):
        # type: (str, Any, Any, Headers, Optional[Mapping[str, Any]]) -> httpx.Response
        return trace_request(self._request(method, url, body, headers, options), self._send, self._tracer)

    def get(self, url, headers=None, options=None):
        return self.request("GET", url, headers=headers, options=options)

    def head(self, url, headers=None, options=None):
        return self.request("HEAD", url, headers=headers, options=options)

    def options(self, url, headers=None, options=None):
        return self.request("OPTIONS", url, headers=headers, options=options)

    def delete(self, url, headers=None, options=None):
        return self.request("DELETE", url, headers=headers, options=options)

    def post(self, url, body=b"", headers=None, options=None):
        return self.request("POST", url, body, headers, options)

    def put(self, url, body=b"", headers=None, options=None):
        return self.request("PUT", url, body, headers, options)

    def patch(self, url, body=b"", headers=None, options=None):
        return self.request("PATCH", url, body, headers, options)


class AsyncTracedClient(_BaseTracedClient):
    """Asynchronous counterpart of :class:`TracedClient`, backed by ``httpx.AsyncClient``."""

    def __init__(self, client=None, tracer=None, **client_kwargs):
        # type: (Optional[httpx.AsyncClient], Optional[trace.Tracer], Any) -> None
        self._owns_client = client is None
        super(AsyncTracedClient, self).__init__(
            client if client is not None else httpx.AsyncClient(**client_kwargs), tracer
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        # type: () -> None
        if self._owns_client:
            await self._client.aclose()

    async def _send(self, request):
        # type: (Request) -> httpx.Response
        return await self._client.send(
            _build_request(self._client, request),
            follow_redirects=request.options.get("follow_redirects", httpx.USE_CLIENT_DEFAULT),
        )

    async def request(self, method, url, body=b"", headers=None, options=None):
        # type: (str, Any, Any, Headers, Optional[Mapping[str, Any]]) -> httpx.Response
        return await trace_request_async(self._request(method, url, body, headers, options), self._send, self._tracer)

    async def get(self, url, headers=None, options=None):
        return await self.request("GET", url, headers=headers, options=options)

    async def head(self, url, headers=None, options=None):
        return await self.request("HEAD", url, headers=headers, options=options)

    async def options(self, url, headers=None, options=None):
        return await self.request("OPTIONS", url, headers=headers, options=options)

    async def delete(self, url, headers=None, options=None):
        return await self.request("DELETE", url, headers=headers, options=options)

    async def post(self, url, body=b"", headers=None, options=None):
        return await self.request("POST", url, body, headers, options)

    async def put(self, url, body=b"", headers=None, options=None):
        return await self.request("PUT", url, body, headers, options)

    async def patch(self, url, body=b"", headers=None, options=None):
        return await self.request("PATCH", url, body, headers, options)


def request(method, url, body=b"", headers=None, options=None, **client_kwargs):
    # type: (str, Any, Any, Headers, Optional[Mapping[str, Any]], Any) -> httpx.Response
    """Send a single traced request with a throwaway client."""
    with TracedClient(**client_kwargs) as client:
        return client.request(method, url, body, headers, options)


def get(url, headers=None, options=None, **client_kwargs):
    return request("GET", url, headers=headers, options=options, **client_kwargs)


def head(url, headers=None, options=None, **client_kwargs):
    return request("HEAD", url, headers=headers, options=options, **client_kwargs)


def delete(url, headers=None, options=None, **client_kwargs):
    return request("DELETE", url, headers=headers, options=options, **client_kwargs)


def post(url, body=b"", headers=None, options=None, **client_kwargs):
    return request("POST", url, body, headers, options, **client_kwargs)


def put(url, body=b"", headers=None, options=None, **client_kwargs):
    return request("PUT", url, body, headers, options, **client_kwargs)
