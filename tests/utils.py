import contextlib
import os

import httpx
from opentelemetry.sdk.trace import SpanProcessor

import telehttp


@contextlib.contextmanager
def override_env(env):
    """
    Temporarily override ``os.environ`` with provided values::

        >>> with override_env(dict(TELEHTTP_DISTRIBUTED_TRACING="false")):
            # Your test
    """
    original = dict(os.environ)
    os.environ.update(env)
    try:
        yield
    finally:
        os.environ.clear()
        os.environ.update(original)


@contextlib.contextmanager
def override_config(values):
    """
    Temporarily override ``telehttp.config`` values::

        >>> with override_config(dict(record_exception=False)):
            # Your test
    """
    original = dict((key, getattr(telehttp.config, key)) for key in values.keys())
    for key, value in values.items():
        setattr(telehttp.config, key, value)
    try:
        yield
    finally:
        for key, value in original.items():
            setattr(telehttp.config, key, value)


class EventRecorder(SpanProcessor):
    """Records span starts and ends, in order, into a shared event list."""

    def __init__(self, events):
        self.events = events

    def on_start(self, span, parent_context=None):
        self.events.append(("start", span.name))

    def on_end(self, span):
        self.events.append(("end", span.name))


def mock_transport(status_code=200, headers=None, content=b"", seen=None, exc=None):
    """
    An ``httpx.MockTransport`` answering every request with the same response.

    :param seen: list receiving every request the transport is asked to send
    :param exc: exception raised instead of answering
    """

    def handler(request):
        if seen is not None:
            seen.append(request)
        if exc is not None:
            raise exc
        return httpx.Response(status_code, headers=headers, content=content)

    return httpx.MockTransport(handler)
