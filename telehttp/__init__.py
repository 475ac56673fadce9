"""
OpenTelemetry instrumentation for outbound HTTP requests.

A client span is created when a request is built, propagation headers are
injected into it and the span is ended once the response (or the transport
error) arrives. ``http.status_code`` and the other standard HTTP attributes
are set automatically.
"""
from .settings.config import Config


config = Config()


from ._trace.tracer import set_tracer_provider  # noqa: E402
from .client import AsyncTracedClient  # noqa: E402
from .client import TracedClient  # noqa: E402
from .client import delete  # noqa: E402
from .client import get  # noqa: E402
from .client import head  # noqa: E402
from .client import post  # noqa: E402
from .client import put  # noqa: E402
from .client import request  # noqa: E402
from .contrib.httpx import patch  # noqa: E402
from .contrib.httpx import unpatch  # noqa: E402
from .version import __version__  # noqa: E402


__all__ = [
    "AsyncTracedClient",
    "TracedClient",
    "config",
    "delete",
    "get",
    "head",
    "patch",
    "post",
    "put",
    "request",
    "setup",
    "unpatch",
    "__version__",
]


def setup(tracer_provider=None):
    """
    Setup the OpenTelemetry instrumentation for telehttp.

    Call it on application startup, before telehttp is used. Spans are created
    with ``tracer_provider`` when given, with the global OpenTelemetry provider
    otherwise.
    """
    set_tracer_provider(tracer_provider)
