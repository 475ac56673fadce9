from typing import Optional  # noqa:F401

from opentelemetry import trace

from telehttp.version import __version__


_tracer_provider = None  # type: Optional[trace.TracerProvider]


def set_tracer_provider(tracer_provider):
    # type: (Optional[trace.TracerProvider]) -> None
    """Use ``tracer_provider`` instead of the global OpenTelemetry provider. ``None`` resets it."""
    global _tracer_provider
    _tracer_provider = tracer_provider


def get_tracer():
    # type: () -> trace.Tracer
    from telehttp import config

    return trace.get_tracer(config.tracer_name, __version__, tracer_provider=_tracer_provider)
