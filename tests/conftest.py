from opentelemetry import context as otel_context
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
import pytest

import telehttp
from tests.utils import EventRecorder


@pytest.fixture
def events():
    return []


@pytest.fixture
def tracer_provider(events):
    provider = TracerProvider()
    provider.add_span_processor(EventRecorder(events))
    return provider


@pytest.fixture
def span_exporter(tracer_provider):
    exporter = InMemorySpanExporter()
    tracer_provider.add_span_processor(SimpleSpanProcessor(exporter))
    telehttp.setup(tracer_provider=tracer_provider)
    yield exporter
    telehttp.setup()
    exporter.clear()


@pytest.fixture
def tracer(tracer_provider):
    """Tracer used by tests to create parent spans around traced requests."""
    return tracer_provider.get_tracer("tests")


@pytest.fixture(autouse=True)
def clean_context():
    token = otel_context.attach(otel_context.Context())
    yield
    otel_context.detach(token)
