from opentelemetry.trace import NonRecordingSpan
from opentelemetry.trace import SpanContext
from opentelemetry.trace import TraceFlags
from opentelemetry.trace import set_span_in_context
import pytest

from telehttp.propagation.http import HTTPPropagator
from telehttp.propagation.http import normalize_headers
from tests.utils import override_config


TRACE_ID = 0x4BF92F3577B34DA6A3CE929D0E0E4736
SPAN_ID = 0x00F067AA0BA902B7
TRACEPARENT = "00-4bf92f3577b34da6a3ce929d0e0e4736-00f067aa0ba902b7-01"


@pytest.fixture
def remote_context():
    span_context = SpanContext(TRACE_ID, SPAN_ID, is_remote=True, trace_flags=TraceFlags(TraceFlags.SAMPLED))
    return set_span_in_context(NonRecordingSpan(span_context))


def test_normalize_mapping():
    assert normalize_headers({"Accept": "application/json", "X-Id": "1"}) == [
        ("Accept", "application/json"),
        ("X-Id", "1"),
    ]


def test_normalize_list_is_copied():
    headers = [("Accept", "text/plain"), ("Accept", "text/html")]
    normalized = normalize_headers(headers)
    assert normalized == headers
    assert normalized is not headers


def test_normalize_none():
    assert normalize_headers(None) == []


def test_inject_appends_traceparent(remote_context):
    headers = HTTPPropagator.inject([("Accept", "application/json")], remote_context)
    assert headers == [("Accept", "application/json"), ("traceparent", TRACEPARENT)]


def test_inject_does_not_modify_caller_headers(remote_context):
    original = [("Accept", "application/json")]
    HTTPPropagator.inject(original, remote_context)
    assert original == [("Accept", "application/json")]


def test_inject_mapping_and_list_are_equivalent(remote_context):
    from_mapping = HTTPPropagator.inject({"Accept": "application/json", "X-Id": "1"}, remote_context)
    from_list = HTTPPropagator.inject([("Accept", "application/json"), ("X-Id", "1")], remote_context)
    assert from_mapping == from_list


def test_inject_replaces_existing_traceparent(remote_context):
    headers = HTTPPropagator.inject(
        [("Traceparent", "caller-value"), ("Accept", "*/*"), ("Accept", "text/html")], remote_context
    )
    assert headers == [("traceparent", TRACEPARENT), ("Accept", "*/*"), ("Accept", "text/html")]


def test_inject_without_active_span():
    # nothing to propagate from an empty context
    assert HTTPPropagator.inject({"Accept": "*/*"}) == [("Accept", "*/*")]


def test_inject_distributed_tracing_disabled(remote_context):
    with override_config(dict(distributed_tracing=False)):
        assert HTTPPropagator.inject({"Accept": "*/*"}, remote_context) == [("Accept", "*/*")]
