import contextvars

from opentelemetry import context as otel_context
from opentelemetry import trace

from telehttp._trace.context import Completion
from telehttp._trace.context import activate_span
from telehttp._trace.context import claim
from telehttp._trace.context import is_current
from telehttp._trace.context import restore_parent_ctx
from telehttp._trace.context import save_parent_ctx


def test_save_and_restore_parent(tracer):
    with tracer.start_as_current_span("parent") as parent:
        snapshot = save_parent_ctx()
        assert trace.get_current_span(snapshot.parent) is parent

        child = tracer.start_span("child")
        activate_span(snapshot, child)
        assert trace.get_current_span() is child
        assert is_current(snapshot)

        restore_parent_ctx(snapshot)
        assert trace.get_current_span() is parent
        assert not is_current(snapshot)


def test_restore_without_parent(tracer):
    snapshot = save_parent_ctx()
    activate_span(snapshot, tracer.start_span("child"))
    restore_parent_ctx(snapshot)
    assert trace.get_current_span() is trace.INVALID_SPAN


def test_restore_is_done_once(tracer):
    with tracer.start_as_current_span("parent") as parent:
        snapshot = save_parent_ctx()
        activate_span(snapshot, tracer.start_span("child"))
        restore_parent_ctx(snapshot)
        restore_parent_ctx(snapshot)
        assert snapshot.token is None
        assert trace.get_current_span() is parent


def test_claim_once(tracer):
    snapshot = save_parent_ctx()
    activate_span(snapshot, tracer.start_span("child"))
    assert snapshot.state is Completion.OPEN

    assert claim(snapshot) is True
    assert snapshot.state is Completion.CLOSED_HERE
    assert claim(snapshot) is False
    assert snapshot.state is Completion.CLOSED_HERE

    restore_parent_ctx(snapshot)


def test_claim_when_current_span_changed(tracer):
    def scenario():
        snapshot = save_parent_ctx()
        activate_span(snapshot, tracer.start_span("request"))
        nested = tracer.start_span("nested")
        otel_context.attach(trace.set_span_in_context(nested))

        assert claim(snapshot) is False
        assert snapshot.state is Completion.CLOSED_ELSEWHERE
        assert claim(snapshot) is False
        assert trace.get_current_span() is nested

    contextvars.copy_context().run(scenario)


def test_snapshots_are_independent(tracer):
    with tracer.start_as_current_span("parent") as parent:
        first = save_parent_ctx()
        activate_span(first, tracer.start_span("first"))

        second = save_parent_ctx()
        activate_span(second, tracer.start_span("second"))
        assert trace.get_current_span(second.parent) is first.span

        restore_parent_ctx(second)
        assert trace.get_current_span() is first.span
        restore_parent_ctx(first)
        assert trace.get_current_span() is parent
