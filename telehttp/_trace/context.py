"""
Explicit parent context handling for a single traced request.

A ``ParentSnapshot`` is created when a request starts and is threaded through
every stage of the request pipeline. It remembers the OpenTelemetry context
that was current before the request span was activated and tracks whether the
request span has been closed already::

    snapshot = save_parent_ctx()
    activate_span(snapshot, span)
    ...
    if claim(snapshot):
        span.end()
        restore_parent_ctx(snapshot)

Snapshots are never stored globally, so concurrent requests on other threads
or asyncio tasks cannot observe each other's parent.
"""

import enum
from typing import Optional  # noqa:F401

from opentelemetry import context as otel_context
from opentelemetry import trace

from telehttp.internal.logger import get_logger


log = get_logger(__name__)


class Completion(enum.Enum):
    OPEN = "open"
    CLOSED_HERE = "closed-here"
    CLOSED_ELSEWHERE = "closed-elsewhere"


class ParentSnapshot(object):
    __slots__ = ("parent", "span", "token", "state")

    def __init__(self, parent):
        # type: (otel_context.Context) -> None
        self.parent = parent
        self.span = None  # type: Optional[trace.Span]
        self.token = None  # type: Optional[object]
        self.state = Completion.OPEN

    def __repr__(self):
        return "ParentSnapshot(span={!r}, state={})".format(self.span, self.state.value)

    def span_context(self):
        # type: () -> otel_context.Context
        """The parent context with the request span set as current."""
        return trace.set_span_in_context(self.span or trace.INVALID_SPAN, self.parent)


def save_parent_ctx():
    # type: () -> ParentSnapshot
    return ParentSnapshot(otel_context.get_current())


def activate_span(snapshot, span):
    # type: (ParentSnapshot, trace.Span) -> None
    snapshot.span = span
    snapshot.token = otel_context.attach(snapshot.span_context())


def is_current(snapshot):
    # type: (ParentSnapshot) -> bool
    return snapshot.span is not None and trace.get_current_span() is snapshot.span


def claim(snapshot):
    # type: (ParentSnapshot) -> bool
    """
    Decide whether the caller is the one that closes the request span.

    Returns ``True`` exactly once, and only while the request span is still the
    current span. When something else replaced the current span in the meantime
    the snapshot is marked as closed elsewhere and is never closed by this request.
    """
    if snapshot.state is not Completion.OPEN:
        return False
    if not is_current(snapshot):
        snapshot.state = Completion.CLOSED_ELSEWHERE
        log.debug("current span changed while %r was in flight, leaving it open", snapshot)
        return False
    snapshot.state = Completion.CLOSED_HERE
    return True


def restore_parent_ctx(snapshot):
    # type: (ParentSnapshot) -> None
    token, snapshot.token = snapshot.token, None
    if token is None:
        return
    otel_context.detach(token)
