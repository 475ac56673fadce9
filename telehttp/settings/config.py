from envier import Env


class Config(Env):
    """
    Process-wide configuration for telehttp.

    Every option can be set through the environment, e.g. ``TELEHTTP_DISTRIBUTED_TRACING=false``,
    or at runtime on the ``telehttp.config`` instance::

        from telehttp import config

        config.record_exception = False
    """

    __prefix__ = "telehttp"

    enabled = Env.var(
        bool,
        "enabled",
        default=True,
        help_type="Boolean",
        help="Trace outbound requests",
    )

    distributed_tracing = Env.var(
        bool,
        "distributed_tracing",
        default=True,
        help_type="Boolean",
        help="Inject trace context propagation headers into outbound requests",
    )

    record_exception = Env.var(
        bool,
        "record_exception",
        default=True,
        help_type="Boolean",
        help="Add an exception event to the span when the transport raises",
    )

    split_by_domain = Env.var(
        bool,
        "split_by_domain",
        default=False,
        help_type="Boolean",
        help="Set the peer.service attribute to the host[:port] of the request",
    )

    tracer_name = Env.var(
        str,
        "tracer_name",
        default="telehttp",
        help_type="String",
        help="Instrumentation scope name used to obtain the OpenTelemetry tracer",
    )
