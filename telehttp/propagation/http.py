from typing import Any  # noqa:F401
from typing import Iterable  # noqa:F401
from typing import List  # noqa:F401
from typing import Mapping  # noqa:F401
from typing import Optional  # noqa:F401
from typing import Tuple  # noqa:F401
from typing import Union  # noqa:F401

from opentelemetry import propagate
from opentelemetry.context import Context  # noqa:F401
from opentelemetry.propagators.textmap import Setter

from telehttp.internal.logger import get_logger


log = get_logger(__name__)

HeaderList = List[Tuple[str, str]]
Headers = Union[Mapping[str, str], Iterable[Tuple[str, str]], None]


def normalize_headers(headers):
    # type: (Headers) -> HeaderList
    """
    Convert a header collection into a new list of ``(key, value)`` pairs.

    Mappings keep their iteration order; ordered pair collections are copied as is::

        >>> normalize_headers({"Accept": "application/json"})
        [('Accept', 'application/json')]
        >>> normalize_headers([("Accept", "text/plain"), ("Accept", "text/html")])
        [('Accept', 'text/plain'), ('Accept', 'text/html')]
    """
    if headers is None:
        return []
    if isinstance(headers, Mapping):
        return list(headers.items())
    return [(key, value) for key, value in headers]


class _ListSetter(Setter):
    def set(self, carrier, key, value):
        # type: (HeaderList, str, str) -> None
        """Replace the first header named ``key`` (case-insensitively), append otherwise."""
        lowered = key.lower()
        for index, (name, _) in enumerate(carrier):
            if name.lower() == lowered:
                carrier[index] = (key, value)
                return
        carrier.append((key, value))


_list_setter = _ListSetter()


class HTTPPropagator(object):
    """A HTTP Propagator using the globally configured OpenTelemetry text map propagator."""

    @staticmethod
    def inject(headers, context=None):
        # type: (Headers, Optional[Context]) -> HeaderList
        """
        Inject trace context propagation headers into ``headers``.

        The caller's collection is left untouched; the returned list holds the
        caller's headers with the propagation headers set: a propagation header
        already present is replaced in place, a missing one is appended. Other
        repeated headers are kept as they are.

        :param headers: A mapping or an ordered collection of ``(key, value)`` pairs
        :param context: The OpenTelemetry context to propagate, the current one if ``None``
        """
        carrier = normalize_headers(headers)
        from telehttp import config

        if not config.distributed_tracing:
            return carrier
        try:
            propagate.inject(carrier, context=context, setter=_list_setter)
        except Exception:
            log.debug("error injecting propagation headers", exc_info=True)
        return carrier
