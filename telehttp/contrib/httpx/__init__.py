"""
The httpx__ integration traces all HTTP requests made with the ``httpx``
library.

Enabling
~~~~~~~~

Use :func:`patch()<telehttp.patch>` to enable the integration::

    import telehttp
    telehttp.patch()

    # use httpx like usual

Every ``httpx.Client.send`` and ``httpx.AsyncClient.send`` call is then wrapped
in a client span named ``"<METHOD> <host[:port]>"``.


Per-request options
~~~~~~~~~~~~~~~~~~~

The span name and additional attributes can be set through request extensions::

    httpx.get(
        "https://api.example.com/v1/items",
        extensions={"ot_span_name": "list items", "ot_attributes": [("app.page", 2)]},
    )


Global Configuration
~~~~~~~~~~~~~~~~~~~~

.. py:data:: telehttp.config.distributed_tracing

   Whether or not to inject distributed tracing headers into requests.

   This option can also be set with the ``TELEHTTP_DISTRIBUTED_TRACING``
   environment variable.

   Default: ``True``


.. py:data:: telehttp.config.split_by_domain

   Whether or not to record the domain name of requests as the ``peer.service``
   attribute.

   Default: ``False``


.. __: https://www.python-httpx.org/
"""
from .patch import get_version
from .patch import patch
from .patch import unpatch


__all__ = [
    "get_version",
    "patch",
    "unpatch",
]
