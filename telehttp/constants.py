"""
This module contains constants used across telehttp.

Constants that should NOT be referenced by telehttp users are marked with a leading underscore.
"""

# per-request options recognized by the traced client and by patched httpx clients
SPAN_NAME_OPTION = "ot_span_name"
ATTRIBUTES_OPTION = "ot_attributes"

# status description used for HTTP-level errors (status code >= 400)
HTTP_ERROR_DESCRIPTION = ""

_HTTP_ERROR_THRESHOLD = 400

# marks httpx requests already traced by a TracedClient so patched clients do not trace them twice
_TRACED_EXTENSION = "telehttp.traced"
