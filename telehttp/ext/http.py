"""
Standard http attributes.

For example:

span.set_attribute(URL, 'https://api.example.com/v1/items')
span.set_attribute(STATUS_CODE, 404)
"""

# attributes
URL = "http.url"
METHOD = "http.method"
STATUS_CODE = "http.status_code"
RESPONSE_CONTENT_LENGTH = "http.response_content_length"

# response header carrying the body size
CONTENT_LENGTH_HEADER = "content-length"
