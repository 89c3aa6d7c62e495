"""HTTP constants for the fetch layer.

Centralizes header names, content types, and status codes used by the
request pipeline.
"""

# HTTP Status Codes
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300
HTTP_STATUS_NO_CONTENT = 204
HTTP_STATUS_BAD_REQUEST = 400

# Responses at or above this status are logged at error level
DEFAULT_MIN_ERROR = HTTP_STATUS_BAD_REQUEST

# Header names
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_ACCEPT_LANGUAGE = "Accept-Language"
HEADER_ACCEPT_ENCODING = "Accept-Encoding"
HEADER_AUTHORIZATION = "Authorization"

# Content types
CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_FORM = "application/x-www-form-urlencoded"

# Some servers answer 500 to a wildcard or missing Accept-Language
FORCED_ACCEPT_LANGUAGE = "en"
FORCED_ACCEPT_ENCODING = "gzip"

# Methods that never carry a request body
BODYLESS_METHODS = frozenset({"GET", "HEAD"})
