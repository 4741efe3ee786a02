"""Helpers for building invoker requests in tests."""

import json

from jsonapi_invoker.invoker import InvokerContext

JSONAPI = "application/vnd.api+json"
SEARCH_PACKAGE = "tests.sample_resources"
DEFAULT_DOMAIN = "http://example.com"


def make_context(method, path, *, query=None, document=None, headers=None):
    """Build an InvokerContext with JSON:API headers and an optional JSON body."""
    request_headers = {"accept": JSONAPI}
    body = b""
    if document is not None:
        request_headers["content-type"] = JSONAPI
        body = json.dumps(document).encode()
    request_headers.update(headers or {})
    return InvokerContext(
        method=method, path=path, query_params=query or {}, headers=request_headers, body=body
    )
