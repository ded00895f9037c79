"""Per-request correlation id and HTTP metrics."""

import time
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from users_api.infrastructure.telemetry import (
    clear_request_context,
    record_http_request,
    set_request_context,
)

REQUEST_ID_HEADER = "X-Request-ID"


def _endpoint_label(request: Request) -> str:
    """Full route template of the matched route, never the raw path."""
    template = getattr(request.scope.get("route"), "path", None)
    if template is None:
        return "unmatched"
    # Routes reached through a mount carry the mount prefix in root_path
    root_path = request.scope.get("root_path", "")
    if root_path and not template.startswith(root_path):
        template = root_path.rstrip("/") + template
    return template


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind a request id to the log context and echo it on the response.

    The id is taken from the incoming ``X-Request-ID`` header when present.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        request.state.request_id = request_id
        set_request_context(request_id=request_id)

        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            record_http_request(
                request.method,
                _endpoint_label(request),
                status_code,
                time.perf_counter() - started,
            )
            clear_request_context()
