import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from traincycle.core.logging import add_log_context, clear_log_context

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tags each request with an id and binds it (and the caller's user id) to every log line."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        clear_log_context()
        add_log_context(
            request_id=request_id,
            user_id=request.headers.get("X-User-Id"),
            path=request.url.path,
        )
        try:
            response: Response = await call_next(request)
        finally:
            clear_log_context()

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
