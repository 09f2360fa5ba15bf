# networkcontrol/api/middleware.py
"""
Request ID Middleware

Tags every request with an ID (taken from X-Request-ID or generated), echoes
it on the response and exposes it to log records through RequestIdFilter.
"""

import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


def get_request_id() -> str:
    return request_id_var.get()


def generate_request_id() -> str:
    return f"req-{uuid.uuid4().hex[:12]}"


class RequestIdFilter(logging.Filter):
    """Adds request_id to every record so formatters can reference it"""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id()
        return True


class RequestIdMiddleware(BaseHTTPMiddleware):

    HEADER_NAME = "X-Request-ID"

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(self.HEADER_NAME) or generate_request_id()
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
            response.headers[self.HEADER_NAME] = request_id
            return response
        finally:
            request_id_var.reset(token)
