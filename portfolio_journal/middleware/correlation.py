# portfolio_journal/middleware/correlation.py
"""
Correlation ID middleware for request tracing.

For every request the middleware takes the ID from X-Correlation-ID (or
X-Request-ID), generating a UUID when neither is present, stores it in the
request context for log records, and echoes it in the X-Correlation-ID
response header.

Usage:
    app.add_middleware(CorrelationIdMiddleware)

Client Usage:
    curl -H "X-Correlation-ID: my-trace-123" http://localhost:8000/analytics
"""

import logging
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from portfolio_journal.utils.context import clear_request_context, set_correlation_id

logger = logging.getLogger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"

# Longer client-supplied IDs are replaced to keep log lines bounded
MAX_CORRELATION_ID_LENGTH = 128


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Assigns a correlation ID to each request and clears context afterwards."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Response],
    ) -> Response:
        correlation_id = self._get_correlation_id(request)
        set_correlation_id(correlation_id)
        # Also on request.state: the outermost error handler runs after the
        # context has been cleared
        request.state.correlation_id = correlation_id

        try:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = correlation_id
            return response
        finally:
            clear_request_context()

    def _get_correlation_id(self, request: Request) -> str:
        for header in (CORRELATION_ID_HEADER, REQUEST_ID_HEADER):
            value = request.headers.get(header)
            if value and len(value) <= MAX_CORRELATION_ID_LENGTH:
                return value

        return str(uuid.uuid4())
