"""
Per-request correlation id.

The id is echoed in the X-Request-ID response header and stamped on every
log record emitted while the request is handled.
"""

import time
import uuid
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from authcore.logging_config import get_logger, request_id_var

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 128

# Above the cost of one bcrypt verification
SLOW_REQUEST_MS = 2000


def resolve_request_id(incoming: Optional[str]) -> str:
    """Reuse a client id of sane length, otherwise mint a UUID."""
    if incoming and len(incoming) <= MAX_REQUEST_ID_LENGTH:
        return incoming
    return str(uuid.uuid4())


class RequestIdMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        context_token = request_id_var.set(request_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            elapsed_ms = round((time.perf_counter() - started) * 1000, 1)
            if elapsed_ms > SLOW_REQUEST_MS:
                logger.warning(
                    "Slow request %s %s took %sms",
                    request.method,
                    request.url.path,
                    elapsed_ms,
                )
        finally:
            request_id_var.reset(context_token)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
