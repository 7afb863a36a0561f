"""Request/response logging middleware for development.

Logs one line per API request with a short request id that is echoed back in
the X-Request-ID header. Only enabled when APP_MODE is dev.
"""

import logging
import time
import uuid
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = logging.getLogger("api.requests")

# Paths to exclude from logging (noisy endpoints)
EXCLUDED_PATHS = {
    "/health",
    "/",
    "/docs",
    "/redoc",
    "/openapi.json",
    "/favicon.ico",
}

SENSITIVE_QUERY_PARAMS = ("token", "password", "key")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, upload size, duration and status for each request.

    Generation requests carry multi-megabyte uploads, so only the declared
    Content-Length is logged, never the body.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in EXCLUDED_PATHS:
            return await call_next(request)

        request_id = str(uuid.uuid4())[:8]
        start_time = time.time()

        method = request.method
        query_params = dict(request.query_params)
        client_ip = request.client.host if request.client else "unknown"

        log_parts = [f"[{request_id}]", f"{method} {request.url.path}"]
        if query_params:
            sanitized_params = {
                k: ("***" if k.lower() in SENSITIVE_QUERY_PARAMS else v)
                for k, v in query_params.items()
            }
            log_parts.append(f"params={sanitized_params}")
        content_length = request.headers.get("content-length")
        if content_length:
            log_parts.append(f"body={content_length}B")
        log_parts.append(f"client={client_ip}")
        request_desc = " ".join(log_parts)

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.time() - start_time
            logger.error("%s - ERROR (%.3fs): %s", request_desc, duration, e)
            raise

        duration = time.time() - start_time
        status_class = response.status_code // 100
        if status_class == 5:
            log_func = logger.error
        elif status_class == 4:
            log_func = logger.warning
        elif method == "GET":
            log_func = logger.debug
        else:
            log_func = logger.info

        log_func("%s - %d (%.3fs)", request_desc, response.status_code, duration)

        response.headers["X-Request-ID"] = request_id
        return response


def configure_request_logging(log_level: str = "INFO") -> None:
    """Give the request logger its own handler and level."""
    request_logger = logging.getLogger("api.requests")
    request_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    # Prevent duplicate emission via root logger handlers.
    request_logger.propagate = False

    if not request_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        request_logger.addHandler(handler)
