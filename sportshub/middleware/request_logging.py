import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from sportshub.core.logging import logger


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status code and latency of every request."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f}ms"
        )
        return response
