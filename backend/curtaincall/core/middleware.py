"""
FastAPI middleware for request context, logging and simulated latency
"""
import asyncio
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from curtaincall.core.logging_config import LoggingConfig

logger = LoggingConfig.get_logger(__name__)

_LATENCY_EXEMPT_PREFIXES = ("/health", "/metrics", "/static")


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """Middleware to add request context to logs"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())

        LoggingConfig.set_context(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_host=request.client.host if request.client else None,
        )

        start_time = time.time()
        logger.debug(
            "Request started",
            extra={"query_params": str(request.query_params)}
        )

        try:
            response = await call_next(request)

            duration_ms = int((time.time() - start_time) * 1000)
            logger.info(
                "%s %s -> %s",
                request.method,
                request.url.path,
                response.status_code,
                extra={"status_code": response.status_code, "duration_ms": duration_ms}
            )

            response.headers["X-Request-ID"] = request_id
            return response

        except Exception as e:
            duration_ms = int((time.time() - start_time) * 1000)
            logger.error(
                "Request failed",
                exc_info=True,
                extra={
                    "error": str(e),
                    "error_type": type(e).__name__,
                    "duration_ms": duration_ms,
                }
            )
            raise

        finally:
            LoggingConfig.clear_context()


class SimulatedLatencyMiddleware(BaseHTTPMiddleware):
    """Delay every page and API request to mimic a remote backend"""

    def __init__(self, app, latency_ms: int = 0):
        super().__init__(app)
        self.latency_ms = latency_ms

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if self.latency_ms > 0 and not request.url.path.startswith(_LATENCY_EXEMPT_PREFIXES):
            await asyncio.sleep(self.latency_ms / 1000)
        return await call_next(request)
