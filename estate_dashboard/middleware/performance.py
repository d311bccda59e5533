"""
Performance monitoring middleware for request timing.
Adds X-Processing-Time to every response and logs slow requests.
"""

from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
import logging
import time

logger = logging.getLogger(__name__)


class PerformanceMonitoringMiddleware(BaseHTTPMiddleware):
    """
    Middleware for request timing.
    Requests slower than the threshold are logged as warnings, others at debug level.
    """

    def __init__(
        self,
        app: ASGIApp,
        slow_request_threshold: float = 2.0,  # seconds
        enable_detailed_logging: bool = False
    ):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold
        self.enable_detailed_logging = enable_detailed_logging

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process request through performance monitoring middleware.

        Args:
            request: FastAPI request object
            call_next: Next middleware/handler in chain

        Returns:
            Response object with performance headers
        """
        start_time = time.perf_counter()
        request_id = getattr(request.state, 'request_id', 'unknown')

        try:
            response = await call_next(request)
        except Exception as exc:
            processing_time = time.perf_counter() - start_time
            logger.error(
                f"Request error [{request_id}]: {type(exc).__name__} - {str(exc)} "
                f"(processing_time: {processing_time:.3f}s)",
                extra={
                    "request_id": request_id,
                    "path": request.url.path,
                    "method": request.method,
                    "processing_time": processing_time,
                    "error_type": type(exc).__name__
                },
                exc_info=True
            )
            raise

        processing_time = time.perf_counter() - start_time
        self._log_timing(request, response, request_id, processing_time)

        response.headers["X-Processing-Time"] = f"{processing_time:.3f}"
        return response

    def _log_timing(self, request: Request, response: Response, request_id: str, processing_time: float) -> None:
        extra = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "processing_time": processing_time
        }

        if processing_time > self.slow_request_threshold:
            logger.warning(
                f"Slow request [{request_id}]: {request.method} {request.url.path} "
                f"took {processing_time:.3f}s (threshold: {self.slow_request_threshold}s)",
                extra=extra
            )
        elif self.enable_detailed_logging:
            logger.info(
                f"Request completed [{request_id}]: {request.method} {request.url.path} "
                f"- {response.status_code} in {processing_time:.3f}s",
                extra=extra
            )
        else:
            logger.debug(
                f"{request.method} {request.url.path} - {response.status_code} in {processing_time:.3f}s",
                extra=extra
            )
