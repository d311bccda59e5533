"""
Request context middleware.
Assigns every request an ID, echoes it in X-Request-ID and turns unhandled
exceptions into the standard error envelope.
"""

from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
import logging
import re
import time
import uuid

from estate_dashboard.services.error_handler import ErrorHandlerService

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
REQUEST_ID_PATTERN = re.compile(r'^[A-Za-z0-9._-]{1,64}$')


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Middleware for request tracking and last-resort error handling.
    A well-formed incoming X-Request-ID is reused, otherwise a short one is generated.
    """

    def __init__(self, app: ASGIApp, enable_request_logging: bool = False):
        super().__init__(app)
        self.enable_request_logging = enable_request_logging

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process request through the context middleware.

        Args:
            request: FastAPI request object
            call_next: Next middleware/handler in chain

        Returns:
            Response object carrying the request ID header
        """
        request_id = self._resolve_request_id(request)
        request.state.request_id = request_id

        start_time = time.time()

        if self.enable_request_logging:
            logger.info(
                f"Request [{request_id}]: {request.method} {request.url.path}",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "query_params": str(request.query_params),
                }
            )

        try:
            response = await call_next(request)
        except Exception as exc:
            processing_time = time.time() - start_time
            logger.error(
                f"Unhandled error [{request_id}]: {type(exc).__name__} "
                f"(processing_time: {processing_time:.3f}s)",
                extra={
                    "request_id": request_id,
                    "path": request.url.path,
                    "method": request.method,
                    "processing_time": processing_time
                }
            )
            response = ErrorHandlerService.handle_unexpected_error(exc, request)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    @staticmethod
    def _resolve_request_id(request: Request) -> str:
        incoming = request.headers.get(REQUEST_ID_HEADER)
        if incoming and REQUEST_ID_PATTERN.match(incoming):
            return incoming
        return str(uuid.uuid4())[:8]
