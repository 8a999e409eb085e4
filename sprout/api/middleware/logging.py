# 📄 File: sprout/api/middleware/logging.py
# 🧭 Purpose (Layman Explanation):
# Keeps a diary of every request: what was asked for, who asked, how long it took and
# how it ended, without ever writing down passwords or tokens.
# 🧪 Purpose (Technical Summary):
# Request/response logging middleware with header redaction, slow-request warnings and
# request-id correlation. Webhook bodies and health probes are not logged.
# 🔗 Dependencies:
# starlette BaseHTTPMiddleware, sprout.shared.utils.logging
# 🔄 Connected Modules / Calls From:
# sprout.main (middleware registration)

import time
from typing import Any, Dict

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from sprout.api.middleware.error_handling import REQUEST_ID_HEADER, get_client_ip
from sprout.shared.utils.logging import get_logger

logger = get_logger(__name__)

EXCLUDED_PATHS = ("/api/v1/health", "/docs", "/redoc", "/openapi.json", "/favicon.ico")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Structured access log for the API."""

    def __init__(self, app: ASGIApp, slow_request_threshold: float = 2.0):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold
        self.sensitive_headers = {
            "authorization",
            "cookie",
            "stripe-signature",
            "x-api-key",
        }

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path.startswith(EXCLUDED_PATHS):
            return await call_next(request)

        start_time = time.time()
        logger.info(
            f"Request started: {request.method} {request.url.path}",
            **self._request_context(request),
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"Request failed: {request.method} {request.url.path}",
                error_type=type(e).__name__,
                processing_time=round(time.time() - start_time, 4),
                **self._request_context(request),
            )
            raise

        processing_time = time.time() - start_time
        context = {
            **self._request_context(request),
            "status_code": response.status_code,
            "processing_time": round(processing_time, 4),
        }
        message = f"Request completed: {request.method} {request.url.path} {response.status_code}"

        if processing_time > self.slow_request_threshold:
            logger.warning(f"Slow request: {message}", **context)
        elif response.status_code >= 500:
            logger.error(message, **context)
        elif response.status_code >= 400:
            logger.warning(message, **context)
        else:
            logger.info(message, **context)
        return response

    def _request_context(self, request: Request) -> Dict[str, Any]:
        return {
            "request_id": getattr(request.state, "request_id", None) or request.headers.get(REQUEST_ID_HEADER),
            "method": request.method,
            "path": request.url.path,
            "client_ip": get_client_ip(request),
            "user_agent": request.headers.get("user-agent"),
            "headers": self._filter_headers(request),
        }

    def _filter_headers(self, request: Request) -> Dict[str, str]:
        return {
            k: ("[REDACTED]" if k.lower() in self.sensitive_headers else v)
            for k, v in request.headers.items()
        }
