# 📄 File: sprout/api/middleware/error_handling.py
# 🧭 Purpose (Layman Explanation):
# Catches anything that goes wrong while answering a request and turns it into a tidy,
# consistent error message instead of a crash.
# 🧪 Purpose (Technical Summary):
# Outermost middleware: assigns a request id, times the request and converts uncaught
# exceptions into the standard JSON error envelope. Domain exceptions normally reach
# the SproutException handler first; this is the net for everything else.
# 🔗 Dependencies:
# starlette BaseHTTPMiddleware, sprout.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# sprout.main (middleware registration)

import logging
import traceback
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Tuple

from fastapi import HTTPException, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from sprout.shared.config.settings import get_settings
from sprout.shared.core.exceptions import (
    DatabaseError,
    ExternalServiceError,
    SproutException,
    exception_to_dict,
)

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Every response carries X-Request-ID and X-Response-Time; failed requests get the
    same error envelope as handled domain exceptions.
    """

    def __init__(self, app: ASGIApp):
        super().__init__(app)
        self.settings = get_settings()

        self.error_status_map = {
            ValueError: 400,
            KeyError: 400,
            ConnectionError: 503,
            TimeoutError: 504,
        }

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        start_time = datetime.now(timezone.utc)

        try:
            response = await call_next(request)
        except Exception as exc:
            return self._handle_exception(request, exc, request_id, start_time)

        processing_time = (datetime.now(timezone.utc) - start_time).total_seconds()
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time"] = f"{processing_time:.3f}s"
        return response

    def _handle_exception(
        self,
        request: Request,
        exc: Exception,
        request_id: str,
        start_time: datetime,
    ) -> JSONResponse:
        status_code = self._get_status_code(exc)
        error_code, error_message, error_details = self._get_error_info(exc)
        self._log_error(request, exc, request_id, status_code)

        error_response = {
            "error": {
                "code": error_code,
                "message": error_message,
                "details": error_details,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "request_id": request_id,
                "path": str(request.url.path),
                "method": request.method,
            }
        }

        if self.settings.debug and not self.settings.is_production:
            error_response["error"]["debug"] = {
                "exception_type": type(exc).__name__,
                "exception_message": str(exc),
                "traceback": traceback.format_exc().split("\n"),
            }

        processing_time = (datetime.now(timezone.utc) - start_time).total_seconds()
        response = JSONResponse(status_code=status_code, content=error_response)
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time"] = f"{processing_time:.3f}s"
        response.headers["X-Error-Code"] = error_code
        return response

    def _get_status_code(self, exc: Exception) -> int:
        if isinstance(exc, HTTPException):
            return exc.status_code
        if isinstance(exc, SproutException):
            return exc.status_code
        for exc_type, status_code in self.error_status_map.items():
            if isinstance(exc, exc_type):
                return status_code
        return 500

    def _get_error_info(self, exc: Exception) -> Tuple[str, str, Dict[str, Any]]:
        # Internal details of unexpected errors stay in the logs
        error = exception_to_dict(exc)["error"]
        return error["code"], error["message"], error["details"]

    def _log_error(self, request: Request, exc: Exception, request_id: str, status_code: int) -> None:
        log_context = {
            "request_id": request_id,
            "method": request.method,
            "path": str(request.url.path),
            "client_ip": get_client_ip(request),
            "status_code": status_code,
            "exception_type": type(exc).__name__,
        }

        if status_code >= 500:
            logger.error(
                f"Server error in {request.method} {request.url.path}",
                extra=log_context,
                exc_info=exc,
            )
        else:
            logger.info(f"Client error in {request.method} {request.url.path}", extra=log_context)

        if isinstance(exc, (ConnectionError, TimeoutError, DatabaseError)):
            logger.error(
                f"Infrastructure error: {type(exc).__name__}",
                extra={**log_context, "infrastructure_error": True},
            )
        if isinstance(exc, ExternalServiceError):
            logger.warning(
                f"External service error: {exc.details.get('service', 'unknown')}",
                extra={**log_context, "external_service_error": True},
            )


def get_client_ip(request: Request) -> str:
    """Client address, honouring proxy headers."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    if request.client:
        return request.client.host
    return "unknown"
