"""
Error types and response handling for the ordering API
"""

import uuid
import traceback
import logging
from typing import Optional, Dict, Any
from datetime import datetime, timezone
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.responses import JSONResponse

from foodorder.config import is_development

logger = logging.getLogger(__name__)

class ErrorContext:
    """Context object for tracking error information across the request lifecycle"""

    def __init__(self, request: Request):
        self.request_id = str(uuid.uuid4())
        self.request = request
        self.endpoint = str(request.url.path)
        self.method = request.method
        self.client_ip = self._get_client_ip()
        self.user_agent = request.headers.get("user-agent")
        self.timestamp = datetime.now(timezone.utc)

    def _get_client_ip(self) -> Optional[str]:
        """Extract client IP from request headers"""
        if "x-forwarded-for" in self.request.headers:
            return self.request.headers["x-forwarded-for"].split(",")[0].strip()
        elif "x-real-ip" in self.request.headers:
            return self.request.headers["x-real-ip"]
        elif self.request.client:
            return self.request.client.host
        return None

class OrderError(Exception):
    """Base class for errors that are safe to show to the caller"""
    status_code = 400
    error_code = "BAD_REQUEST"

    def __init__(self, message: str, **context: Any):
        self.message = message
        self.context = context
        super().__init__(self.message)

class BadRequest(OrderError):
    """Missing or malformed input"""

class InvalidQuantity(OrderError):
    error_code = "INVALID_QUANTITY"

class RestaurantUnavailable(OrderError):
    status_code = 404
    error_code = "RESTAURANT_UNAVAILABLE"

class ItemUnavailable(OrderError):
    status_code = 404
    error_code = "ITEM_UNAVAILABLE"

class OrderNotFound(OrderError):
    status_code = 404
    error_code = "ORDER_NOT_FOUND"

class AlreadyCancelled(OrderError):
    error_code = "ALREADY_CANCELLED"

class OrderFinalized(OrderError):
    error_code = "ORDER_FINALIZED"

class InvalidTransition(OrderError):
    error_code = "INVALID_TRANSITION"

class InternalError(Exception):
    """Failures the caller can do nothing about"""
    error_code = "INTERNAL_ERROR"

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)

class DatabaseError(InternalError):
    """Custom exception for database-related errors"""
    error_code = "DATABASE_ERROR"

class InvariantViolation(InternalError):
    """A computed or persisted value broke a rule that must always hold"""
    error_code = "INVARIANT_VIOLATION"

class ErrorHandler:
    """Centralized error handling service"""

    @staticmethod
    def create_error_response(
        error_context: ErrorContext,
        error: Exception,
        status_code: int = 500,
        error_code: Optional[str] = None,
        include_details: bool = False
    ) -> JSONResponse:
        """Create a standardized error response"""

        error_data: Dict[str, Any] = {
            "error": {
                "code": error_code or ErrorHandler._get_error_code(error),
                "message": ErrorHandler._get_user_friendly_message(error),
                "request_id": error_context.request_id,
                "timestamp": error_context.timestamp.isoformat(),
                "endpoint": error_context.endpoint,
                "method": error_context.method
            }
        }

        context = ErrorHandler._get_context(error)
        if context:
            error_data["error"]["context"] = context

        # Include detailed error information in development
        if include_details:
            original = getattr(error, "original_error", None) or error
            error_data["error"]["details"] = {
                "original_error": str(original),
                "error_type": type(original).__name__,
                "stack_trace": "".join(
                    traceback.format_exception(type(original), original, original.__traceback__)
                )
            }

        ErrorHandler._log_error(error_context, error, status_code)

        return JSONResponse(
            status_code=status_code,
            content=error_data,
            headers=getattr(error, "headers", None)
        )

    @staticmethod
    def _get_error_code(error: Exception) -> str:
        """Generate appropriate error codes based on exception type"""
        if isinstance(error, StarletteHTTPException):
            return f"HTTP_{error.status_code}"
        elif isinstance(error, RequestValidationError):
            return "VALIDATION_ERROR"
        elif isinstance(error, (OrderError, InternalError)):
            return error.error_code
        return "INTERNAL_ERROR"

    @staticmethod
    def _get_context(error: Exception) -> Optional[Dict[str, Any]]:
        if isinstance(error, OrderError):
            return error.context
        if isinstance(error, RequestValidationError):
            return {
                "errors": [
                    {
                        "field": ".".join(str(part) for part in err.get("loc", ())),
                        "message": err.get("msg", ""),
                    }
                    for err in error.errors()
                ]
            }
        return None

    @staticmethod
    def _get_user_friendly_message(error: Exception) -> str:
        """Generate user-friendly error messages"""
        if isinstance(error, StarletteHTTPException):
            return str(error.detail)
        elif isinstance(error, RequestValidationError):
            return "Invalid input provided. Please check your data and try again."
        elif isinstance(error, OrderError):
            return error.message
        elif isinstance(error, DatabaseError):
            return "A database error occurred. Please try again later."
        return "An unexpected error occurred. Please try again later."

    @staticmethod
    def _log_error(error_context: ErrorContext, error: Exception, status_code: int):
        """Log error with comprehensive context"""
        extra = {
            "request_id": error_context.request_id,
            "endpoint": error_context.endpoint,
            "method": error_context.method,
            "status_code": status_code,
            "client_ip": error_context.client_ip,
            "user_agent": error_context.user_agent,
            "error_type": type(error).__name__,
            "error_message": str(error),
        }
        if status_code >= 500:
            logger.error(
                f"Error {error_context.request_id}: {type(error).__name__} in {error_context.method} {error_context.endpoint}",
                extra=extra,
                exc_info=error
            )
        else:
            logger.warning(
                f"Rejected {error_context.method} {error_context.endpoint}: {error}",
                extra=extra
            )

async def order_error_handler(request: Request, exc: OrderError) -> JSONResponse:
    """Answer domain errors with their own status and message"""
    return ErrorHandler.create_error_response(
        ErrorContext(request), exc, exc.status_code, include_details=False
    )

async def internal_error_handler(request: Request, exc: InternalError) -> JSONResponse:
    """Answer internal errors generically, with details only in development"""
    return ErrorHandler.create_error_response(
        ErrorContext(request), exc, 500, include_details=is_development()
    )

async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Answer framework HTTP errors (auth, routing) in the common envelope"""
    return ErrorHandler.create_error_response(
        ErrorContext(request), exc, exc.status_code, include_details=False
    )

async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer request schema failures in the common envelope"""
    return ErrorHandler.create_error_response(
        ErrorContext(request), exc, 422, include_details=False
    )
