# 📄 File: sprout/shared/core/exceptions.py
# 🧭 Purpose (Layman Explanation):
# This file defines all the special error types the marketplace uses to say
# what went wrong in a clear, organized way instead of generic error messages.
# 🧪 Purpose (Technical Summary):
# Custom exception hierarchy providing specific error types with HTTP status codes,
# error details and machine-readable error codes for the API error envelope.
# 🔗 Dependencies:
# FastAPI status constants, typing
# 🔄 Connected Modules / Calls From:
# All modules for error handling, middleware, API endpoints, domain services

from typing import Any, Dict, Optional
from fastapi import HTTPException, status


class SproutException(Exception):
    """
    Base exception class for the Sprout marketplace.
    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.error_code = error_code or self.__class__.__name__.upper()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Error body without the per-request fields the handlers add."""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
                "status_code": self.status_code,
            }
        }


# =============================================================================
# AUTHENTICATION & AUTHORIZATION EXCEPTIONS
# =============================================================================

class AuthenticationError(SproutException):
    """
    Exception raised for authentication failures.
    Used when the bearer token is invalid or missing.
    """

    def __init__(
        self,
        message: str = "Authentication failed",
        details: Optional[Dict[str, Any]] = None,
        user_id: Optional[str] = None
    ):
        if not details:
            details = {}
        if user_id:
            details["user_id"] = user_id

        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            details=details,
            error_code="AUTHENTICATION_ERROR"
        )


class AuthorizationError(SproutException):
    """
    Exception raised for authorization failures.
    Used when a user acts on a resource they do not own or moderate.
    """

    def __init__(
        self,
        message: str = "Access denied",
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        required_action: Optional[str] = None,
        user_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = resource_id
        if required_action:
            details["required_action"] = required_action
        if user_id:
            details["user_id"] = user_id

        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            details=details,
            error_code="AUTHORIZATION_ERROR"
        )


# =============================================================================
# VALIDATION & DATA EXCEPTIONS
# =============================================================================

class ValidationError(SproutException):
    """
    Exception raised for data validation failures.
    Used when input data doesn't meet validation requirements.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        if constraint:
            details["constraint"] = constraint

        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details,
            error_code="VALIDATION_ERROR"
        )


class BadRequestError(SproutException):
    """Request is well-formed but cannot be acted on (empty cart, no rates, bad webhook payload)."""

    def __init__(
        self,
        message: str = "Bad request",
        details: Optional[Dict[str, Any]] = None,
        error_code: str = "BAD_REQUEST"
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
            error_code=error_code
        )


class NotFoundError(SproutException):
    """
    Exception raised when requested resource is not found.
    Used for missing listings, users, chats, forums, posts, etc.
    """

    def __init__(
        self,
        message: str = "Resource not found",
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = resource_id

        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
            error_code="NOT_FOUND"
        )


class DuplicateResourceError(SproutException):
    """
    Exception raised when attempting to create duplicate resources.
    Used for unique constraint violations, duplicate entries, etc.
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        resource_type: Optional[str] = None,
        field: Optional[str] = None,
        value: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if resource_type:
            details["resource_type"] = resource_type
        if field:
            details["field"] = field
        if value:
            details["value"] = value

        super().__init__(
            message=message,
            status_code=status.HTTP_409_CONFLICT,
            details=details,
            error_code="DUPLICATE_RESOURCE"
        )


# =============================================================================
# BUSINESS LOGIC EXCEPTIONS
# =============================================================================

class BusinessRuleViolationError(SproutException):
    """
    Exception raised when business rules are violated.
    Used for domain-specific rule enforcement.
    """

    def __init__(
        self,
        message: str = "Business rule violation",
        rule: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if rule:
            details["rule"] = rule
        if context:
            details["context"] = context

        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details,
            error_code="BUSINESS_RULE_VIOLATION"
        )



class SubscriptionError(SproutException):
    """
    Exception raised when a Pro-only feature is used on the free plan.
    """

    def __init__(
        self,
        message: str = "A Pro subscription is required",
        feature: Optional[str] = None,
        subscription_status: Optional[str] = None,
        required_plan: Optional[str] = "pro",
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if feature:
            details["feature"] = feature
        if subscription_status:
            details["subscription_status"] = subscription_status
        if required_plan:
            details["required_plan"] = required_plan

        super().__init__(
            message=message,
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            details=details,
            error_code="SUBSCRIPTION_ERROR"
        )

# =============================================================================
# EXTERNAL SERVICE EXCEPTIONS
# =============================================================================

class ExternalServiceError(SproutException):
    """
    Exception raised when external service calls fail.
    Used for Stripe, Mailjet, Shippo and Supabase integrations.
    """

    def __init__(
        self,
        message: str = "External service error",
        service: Optional[str] = None,
        service_response: Optional[str] = None,
        retry_after: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if service:
            details["service"] = service
        if service_response:
            details["service_response"] = service_response
        if retry_after:
            details["retry_after"] = retry_after

        super().__init__(
            message=message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            details=details,
            error_code="EXTERNAL_SERVICE_ERROR"
        )


class ExternalAPIError(ExternalServiceError):
    """Raised by the generic API client for failed HTTP exchanges."""

    def __init__(
        self,
        message: str = "External API request failed",
        service: Optional[str] = None,
        status_code: Optional[int] = None,
        service_response: Optional[str] = None
    ):
        details = {}
        if status_code is not None:
            details["upstream_status"] = status_code
        super().__init__(
            message=message,
            service=service,
            service_response=service_response,
            details=details
        )
        self.upstream_status = status_code


class PaymentProviderError(ExternalServiceError):
    """Stripe rejected or failed a request."""

    def __init__(self, message: str = "Payment provider error", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, service="stripe", details=details)


class EmailDeliveryError(ExternalServiceError):
    """Mailjet refused the message."""

    def __init__(self, message: str = "Failed to send message.", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, service="mailjet", details=details)


class ShippingProviderError(ExternalServiceError):
    """Shippo could not be reached."""

    def __init__(self, message: str = "Shipping provider error", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, service="shippo", details=details)


class ServiceNotConfiguredError(SproutException):
    """
    Exception raised when an optional provider has no credentials.

    Most features answer 503 when their provider is missing. Webhooks,
    contact email and shipping labels answer 500, so the status can be
    overridden per call site.
    """

    def __init__(
        self,
        message: str = "Service is not configured on the server.",
        service: Optional[str] = None,
        status_code: int = status.HTTP_503_SERVICE_UNAVAILABLE,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}
        if service:
            details["service"] = service

        super().__init__(
            message=message,
            status_code=status_code,
            details=details,
            error_code="SERVICE_NOT_CONFIGURED"
        )


class WebhookSignatureError(SproutException):
    """Missing or invalid Stripe-Signature header."""

    def __init__(self, message: str = "Webhook signature verification failed"):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="WEBHOOK_SIGNATURE_ERROR"
        )


class WebhookProcessingError(SproutException):
    """
    A verified webhook event could not be applied.

    Answered with 500 so Stripe redelivers the event.
    """

    def __init__(
        self,
        message: str = "Webhook handler failed",
        event_type: Optional[str] = None,
        event_id: Optional[str] = None
    ):
        details = {}
        if event_type:
            details["event_type"] = event_type
        if event_id:
            details["event_id"] = event_id
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
            error_code="WEBHOOK_PROCESSING_ERROR"
        )



class RateLimitError(SproutException):
    """
    Exception raised when a caller exceeds a route's rate limit.
    Built from slowapi's RateLimitExceeded by the application handler.
    """

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        limit: Optional[str] = None,
        retry_after: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if limit:
            details["limit"] = limit
        if retry_after:
            details["retry_after"] = retry_after

        super().__init__(
            message=message,
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            details=details,
            error_code="RATE_LIMIT_EXCEEDED"
        )

# =============================================================================
# DATABASE & INFRASTRUCTURE EXCEPTIONS
# =============================================================================

class DatabaseError(SproutException):
    """
    Exception raised for database operation failures.
    Used for connection issues, query failures, etc.
    """

    def __init__(
        self,
        message: str = "Database error",
        operation: Optional[str] = None,
        table: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if operation:
            details["operation"] = operation
        if table:
            details["table"] = table

        super().__init__(
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details=details,
            error_code="DATABASE_ERROR"
        )


class RepositoryError(SproutException):
    """
    Exception raised for repository/database operation failures.
    Used when database operations fail at the repository layer.
    """

    def __init__(
        self,
        message: str = "Repository operation failed",
        operation: Optional[str] = None,
        entity: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if operation:
            details["operation"] = operation
        if entity:
            details["entity"] = entity

        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
            error_code="REPOSITORY_ERROR"
        )


class FileStorageError(SproutException):
    """
    Exception raised for file storage operation failures.
    Used for upload/delete errors against Supabase Storage.
    """

    def __init__(
        self,
        message: str = "File storage error",
        operation: Optional[str] = None,
        storage_path: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if operation:
            details["operation"] = operation
        if storage_path:
            details["storage_path"] = storage_path

        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
            error_code="FILE_STORAGE_ERROR"
        )


class FileTooLargeError(SproutException):
    def __init__(self, size: int, max_size: int):
        super().__init__(
            message=f"File size {size} exceeds maximum {max_size} bytes",
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            details={"size": size, "max_size": max_size},
            error_code="FILE_TOO_LARGE"
        )


class InvalidFileTypeError(SproutException):
    def __init__(self, content_type: str, allowed: Optional[list] = None):
        details: Dict[str, Any] = {"content_type": content_type}
        if allowed:
            details["allowed"] = sorted(allowed)
        super().__init__(
            message=f"File type {content_type} not allowed",
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            details=details,
            error_code="INVALID_FILE_TYPE"
        )


# =============================================================================
# MARKETPLACE SPECIFIC EXCEPTIONS
# =============================================================================

class UserNotFoundError(NotFoundError):
    """Specialized NotFoundError for user profiles."""

    def __init__(self, user_id: str, message: Optional[str] = None):
        super().__init__(
            message=message or f"User profile not found: {user_id}",
            resource_type="user",
            resource_id=user_id
        )


class ListingNotFoundError(NotFoundError):
    """
    Exception raised when a plant listing is not found.
    Specialized NotFoundError for listing resources.
    """

    def __init__(self, plant_id: str, message: Optional[str] = None):
        super().__init__(
            message=message or f"Plant listing not found: {plant_id}",
            resource_type="plant_listing",
            resource_id=plant_id
        )


class ChatNotFoundError(NotFoundError):
    def __init__(self, chat_id: str):
        super().__init__(
            message=f"Chat not found: {chat_id}",
            resource_type="chat",
            resource_id=chat_id
        )


class ForumNotFoundError(NotFoundError):
    def __init__(self, forum_id: str):
        super().__init__(
            message=f"Forum not found: {forum_id}",
            resource_type="forum",
            resource_id=forum_id
        )


class PostNotFoundError(NotFoundError):
    def __init__(self, post_id: str):
        super().__init__(
            message=f"Post not found: {post_id}",
            resource_type="post",
            resource_id=post_id
        )


class OrderNotFoundError(NotFoundError):
    def __init__(self, order_id: str):
        super().__init__(
            message=f"Order not found: {order_id}",
            resource_type="order",
            resource_id=order_id
        )


class InsufficientStockError(BusinessRuleViolationError):
    """
    Exception raised when a cart asks for more plants than are listed.
    """

    def __init__(self, plant_id: str, requested: int, available: int):
        super().__init__(
            message=f"Only {available} left in stock",
            rule="quantity_within_stock",
            context={"plant_id": plant_id, "requested": requested, "available": available}
        )
        self.error_code = "INSUFFICIENT_STOCK"


class InsufficientPointsError(BusinessRuleViolationError):
    """
    Exception raised when redeeming more reward points than the balance holds.
    """

    def __init__(self, balance: int, requested: int):
        super().__init__(
            message="Insufficient reward points",
            rule="balance_never_negative",
            context={"balance": balance, "requested": requested}
        )
        self.error_code = "INSUFFICIENT_POINTS"


class ShippingProhibitedError(BusinessRuleViolationError):
    def __init__(self, reason: str, species: Optional[str] = None):
        super().__init__(
            message=f"Shipping prohibited: {reason}",
            rule="shipping_prohibited",
            context={"species": species} if species else None
        )
        self.error_code = "SHIPPING_PROHIBITED"


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def exception_to_dict(exception: Exception) -> Dict[str, Any]:
    """
    Convert any exception to the error body shape.

    Args:
        exception: Exception to convert

    Returns:
        Dict: {"error": {code, message, details, status_code}}
    """
    if isinstance(exception, SproutException):
        return exception.to_dict()

    if isinstance(exception, HTTPException):
        return {
            "error": {
                "code": f"HTTP_{exception.status_code}",
                "message": str(exception.detail),
                "details": {},
                "status_code": exception.status_code,
            }
        }

    return {
        "error": {
            "code": "INTERNAL_SERVER_ERROR",
            "message": "An internal server error occurred",
            "details": {},
            "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR,
        }
    }


def is_client_error(exception: Exception) -> bool:
    """True for exceptions that map to a 4xx response."""
    if isinstance(exception, (SproutException, HTTPException)):
        return 400 <= exception.status_code < 500
    return False


def is_server_error(exception: Exception) -> bool:
    """True for exceptions that map to a 5xx response, including unexpected ones."""
    if isinstance(exception, (SproutException, HTTPException)):
        return exception.status_code >= 500
    return True
