"""
Common FastAPI dependencies for the Sprout marketplace.
Provides the authenticated caller and pagination parameters.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .exceptions import AuthenticationError
from .security import SecurityManager, get_security_manager
from ..utils.logging import user_id_var

logger = logging.getLogger(__name__)

# Security scheme for OpenAPI documentation; errors are raised by us
security = HTTPBearer(auto_error=False)


class CurrentUser:
    """User information extracted from the verified JWT."""

    def __init__(
        self,
        user_id: str,
        email: Optional[str] = None,
        roles: Optional[list] = None,
        token_payload: Optional[Dict[str, Any]] = None
    ):
        self.user_id = user_id
        self.email = email
        self.roles = roles or ["authenticated"]
        self.token_payload = token_payload or {}


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    security_manager: SecurityManager = Depends(get_security_manager),
) -> CurrentUser:
    """
    Resolve the caller from the Authorization header.

    Raises:
        AuthenticationError: If the header is missing or the token is invalid
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Not authenticated")

    payload = security_manager.verify_token(credentials.credentials)
    current_user = CurrentUser(
        user_id=payload["sub"],
        email=payload.get("email"),
        roles=[payload.get("role", "authenticated")],
        token_payload=payload,
    )
    user_id_var.set(current_user.user_id)
    return current_user


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    security_manager: SecurityManager = Depends(get_security_manager),
) -> Optional[CurrentUser]:
    """Same as get_current_user, but anonymous callers get None."""
    if credentials is None or not credentials.credentials:
        return None
    return await get_current_user(credentials, security_manager)


class PaginationParams:
    """Query parameters for list endpoints: limit plus an opaque cursor."""

    def __init__(
        self,
        limit: int = Query(10, ge=1, le=50, description="Page size"),
        cursor: Optional[str] = Query(None, description="Cursor from the previous page"),
    ):
        self.limit = limit
        self.cursor = cursor
