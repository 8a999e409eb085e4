# 📄 File: sprout/shared/core/security.py
# 🧭 Purpose (Layman Explanation):
# Checks the "ID badge" (access token) each shopper sends so the marketplace knows
# who is asking. Signing in happens at Supabase; we only check the badge is genuine.
# 🧪 Purpose (Technical Summary):
# JWT verification of Supabase-issued access tokens with python-jose: signature,
# audience, expiry and subject checks.
# 🔗 Dependencies:
# python-jose, sprout.shared.config.settings, sprout.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# sprout.shared.core.dependencies (get_current_user / get_optional_user)

import logging
from typing import Any, Dict

from jose import ExpiredSignatureError, JWTError, jwt

from ..config.settings import get_settings
from .exceptions import AuthenticationError, ServiceNotConfiguredError

logger = logging.getLogger(__name__)


class SecurityManager:
    """
    Verifies bearer tokens issued by the managed auth provider.
    """

    def __init__(self):
        self.settings = get_settings()
        self.algorithm = self.settings.JWT_ALGORITHM
        self.secret_key = self.settings.SUPABASE_JWT_SECRET
        self.audience = self.settings.JWT_AUDIENCE

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a JWT access token.

        Args:
            token: Raw bearer token

        Returns:
            dict: Decoded token payload

        Raises:
            AuthenticationError: If the token is expired, forged or lacks a subject
            ServiceNotConfiguredError: If no signing secret is configured
        """
        if not self.secret_key:
            raise ServiceNotConfiguredError(
                "Authentication is not configured on the server.",
                service="supabase_auth"
            )

        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                audience=self.audience,
            )
        except ExpiredSignatureError as e:
            logger.info("Rejected expired access token")
            raise AuthenticationError("Token expired") from e
        except JWTError as e:
            logger.warning(f"JWT validation failed: {e}")
            raise AuthenticationError("Could not validate credentials") from e

        if not payload.get("sub"):
            logger.warning("Token missing subject (user_id)")
            raise AuthenticationError("Could not validate credentials")

        return payload


def get_security_manager() -> SecurityManager:
    """Build a SecurityManager bound to the current settings."""
    return SecurityManager()
