"""
Rate limiting for the Sprout marketplace.
A single slowapi Limiter keyed by client address, shared by every router
that throttles an endpoint (contact form, checkout creation).
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from ..config.settings import get_settings

limiter = Limiter(
    key_func=get_remote_address,
    enabled=get_settings().RATE_LIMIT_ENABLED,
)
