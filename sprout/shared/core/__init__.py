# 📄 File: sprout/shared/core/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Core building blocks every feature relies on: error types, checking who is
# calling, and request throttling.
#
# 🧪 Purpose (Technical Summary):
# Core package: exception hierarchy, JWT security, FastAPI dependencies, slowapi limiter.
#
# 🔗 Dependencies:
# - exceptions.py, security.py, dependencies.py, rate_limiter.py
#
# 🔄 Connected Modules / Calls From:
# - All modules

from .exceptions import SproutException
from .dependencies import CurrentUser, get_current_user, get_optional_user

__all__ = [
    "SproutException",
    "CurrentUser",
    "get_current_user",
    "get_optional_user",
]
