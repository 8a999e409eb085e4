# 📄 File: sprout/shared/config/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Holds the settings that tell the marketplace how to reach its database
# and the outside services it depends on.
#
# 🧪 Purpose (Technical Summary):
# Configuration package exports for settings management.
#
# 🔗 Dependencies:
# - settings.py (application settings)
#
# 🔄 Connected Modules / Calls From:
# - sprout.main (application startup)
# - All modules requiring configuration

from .settings import get_settings, Settings

__all__ = [
    "get_settings",
    "Settings",
]
