# 📄 File: sprout/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Tells Python that the 'sprout' folder holds the plant marketplace application
# and records its version and package information.
#
# 🧪 Purpose (Technical Summary):
# Application package initialization with version info for the Sprout
# FastAPI modular monolith.
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - main.py (application entry point)
# - Package imports throughout the application

"""
Sprout - Plant Marketplace Backend

Listings, cart and Stripe checkout, seller payouts, chats, community forums,
reward points and shipping compliance for plant lovers.
"""

__version__ = "1.0.0"
__title__ = "Sprout Marketplace API"
__description__ = "Plant marketplace, trading and community platform"
