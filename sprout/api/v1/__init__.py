# 📄 File: sprout/api/v1/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Version 1 of the web API.
#
# 🧪 Purpose (Technical Summary):
# Router aggregation and health endpoints for /api/v1.
