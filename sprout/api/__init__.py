# 📄 File: sprout/api/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# The front door of the web API.
#
# 🧪 Purpose (Technical Summary):
# HTTP layer: versioned routers and middleware.
