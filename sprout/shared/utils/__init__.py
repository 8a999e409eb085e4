# 📄 File: sprout/shared/utils/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Small helpers and the logging setup shared across the marketplace.
#
# 🧪 Purpose (Technical Summary):
# Utility package: structured logging and generic helpers.
#
# 🔗 Dependencies:
# - logging.py, helpers.py
#
# 🔄 Connected Modules / Calls From:
# - All modules
