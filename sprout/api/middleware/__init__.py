# 📄 File: sprout/api/middleware/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Checks that run around every request, such as logging and error handling.
#
# 🧪 Purpose (Technical Summary):
# Starlette middleware for error envelopes and request logging.
