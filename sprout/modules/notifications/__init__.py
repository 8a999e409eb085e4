# 📄 File: sprout/modules/notifications/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# The little alerts members see for messages, orders and comments.
#
# 🧪 Purpose (Technical Summary):
# Notification persistence, listing and read tracking.
