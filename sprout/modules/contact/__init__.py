# 📄 File: sprout/modules/contact/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# The contact form that emails the Sprout team.
#
# 🧪 Purpose (Technical Summary):
# Mailjet-backed contact form delivery.
