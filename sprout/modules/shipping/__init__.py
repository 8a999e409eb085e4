# 📄 File: sprout/modules/shipping/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Help with shipping plants: border paperwork and postage labels.
#
# 🧪 Purpose (Technical Summary):
# Compliance rule lookup and Shippo label purchase.
