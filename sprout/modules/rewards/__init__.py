# 📄 File: sprout/modules/rewards/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Points members earn for taking part and the tiers they unlock.
#
# 🧪 Purpose (Technical Summary):
# Append-only reward ledger, tiers and redemption.
