# 📄 File: sprout/modules/messaging/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Private chats between two members.
#
# 🧪 Purpose (Technical Summary):
# Deterministic two-party chats, polled message history and read receipts.
