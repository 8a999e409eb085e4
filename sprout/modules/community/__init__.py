# 📄 File: sprout/modules/community/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Community boards with posts, comments and votes.
#
# 🧪 Purpose (Technical Summary):
# Forums with creator/moderator roles, memberships, posts, votes and comments.
