# 📄 File: sprout/modules/user_management/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Member accounts: profiles, avatars, wishlists, follows and Pro membership.
#
# 🧪 Purpose (Technical Summary):
# User aggregate, repository and service shared by every other module, plus the /users API.
