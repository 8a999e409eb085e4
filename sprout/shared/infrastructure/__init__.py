# 📄 File: sprout/shared/infrastructure/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Groups the plumbing that talks to the outside world: the database,
# file storage and third-party web APIs.
#
# 🧪 Purpose (Technical Summary):
# Shared infrastructure package (database, storage, external API client).
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - Module infrastructure layers
