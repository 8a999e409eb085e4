# 📄 File: sprout/shared/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Marks the 'shared' folder as the toolbox every part of the marketplace uses,
# like settings, database sessions, errors and logging.
#
# 🧪 Purpose (Technical Summary):
# Shared kernel package for configuration, infrastructure and cross-cutting
# concerns used by every feature module.
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - All feature modules under sprout.modules
