# 📄 File: sprout/modules/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Holds every feature of the marketplace, each in its own folder.
#
# 🧪 Purpose (Technical Summary):
# Feature modules of the modular monolith, each split into domain, infrastructure and presentation layers.
