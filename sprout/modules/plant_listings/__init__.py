# 📄 File: sprout/modules/plant_listings/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# The plants people put up for sale or trade, with photos, stock and featuring.
#
# 🧪 Purpose (Technical Summary):
# PlantListing aggregate with stock/availability rules, catalog queries and the /plants API.
