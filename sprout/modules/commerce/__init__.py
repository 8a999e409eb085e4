# 📄 File: sprout/modules/commerce/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Shopping: the cart, paying with Stripe, seller payouts and order history.
#
# 🧪 Purpose (Technical Summary):
# Cart, checkout, Stripe webhooks, Connect onboarding and order fulfilment.
