# 📄 File: sprout/api/v1/router.py
# 🧭 Purpose (Layman Explanation):
# The traffic director for version 1 of the API: sends cart requests to the cart,
# forum requests to the forums, and so on.
# 🧪 Purpose (Technical Summary):
# Aggregates the health router and every module router under one APIRouter that
# sprout.main mounts at /api/v1, plus a small info endpoint listing the modules.
# 🔗 Dependencies:
# FastAPI, sprout.api.v1.health, all module presentation routers
# 🔄 Connected Modules / Calls From:
# sprout.main

import logging
from typing import Dict

from fastapi import APIRouter

from sprout.api.v1.health import health_router
from sprout.modules.commerce.presentation.api.v1 import cart, checkout, connect, orders, webhooks
from sprout.modules.community.presentation.api.v1 import forums
from sprout.modules.contact.presentation.api.v1 import contact
from sprout.modules.messaging.presentation.api.v1 import chats
from sprout.modules.notifications.presentation.api.v1 import notifications
from sprout.modules.plant_listings.presentation.api.v1 import plants
from sprout.modules.rewards.presentation.api.v1 import rewards
from sprout.modules.shipping.presentation.api.v1 import shipping
from sprout.modules.user_management.presentation.api.v1 import users
from sprout.shared.config.settings import get_settings

logger = logging.getLogger(__name__)

api_v1_router = APIRouter()

api_v1_router.include_router(health_router, tags=["Health Check"])

MODULE_ROUTERS = [
    ("users", users.router),
    ("plants", plants.router),
    ("cart", cart.router),
    ("checkout", checkout.router),
    ("orders", orders.router),
    ("connect", connect.router),
    ("webhooks", webhooks.router),
    ("chats", chats.router),
    ("forums", forums.router),
    ("rewards", rewards.router),
    ("notifications", notifications.router),
    ("shipping", shipping.router),
    ("contact", contact.router),
]

for _name, _router in MODULE_ROUTERS:
    api_v1_router.include_router(_router)
    logger.debug(f"{_name} router loaded")


def get_available_modules() -> Dict[str, str]:
    """Module name to mount prefix, relative to /api/v1."""
    return {name: router.prefix for name, router in MODULE_ROUTERS}


@api_v1_router.get("/", summary="API v1 Information", tags=["API Info"])
async def api_v1_info() -> dict:
    settings = get_settings()
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "api_version": "v1",
        "modules": get_available_modules(),
        "endpoints": {
            "health_check": "/api/v1/health",
            "readiness_probe": "/api/v1/health/ready",
        },
    }
