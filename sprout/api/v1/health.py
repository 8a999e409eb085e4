# 📄 File: sprout/api/v1/health.py
# 🧭 Purpose (Layman Explanation):
# A quick checkup that tells load balancers whether the marketplace is up and whether
# it can reach its database.
# 🧪 Purpose (Technical Summary):
# Liveness (/health) and readiness (/health/ready, database ping) endpoints.
# 🔗 Dependencies:
# FastAPI, sprout.shared.infrastructure.database.connection
# 🔄 Connected Modules / Calls From:
# sprout.api.v1.router, load balancers

import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from sprout.shared.config.settings import get_settings
from sprout.shared.infrastructure.database.connection import database_health_check as db_health_check

logger = logging.getLogger(__name__)

health_router = APIRouter()


@health_router.get(
    "/health",
    summary="Basic Health Check",
    description="Basic health check endpoint for load balancers and monitoring",
)
async def health_check() -> JSONResponse:
    settings = get_settings()
    return JSONResponse(
        status_code=200,
        content={
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": "sprout-api",
            "version": settings.APP_VERSION,
            "integrations": {
                "stripe": settings.stripe_enabled,
                "mailjet": settings.mailjet_enabled,
                "shippo": settings.shippo_enabled,
                "storage": settings.storage_enabled,
            },
        },
    )


@health_router.get(
    "/health/ready",
    summary="Readiness Probe",
    description="Returns 200 only when the database answers",
)
async def readiness_probe() -> JSONResponse:
    db_health = await db_health_check()

    if db_health["status"] == "healthy":
        return JSONResponse(
            status_code=200,
            content={"status": "ready", "timestamp": datetime.now(timezone.utc).isoformat()},
        )

    logger.warning(f"Readiness probe failed: {db_health.get('error')}")
    return JSONResponse(
        status_code=503,
        content={
            "status": "not_ready",
            "reason": "database_unhealthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )
