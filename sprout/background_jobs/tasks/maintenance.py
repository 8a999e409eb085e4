# 📄 File: sprout/background_jobs/tasks/maintenance.py
#
# 🧭 Purpose (Layman Explanation):
# Scheduled tidy-ups: takes the "featured" badge off listings whose paid spot has run
# out, and moves members whose Pro membership lapsed back to the free plan.
#
# 🧪 Purpose (Technical Summary):
# Celery tasks that open their own database session and drive the same domain services
# the API uses. The async work runs through asyncio.run inside the worker process.
#
# 🔗 Dependencies:
# - celery (shared_task)
# - sprout.shared.infrastructure.database (engine and session lifecycle)
# - PlantListingService, UserService, StripeGateway (live subscription check)
#
# 🔄 Connected Modules / Calls From:
# - celery_config.py beat schedule

import asyncio
from datetime import datetime
from typing import Dict, List, Optional

from celery import shared_task

from sprout.modules.commerce.infrastructure.external.stripe_gateway import StripeGateway
from sprout.modules.notifications.domain.services.notification_service import NotificationService
from sprout.modules.notifications.infrastructure.database.notification_repository_impl import (
    NotificationRepositoryImpl,
)
from sprout.modules.plant_listings.domain.services.plant_listing_service import PlantListingService
from sprout.modules.plant_listings.infrastructure.database.plant_listing_repository_impl import (
    PlantListingRepositoryImpl,
)
from sprout.modules.rewards.domain.services.reward_service import RewardService
from sprout.modules.rewards.infrastructure.database.reward_repository_impl import (
    RewardTransactionRepositoryImpl,
)
from sprout.modules.user_management.domain.services.user_service import UserService
from sprout.modules.user_management.infrastructure.database.user_repository_impl import UserRepositoryImpl
from sprout.shared.config.settings import get_settings
from sprout.shared.core.exceptions import PaymentProviderError
from sprout.shared.infrastructure.database.connection import close_database, db_manager, init_database
from sprout.shared.infrastructure.database.session import database_session, initialize_sessions, session_manager
from sprout.shared.infrastructure.storage.supabase_storage import SupabaseStorageClient
from sprout.shared.utils.helpers import utc_now
from sprout.shared.utils.logging import get_logger

logger = get_logger(__name__)


async def expire_featured(now: Optional[datetime] = None) -> int:
    """Clear lapsed featured flags. Needs an initialized session manager."""
    async with database_session() as db:
        listing_repository = PlantListingRepositoryImpl(db)
        user_repository = UserRepositoryImpl(db)
        service = PlantListingService(
            listing_repository=listing_repository,
            user_repository=user_repository,
            reward_service=RewardService(user_repository, RewardTransactionRepositoryImpl(db)),
            storage=SupabaseStorageClient(),
            settings=get_settings(),
        )
        return await service.expire_featured_listings(now)


async def expire_pro(
    now: Optional[datetime] = None, stripe_gateway: Optional[StripeGateway] = None
) -> List[str]:
    """
    Downgrade Pro members whose expiry date has passed and whose Stripe
    subscription is no longer live. Returns the downgraded ids.

    Members Stripe cannot be asked about are left for the next run.
    """
    gateway = stripe_gateway or StripeGateway(get_settings())
    async with database_session() as db:
        user_repository = UserRepositoryImpl(db)
        service = UserService(
            user_repository=user_repository,
            listing_repository=PlantListingRepositoryImpl(db),
            notification_service=NotificationService(NotificationRepositoryImpl(db)),
            storage=SupabaseStorageClient(),
            settings=get_settings(),
        )

        downgraded: List[str] = []
        for user in await user_repository.list_expired_pro(now or utc_now()):
            if user.stripe_customer_id and gateway.is_configured:
                try:
                    if await gateway.has_live_subscription(user.stripe_customer_id):
                        logger.info(f"Skipping {user.user_id}: Stripe subscription still live")
                        continue
                except PaymentProviderError as e:
                    logger.warning(f"Could not check Stripe for {user.user_id}: {e.message}")
                    continue
            await service.downgrade_user_subscription(user.user_id)
            downgraded.append(user.user_id)
        return downgraded


async def _run_with_database(coro_factory):
    """Bring the engine up for one task run if this worker has not already."""
    owns_engine = not db_manager.is_initialized
    if owns_engine:
        await init_database()
    if not session_manager.is_initialized or owns_engine:
        initialize_sessions()
    try:
        return await coro_factory()
    finally:
        if owns_engine:
            await close_database()


@shared_task(name="sprout.background_jobs.tasks.maintenance.expire_featured_listings")
def expire_featured_listings() -> Dict[str, int]:
    expired = asyncio.run(_run_with_database(expire_featured))
    logger.info(f"Featured expiry run finished: {expired} listings", expired=expired)
    return {"expired": expired}


@shared_task(name="sprout.background_jobs.tasks.maintenance.expire_pro_subscriptions")
def expire_pro_subscriptions() -> Dict[str, int]:
    downgraded = asyncio.run(_run_with_database(expire_pro))
    logger.info(f"Pro expiry run finished: {len(downgraded)} members downgraded", downgraded=len(downgraded))
    return {"downgraded": len(downgraded)}
