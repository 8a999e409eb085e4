"""
SQLAlchemy implementation of NotificationRepository.
"""

import logging
from typing import List, Optional

from fastapi import Depends
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from sprout.modules.notifications.domain.models.notification import Notification
from sprout.modules.notifications.domain.repositories.notification_repository import (
    NotificationRepository,
)
from sprout.modules.notifications.infrastructure.database.models import NotificationModel
from sprout.shared.infrastructure.database.session import get_db_session
from sprout.shared.utils.helpers import ensure_utc

logger = logging.getLogger(__name__)


class NotificationRepositoryImpl(NotificationRepository):

    def __init__(self, session: AsyncSession = Depends(get_db_session)):
        self._session = session

    async def create(self, notification: Notification) -> Notification:
        model = NotificationModel(
            id=notification.id,
            user_id=notification.user_id,
            type=notification.type,
            message=notification.message,
            link=notification.link,
            is_read=notification.is_read,
            created_at=notification.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._model_to_domain(model)

    async def list_for_user(self, user_id: str, limit: Optional[int] = None) -> List[Notification]:
        stmt = (
            select(NotificationModel)
            .where(NotificationModel.user_id == user_id)
            .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
        )
        if limit:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return [self._model_to_domain(m) for m in result.scalars().all()]

    async def count_unread(self, user_id: str) -> int:
        result = await self._session.execute(
            select(func.count(NotificationModel.id)).where(
                NotificationModel.user_id == user_id,
                NotificationModel.is_read.is_(False),
            )
        )
        return result.scalar_one()

    async def mark_all_read(self, user_id: str) -> int:
        result = await self._session.execute(
            update(NotificationModel)
            .where(
                NotificationModel.user_id == user_id,
                NotificationModel.is_read.is_(False),
            )
            .values(is_read=True)
        )
        logger.debug(f"Marked {result.rowcount} notifications read for {user_id}")
        return result.rowcount

    def _model_to_domain(self, model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            type=model.type,
            message=model.message,
            link=model.link,
            is_read=bool(model.is_read),
            created_at=ensure_utc(model.created_at),
        )
