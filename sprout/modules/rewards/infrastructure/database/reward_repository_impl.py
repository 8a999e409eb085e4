# 📄 File: sprout/modules/rewards/infrastructure/database/reward_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Writes point receipts to the database and reads a member's history back.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy implementation of RewardTransactionRepository.
#
# 🔗 Dependencies:
# - SQLAlchemy async session, RewardTransactionModel
#
# 🔄 Connected Modules / Calls From:
# - RewardService via FastAPI dependency overrides

import logging
from typing import List, Optional

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sprout.modules.rewards.domain.models.reward import RewardTransaction
from sprout.modules.rewards.domain.repositories.reward_repository import RewardTransactionRepository
from sprout.modules.rewards.infrastructure.database.models import RewardTransactionModel
from sprout.shared.infrastructure.database.session import get_db_session
from sprout.shared.utils.helpers import ensure_utc

logger = logging.getLogger(__name__)


class RewardTransactionRepositoryImpl(RewardTransactionRepository):

    def __init__(self, session: AsyncSession = Depends(get_db_session)):
        self._session = session

    async def create(self, transaction: RewardTransaction) -> RewardTransaction:
        model = RewardTransactionModel(
            id=transaction.id,
            user_id=transaction.user_id,
            type=transaction.type,
            points=transaction.points,
            description=transaction.description,
            timestamp=transaction.timestamp,
        )
        self._session.add(model)
        await self._session.flush()
        logger.debug(f"Recorded {transaction.type} of {transaction.points} points for {transaction.user_id}")
        return self._model_to_domain(model)

    async def list_for_user(self, user_id: str, limit: Optional[int] = None) -> List[RewardTransaction]:
        stmt = (
            select(RewardTransactionModel)
            .where(RewardTransactionModel.user_id == user_id)
            .order_by(RewardTransactionModel.timestamp.desc(), RewardTransactionModel.id.desc())
        )
        if limit:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return [self._model_to_domain(m) for m in result.scalars().all()]

    def _model_to_domain(self, model: RewardTransactionModel) -> RewardTransaction:
        return RewardTransaction(
            id=model.id,
            user_id=model.user_id,
            type=model.type,
            points=model.points,
            description=model.description,
            timestamp=ensure_utc(model.timestamp),
        )
