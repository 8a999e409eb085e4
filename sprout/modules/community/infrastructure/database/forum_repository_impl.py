# 📄 File: sprout/modules/community/infrastructure/database/forum_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Saves community boards and their member lists, and removes a whole board with
# everything in it when it is deleted.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy implementation of ForumRepository. Deletion removes comments, posts and
# memberships explicitly so it does not depend on the database enforcing ON DELETE.
#
# 🔗 Dependencies:
# - SQLAlchemy async session, community ORM models
#
# 🔄 Connected Modules / Calls From:
# - ForumService via FastAPI dependency overrides

import logging
from typing import List, Optional

from fastapi import Depends
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from sprout.modules.community.domain.models.forum import Forum
from sprout.modules.community.domain.repositories.forum_repository import ForumRepository
from sprout.modules.community.infrastructure.database.models import (
    CommentModel,
    ForumMemberModel,
    ForumModel,
    PostModel,
)
from sprout.shared.core.exceptions import RepositoryError
from sprout.shared.infrastructure.database.session import get_db_session
from sprout.shared.utils.helpers import ensure_utc

logger = logging.getLogger(__name__)


class ForumRepositoryImpl(ForumRepository):

    def __init__(self, session: AsyncSession = Depends(get_db_session)):
        self._session = session

    async def create(self, forum: Forum) -> Forum:
        model = ForumModel(
            id=forum.id,
            name=forum.name,
            description=forum.description,
            creator_id=forum.creator_id,
            banner_url=forum.banner_url,
            moderators=list(forum.moderators),
            member_count=forum.member_count,
            created_at=forum.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        self._session.add(ForumMemberModel(forum_id=forum.id, user_id=forum.creator_id))
        await self._session.flush()
        logger.info(f"Created forum {forum.id} by {forum.creator_id}")
        return self._model_to_domain(model)

    async def get_by_id(self, forum_id: str) -> Optional[Forum]:
        model = await self._session.get(ForumModel, forum_id)
        return self._model_to_domain(model) if model else None

    async def list_all(self) -> List[Forum]:
        result = await self._session.execute(
            select(ForumModel).order_by(ForumModel.created_at.desc(), ForumModel.id.desc())
        )
        return [self._model_to_domain(m) for m in result.scalars().all()]

    async def update(self, forum: Forum) -> Forum:
        model = await self._session.get(ForumModel, forum.id)
        if model is None:
            raise RepositoryError(f"Cannot update missing forum {forum.id}", operation="update", entity="forum")

        model.name = forum.name
        model.description = forum.description
        model.banner_url = forum.banner_url
        model.moderators = list(forum.moderators)
        model.member_count = forum.member_count
        await self._session.flush()
        return self._model_to_domain(model)

    async def delete(self, forum_id: str) -> bool:
        post_ids = select(PostModel.id).where(PostModel.forum_id == forum_id)
        await self._session.execute(delete(CommentModel).where(CommentModel.post_id.in_(post_ids)))
        await self._session.execute(delete(PostModel).where(PostModel.forum_id == forum_id))
        await self._session.execute(delete(ForumMemberModel).where(ForumMemberModel.forum_id == forum_id))
        result = await self._session.execute(delete(ForumModel).where(ForumModel.id == forum_id))
        return result.rowcount > 0

    async def add_member(self, forum_id: str, user_id: str) -> bool:
        if await self.is_member(forum_id, user_id):
            return False
        self._session.add(ForumMemberModel(forum_id=forum_id, user_id=user_id))
        await self._session.flush()
        return True

    async def remove_member(self, forum_id: str, user_id: str) -> bool:
        result = await self._session.execute(
            delete(ForumMemberModel).where(
                ForumMemberModel.forum_id == forum_id,
                ForumMemberModel.user_id == user_id,
            )
        )
        return result.rowcount > 0

    async def is_member(self, forum_id: str, user_id: str) -> bool:
        result = await self._session.execute(
            select(ForumMemberModel.id).where(
                ForumMemberModel.forum_id == forum_id,
                ForumMemberModel.user_id == user_id,
            )
        )
        return result.first() is not None

    def _model_to_domain(self, model: ForumModel) -> Forum:
        return Forum(
            id=model.id,
            name=model.name,
            description=model.description,
            creator_id=model.creator_id,
            banner_url=model.banner_url,
            moderators=list(model.moderators or []),
            member_count=model.member_count,
            created_at=ensure_utc(model.created_at),
        )
