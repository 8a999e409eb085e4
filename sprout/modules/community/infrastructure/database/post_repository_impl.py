# 📄 File: sprout/modules/community/infrastructure/database/post_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Saves posts, votes and comments on the community boards.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy implementation of PostRepository. The comment counter is bumped with an
# atomic UPDATE in the same transaction as the comment insert.
#
# 🔗 Dependencies:
# - SQLAlchemy async session, PostModel, CommentModel
#
# 🔄 Connected Modules / Calls From:
# - ForumService via FastAPI dependency overrides

import logging
from typing import List, Optional

from fastapi import Depends
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from sprout.modules.community.domain.models.forum import Comment, Post
from sprout.modules.community.domain.repositories.post_repository import PostRepository
from sprout.modules.community.infrastructure.database.models import CommentModel, PostModel
from sprout.shared.core.exceptions import RepositoryError
from sprout.shared.infrastructure.database.session import get_db_session
from sprout.shared.utils.helpers import ensure_utc

logger = logging.getLogger(__name__)


class PostRepositoryImpl(PostRepository):

    def __init__(self, session: AsyncSession = Depends(get_db_session)):
        self._session = session

    async def create(self, post: Post) -> Post:
        model = PostModel(
            id=post.id,
            forum_id=post.forum_id,
            author_id=post.author_id,
            author_username=post.author_username,
            author_avatar_url=post.author_avatar_url,
            title=post.title,
            content=post.content,
            image_url=post.image_url,
            upvotes=list(post.upvotes),
            downvotes=list(post.downvotes),
            comment_count=post.comment_count,
            created_at=post.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        logger.info(f"Created post {post.id} in forum {post.forum_id}")
        return self._post_to_domain(model)

    async def get_by_id(self, post_id: str) -> Optional[Post]:
        model = await self._session.get(PostModel, post_id)
        return self._post_to_domain(model) if model else None

    async def list_for_forum(self, forum_id: str) -> List[Post]:
        result = await self._session.execute(
            select(PostModel)
            .where(PostModel.forum_id == forum_id)
            .order_by(PostModel.created_at.desc(), PostModel.id.desc())
        )
        return [self._post_to_domain(m) for m in result.scalars().all()]

    async def update_votes(self, post: Post) -> Post:
        model = await self._session.get(PostModel, post.id)
        if model is None:
            raise RepositoryError(f"Cannot vote on missing post {post.id}", operation="update_votes", entity="post")
        model.upvotes = list(post.upvotes)
        model.downvotes = list(post.downvotes)
        await self._session.flush()
        return self._post_to_domain(model)

    async def delete(self, post_id: str) -> bool:
        await self._session.execute(delete(CommentModel).where(CommentModel.post_id == post_id))
        result = await self._session.execute(delete(PostModel).where(PostModel.id == post_id))
        return result.rowcount > 0

    async def add_comment(self, comment: Comment) -> Comment:
        model = CommentModel(
            id=comment.id,
            post_id=comment.post_id,
            author_id=comment.author_id,
            author_username=comment.author_username,
            author_avatar_url=comment.author_avatar_url,
            text=comment.text,
            created_at=comment.created_at,
        )
        self._session.add(model)
        await self._session.execute(
            update(PostModel)
            .where(PostModel.id == comment.post_id)
            .values(comment_count=PostModel.comment_count + 1)
        )
        await self._session.flush()
        return self._comment_to_domain(model)

    async def list_comments(self, post_id: str) -> List[Comment]:
        result = await self._session.execute(
            select(CommentModel)
            .where(CommentModel.post_id == post_id)
            .order_by(CommentModel.created_at.asc(), CommentModel.id.asc())
        )
        return [self._comment_to_domain(m) for m in result.scalars().all()]

    # =========================================================================
    # MAPPING
    # =========================================================================

    def _post_to_domain(self, model: PostModel) -> Post:
        return Post(
            id=model.id,
            forum_id=model.forum_id,
            author_id=model.author_id,
            author_username=model.author_username,
            author_avatar_url=model.author_avatar_url,
            title=model.title,
            content=model.content,
            image_url=model.image_url,
            upvotes=list(model.upvotes or []),
            downvotes=list(model.downvotes or []),
            comment_count=model.comment_count,
            created_at=ensure_utc(model.created_at),
        )

    def _comment_to_domain(self, model: CommentModel) -> Comment:
        return Comment(
            id=model.id,
            post_id=model.post_id,
            author_id=model.author_id,
            author_username=model.author_username,
            author_avatar_url=model.author_avatar_url,
            text=model.text,
            created_at=ensure_utc(model.created_at),
        )
