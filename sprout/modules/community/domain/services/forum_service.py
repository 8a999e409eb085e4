# 📄 File: sprout/modules/community/domain/services/forum_service.py
# 🧭 Purpose (Layman Explanation):
# Runs the community boards: creating and managing boards, joining and leaving, writing
# posts and comments, voting, and rewarding members who take part.
# 🧪 Purpose (Technical Summary):
# Domain service for forums, posts and comments with creator/moderator authorization,
# membership counting floored at one, vote toggling, and reward/notification side effects.
# 🔗 Dependencies:
# ForumRepository, PostRepository, UserRepository, RewardService, NotificationService,
# SupabaseStorageClient, settings
# 🔄 Connected Modules / Calls From:
# community API

from typing import List, Optional

from fastapi import Depends

from sprout.modules.community.domain.models.forum import Comment, Forum, Post, VoteType
from sprout.modules.community.domain.repositories.forum_repository import ForumRepository
from sprout.modules.community.domain.repositories.post_repository import PostRepository
from sprout.modules.notifications.domain.models.notification import NotificationType
from sprout.modules.notifications.domain.services.notification_service import NotificationService
from sprout.modules.rewards.domain.services.reward_service import RewardService
from sprout.modules.user_management.domain.models.user import User
from sprout.modules.user_management.domain.repositories.user_repository import UserRepository
from sprout.shared.config.settings import Settings, get_settings
from sprout.shared.core.exceptions import (
    AuthorizationError,
    BusinessRuleViolationError,
    FileStorageError,
    ForumNotFoundError,
    NotFoundError,
    PostNotFoundError,
    ServiceNotConfiguredError,
    UserNotFoundError,
    ValidationError,
)
from sprout.shared.infrastructure.storage.supabase_storage import (
    SupabaseStorageClient,
    get_storage_client,
)
from sprout.shared.utils.logging import get_logger

logger = get_logger(__name__)


class ForumService:
    """
    Domain service for the community.

    Business rules:
    - The creator is always a moderator and cannot be removed
    - Moderators edit settings and banners; only the creator deletes a forum or
      manages moderators
    - A post can be deleted by its author or a moderator of its forum
    - member_count never drops below one
    """

    def __init__(
        self,
        forum_repository: ForumRepository = Depends(),
        post_repository: PostRepository = Depends(),
        user_repository: UserRepository = Depends(),
        reward_service: RewardService = Depends(),
        notification_service: NotificationService = Depends(),
        storage: SupabaseStorageClient = Depends(get_storage_client),
        settings: Settings = Depends(get_settings),
    ):
        self.forum_repository = forum_repository
        self.post_repository = post_repository
        self.user_repository = user_repository
        self.reward_service = reward_service
        self.notification_service = notification_service
        self.storage = storage
        self.settings = settings

    # =========================================================================
    # FORUMS
    # =========================================================================

    async def create_forum(self, creator_id: str, name: str, description: str) -> Forum:
        await self._get_member_profile(creator_id)
        try:
            forum = Forum(
                name=name.strip(),
                description=description.strip(),
                creator_id=creator_id,
                moderators=[creator_id],
                member_count=1,
            )
        except ValueError as e:
            raise ValidationError("Invalid forum", details={"errors": str(e)}) from e
        forum = await self.forum_repository.create(forum)
        logger.log_user_action("create_forum", creator_id, resource=f"forum:{forum.id}")
        return forum

    async def get_forums(self) -> List[Forum]:
        return await self.forum_repository.list_all()

    async def get_forum_by_id(self, forum_id: str) -> Forum:
        forum = await self.forum_repository.get_by_id(forum_id)
        if forum is None:
            raise ForumNotFoundError(forum_id)
        return forum

    async def update_forum_settings(
        self,
        forum_id: str,
        user_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Forum:
        forum = await self._get_moderated_forum(forum_id, user_id, "update_settings")
        try:
            if name is not None:
                forum.name = name.strip()
            if description is not None:
                forum.description = description.strip()
        except ValueError as e:
            raise ValidationError("Invalid forum settings", details={"errors": str(e)}) from e
        return await self.forum_repository.update(forum)

    async def upload_forum_banner(
        self,
        forum_id: str,
        user_id: str,
        filename: str,
        data: bytes,
        content_type: str,
    ) -> Forum:
        """Replace the forum banner; the previous image is removed from storage."""
        forum = await self._get_moderated_forum(forum_id, user_id, "upload_banner")
        old_banner = forum.banner_url

        forum.banner_url = await self.storage.upload_image(
            category="forum_banners",
            owner_id=forum_id,
            filename=filename,
            file_data=data,
            content_type=content_type,
        )
        updated = await self.forum_repository.update(forum)

        if old_banner and old_banner != updated.banner_url:
            await self._delete_blob(old_banner)
        return updated

    async def delete_forum(self, forum_id: str, user_id: str) -> None:
        """Delete a forum with all its posts and comments. Creator only."""
        forum = await self.get_forum_by_id(forum_id)
        self._require_creator(forum, user_id, "delete")

        await self.forum_repository.delete(forum_id)
        if forum.banner_url:
            await self._delete_blob(forum.banner_url)
        logger.log_user_action("delete_forum", user_id, resource=f"forum:{forum_id}")

    async def add_moderator(self, forum_id: str, user_id: str, username: str) -> Forum:
        forum = await self.get_forum_by_id(forum_id)
        self._require_creator(forum, user_id, "add_moderator")

        moderator = await self.user_repository.get_by_username(username)
        if moderator is None:
            raise NotFoundError(f"No member named {username}", resource_type="user", resource_id=username)

        if moderator.user_id not in forum.moderators:
            forum.moderators = [*forum.moderators, moderator.user_id]
            forum = await self.forum_repository.update(forum)
        return forum

    async def remove_moderator(self, forum_id: str, user_id: str, moderator_id: str) -> Forum:
        forum = await self.get_forum_by_id(forum_id)
        self._require_creator(forum, user_id, "remove_moderator")

        if moderator_id == forum.creator_id:
            raise BusinessRuleViolationError(
                "The forum creator cannot be removed as moderator", rule="creator_is_moderator"
            )
        if moderator_id in forum.moderators:
            forum.moderators = [m for m in forum.moderators if m != moderator_id]
            forum = await self.forum_repository.update(forum)
        return forum

    async def get_moderators(self, forum_id: str) -> List[User]:
        forum = await self.get_forum_by_id(forum_id)
        return await self.user_repository.get_by_ids(forum.moderators)

    async def join_forum(self, forum_id: str, user_id: str) -> Forum:
        forum = await self.get_forum_by_id(forum_id)
        if await self.forum_repository.add_member(forum_id, user_id):
            forum.member_count += 1
            forum = await self.forum_repository.update(forum)
        return forum

    async def leave_forum(self, forum_id: str, user_id: str) -> Forum:
        forum = await self.get_forum_by_id(forum_id)
        if user_id == forum.creator_id:
            raise BusinessRuleViolationError("The forum creator cannot leave the forum", rule="creator_is_member")

        if await self.forum_repository.remove_member(forum_id, user_id):
            forum.member_count = max(1, forum.member_count - 1)
            forum = await self.forum_repository.update(forum)
        return forum

    # =========================================================================
    # POSTS
    # =========================================================================

    async def add_forum_post(
        self,
        forum_id: str,
        author_id: str,
        title: str,
        content: str,
        image_url: Optional[str] = None,
    ) -> Post:
        await self.get_forum_by_id(forum_id)
        author = await self._get_member_profile(author_id)

        post = await self.post_repository.create(
            Post(
                forum_id=forum_id,
                author_id=author_id,
                author_username=author.username,
                author_avatar_url=author.avatar_url,
                title=title.strip(),
                content=content.strip(),
                image_url=image_url,
            )
        )
        await self.reward_service.award_reward_points(
            author_id, self.settings.REWARD_POINTS_POST, f"Created a forum post: {post.title}"
        )
        return post

    async def get_posts_for_forum(self, forum_id: str) -> List[Post]:
        await self.get_forum_by_id(forum_id)
        return await self.post_repository.list_for_forum(forum_id)

    async def get_post_by_id(self, forum_id: str, post_id: str) -> Post:
        post = await self.post_repository.get_by_id(post_id)
        if post is None or post.forum_id != forum_id:
            raise PostNotFoundError(post_id)
        return post

    async def delete_post(self, forum_id: str, post_id: str, user_id: str) -> None:
        post = await self.get_post_by_id(forum_id, post_id)
        if post.author_id != user_id:
            forum = await self.get_forum_by_id(forum_id)
            if not forum.is_moderator(user_id):
                raise AuthorizationError(
                    "Only the author or a moderator can delete this post",
                    resource_type="post",
                    resource_id=post_id,
                    required_action="delete",
                    user_id=user_id,
                )
        await self.post_repository.delete(post_id)
        logger.log_user_action("delete_post", user_id, resource=f"post:{post_id}")

    async def toggle_post_vote(self, forum_id: str, post_id: str, user_id: str, vote: VoteType) -> Post:
        post = await self.get_post_by_id(forum_id, post_id)
        post.toggle_vote(user_id, VoteType(vote))
        return await self.post_repository.update_votes(post)

    # =========================================================================
    # COMMENTS
    # =========================================================================

    async def add_comment_to_post(self, forum_id: str, post_id: str, author_id: str, text: str) -> Comment:
        post = await self.get_post_by_id(forum_id, post_id)
        author = await self._get_member_profile(author_id)

        comment = await self.post_repository.add_comment(
            Comment(
                post_id=post_id,
                author_id=author_id,
                author_username=author.username,
                author_avatar_url=author.avatar_url,
                text=text.strip(),
            )
        )

        if post.author_id != author_id:
            await self.notification_service.create_notification(
                user_id=post.author_id,
                type=NotificationType.COMMENT,
                message=f"{author.username} commented on your post \"{post.title}\"",
                link=f"/forums/{forum_id}/{post_id}",
            )
        await self.reward_service.award_reward_points(
            author_id, self.settings.REWARD_POINTS_COMMENT, f"Commented on: {post.title}"
        )
        return comment

    async def get_comments_for_post(self, forum_id: str, post_id: str) -> List[Comment]:
        await self.get_post_by_id(forum_id, post_id)
        return await self.post_repository.list_comments(post_id)

    # =========================================================================
    # HELPERS
    # =========================================================================

    async def _get_member_profile(self, user_id: str) -> User:
        user = await self.user_repository.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def _get_moderated_forum(self, forum_id: str, user_id: str, action: str) -> Forum:
        forum = await self.get_forum_by_id(forum_id)
        if not forum.is_moderator(user_id):
            raise AuthorizationError(
                "Only moderators can manage this forum",
                resource_type="forum",
                resource_id=forum_id,
                required_action=action,
                user_id=user_id,
            )
        return forum

    @staticmethod
    def _require_creator(forum: Forum, user_id: str, action: str) -> None:
        if forum.creator_id != user_id:
            raise AuthorizationError(
                "Only the forum creator can do this",
                resource_type="forum",
                resource_id=forum.id,
                required_action=action,
                user_id=user_id,
            )

    async def _delete_blob(self, url: str) -> None:
        try:
            await self.storage.delete_by_url(url)
        except (FileStorageError, ServiceNotConfiguredError) as e:
            logger.warning(f"Could not delete forum banner {url}: {e.message}")
