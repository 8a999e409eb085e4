# 📄 File: sprout/modules/user_management/domain/services/user_service.py
# 🧭 Purpose (Layman Explanation):
# Manages member profiles: setting one up on first visit, editing it, profile pictures,
# the wishlist of favourite plants, following other members and the Pro plan.
# 🧪 Purpose (Technical Summary):
# Domain service for the User aggregate. Enforces profile validation, set semantics on
# wishlist/follow lists and subscription transitions used by payment webhooks.
# 🔗 Dependencies:
# UserRepository, PlantListingRepository, NotificationService, SupabaseStorageClient, settings
# 🔄 Connected Modules / Calls From:
# users API, commerce webhooks, background maintenance tasks

from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import Depends

from sprout.modules.notifications.domain.models.notification import NotificationType
from sprout.modules.notifications.domain.services.notification_service import NotificationService
from sprout.modules.plant_listings.domain.models.plant_listing import PlantListing
from sprout.modules.plant_listings.domain.repositories.plant_listing_repository import (
    PlantListingRepository,
)
from sprout.modules.user_management.domain.models.user import User
from sprout.modules.user_management.domain.repositories.user_repository import UserRepository
from sprout.shared.config.settings import Settings, get_settings
from sprout.shared.core.exceptions import (
    BusinessRuleViolationError,
    DuplicateResourceError,
    ListingNotFoundError,
    UserNotFoundError,
    ValidationError,
)
from sprout.shared.infrastructure.storage.supabase_storage import (
    SupabaseStorageClient,
    get_storage_client,
)
from sprout.shared.utils.logging import get_logger

logger = get_logger(__name__)

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
BIO_MAX_LENGTH = 500

UPDATABLE_FIELDS = {"username", "bio", "location", "avatar_url"}


class UserService:
    """
    Domain service for member profiles.

    Business rules:
    - One profile per auth uid, created on first authenticated use
    - Usernames are 3-30 characters and unique (case-insensitive)
    - Wishlist and follow lists never contain duplicates
    """

    def __init__(
        self,
        user_repository: UserRepository = Depends(),
        listing_repository: PlantListingRepository = Depends(),
        notification_service: NotificationService = Depends(),
        storage: SupabaseStorageClient = Depends(get_storage_client),
        settings: Settings = Depends(get_settings),
    ):
        self.user_repository = user_repository
        self.listing_repository = listing_repository
        self.notification_service = notification_service
        self.storage = storage
        self.settings = settings

    # =========================================================================
    # PROFILE
    # =========================================================================

    async def create_user_profile(self, user_id: str, email: Optional[str], username: str) -> User:
        """
        Create the profile for a freshly signed-up user.

        Raises:
            DuplicateResourceError: If the profile exists or the username is taken
            ValidationError: If the username is malformed
        """
        username = self._validate_username(username)

        if await self.user_repository.get_by_id(user_id):
            raise DuplicateResourceError(
                "User profile already exists", resource_type="user", field="user_id", value=user_id
            )
        if await self.user_repository.get_by_username(username):
            raise DuplicateResourceError(
                "Username is already taken", resource_type="user", field="username", value=username
            )

        user = await self.user_repository.create(User.create_new(user_id, username, email))
        logger.log_user_action("create_profile", user_id, resource="user_profile")
        return user

    async def get_user_profile(self, user_id: str) -> User:
        user = await self.user_repository.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def get_user_by_username(self, username: str) -> User:
        user = await self.user_repository.get_by_username(username.strip())
        if user is None:
            raise UserNotFoundError(username, message=f"No user with username '{username}'")
        return user

    async def update_user_data(self, user_id: str, updates: Dict[str, Any]) -> User:
        """
        Apply a partial update to the profile.

        Args:
            user_id: Profile owner
            updates: Subset of username, bio, location, avatar_url

        Raises:
            ValidationError: If a field is invalid or not updatable
            DuplicateResourceError: If the new username is taken
        """
        unknown = set(updates) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(
                f"Fields cannot be updated: {', '.join(sorted(unknown))}",
                field=sorted(unknown)[0]
            )

        user = await self.get_user_profile(user_id)

        if "username" in updates and updates["username"] is not None:
            username = self._validate_username(updates["username"])
            if username.lower() != user.username.lower():
                existing = await self.user_repository.get_by_username(username)
                if existing and existing.user_id != user_id:
                    raise DuplicateResourceError(
                        "Username is already taken", resource_type="user", field="username", value=username
                    )
            user.username = username

        if "bio" in updates:
            bio = updates["bio"]
            if bio is not None and len(bio) > BIO_MAX_LENGTH:
                raise ValidationError(
                    f"Bio must be at most {BIO_MAX_LENGTH} characters", field="bio", constraint="max_length"
                )
            user.bio = bio

        if "location" in updates:
            user.location = updates["location"]
        if "avatar_url" in updates:
            user.avatar_url = updates["avatar_url"]

        user.touch()
        updated = await self.user_repository.update(user)
        logger.log_user_action("update_profile", user_id, extra={"fields": sorted(updates)})
        return updated

    async def upload_profile_image(
        self, user_id: str, filename: str, data: bytes, content_type: str
    ) -> User:
        """Store a new avatar and point the profile at it."""
        user = await self.get_user_profile(user_id)
        url = await self.storage.upload_image(
            category="profile_images",
            owner_id=user_id,
            filename=filename,
            file_data=data,
            content_type=content_type,
        )
        user.avatar_url = url
        user.touch()
        return await self.user_repository.update(user)

    # =========================================================================
    # SUBSCRIPTION
    # =========================================================================

    async def update_user_subscription(
        self,
        user_id: str,
        expiry_date: Optional[datetime] = None,
        stripe_customer_id: Optional[str] = None,
    ) -> User:
        """
        Put the user on Pro.

        Without an explicit expiry the plan runs PRO_SUBSCRIPTION_DAYS from now.
        """
        user = await self.get_user_profile(user_id)
        user.upgrade_to_pro(self.settings.PRO_SUBSCRIPTION_DAYS, expiry_date=expiry_date)
        if stripe_customer_id:
            user.stripe_customer_id = stripe_customer_id
        updated = await self.user_repository.update(user)
        logger.log_business_event(
            "subscription_activated",
            f"User {user_id} upgraded to Pro",
            entity_id=user_id,
            entity_type="user",
            extra={"expiry_date": updated.subscription.expiry_date.isoformat()},
        )
        return updated

    async def downgrade_user_subscription(self, user_id: str) -> User:
        user = await self.get_user_profile(user_id)
        user.downgrade_to_free()
        updated = await self.user_repository.update(user)
        logger.log_business_event(
            "subscription_ended",
            f"User {user_id} moved to the free plan",
            entity_id=user_id,
            entity_type="user",
        )
        return updated

    async def find_by_stripe_customer(self, customer_id: str) -> Optional[User]:
        return await self.user_repository.get_by_stripe_customer_id(customer_id)

    async def save(self, user: User) -> User:
        return await self.user_repository.update(user)

    # =========================================================================
    # WISHLIST
    # =========================================================================

    async def add_plant_to_wishlist(self, user_id: str, plant_id: str) -> User:
        """
        Add a listing to the wishlist. Adding it twice changes nothing.

        Raises:
            ListingNotFoundError: If the listing does not exist
        """
        user = await self.get_user_profile(user_id)
        if await self.listing_repository.get_by_id(plant_id) is None:
            raise ListingNotFoundError(plant_id)

        if not user.add_to_wishlist(plant_id):
            return user
        return await self.user_repository.update(user)

    async def remove_plant_from_wishlist(self, user_id: str, plant_id: str) -> User:
        user = await self.get_user_profile(user_id)
        if not user.remove_from_wishlist(plant_id):
            return user
        return await self.user_repository.update(user)

    async def get_wishlist_plants(self, user_id: str) -> List[PlantListing]:
        """Wishlisted listings; ids whose listing was deleted are skipped."""
        user = await self.get_user_profile(user_id)
        return await self.listing_repository.get_by_ids(user.favorite_plants)

    # =========================================================================
    # FOLLOWS
    # =========================================================================

    async def follow_user(self, user_id: str, target_id: str) -> User:
        if user_id == target_id:
            raise BusinessRuleViolationError("You cannot follow yourself", rule="no_self_follow")

        user = await self.get_user_profile(user_id)
        target = await self.get_user_profile(target_id)

        if not user.add_following(target_id):
            return user
        target.add_follower(user_id)

        await self.user_repository.update(target)
        updated = await self.user_repository.update(user)

        await self.notification_service.create_notification(
            user_id=target_id,
            type=NotificationType.FOLLOW,
            message=f"{user.username} started following you.",
            link=f"/profile/{user_id}",
        )
        return updated

    async def unfollow_user(self, user_id: str, target_id: str) -> User:
        user = await self.get_user_profile(user_id)
        if not user.remove_following(target_id):
            return user

        target = await self.user_repository.get_by_id(target_id)
        if target is not None and target.remove_follower(user_id):
            await self.user_repository.update(target)
        return await self.user_repository.update(user)

    async def get_user_plant_listings(self, owner_id: str) -> List[PlantListing]:
        await self.get_user_profile(owner_id)
        return await self.listing_repository.list_by_owner(owner_id)

    # =========================================================================
    # VALIDATION
    # =========================================================================

    @staticmethod
    def _validate_username(username: str) -> str:
        username = (username or "").strip()
        if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
            raise ValidationError(
                f"Username must be {USERNAME_MIN_LENGTH}-{USERNAME_MAX_LENGTH} characters",
                field="username",
                value=username,
                constraint="length",
            )
        return username
