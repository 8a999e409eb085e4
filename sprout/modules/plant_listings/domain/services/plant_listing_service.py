# 📄 File: sprout/modules/plant_listings/domain/services/plant_listing_service.py
# 🧭 Purpose (Layman Explanation):
# Everything a seller does with a listing (put a plant up, edit it, add photos, promote it,
# take it down) and everything a shopper does to browse the catalog page by page.
# 🧪 Purpose (Technical Summary):
# Domain service for PlantListing: owner authorization, listing-type and stock rules,
# keyset catalog pagination with opaque cursors, image blob management, featured windows
# and their periodic expiry.
# 🔗 Dependencies:
# PlantListingRepository, UserRepository, RewardService, SupabaseStorageClient, settings,
# sprout.shared.utils.helpers (cursors)
# 🔄 Connected Modules / Calls From:
# plant_listings API, background maintenance tasks

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from fastapi import Depends

from sprout.modules.plant_listings.domain.models.plant_listing import PlantListing
from sprout.modules.plant_listings.domain.repositories.plant_listing_repository import (
    PlantListingRepository,
)
from sprout.modules.rewards.domain.services.reward_service import RewardService
from sprout.modules.user_management.domain.repositories.user_repository import UserRepository
from sprout.shared.config.settings import Settings, get_settings
from sprout.shared.core.exceptions import (
    AuthorizationError,
    BusinessRuleViolationError,
    FileStorageError,
    ListingNotFoundError,
    NotFoundError,
    ServiceNotConfiguredError,
    UserNotFoundError,
    ValidationError,
)
from sprout.shared.infrastructure.storage.supabase_storage import (
    SupabaseStorageClient,
    get_storage_client,
)
from sprout.shared.utils.helpers import decode_cursor, encode_cursor, utc_now
from sprout.shared.utils.logging import get_logger

logger = get_logger(__name__)

MAX_IMAGES_PER_LISTING = 10
UPDATABLE_FIELDS = {"name", "description", "price", "listing_type", "quantity", "tags", "location"}


class PlantListingService:
    """
    Domain service for plant listings and the catalog.

    Business rules:
    - Only the owner may change, feature or delete a listing
    - Sale listings carry a price; trade listings are trade only
    - A listing is available exactly when it has stock
    """

    def __init__(
        self,
        listing_repository: PlantListingRepository = Depends(),
        user_repository: UserRepository = Depends(),
        reward_service: RewardService = Depends(),
        storage: SupabaseStorageClient = Depends(get_storage_client),
        settings: Settings = Depends(get_settings),
    ):
        self.listing_repository = listing_repository
        self.user_repository = user_repository
        self.reward_service = reward_service
        self.storage = storage
        self.settings = settings

    # =========================================================================
    # CREATE / READ
    # =========================================================================

    async def add_plant_listing(self, owner_id: str, data: Dict[str, Any]) -> PlantListing:
        """
        Create a listing for `owner_id`.

        The owner's username and avatar are copied onto the listing, the owner's
        plants_listed counter goes up and listing reward points are awarded.

        Raises:
            UserNotFoundError: If the owner has no profile yet
            ValidationError: If a sale listing has no price
        """
        owner = await self.user_repository.get_by_id(owner_id)
        if owner is None:
            raise UserNotFoundError(owner_id)

        now = utc_now()
        listing = PlantListing(
            **data,
            owner_id=owner.user_id,
            owner_username=owner.username,
            owner_avatar_url=owner.avatar_url,
            listed_date=now,
            updated_at=now,
        )
        self._apply_rules(listing)
        listing.sync_availability()

        created = await self.listing_repository.create(listing)
        await self.user_repository.increment_counters(owner_id, plants_listed=1)
        await self.reward_service.award_reward_points(
            owner_id,
            self.settings.REWARD_POINTS_LISTING,
            f"Listed a new plant: {created.name}",
        )

        logger.log_user_action("create_listing", owner_id, resource=f"plant_listing:{created.id}")
        return created

    async def get_plant_listing(self, plant_id: str) -> PlantListing:
        listing = await self.listing_repository.get_by_id(plant_id)
        if listing is None:
            raise ListingNotFoundError(plant_id)
        return listing

    async def get_available_plant_listings(
        self,
        limit: int = 10,
        cursor: Optional[str] = None,
        tag: Optional[str] = None,
        query: Optional[str] = None,
    ) -> Tuple[List[PlantListing], Optional[str]]:
        """
        One catalog page of available listings, newest first.

        Args:
            limit: Page size
            cursor: Opaque position returned with the previous page
            tag: Optional tag filter
            query: Optional case-insensitive name filter

        Returns:
            Tuple of (listings, next_cursor); next_cursor is None on the last page

        Raises:
            ValidationError: If the cursor cannot be decoded
        """
        after = decode_cursor(cursor) if cursor else None

        # One extra row tells us whether another page exists
        rows = await self.listing_repository.list_available(limit + 1, after=after, tag=tag, query=query)
        page = rows[:limit]

        next_cursor = None
        if len(rows) > limit and page:
            last = page[-1]
            next_cursor = encode_cursor(last.listed_date, last.id)

        return page, next_cursor

    async def get_featured_listings(self, limit: int = 10) -> List[PlantListing]:
        return await self.listing_repository.list_featured(utc_now(), limit)

    async def get_user_plant_listings(self, owner_id: str) -> List[PlantListing]:
        return await self.listing_repository.list_by_owner(owner_id)

    # =========================================================================
    # UPDATE / DELETE
    # =========================================================================

    async def update_plant_listing(
        self, plant_id: str, user_id: str, updates: Dict[str, Any]
    ) -> PlantListing:
        """
        Partially update a listing. Giving a quantity recomputes availability.

        Raises:
            ListingNotFoundError, AuthorizationError, ValidationError
        """
        unknown = set(updates) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(
                f"Fields cannot be updated: {', '.join(sorted(unknown))}", field=sorted(unknown)[0]
            )

        listing = await self._get_owned_listing(plant_id, user_id, "update")

        try:
            for field, value in updates.items():
                setattr(listing, field, value)
        except ValueError as e:
            raise ValidationError("Invalid listing update", details={"errors": str(e)}) from e

        self._apply_rules(listing)
        if "quantity" in updates:
            listing.sync_availability()
        listing.updated_at = utc_now()

        return await self.listing_repository.update(listing)

    async def delete_plant_listing(self, plant_id: str, user_id: str) -> None:
        """Delete the listing and the images it stored."""
        listing = await self._get_owned_listing(plant_id, user_id, "delete")

        for url in listing.image_urls:
            await self._delete_blob(url)

        await self.listing_repository.delete(plant_id)
        logger.log_user_action("delete_listing", user_id, resource=f"plant_listing:{plant_id}")

    # =========================================================================
    # IMAGES
    # =========================================================================

    async def upload_plant_image(
        self,
        plant_id: str,
        user_id: str,
        filename: str,
        data: bytes,
        content_type: str,
        index: Optional[int] = None,
    ) -> PlantListing:
        """Store an image for the listing and append its URL."""
        listing = await self._get_owned_listing(plant_id, user_id, "upload_image")

        if len(listing.image_urls) >= MAX_IMAGES_PER_LISTING:
            raise BusinessRuleViolationError(
                f"A listing can have at most {MAX_IMAGES_PER_LISTING} images",
                rule="max_listing_images",
            )

        url = await self.storage.upload_image(
            category="plant_images",
            owner_id=plant_id,
            filename=filename,
            file_data=data,
            content_type=content_type,
            index=index if index is not None else len(listing.image_urls),
        )

        if url not in listing.image_urls:
            listing.image_urls = [*listing.image_urls, url]
        listing.updated_at = utc_now()
        return await self.listing_repository.update(listing)

    async def delete_plant_image(self, plant_id: str, user_id: str, image_url: str) -> PlantListing:
        listing = await self._get_owned_listing(plant_id, user_id, "delete_image")
        if image_url not in listing.image_urls:
            raise NotFoundError("Image not found on this listing", resource_type="plant_image", resource_id=image_url)

        await self.storage.delete_by_url(image_url)

        listing.image_urls = [u for u in listing.image_urls if u != image_url]
        listing.updated_at = utc_now()
        return await self.listing_repository.update(listing)

    # =========================================================================
    # FEATURED
    # =========================================================================

    async def feature_listing(self, plant_id: str, user_id: str) -> PlantListing:
        """
        Promote an available listing for FEATURED_LISTING_DAYS.

        Featuring a listing that is already featured extends its window.
        """
        listing = await self._get_owned_listing(plant_id, user_id, "feature")
        if not listing.is_available:
            raise BusinessRuleViolationError(
                "Only available listings can be featured", rule="feature_requires_availability"
            )

        listing.feature(self.settings.FEATURED_LISTING_DAYS)
        updated = await self.listing_repository.update(listing)

        logger.log_business_event(
            "listing_featured",
            f"Listing {plant_id} featured until {updated.featured_until.isoformat()}",
            entity_id=plant_id,
            entity_type="plant_listing",
        )
        return updated

    async def expire_featured_listings(self, now: Optional[datetime] = None) -> int:
        """Clear features whose window has ended. Returns how many were cleared."""
        expired = await self.listing_repository.expire_featured(now or utc_now())
        if expired:
            logger.info(f"Expired {expired} featured listings")
        return expired

    # =========================================================================
    # HELPERS
    # =========================================================================

    async def _get_owned_listing(self, plant_id: str, user_id: str, action: str) -> PlantListing:
        listing = await self.get_plant_listing(plant_id)
        if listing.owner_id != user_id:
            raise AuthorizationError(
                "Only the owner can modify this listing",
                resource_type="plant_listing",
                resource_id=plant_id,
                required_action=action,
                user_id=user_id,
            )
        return listing

    @staticmethod
    def _apply_rules(listing: PlantListing) -> None:
        try:
            listing.apply_listing_type_rules()
        except ValueError as e:
            raise ValidationError(str(e), field="price", constraint="required_for_sale") from e

    async def _delete_blob(self, url: str) -> None:
        try:
            await self.storage.delete_by_url(url)
        except (FileStorageError, ServiceNotConfiguredError) as e:
            logger.warning(f"Could not delete listing image {url}: {e.message}")
