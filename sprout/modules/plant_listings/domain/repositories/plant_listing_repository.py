# 📄 File: sprout/modules/plant_listings/domain/repositories/plant_listing_repository.py
# 🧭 Purpose (Layman Explanation):
# The list of things we need to do with stored plant listings: save, find, page through
# the catalog, and switch off promotions that have run out.
# 🧪 Purpose (Technical Summary):
# Repository interface for PlantListing with keyset catalog paging and featured queries.
# 🔗 Dependencies:
# abc, PlantListing domain model
# 🔄 Connected Modules / Calls From:
# PlantListingService, UserService (wishlist), CartService, OrderService

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple

from ..models.plant_listing import PlantListing


class PlantListingRepository(ABC):
    """Repository interface for plant listings."""

    @abstractmethod
    async def create(self, listing: PlantListing) -> PlantListing:
        pass

    @abstractmethod
    async def get_by_id(self, plant_id: str) -> Optional[PlantListing]:
        pass

    @abstractmethod
    async def get_by_ids(self, plant_ids: List[str]) -> List[PlantListing]:
        """Listings for the given ids. Missing ids are skipped."""
        pass

    @abstractmethod
    async def update(self, listing: PlantListing) -> PlantListing:
        pass

    @abstractmethod
    async def delete(self, plant_id: str) -> bool:
        pass

    @abstractmethod
    async def list_available(
        self,
        limit: int,
        after: Optional[Tuple[datetime, str]] = None,
        tag: Optional[str] = None,
        query: Optional[str] = None
    ) -> List[PlantListing]:
        """
        Available listings, newest first.

        Args:
            limit: Maximum rows to return
            after: (listed_date, id) of the last row of the previous page
            tag: Only listings carrying this tag
            query: Case-insensitive substring of the name
        """
        pass

    @abstractmethod
    async def list_featured(self, now: datetime, limit: int) -> List[PlantListing]:
        pass

    @abstractmethod
    async def list_by_owner(self, owner_id: str) -> List[PlantListing]:
        pass

    @abstractmethod
    async def count_available_by_owner(self, owner_id: str) -> int:
        pass

    @abstractmethod
    async def expire_featured(self, now: datetime) -> int:
        """Clear the featured flag on listings whose window ended. Returns rows changed."""
        pass
