# 📄 File: sprout/modules/plant_listings/infrastructure/database/plant_listing_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Reads and writes plant listings in the database and serves the catalog one page at a time.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy implementation of PlantListingRepository with keyset pagination on
# (listed_date, id), tag/name filtering and bulk featured expiry.
#
# 🔗 Dependencies:
# - SQLAlchemy async session
# - PlantListing domain model, PlantListingModel
#
# 🔄 Connected Modules / Calls From:
# - FastAPI dependency overrides in sprout.main
# - Background maintenance tasks

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from fastapi import Depends
from sqlalchemy import and_, delete, func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sprout.modules.plant_listings.domain.models.plant_listing import PlantListing
from sprout.modules.plant_listings.domain.repositories.plant_listing_repository import (
    PlantListingRepository,
)
from sprout.modules.plant_listings.infrastructure.database.models import PlantListingModel
from sprout.shared.core.exceptions import RepositoryError
from sprout.shared.infrastructure.database.session import get_db_session
from sprout.shared.utils.helpers import ensure_utc

logger = logging.getLogger(__name__)


def _search_tags(tags: List[str]) -> str:
    cleaned = [t.strip().lower() for t in tags if t and t.strip()]
    return f"|{'|'.join(cleaned)}|" if cleaned else ""


class PlantListingRepositoryImpl(PlantListingRepository):
    """
    SQLAlchemy implementation of the PlantListingRepository interface.
    """

    def __init__(self, session: AsyncSession = Depends(get_db_session)):
        self._session = session

    async def create(self, listing: PlantListing) -> PlantListing:
        try:
            model = self._domain_to_model(listing)
            self._session.add(model)
            await self._session.flush()
            logger.info(f"Created plant listing {listing.id} for owner {listing.owner_id}")
            return self._model_to_domain(model)
        except SQLAlchemyError as e:
            logger.error(f"Database error creating listing: {e}")
            raise RepositoryError("Failed to create listing", operation="create", entity="plant_listing") from e

    async def get_by_id(self, plant_id: str) -> Optional[PlantListing]:
        model = await self._session.get(PlantListingModel, plant_id)
        return self._model_to_domain(model) if model else None

    async def get_by_ids(self, plant_ids: List[str]) -> List[PlantListing]:
        if not plant_ids:
            return []
        result = await self._session.execute(
            select(PlantListingModel).where(PlantListingModel.id.in_(plant_ids))
        )
        by_id = {m.id: self._model_to_domain(m) for m in result.scalars().all()}
        # Keep the caller's order
        return [by_id[pid] for pid in plant_ids if pid in by_id]

    async def update(self, listing: PlantListing) -> PlantListing:
        model = await self._session.get(PlantListingModel, listing.id)
        if model is None:
            raise RepositoryError(
                f"Cannot update missing listing {listing.id}", operation="update", entity="plant_listing"
            )

        model.name = listing.name
        model.description = listing.description
        model.image_urls = list(listing.image_urls)
        model.price = listing.price
        model.trade_only = listing.trade_only
        model.listing_type = listing.listing_type
        model.is_available = listing.is_available
        model.quantity = listing.quantity
        model.tags = list(listing.tags)
        model.search_tags = _search_tags(listing.tags)
        model.location = listing.location
        model.owner_username = listing.owner_username
        model.owner_avatar_url = listing.owner_avatar_url
        model.updated_at = listing.updated_at
        model.is_featured = listing.is_featured
        model.featured_until = listing.featured_until

        await self._session.flush()
        return self._model_to_domain(model)

    async def delete(self, plant_id: str) -> bool:
        result = await self._session.execute(
            delete(PlantListingModel).where(PlantListingModel.id == plant_id)
        )
        return result.rowcount > 0

    async def list_available(
        self,
        limit: int,
        after: Optional[Tuple[datetime, str]] = None,
        tag: Optional[str] = None,
        query: Optional[str] = None
    ) -> List[PlantListing]:
        stmt = select(PlantListingModel).where(PlantListingModel.is_available.is_(True))

        if after is not None:
            after_date, after_id = after
            stmt = stmt.where(
                or_(
                    PlantListingModel.listed_date < after_date,
                    and_(
                        PlantListingModel.listed_date == after_date,
                        PlantListingModel.id < after_id,
                    ),
                )
            )

        if tag:
            stmt = stmt.where(PlantListingModel.search_tags.contains(f"|{tag.strip().lower()}|"))

        if query:
            stmt = stmt.where(func.lower(PlantListingModel.name).contains(query.strip().lower()))

        stmt = stmt.order_by(
            PlantListingModel.listed_date.desc(), PlantListingModel.id.desc()
        ).limit(limit)

        result = await self._session.execute(stmt)
        return [self._model_to_domain(m) for m in result.scalars().all()]

    async def list_featured(self, now: datetime, limit: int) -> List[PlantListing]:
        result = await self._session.execute(
            select(PlantListingModel)
            .where(
                PlantListingModel.is_available.is_(True),
                PlantListingModel.is_featured.is_(True),
                PlantListingModel.featured_until > now,
            )
            .order_by(PlantListingModel.featured_until.desc())
            .limit(limit)
        )
        return [self._model_to_domain(m) for m in result.scalars().all()]

    async def list_by_owner(self, owner_id: str) -> List[PlantListing]:
        result = await self._session.execute(
            select(PlantListingModel)
            .where(PlantListingModel.owner_id == owner_id)
            .order_by(PlantListingModel.listed_date.desc(), PlantListingModel.id.desc())
        )
        return [self._model_to_domain(m) for m in result.scalars().all()]

    async def count_available_by_owner(self, owner_id: str) -> int:
        result = await self._session.execute(
            select(func.count(PlantListingModel.id)).where(
                PlantListingModel.owner_id == owner_id,
                PlantListingModel.is_available.is_(True),
            )
        )
        return result.scalar_one()

    async def expire_featured(self, now: datetime) -> int:
        result = await self._session.execute(
            update(PlantListingModel)
            .where(
                PlantListingModel.is_featured.is_(True),
                PlantListingModel.featured_until <= now,
            )
            .values(is_featured=False, featured_until=None)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    # =========================================================================
    # MAPPING
    # =========================================================================

    def _domain_to_model(self, listing: PlantListing) -> PlantListingModel:
        return PlantListingModel(
            id=listing.id,
            name=listing.name,
            description=listing.description,
            image_urls=list(listing.image_urls),
            price=listing.price,
            trade_only=listing.trade_only,
            listing_type=listing.listing_type,
            is_available=listing.is_available,
            quantity=listing.quantity,
            tags=list(listing.tags),
            search_tags=_search_tags(listing.tags),
            location=listing.location,
            owner_id=listing.owner_id,
            owner_username=listing.owner_username,
            owner_avatar_url=listing.owner_avatar_url,
            listed_date=listing.listed_date,
            updated_at=listing.updated_at,
            is_featured=listing.is_featured,
            featured_until=listing.featured_until,
        )

    def _model_to_domain(self, model: PlantListingModel) -> PlantListing:
        return PlantListing(
            id=model.id,
            name=model.name,
            description=model.description or "",
            image_urls=list(model.image_urls or []),
            price=float(model.price) if model.price is not None else None,
            trade_only=bool(model.trade_only),
            listing_type=model.listing_type,
            is_available=bool(model.is_available),
            quantity=model.quantity,
            tags=list(model.tags or []),
            location=model.location,
            owner_id=model.owner_id,
            owner_username=model.owner_username,
            owner_avatar_url=model.owner_avatar_url,
            listed_date=ensure_utc(model.listed_date),
            updated_at=ensure_utc(model.updated_at),
            is_featured=bool(model.is_featured),
            featured_until=ensure_utc(model.featured_until),
        )
