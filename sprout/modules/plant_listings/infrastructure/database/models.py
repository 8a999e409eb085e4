# 📄 File: sprout/modules/plant_listings/infrastructure/database/models.py
# 🧭 Purpose (Layman Explanation):
# Describes the "plant_listings" table where every plant put up for sale or trade is kept.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy ORM model for PlantListing with catalog indexes for keyset paging.
#
# 🔗 Dependencies:
# - SQLAlchemy ORM
# - sprout.shared.infrastructure.database.connection (Base)
#
# 🔄 Connected Modules / Calls From:
# - plant_listing_repository_impl.py
# - migrations/versions

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
)

from sprout.shared.infrastructure.database.connection import Base


class PlantListingModel(Base):
    """SQLAlchemy model for plant listings."""
    __tablename__ = "plant_listings"

    id = Column(String(36), primary_key=True)
    name = Column(String(120), nullable=False)
    description = Column(Text, nullable=False, default="")
    image_urls = Column(JSON, nullable=False, default=list)

    price = Column(Numeric(10, 2), nullable=True)
    trade_only = Column(Boolean, nullable=False, default=False)
    listing_type = Column(String(20), nullable=False, default="sale")

    is_available = Column(Boolean, nullable=False, default=True, index=True)
    quantity = Column(Integer, nullable=False, default=1)

    tags = Column(JSON, nullable=False, default=list)
    # Lower-cased "|tag1|tag2|" copy of tags for portable LIKE filtering
    search_tags = Column(String(1024), nullable=False, default="")
    location = Column(String(255), nullable=True)

    owner_id = Column(
        String(128),
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    owner_username = Column(String(30), nullable=False)
    owner_avatar_url = Column(String(1024), nullable=True)

    listed_date = Column(DateTime(timezone=True), nullable=False, default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, default=func.now(), onupdate=func.now())

    is_featured = Column(Boolean, nullable=False, default=False)
    featured_until = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_plant_listings_quantity_non_negative"),
        CheckConstraint("price IS NULL OR price >= 0", name="ck_plant_listings_price_non_negative"),
        CheckConstraint(
            "listing_type IN ('sale', 'trade', 'sale_trade')",
            name="ck_plant_listings_listing_type"
        ),
        Index("ix_plant_listings_catalog", "is_available", "listed_date", "id"),
        Index("ix_plant_listings_featured", "is_featured", "featured_until"),
    )

    def __repr__(self) -> str:
        return f"<PlantListingModel(id={self.id}, name={self.name})>"
