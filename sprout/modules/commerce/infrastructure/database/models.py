# 📄 File: sprout/modules/commerce/infrastructure/database/models.py
# 🧭 Purpose (Layman Explanation):
# Describes the tables for shopping carts, paid orders and the plants inside each order.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy ORM models: cart_items (unique per user and plant), orders (unique Stripe
# session id for idempotent fulfilment) and order_items (seller-indexed lines).
#
# 🔗 Dependencies:
# - SQLAlchemy ORM
# - sprout.shared.infrastructure.database.connection (Base)
#
# 🔄 Connected Modules / Calls From:
# - cart_repository_impl.py, order_repository_impl.py
# - migrations/versions

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from sprout.shared.infrastructure.database.connection import Base


class CartItemModel(Base):
    """SQLAlchemy model for cart items."""
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        String(128),
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    # Not a foreign key: a deleted listing is dropped by reconciliation
    plant_id = Column(String(36), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    added_at = Column(DateTime(timezone=True), nullable=False, default=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "plant_id", name="uq_cart_items_user_plant"),
        CheckConstraint("quantity > 0", name="ck_cart_items_quantity_positive"),
    )

    def __repr__(self) -> str:
        return f"<CartItemModel(user_id={self.user_id}, plant_id={self.plant_id}, quantity={self.quantity})>"


class OrderModel(Base):
    """SQLAlchemy model for orders."""
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True)
    buyer_id = Column(String(128), nullable=False, index=True)
    seller_ids = Column(JSON, nullable=False, default=list)
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)
    status = Column(String(20), nullable=False, default="paid")
    stripe_session_id = Column(String(255), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=func.now(), index=True)

    tracking_number = Column(String(100), nullable=True)
    label_url = Column(String(1024), nullable=True)
    shipped_at = Column(DateTime(timezone=True), nullable=True)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderItemModel.id",
    )

    __table_args__ = (
        CheckConstraint("status IN ('paid', 'shipped', 'cancelled')", name="ck_orders_status"),
    )

    def __repr__(self) -> str:
        return f"<OrderModel(id={self.id}, buyer_id={self.buyer_id}, status={self.status})>"


class OrderItemModel(Base):
    """SQLAlchemy model for order lines."""
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(
        String(36),
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    plant_id = Column(String(36), nullable=False)
    name = Column(String(120), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    quantity = Column(Integer, nullable=False)
    image_url = Column(String(1024), nullable=True)
    seller_id = Column(String(128), nullable=False, index=True)

    order = relationship("OrderModel", back_populates="items")

    def __repr__(self) -> str:
        return f"<OrderItemModel(order_id={self.order_id}, plant_id={self.plant_id})>"
