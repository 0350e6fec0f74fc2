"""
Shopping cart model
One row per cart, bound to either a user or a guest session
"""

from sqlalchemy import Column, String, JSON, CheckConstraint

from .base import Base, TimestampedModel, UUIDModel

class Cart(Base, UUIDModel, TimestampedModel):
    """Shopping cart document"""

    __tablename__ = "carts"

    # User or session, never both
    user_id = Column(String(64), nullable=True, unique=True)
    session_id = Column(String(255), nullable=True, unique=True)

    # Ordered list of {product_id, quantity, selected_size, selected_color}
    items = Column(JSON, nullable=False, default=list)

    # Timestamps are stamped by the cart store, not by the database
    __table_args__ = (
        CheckConstraint(
            "(user_id IS NULL) <> (session_id IS NULL)",
            name="check_exactly_one_identity"
        ),
    )
