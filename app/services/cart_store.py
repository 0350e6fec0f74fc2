"""
Durable cart storage
One row per user cart and one row per session cart, replaced wholesale on save
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select, delete
from datetime import datetime, timedelta, timezone
from typing import Optional
import logging
import uuid

from app.models import Cart as CartRecord
from app.schemas.cart import Cart, CartItem, CartIdentity, IdentityKind

logger = logging.getLogger(__name__)

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands timestamps back without tzinfo
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value

def _next_timestamp(*previous: Optional[datetime]) -> datetime:
    """Now, or just past the latest previous stamp if the clock has not moved"""
    now = _utcnow()
    for stamp in previous:
        stamp = _as_utc(stamp)
        if stamp is not None and now <= stamp:
            now = stamp + timedelta(microseconds=1)
    return now

def _to_cart(record: CartRecord) -> Cart:
    return Cart(
        id=record.id,
        user_id=record.user_id,
        session_id=record.session_id,
        items=[CartItem(**item) for item in (record.items or [])],
        created_at=_as_utc(record.created_at),
        updated_at=_as_utc(record.updated_at),
    )

class CartStore:
    """
    Cart repository over an async SQLAlchemy session.

    Methods flush but never commit; the caller commits once per operation.
    Database errors propagate unchanged.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _record_by_user(self, user_id: str) -> Optional[CartRecord]:
        result = await self.db.execute(
            select(CartRecord).where(CartRecord.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def _record_by_session(self, session_id: str) -> Optional[CartRecord]:
        result = await self.db.execute(
            select(CartRecord).where(CartRecord.session_id == session_id)
        )
        return result.scalar_one_or_none()

    async def _record_for(self, identity: CartIdentity) -> Optional[CartRecord]:
        if identity.kind is IdentityKind.USER:
            return await self._record_by_user(identity.value)
        return await self._record_by_session(identity.value)

    async def find_by_user(self, user_id: str) -> Optional[Cart]:
        record = await self._record_by_user(user_id)
        return _to_cart(record) if record else None

    async def find_by_session(self, session_id: str) -> Optional[Cart]:
        record = await self._record_by_session(session_id)
        return _to_cart(record) if record else None

    async def find(self, identity: CartIdentity) -> Optional[Cart]:
        record = await self._record_for(identity)
        return _to_cart(record) if record else None

    async def save(self, cart: Cart) -> Cart:
        """
        Create the cart when it has no id yet, otherwise replace the stored
        record by id. Last write wins; no field-level merging happens here.
        """
        identity = cart.identity
        if identity is None:
            raise ValueError("Cannot save a cart without a user or session identity")

        items = [item.model_dump() for item in cart.items]

        if cart.id is None:
            now = _next_timestamp(cart.updated_at)
            record = CartRecord(
                id=str(uuid.uuid4()),
                user_id=cart.user_id,
                session_id=cart.session_id,
                items=items,
                created_at=now,
                updated_at=now,
            )
            self.db.add(record)
            try:
                await self.db.flush()
            except IntegrityError:
                # Another request created this identity's cart first; replace it
                await self.db.rollback()
                record = await self._record_for(identity)
                if record is None:
                    raise
                logger.info(f"Cart for {identity} created concurrently, replacing {record.id}")
                now = _next_timestamp(cart.updated_at, record.updated_at)
                self._replace(record, cart, items, now)
                await self.db.flush()
        else:
            record = await self.db.get(CartRecord, cart.id)
            if record is None:
                # Deleted underneath us; the write still wins
                now = _next_timestamp(cart.updated_at)
                record = CartRecord(
                    id=cart.id,
                    created_at=cart.created_at or now,
                )
                self.db.add(record)
            else:
                now = _next_timestamp(cart.updated_at, record.updated_at)
            self._replace(record, cart, items, now)
            await self.db.flush()

        cart.id = record.id
        cart.created_at = _as_utc(record.created_at)
        cart.updated_at = now
        return cart

    @staticmethod
    def _replace(record: CartRecord, cart: Cart, items: list, now: datetime) -> None:
        record.user_id = cart.user_id
        record.session_id = cart.session_id
        record.items = items
        record.updated_at = now

    async def delete_by_session(self, session_id: str) -> bool:
        """Delete a session cart; deleting a missing one is not an error"""
        result = await self.db.execute(
            delete(CartRecord).where(CartRecord.session_id == session_id)
        )
        return bool(result.rowcount)

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()
