"""
Cart service layer
Handles shopping cart business logic for guests and signed-in users
"""

from typing import Optional
import logging

from app.core.exceptions import (
    IdentityRequiredException,
    InvalidReferenceException,
    UnauthorizedException,
)
from app.schemas.cart import Cart, CartItem, CartIdentity, CartResponse, MergeResult
from app.utils.validators import normalize_variant, validate_product_id
from .cart_cache import CartCache
from .cart_store import CartStore
from .product_catalog import ProductEnricher

logger = logging.getLogger(__name__)

def _product_id(value) -> str:
    try:
        return validate_product_id(value)
    except ValueError as e:
        raise InvalidReferenceException(str(e))

class CartService:
    """
    Shopping cart service

    Reads go cache first and fall back to the store. Writes read the current
    cart from the store, save it, then refresh the cache. Store errors
    propagate, cache errors never do.
    """

    def __init__(
        self,
        store: CartStore,
        cache: CartCache,
        enricher: Optional[ProductEnricher] = None
    ):
        self.store = store
        self.cache = cache
        self.enricher = enricher

    async def get_cart(self, identity: Optional[CartIdentity]) -> Cart:
        """
        Get the cart for an identity

        A missing cart comes back empty and is not persisted.

        Raises:
            IdentityRequiredException: If there is no identity
        """
        if identity is None:
            raise IdentityRequiredException()

        cached = await self.cache.get(identity)
        if cached is not None:
            return cached

        cart = await self.store.find(identity)
        if cart is None:
            return Cart.empty(identity)

        await self.cache.set(identity, cart)
        return cart

    async def get_cart_enriched(self, identity: Optional[CartIdentity]) -> CartResponse:
        """Get the cart with current product data on every line that resolves"""
        cart = await self.get_cart(identity)
        if self.enricher is None:
            return CartResponse.from_cart(cart)
        return await self.enricher.enrich(cart)

    async def _load_for_write(self, identity: CartIdentity) -> Cart:
        # Writes start from the store; a stale cache entry must never be saved back
        return await self.store.find(identity) or Cart.empty(identity)

    async def add_item(self, identity: Optional[CartIdentity], item: CartItem) -> Cart:
        """
        Add item to cart

        Adding a line that is already in the cart increases its quantity.

        Args:
            identity: Cart owner
            item: Line to add

        Returns:
            Updated cart

        Raises:
            IdentityRequiredException: If there is no identity
            InvalidReferenceException: If the product id or quantity is invalid
        """
        if identity is None:
            raise IdentityRequiredException()

        if isinstance(item.quantity, bool) or not isinstance(item.quantity, int) or item.quantity < 1:
            raise InvalidReferenceException("Quantity must be a positive integer")

        line = CartItem(
            product_id=_product_id(item.product_id),
            quantity=item.quantity,
            selected_size=normalize_variant(item.selected_size),
            selected_color=normalize_variant(item.selected_color),
        )

        cart = await self._load_for_write(identity)
        cart.add_line(line)
        cart.bind(identity)

        cart = await self.store.save(cart)
        await self.store.commit()
        logger.info(f"Cart {cart.id} ({identity}): added {line.quantity} x {line.product_id}")

        await self.cache.set(identity, cart)
        return cart

    async def remove_item(
        self,
        identity: Optional[CartIdentity],
        product_id: str,
        selected_size: str = "",
        selected_color: str = ""
    ) -> Cart:
        """
        Remove a line from the cart

        Removing a line that is not there is a no-op.
        """
        if identity is None:
            raise IdentityRequiredException()

        key = (
            _product_id(product_id),
            normalize_variant(selected_size),
            normalize_variant(selected_color),
        )

        cart = await self._load_for_write(identity)
        if not cart.is_persisted or not cart.remove_line(key):
            return cart

        cart.bind(identity)
        cart = await self.store.save(cart)
        await self.store.commit()
        logger.info(f"Cart {cart.id} ({identity}): removed line {key}")

        await self.cache.set(identity, cart)
        return cart

    async def merge_carts(
        self,
        identity: Optional[CartIdentity],
        session_id: Optional[str]
    ) -> MergeResult:
        """
        Merge session cart into user cart on login

        Quantities of lines present in both carts are added together. The
        session cart is deleted in the same transaction that saves the user
        cart, so merging the same session twice moves nothing the second time.

        Args:
            identity: Signed-in user
            session_id: Guest session to merge from

        Returns:
            How many lines and units were moved

        Raises:
            UnauthorizedException: If the identity is not a user
        """
        if identity is None or not identity.is_user:
            raise UnauthorizedException("Sign in to merge your guest cart")

        if not session_id:
            return MergeResult()

        session_cart = await self.store.find_by_session(session_id)
        if session_cart is None or not session_cart.items:
            return MergeResult()

        user_cart = await self.store.find_by_user(identity.value) or Cart.empty(identity)
        for item in session_cart.items:
            user_cart.add_line(item)
        user_cart.bind(identity)

        user_cart = await self.store.save(user_cart)
        await self.store.delete_by_session(session_id)
        await self.store.commit()

        result = MergeResult(
            merged_lines=len(session_cart.items),
            merged_quantity=session_cart.total_quantity,
        )
        logger.info(
            f"Merged session cart {session_cart.id} into cart {user_cart.id} "
            f"for user {identity.value}: {result.merged_lines} lines"
        )

        await self.cache.invalidate(identity, CartIdentity.session(session_id))
        return result
