"""Cart router with guest session and signed-in user support"""

from fastapi import APIRouter, Depends, Query

from app.api.v1.auth.dependencies import get_resolved_identity, require_user
from app.core.config import settings
from app.core.security import SecurityUtils
from app.schemas.cart import CartItem, CartResponse
from app.services.cart_service import CartService
from app.services.identity import ResolvedIdentity
from app.utils.dependencies import get_cart_service
from .schemas import CartItemCreate, CartMergeResponse, SessionResponse

router = APIRouter()

@router.get("/", response_model=CartResponse)
async def get_cart(
    resolved: ResolvedIdentity = Depends(get_resolved_identity),
    service: CartService = Depends(get_cart_service),
):
    """Get cart (supports both authenticated and session-based)"""
    if resolved.identity is None:
        # Nobody to look up yet: show an empty cart
        return CartResponse()

    return await service.get_cart_enriched(resolved.identity)

@router.post("/", response_model=CartResponse)
async def add_to_cart(
    item_data: CartItemCreate,
    resolved: ResolvedIdentity = Depends(get_resolved_identity),
    service: CartService = Depends(get_cart_service),
):
    """Add item to cart"""
    await service.add_item(
        resolved.identity,
        CartItem(
            product_id=item_data.product_id,
            quantity=item_data.quantity,
            selected_size=item_data.selected_size,
            selected_color=item_data.selected_color,
        ),
    )
    return await service.get_cart_enriched(resolved.identity)

@router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_from_cart(
    product_id: str,
    selected_size: str = Query(""),
    selected_color: str = Query(""),
    resolved: ResolvedIdentity = Depends(get_resolved_identity),
    service: CartService = Depends(get_cart_service),
):
    """Remove a line (product, size and color) from the cart"""
    await service.remove_item(resolved.identity, product_id, selected_size, selected_color)
    return await service.get_cart_enriched(resolved.identity)

@router.post("/merge", response_model=CartMergeResponse)
async def merge_carts(
    resolved: ResolvedIdentity = Depends(require_user),
    service: CartService = Depends(get_cart_service),
):
    """Merge session cart with user cart after login"""
    result = await service.merge_carts(resolved.identity, resolved.session_id)

    if not result.merged_lines:
        message = "No session cart to merge"
    else:
        message = f"Merged {result.merged_lines} items into your cart"

    return CartMergeResponse(
        message=message,
        items_merged=result.merged_lines,
        quantity_merged=result.merged_quantity,
    )

@router.post("/session", response_model=SessionResponse)
async def create_session():
    """Issue a guest session token for the client to send back on cart requests"""
    return SessionResponse(
        session_id=SecurityUtils.generate_session_id(),
        header=settings.SESSION_HEADER,
    )
