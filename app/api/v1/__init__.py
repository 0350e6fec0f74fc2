"""API v1 routes aggregation"""

from fastapi import APIRouter

from .cart.router import router as cart_router

# Create v1 router
api_router = APIRouter()

api_router.include_router(cart_router, prefix="/cart", tags=["Cart"])

# Export router
router = api_router
