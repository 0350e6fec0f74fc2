"""
Cart schemas for request/response validation
"""

from pydantic import BaseModel, Field

class CartItemCreate(BaseModel):
    """Schema for adding item to cart"""
    product_id: str = Field(..., description="Product UUID")
    quantity: int = Field(1, description="Units to add; must be at least 1")
    selected_size: str = Field("", max_length=50)
    selected_color: str = Field("", max_length=50)

class CartMergeResponse(BaseModel):
    """Result of merging a guest cart into the signed-in user's cart"""
    message: str
    items_merged: int
    quantity_merged: int

class SessionResponse(BaseModel):
    """Freshly issued guest session token"""
    session_id: str
    header: str
