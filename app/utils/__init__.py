"""Utilities package"""

from .validators import validate_product_id, validate_session_token, normalize_variant

__all__ = [
    "validate_product_id",
    "validate_session_token",
    "normalize_variant",
]
