"""Custom validators and sanitizers"""

from typing import Optional
import uuid

MAX_SESSION_TOKEN_LENGTH = 255

def validate_product_id(value) -> str:
    """Validate a product id and return its canonical UUID string"""
    if isinstance(value, uuid.UUID):
        return str(value)
    if not isinstance(value, str) or not value.strip():
        raise ValueError("Product id is required")
    try:
        return str(uuid.UUID(value.strip()))
    except ValueError:
        raise ValueError(f"Invalid product id '{value}'")

def validate_session_token(value: Optional[str]) -> Optional[str]:
    """
    Session tokens are opaque and used exactly as sent. An empty token counts
    as absent; one that does not fit the session_id column is an error.
    """
    if not value:
        return None
    if len(value) > MAX_SESSION_TOKEN_LENGTH:
        raise ValueError(f"Session id must be at most {MAX_SESSION_TOKEN_LENGTH} characters")
    return value

def normalize_variant(value: Optional[str]) -> str:
    """Sizes and colors compare exactly; only surrounding whitespace is dropped"""
    return (value or "").strip()
