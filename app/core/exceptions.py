"""
Custom exception classes and error handlers
Provides consistent error responses across the application
"""

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)

class CartAPIException(HTTPException):
    """Base exception class for the cart service"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code

class BadRequestException(CartAPIException):
    """400 Bad Request"""

    def __init__(self, detail: str, error_code: str = "BAD_REQUEST"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=error_code
        )

class UnauthorizedException(CartAPIException):
    """401 Unauthorized"""

    def __init__(self, detail: str = "Unauthorized", error_code: str = "UNAUTHORIZED"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code=error_code,
            headers={"WWW-Authenticate": "Bearer"}
        )

class ServiceUnavailableException(CartAPIException):
    """503 Service Unavailable"""

    def __init__(
        self,
        detail: str = "Service temporarily unavailable",
        error_code: str = "SERVICE_UNAVAILABLE"
    ):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail,
            error_code=error_code
        )

# Cart exceptions
class IdentityRequiredException(BadRequestException):
    """Neither a user nor a session identity was supplied"""

    def __init__(self, detail: str = "A signed-in user or a session id is required"):
        super().__init__(detail=detail, error_code="IDENTITY_REQUIRED")

class InvalidReferenceException(BadRequestException):
    """Malformed product or line reference"""

    def __init__(self, detail: str = "Invalid product reference"):
        super().__init__(detail=detail, error_code="INVALID_REFERENCE")

class InvalidSessionException(BadRequestException):
    """Session header present but unusable"""

    def __init__(self, detail: str = "Invalid session id"):
        super().__init__(detail=detail, error_code="INVALID_SESSION")

class StoreUnavailableException(ServiceUnavailableException):
    """The durable cart store failed"""

    def __init__(self, detail: str = "Cart storage is temporarily unavailable"):
        super().__init__(detail=detail, error_code="STORE_UNAVAILABLE")

class CacheDegraded(Exception):
    """
    A cache read or write failed.
    Never rendered to clients; cache users log it and carry on without the cache.
    """

def _error_body(request: Request, code: Optional[str], message: str) -> Dict[str, Any]:
    return {
        "error": {
            "code": code,
            "message": message,
            "request_id": getattr(request.state, "request_id", None)
        }
    }

async def cart_exception_handler(request: Request, exc: CartAPIException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, exc.error_code, exc.detail),
        headers=exc.headers
    )

async def store_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception(f"Cart store failure on {request.method} {request.url.path}: {exc}")
    return await cart_exception_handler(request, StoreUnavailableException())

def register_exception_handlers(app):
    """Attach the error envelope handlers to the application"""
    app.add_exception_handler(CartAPIException, cart_exception_handler)
    app.add_exception_handler(SQLAlchemyError, store_exception_handler)
