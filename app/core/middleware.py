"""
HTTP middleware: CORS for browser clients, request ids and access logging
"""

from fastapi import Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
import time
import uuid
import logging
from typing import Callable

from .config import settings

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

class RequestIDMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's request id when it sends one, otherwise mint one"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request.state.request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request.state.request_id
        return response

def _caller(request: Request) -> str:
    # Which credentials arrived, never their values
    if request.headers.get("Authorization"):
        return "bearer"
    if request.headers.get(settings.SESSION_HEADER):
        return "session"
    return "anonymous"

class LoggingMiddleware(BaseHTTPMiddleware):
    """One line per request with status, duration and caller kind"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        request_id = getattr(request.state, "request_id", "-")

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                f"{request.method} {request.url.path} failed after "
                f"{time.perf_counter() - started:.3f}s [{request_id}]"
            )
            raise

        elapsed = time.perf_counter() - started
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} "
            f"{elapsed:.3f}s caller={_caller(request)} [{request_id}]"
        )
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        return response

def setup_middleware(app):
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept", settings.SESSION_HEADER, REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
    )

    # Last added runs first, so the request id exists before logging reads it
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
