"""Main FastAPI application"""

from fastapi import FastAPI
import logging

from app.core.config import settings
from app.core.events import lifespan
from app.core.exceptions import register_exception_handlers
from app.core.middleware import setup_middleware
from app.api.health import router as health_router
from app.api.v1 import api_router

logger = logging.getLogger(__name__)

def create_app() -> FastAPI:
    """Build the application with middleware, error handlers and routes"""
    app = FastAPI(
        title=settings.APP_NAME,
        description="Shopping cart API for guest and signed-in shoppers",
        version=settings.APP_VERSION,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan
    )

    setup_middleware(app)
    register_exception_handlers(app)

    app.include_router(api_router, prefix="/api/v1")
    app.include_router(health_router)

    @app.get("/")
    async def root():
        return {
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "docs": "/api/docs",
            "health": "/health"
        }

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
