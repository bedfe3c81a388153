"""
Inventory Auth API - Application entrypoint
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from inventory_auth.core.config import settings
from inventory_auth.core.exceptions import InventoryAuthException
from inventory_auth.routes import api_router
from inventory_auth.schemas import ErrorResponse

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


async def inventory_auth_exception_handler(request: Request, exc: InventoryAuthException):
    """Render every service error as an ErrorResponse body."""
    body = ErrorResponse(
        error=exc.detail,
        error_code=exc.error_code,
        details=exc.extra or None
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(),
        headers=exc.headers
    )


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Redirect-To"]
    )

    app.add_exception_handler(InventoryAuthException, inventory_auth_exception_handler)
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok", "version": settings.APP_VERSION, "environment": settings.ENVIRONMENT}

    logger.info(f"{settings.APP_NAME} {settings.APP_VERSION} ready ({settings.ENVIRONMENT})")
    return app


app = create_app()
