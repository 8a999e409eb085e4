# 📄 File: sprout/main.py
#
# 🧭 Purpose (Layman Explanation):
# The main control center that starts the Sprout marketplace, connects all its parts
# together and makes sure everything is ready before shoppers and sellers arrive.
#
# 🧪 Purpose (Technical Summary):
# FastAPI application factory: lifespan (database init/close), middleware stack, slowapi
# rate limiting, domain exception handler, repository bindings and router registration.
#
# 🔗 Dependencies:
# - FastAPI, slowapi, uvicorn
# - sprout.shared.config.settings
# - sprout.shared.infrastructure.database
# - All module routers and repository implementations
#
# 🔄 Connected Modules / Calls From:
# - uvicorn server startup
# - tests (create_application)

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from sprout.api.middleware.error_handling import ErrorHandlingMiddleware
from sprout.api.middleware.logging import RequestLoggingMiddleware
from sprout.api.v1.router import api_v1_router
from sprout.modules.commerce.domain.repositories.cart_repository import CartRepository
from sprout.modules.commerce.domain.repositories.order_repository import OrderRepository
from sprout.modules.commerce.infrastructure.database.cart_repository_impl import CartRepositoryImpl
from sprout.modules.commerce.infrastructure.database.order_repository_impl import OrderRepositoryImpl
from sprout.modules.community.domain.repositories.forum_repository import ForumRepository
from sprout.modules.community.domain.repositories.post_repository import PostRepository
from sprout.modules.community.infrastructure.database.forum_repository_impl import ForumRepositoryImpl
from sprout.modules.community.infrastructure.database.post_repository_impl import PostRepositoryImpl
from sprout.modules.messaging.domain.repositories.chat_repository import ChatRepository
from sprout.modules.messaging.infrastructure.database.chat_repository_impl import ChatRepositoryImpl
from sprout.modules.notifications.domain.repositories.notification_repository import NotificationRepository
from sprout.modules.notifications.infrastructure.database.notification_repository_impl import (
    NotificationRepositoryImpl,
)
from sprout.modules.plant_listings.domain.repositories.plant_listing_repository import PlantListingRepository
from sprout.modules.plant_listings.infrastructure.database.plant_listing_repository_impl import (
    PlantListingRepositoryImpl,
)
from sprout.modules.rewards.domain.repositories.reward_repository import RewardTransactionRepository
from sprout.modules.rewards.infrastructure.database.reward_repository_impl import (
    RewardTransactionRepositoryImpl,
)
from sprout.modules.user_management.domain.repositories.user_repository import UserRepository
from sprout.modules.user_management.infrastructure.database.user_repository_impl import UserRepositoryImpl
from sprout.shared.config.settings import get_settings
from sprout.shared.core.exceptions import RateLimitError, SproutException, is_client_error, is_server_error
from sprout.shared.core.rate_limiter import limiter
from sprout.shared.infrastructure.database.connection import close_database, init_database
from sprout.shared.infrastructure.database.session import initialize_sessions
from sprout.shared.utils.logging import get_logger, setup_logging

settings = get_settings()

setup_logging()
logger = get_logger(__name__)

# Repository ABC -> SQLAlchemy implementation, injected wherever a service asks for the ABC
REPOSITORY_BINDINGS = {
    UserRepository: UserRepositoryImpl,
    PlantListingRepository: PlantListingRepositoryImpl,
    RewardTransactionRepository: RewardTransactionRepositoryImpl,
    NotificationRepository: NotificationRepositoryImpl,
    CartRepository: CartRepositoryImpl,
    OrderRepository: OrderRepositoryImpl,
    ChatRepository: ChatRepositoryImpl,
    ForumRepository: ForumRepositoryImpl,
    PostRepository: PostRepositoryImpl,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the database pool on startup and dispose of it on shutdown."""
    logger.info("🌱 Sprout API starting up...")

    await init_database()
    initialize_sessions()
    logger.info("✅ Database connection and session manager initialized")
    logger.info("✅ Sprout API startup complete")

    try:
        yield
    finally:
        logger.info("🔄 Sprout API shutting down...")
        await close_database()
        logger.info("✅ Sprout API shutdown complete")


def create_application() -> FastAPI:
    """
    Application factory function.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan,
        debug=settings.DEBUG,
    )

    # =========================================================================
    # MIDDLEWARE CONFIGURATION
    # =========================================================================

    # Starlette runs the last-added middleware first
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Response-Time"],
    )
    if not settings.is_testing:
        app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(ErrorHandlingMiddleware)

    app.state.limiter = limiter

    for abstract, implementation in REPOSITORY_BINDINGS.items():
        app.dependency_overrides[abstract] = implementation

    # =========================================================================
    # EXCEPTION HANDLERS
    # =========================================================================

    @app.exception_handler(SproutException)
    async def sprout_exception_handler(request: Request, exc: SproutException) -> JSONResponse:
        """Render domain exceptions with their own status code."""
        if is_server_error(exc):
            logger.error(
                f"{exc.error_code}: {exc.message}",
                path=request.url.path,
                details=exc.details,
            )
        elif is_client_error(exc):
            logger.info(f"{exc.error_code}: {exc.message}", path=request.url.path)
        body = exc.to_dict()
        del body["error"]["status_code"]
        body["error"]["timestamp"] = datetime.now(timezone.utc).isoformat()
        body["error"]["request_id"] = getattr(request.state, "request_id", None)
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
        """slowapi rejections in the standard envelope, keeping its rate limit headers."""
        response = await sprout_exception_handler(
            request, RateLimitError(f"Rate limit exceeded: {exc.detail}", limit=str(exc.detail))
        )
        return request.app.state.limiter._inject_headers(response, request.state.view_rate_limit)

    # =========================================================================
    # ROUTER REGISTRATION
    # =========================================================================

    app.include_router(api_v1_router, prefix="/api/v1")

    @app.get("/", include_in_schema=False)
    async def root() -> dict:
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "description": settings.APP_DESCRIPTION,
            "docs_url": "/docs" if settings.DEBUG else None,
            "health_check": "/api/v1/health",
            "api_base": "/api/v1",
        }

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon():
        return Response(status_code=204)

    return app


app = create_application()


def main():
    """Run the development server (python -m sprout.main)."""
    uvicorn.run(
        "sprout.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD and settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower(),
        workers=1 if settings.RELOAD else settings.WORKERS,
    )


if __name__ == "__main__":
    main()
