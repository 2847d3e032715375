"""
Taskboard API — application entry point.

This is the **only** file that assembles the app.  All business logic
lives in the `api/`, `services/`, `models/`, and `core/` packages.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.api.v1.api import api_router
from app.core.config import Settings, settings
from app.core.exceptions import register_exception_handlers
from app.core.middleware import RequestLoggingMiddleware
from app.core.rate_limit import limiter
from app.core.result import Err
from app.core.security import PasswordHasher, TokenService
from app.db.session import build_engine, build_session_factory, create_tables
from app.services.users import CredentialStore

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


async def seed_admin(
    app_settings: Settings,
    hasher: PasswordHasher,
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    """Create the default admin account if it does not exist yet."""
    async with session_factory() as session:
        store = CredentialStore(session, hasher)
        if await store.get_by_email(app_settings.FIRST_ADMIN_EMAIL) is not None:
            return
        result = await store.register(
            app_settings.FIRST_ADMIN_NAME,
            app_settings.FIRST_ADMIN_EMAIL,
            app_settings.FIRST_ADMIN_PASSWORD,
            role="admin",
        )
        if isinstance(result, Err):
            logger.warning("Default admin not created: %s", result.message)
        else:
            logger.info(
                "Default admin created: %s (password: <redacted>)",
                app_settings.FIRST_ADMIN_EMAIL,
            )


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    app_settings: Settings = application.state.settings
    engine = application.state.engine
    await create_tables(engine)
    logger.info("Database tables initialised")

    await seed_admin(
        app_settings, application.state.password_hasher, application.state.session_factory
    )

    logger.info("🚀 %s v%s started", app_settings.PROJECT_NAME, app_settings.VERSION)
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app(app_settings: Settings | None = None) -> FastAPI:
    app_settings = app_settings or settings
    application = FastAPI(
        title=app_settings.PROJECT_NAME,
        description="Tasks and blog posts with JWT authentication",
        version=app_settings.VERSION,
        openapi_url=f"{app_settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Process-wide services, built once and read by dependencies
    application.state.settings = app_settings
    application.state.token_service = TokenService.from_settings(app_settings)
    application.state.password_hasher = PasswordHasher(rounds=app_settings.BCRYPT_ROUNDS)
    application.state.engine = build_engine(app_settings.DATABASE_URL)
    application.state.session_factory = build_session_factory(application.state.engine)
    # Route limits are declared at import; the on/off switch follows this app
    limiter.enabled = app_settings.RATE_LIMIT_ENABLED
    application.state.limiter = limiter

    # CORS
    application.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_middleware(SlowAPIMiddleware)
    application.add_middleware(RequestLoggingMiddleware)

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)

    # Mount API v1
    application.include_router(api_router, prefix=app_settings.API_V1_PREFIX)

    @application.get("/health", tags=["meta"])
    async def health() -> dict:
        return {
            "success": True,
            "message": "Server is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @application.get("/", tags=["meta"])
    async def root() -> dict:
        prefix = app_settings.API_V1_PREFIX
        return {
            "success": True,
            "message": f"Welcome to {app_settings.PROJECT_NAME}",
            "version": app_settings.VERSION,
            "endpoints": {
                "health": "/health",
                "auth": f"{prefix}/auth",
                "tasks": f"{prefix}/tasks",
                "posts": f"{prefix}/posts",
            },
        }

    return application


app = create_app()
