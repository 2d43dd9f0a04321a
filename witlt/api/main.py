"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures exception handlers, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from witlt.adapters.mail.console import ConsoleEmailSender
from witlt.adapters.mail.resend_sender import ResendEmailSender
from witlt.adapters.oauth.twitter import TwitterOAuthProvider
from witlt.adapters.repository.postgres import PostgresUserRepository, run_migrations
from witlt.adapters.session.jwt_issuer import JwtSessionIssuer
from witlt.adapters.store import InMemoryRegistrationStore, RedisRegistrationStore
from witlt.api.auth import router as auth_router
from witlt.api.errors import install_error_handlers
from witlt.api.rate_limit import limiter
from witlt.config.settings import Settings, get_settings
from witlt.domain.ports import EmailSender, RegistrationStore

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "auth",
        "description": "Registration with email verification codes, login and social login",
    },
]


def build_store(settings: Settings) -> RegistrationStore:
    if settings.store_backend == "memory":
        logger.warning("Using in-memory registration store; state is per-process")
        return InMemoryRegistrationStore()
    return RedisRegistrationStore.from_url(settings.redis_url)


def build_email_sender(settings: Settings) -> EmailSender:
    if settings.email_backend == "resend":
        return ResendEmailSender(
            api_key=settings.resend_api_key,
            sender=settings.mail_from,
            app_url=settings.app_url,
            code_ttl_minutes=settings.verification_ttl_seconds // 60,
        )
    return ConsoleEmailSender()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates database connection pool on startup
    - Runs migrations on startup
    - Wires store, mail, token and OAuth adapters into app.state
    - Closes connection pool and OAuth HTTP clients on shutdown
    """
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    logger.info("Starting application...")
    logger.info("Connecting to database...")

    # Create connection pool with explicit sizing
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )

    logger.info("Running database migrations...")
    run_migrations(pool)

    # Store adapters in app state for dependency injection
    app.state.pool = pool
    app.state.user_repository = PostgresUserRepository(pool)
    app.state.store = build_store(settings)
    app.state.email_sender = build_email_sender(settings)
    app.state.session_issuer = JwtSessionIssuer(
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        ttl_minutes=settings.jwt_ttl_minutes,
    )
    app.state.social_providers = {
        "twitter": TwitterOAuthProvider(
            client_id=settings.twitter_client_id,
            client_secret=settings.twitter_client_secret,
            redirect_uri=settings.twitter_redirect_uri,
        ),
    }

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    pool.close()
    logger.info("Database connection pool closed")
    for provider in app.state.social_providers.values():
        provider.close()


app = FastAPI(
    title="witlt",
    description="When Is The Last Time - Authentication API",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

app.state.limiter = limiter
install_error_handlers(app)
app.include_router(auth_router)


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database and store validation.

    Returns 200 OK if application, database and store are healthy.
    Raises exception if either backend is unreachable.
    """
    request.app.state.user_repository.ping()
    request.app.state.store.ping()

    return {"status": "healthy"}


def run() -> None:
    """Serve the application with uvicorn."""
    settings = get_settings()
    uvicorn.run("witlt.api.main:app", host=settings.host, port=settings.port)
