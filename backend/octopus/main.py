"""truapi - FastAPI application entry point (uvicorn octopus.main:app).

Invariants:
    - Routes registered explicitly (no auto-discovery); the SPA fallback goes last
    - Global error handlers map OctopusError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database, chain client, push gateway, object storage and the notification
      dispatcher are created on startup and closed on shutdown (lifespan)

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Comment notifications are sent from this process by its own dispatcher task, so a
      comment does not wait on pushd
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from octopus.api.dependencies import secure_cookie_for
from octopus.api.error_handlers import register_error_handlers
from octopus.api.middleware import anonymous_session_middleware
from octopus.api.routes import (
    auth,
    claim_of_the_day,
    comments,
    device_tokens,
    flag_story,
    health,
    invites,
    mentions,
    metrics,
    notifications,
    reactions,
    spotlight,
    uploads,
    users,
    web_app,
)
from octopus.config import get_settings
from octopus.graphql.schema import create_graphql_router
from octopus.infrastructure.chain_client import ChainClient
from octopus.infrastructure.database import init_db
from octopus.infrastructure.observability import setup_logging
from octopus.infrastructure.push_gateway import PushGateway
from octopus.infrastructure.storage import ObjectStorage
from octopus.services.notification_dispatcher import NotificationDispatcher

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    # fails startup when cookie keys are missing
    secure_cookie_for(settings)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    app.state.chain = ChainClient(
        settings.chain_endpoint_url,
        settings.chain_rpc_url,
        timeout=settings.chain_timeout_seconds,
    )
    gateway = PushGateway(settings.push_endpoint_url, timeout=settings.push_timeout_seconds)
    app.state.storage = ObjectStorage(
        settings.aws_s3_bucket,
        settings.aws_region,
        expiry_seconds=settings.aws_presign_expiry_seconds,
    )
    app.state.dispatcher = NotificationDispatcher(
        manager.session, gateway, message_limit=settings.push_message_limit,
    )
    app.state.dispatcher.start()
    logger.info("truapi started")
    yield
    logger.info("truapi shutting down")
    await app.state.dispatcher.stop()
    await gateway.aclose()
    await app.state.chain.aclose()
    await manager.dispose()


app = FastAPI(title="TruStory API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.middleware("http")(anonymous_session_middleware)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(auth.logout_router)
app.include_router(users.router)
app.include_router(invites.router)
app.include_router(flag_story.router)
app.include_router(comments.router)
app.include_router(reactions.router)
app.include_router(notifications.router)
app.include_router(device_tokens.router)
app.include_router(uploads.router)
app.include_router(mentions.router)
app.include_router(metrics.router)
app.include_router(claim_of_the_day.router)
app.include_router(spotlight.router)
app.include_router(create_graphql_router(), prefix="/api/v1/graphql")
app.include_router(web_app.router)

register_error_handlers(app)
