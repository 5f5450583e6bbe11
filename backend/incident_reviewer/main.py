"""FastAPI application initialization for the Incident Reviewer."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional
from uuid import UUID

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from incident_reviewer.config import Settings, get_settings
from incident_reviewer.entities import Cause, Review, Trigger
from incident_reviewer.errors import NotFoundError, ReviewerError
from incident_reviewer.routers import causes, reviews, triggers
from incident_reviewer.services import CauseService, ReviewService, TriggerService
from incident_reviewer.storage import MemoryStore
from incident_reviewer.validation import Validator

logger = logging.getLogger(__name__)

# Fixed so the default trigger keeps its identity across restarts
DEFAULT_TRIGGER_ID = UUID("0193dd86-b07e-7e73-a77e-6a195282a01b")
DEFAULT_CAUSE_ID = UUID("0193dd86-b07e-7e73-a77e-3a1d9a47e0c5")

DEFAULT_CAUSES = [
    Cause(
        id=DEFAULT_CAUSE_ID,
        name="Third party outage",
        description=(
            "In case a third party experienced issues/outage and it leads to an incident on our side.\n"
            "Things like third party changing configuration and it leading to issues on our side also qualifies"
        ),
        category="Design",
    ),
]

DEFAULT_TRIGGERS = [
    Trigger(
        id=DEFAULT_TRIGGER_ID,
        name="Traffic increase",
        description="More users than normal",
    ),
]


def configure_logging(settings: Settings) -> None:
    level = logging.DEBUG if settings.debug else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_services(
    settings: Settings,
    session_maker: Optional[async_sessionmaker[AsyncSession]] = None,
) -> tuple[CauseService, TriggerService, ReviewService]:
    """Wire the stores, validator and services for the configured backend.

    The postgres backend needs ``session_maker``, bound to an engine built
    from the same settings (see :func:`incident_reviewer.database.make_engine`).
    """
    validator = Validator()

    if settings.storage_backend == "postgres":
        if session_maker is None:
            raise ValueError("postgres storage needs a session maker")

        from incident_reviewer.storage import sql

        cause_store = sql.cause_store(session_maker)
        trigger_store = sql.trigger_store(session_maker)
        review_store = sql.review_store(session_maker)
    else:
        cause_store = MemoryStore[Cause](Cause.KIND)
        trigger_store = MemoryStore[Trigger](Trigger.KIND)
        review_store = MemoryStore[Review](Review.KIND)

    cause_service = CauseService(cause_store, validator)
    trigger_service = TriggerService(trigger_store, validator)
    review_service = ReviewService(review_store, cause_service, trigger_service, validator)

    logger.info(f"Using {settings.storage_backend} storage")
    return cause_service, trigger_service, review_service


async def seed_defaults(cause_service: CauseService, trigger_service: TriggerService) -> None:
    """Add the default catalog entries that aren't stored yet."""
    for cause in DEFAULT_CAUSES:
        await _seed(cause_service, cause)
    for trigger in DEFAULT_TRIGGERS:
        await _seed(trigger_service, trigger)


async def _seed(service, record) -> None:
    try:
        await service.get(record.id)
        return
    except ReviewerError as e:
        if not e.is_kind(NotFoundError):
            raise

    await service.save(record)
    logger.info(f"Seeded default {service.kind} '{record.name}'")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Debug mode: {settings.debug}")

    if settings.seed_defaults:
        await seed_defaults(app.state.cause_service, app.state.trigger_service)

    yield

    logger.info("Shutting down application...")
    if app.state.engine is not None:
        from incident_reviewer.database import close_engine

        await close_engine(app.state.engine)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    if settings is None:
        settings = get_settings()

    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Track incident reviews and classify them with contributing causes and triggers",
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    engine = None
    session_maker = None
    if settings.storage_backend == "postgres":
        from incident_reviewer.database import make_engine, make_session_maker

        engine = make_engine(settings)
        session_maker = make_session_maker(engine)

    cause_service, trigger_service, review_service = build_services(settings, session_maker)
    app.state.settings = settings
    app.state.engine = engine
    app.state.cause_service = cause_service
    app.state.trigger_service = trigger_service
    app.state.review_service = review_service

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict:
        return {
            "status": "healthy",
            "app_name": settings.app_name,
            "version": settings.app_version,
        }

    @app.get("/api", tags=["Root"])
    async def api_root() -> dict:
        return {
            "message": f"Welcome to {settings.app_name} API",
            "version": settings.app_version,
            "docs": "/api/docs",
        }

    # Register routers
    app.include_router(causes.router)
    app.include_router(triggers.router)
    app.include_router(reviews.router)

    return app


app = create_app()
