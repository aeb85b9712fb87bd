from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from pathlib import Path
from sqlalchemy.exc import SQLAlchemyError
from app.core.config import settings
from app.core.database import create_db_engine, create_session_factory
from app.core.exceptions import database_error_handler
from app.core.logging_config import (
    setup_logging,
    CorrelationIdMiddleware,
    log_security_event,
)
from app.api.endpoints import (
    announcements,
    auth,
    authors,
    blogs,
    events,
    highlights,
    logos,
    tags,
    upload,
)
from app.services.schema import ensure_schema, ensure_seed_admin
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
import logging

# Configure structured JSON logging
security_logger = setup_logging(logging.DEBUG if settings.DEBUG else logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    logger.info("Starting Fableration API...")

    engine = create_db_engine(settings.DATABASE_URL)
    app.state.engine = engine
    app.state.SessionLocal = create_session_factory(engine)

    ensure_schema(engine)
    with app.state.SessionLocal() as db:
        ensure_seed_admin(db)

    yield

    # Shutdown
    logger.info("Shutting down Fableration API...")
    engine.dispose()


def include_routers(app: FastAPI) -> None:
    """Mount every content router under the API prefix."""
    prefix = settings.API_PREFIX
    app.include_router(auth.router, prefix=f"{prefix}/auth", tags=["auth"])
    app.include_router(blogs.router, prefix=f"{prefix}/blogs", tags=["blogs"])
    app.include_router(authors.router, prefix=f"{prefix}/authors", tags=["authors"])
    app.include_router(logos.router, prefix=f"{prefix}/logos", tags=["logos"])
    app.include_router(tags.router, prefix=f"{prefix}/tags", tags=["tags"])
    app.include_router(
        announcements.router, prefix=f"{prefix}/announcements", tags=["announcements"]
    )
    app.include_router(events.router, prefix=f"{prefix}/events", tags=["events"])
    app.include_router(
        highlights.router, prefix=f"{prefix}/highlights", tags=["highlights"]
    )
    app.include_router(upload.router, prefix=f"{prefix}/upload", tags=["upload"])


app = FastAPI(
    title="Fableration API",
    description="Content API for blogs, events, announcements and highlights",
    version="1.0.0",
    lifespan=lifespan,
)

# Add correlation ID middleware (first, so all logs have correlation IDs)
app.add_middleware(CorrelationIdMiddleware)

# Login rate limiting
app.state.limiter = auth.limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Storage failures outside the services' own handling
app.add_exception_handler(SQLAlchemyError, database_error_handler)

log_security_event(
    event_type="app.startup",
    message="Fableration API starting",
    event_category="system",
    debug=settings.DEBUG,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

include_routers(app)

# Serve uploaded images
media_path = Path(settings.MEDIA_ROOT)
media_path.mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=str(media_path)), name="uploads")


@app.get("/")
def root():
    return {
        "name": "Fableration API",
        "version": "1.0.0",
        "description": "Content API for the Fableration site and dashboard",
    }


@app.get("/health")
def health_check():
    return {"status": "healthy"}
