"""Main FastAPI application."""

import logging
import re
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import Session

from .api import folders_router, items_router, templates_router, todos_router, workspaces_router
from .core.config import ConfigurationError, Environment, settings
from .core.logging_config import setup_logging
from .database import DATABASE_URL, engine, get_db, init_db
from .exceptions import StudyException
from .middleware.exception_handler import study_exception_handler
from .middleware.request_context import RequestContextMiddleware
from .models import Workspace
from .services.template_catalog import get_template_catalog

API_VERSION = "1.0.0"

# Setup logging first
setup_logging(log_level=settings.log_level, log_format=settings.log_format)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Startup validation: fail fast with an actionable message when the database
# cannot be reached, then make sure every table exists.
# ---------------------------------------------------------------------------

def _mask_url(url: str) -> str:
    """Mask password in database URL for safe logging."""
    return re.sub(r'://([^:]+):([^@]+)@', r'://\1:***@', url)


def _validate_database_connection() -> None:
    """Test that the database is reachable. Exits with clear message on failure."""
    masked = _mask_url(DATABASE_URL)
    logger.info("Connecting to database: %s", masked)

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("Database connection verified")
    except Exception as e:
        if DATABASE_URL.startswith("sqlite"):
            hint = "Check that the directory exists and is writable."
        elif DATABASE_URL.startswith("postgresql"):
            hint = "Verify PostgreSQL is running and DATABASE_URL credentials are correct."
        else:
            hint = "Check DATABASE_URL in .env or environment variables."
        logger.critical(
            "Database connection failed.\n"
            f"  DATABASE_URL: {masked}\n"
            f"  {hint}\n"
            f"  Error: {e}"
        )
        raise SystemExit(1)


_validate_database_connection()
init_db()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle for the Study Room API."""
    logger.info("Environment: %s", settings.environment.value)
    try:
        settings.validate_production_config()
    except ConfigurationError as e:
        logger.critical(f"STARTUP BLOCKED: {e}")
        raise SystemExit(1) from e

    if settings.environment == Environment.DEVELOPMENT:
        if settings.auth_enabled and settings.jwt_secret_key == "dev-insecure-key-change-me":
            logger.critical(
                "SECURITY: AUTH_ENABLED=true but JWT_SECRET_KEY is the default. "
                "Anyone can forge tokens. Generate a secure key: openssl rand -hex 32"
            )
        if not settings.auth_enabled:
            logger.warning(
                "SECURITY: Authentication is disabled (AUTH_ENABLED=false). "
                "Every request acts as owner '%s'.",
                settings.dev_owner_id,
            )

    catalog = get_template_catalog()
    logger.info("Template catalog loaded with %d templates", len(catalog))

    yield  # App runs here


# Create FastAPI app
app = FastAPI(
    title="Study Room API",
    description=(
        "Personal study tracker: workspaces, folders, items and todos, a daily "
        "\"Next 3\" focus list, spaced-repetition reviews and XP / level / streak "
        "progression.\n\n"
        "**Authentication:** When `AUTH_ENABLED=true`, every endpoint under "
        "`/api/study` requires a `Bearer` token whose `sub` claim is the owner id. "
        "When `AUTH_ENABLED=false` (default), all requests act as `DEV_OWNER_ID`."
    ),
    version=API_VERSION,
    lifespan=lifespan,
)

# Middleware stack (outermost first: CORS wraps request context).
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
)
app.add_middleware(RequestContextMiddleware)

# Register exception handlers
app.add_exception_handler(StudyException, study_exception_handler)

db_type = "PostgreSQL" if DATABASE_URL.startswith("postgresql") else "SQLite"
logger.info(
    "Study Room API started | env=%s | db=%s | auth=%s",
    settings.environment.value,
    db_type,
    "enabled" if settings.auth_enabled else "disabled",
)

# Include routers
app.include_router(workspaces_router)
app.include_router(folders_router)
app.include_router(items_router)
app.include_router(todos_router)
app.include_router(templates_router)


@app.get("/")
def root():
    """Root endpoint."""
    return {
        "name": "Study Room API",
        "version": API_VERSION,
        "status": "running"
    }


_startup_time = time.monotonic()


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Health check returning database status, uptime and workspace count.

    Never raises: a database failure reports "degraded" so load balancers
    can still probe without receiving 5xx.
    """
    db_status = "ok"
    workspace_count = 0
    try:
        workspace_count = db.query(Workspace).count()
    except Exception:
        logger.exception("Health check database query failed")
        db_status = "error"

    return {
        "status": "healthy" if db_status == "ok" else "degraded",
        "db": db_status,
        "uptime_seconds": round(time.monotonic() - _startup_time),
        "version": API_VERSION,
        "workspace_count": workspace_count,
    }
