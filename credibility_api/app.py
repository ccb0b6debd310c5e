"""
Credibility API Service - FastAPI Application.

REST API for casting and reading per-user credibility votes.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, UTC

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from credibility_api.config import get_settings
from credibility_api.credibility_service import CredibilityStore
from credibility_api.database import get_db, init_db
from credibility_api.errors import StoreError
from credibility_api.models import HealthResponse
from credibility_api.routes import credibility_router


settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info("Starting Credibility API Service...")
    init_db()
    logger.info("Database initialized")

    yield

    # Shutdown
    logger.info("Shutting down Credibility API Service...")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="""
## Credibility API

Users vote on each other's credibility, one vote per voter and target.

### Endpoints

- **GET /credibility**: positive/negative counts for the user in the
  `target_id` header, plus how the `user_id` header user voted
- **POST /credibility**: cast a vote on `target_id`; the `vote` header is
  base64 of `"<user_id>;<positive|negative>"`

Voting the opposite way switches an existing vote. Repeating the same vote
is accepted and changes nothing.
    """,
    version=settings.app_version,
    lifespan=lifespan,
)

# Configure CORS
origins = settings.allowed_origins.split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    """Store failures are logged where they happen; callers get a generic 500."""
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=500, content={"detail": "internal server error"})


# Include routers
app.include_router(credibility_router)


# Root endpoint
@app.get("/")
def root():
    """Root endpoint with API information."""
    return {
        "name": settings.app_name,
        "hostname": settings.hostname,
        "version": settings.app_version,
        "description": "Per-user credibility voting",
        "docs_url": "/docs",
        "openapi_url": "/openapi.json",
        "endpoints": {
            "credibility": "/credibility",
            "health": "/health",
        }
    }


@app.get("/health", response_model=HealthResponse)
def health_check(db: Session = Depends(get_db)):
    """
    Health check endpoint.

    Returns service health status and the number of rated targets.
    """
    targets_count = 0
    try:
        db.execute(text("SELECT 1"))
        targets_count = CredibilityStore(db).count_targets()
        db_connected = True
    except SQLAlchemyError:
        logger.exception("Health check database query failed")
        db_connected = False

    return HealthResponse(
        status="healthy" if db_connected else "degraded",
        version=settings.app_version,
        database_connected=db_connected,
        targets_count=targets_count,
        checked_at=datetime.now(UTC),
    )
