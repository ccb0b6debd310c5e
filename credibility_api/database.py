"""
Database models and session management for Credibility API.

Uses SQLAlchemy with SQLite for the standalone service.
Can be configured for PostgreSQL in production.
"""

from datetime import datetime, UTC

from sqlalchemy import DateTime, String, Text, create_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker

from credibility_api.config import get_settings


# =============================================================================
# Database Setup
# =============================================================================


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


def get_engine():
    """Create database engine."""
    settings = get_settings()
    database_url = settings.database_url_resolved
    return create_engine(
        database_url,
        connect_args={"check_same_thread": False} if database_url.startswith("sqlite") else {},
        echo=settings.debug,
        pool_pre_ping=True,
    )


engine = get_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Dependency to get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Initialize database tables."""
    Base.metadata.create_all(bind=bind or engine)


# =============================================================================
# Database Models
# =============================================================================


class Credibility(Base):
    """
    Voters for a single target user.

    One row per target. Voter lists are stored as semicolon-joined IDs,
    with an empty string meaning nobody has voted that way.
    """

    __tablename__ = "credibility"

    torn_id: Mapped[str] = mapped_column(String(32), primary_key=True)

    positive: Mapped[str] = mapped_column(Text, default="", nullable=False)
    negative: Mapped[str] = mapped_column(Text, default="", nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(UTC), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC)
    )
