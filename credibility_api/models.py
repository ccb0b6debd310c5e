"""
Pydantic models and enums for Credibility API requests and responses.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================


class VoteDirection(str, Enum):
    """Direction of a credibility vote."""
    POSITIVE = "positive"
    NEGATIVE = "negative"

    @property
    def label(self) -> str:
        """Display form used in API responses ("Positive"/"Negative")."""
        return self.value.capitalize()

    @property
    def opposite(self) -> "VoteDirection":
        if self is VoteDirection.POSITIVE:
            return VoteDirection.NEGATIVE
        return VoteDirection.POSITIVE


class VoteOutcome(str, Enum):
    """Result of applying a vote to a target's record."""
    RECORDED = "recorded"
    ALREADY_VOTED = "already_voted"


class VotedLabel(str, Enum):
    """Direction labels as reported by GET /credibility."""
    POSITIVE = "Positive"
    NEGATIVE = "Negative"


# =============================================================================
# Response Models
# =============================================================================


class CredibilityResponse(BaseModel):
    """Current tally for a target, plus the viewer's own vote if any."""

    positives: int = Field(..., ge=0, description="Number of positive voters")
    negatives: int = Field(..., ge=0, description="Number of negative voters")
    voted: Optional[VotedLabel] = Field(
        default=None,
        description="Direction of the requesting user's vote (omitted if none)"
    )


class VoteResultResponse(BaseModel):
    """Response from casting a vote."""

    outcome: VoteOutcome
    message: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    version: str
    database_connected: bool
    targets_count: int = 0
    checked_at: datetime
