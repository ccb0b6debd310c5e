"""
API routes for reading and casting credibility votes.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session

from credibility_api.credibility_service import CredibilityService
from credibility_api.database import get_db
from credibility_api.errors import (
    InvalidIdentifierError, InvalidPayloadError, SelfVoteError
)
from credibility_api.models import (
    CredibilityResponse, VoteOutcome, VoteResultResponse, VotedLabel
)
from credibility_api.validation import build_vote_request, is_valid_id


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/credibility", tags=["Credibility"])

MISSING_HEADERS = "missing required request headers"
ALREADY_VOTED_MESSAGE = "Nothing to update, user already voted"
RECORDED_MESSAGE = "vote recorded"


# =============================================================================
# Get Credibility
# =============================================================================


@router.get("", response_model=CredibilityResponse, response_model_exclude_none=True)
def get_credibility(
    target_id: Optional[str] = Header(default=None, convert_underscores=False),
    user_id: Optional[str] = Header(default=None, convert_underscores=False),
    db: Session = Depends(get_db)
) -> CredibilityResponse:
    """
    Get the credibility tally for a target user.

    Returns the number of positive and negative voters. If ``user_id`` has
    voted on the target, ``voted`` reports which way.
    """
    if not target_id or not user_id:
        raise HTTPException(status_code=400, detail=MISSING_HEADERS)
    if not is_valid_id(target_id) or not is_valid_id(user_id):
        raise HTTPException(
            status_code=400,
            detail="target_id and user_id fields must be a number"
        )

    logger.info(f"Fetching credibility of target {target_id} for user {user_id}")

    result = CredibilityService(db).get_credibility(target_id, viewer_id=user_id)

    response = CredibilityResponse(
        positives=result.positives,
        negatives=result.negatives,
        voted=VotedLabel(result.voted.label) if result.voted else None,
    )
    logger.info(f"Responding with {response}")
    return response


# =============================================================================
# Cast Vote
# =============================================================================


@router.post("", response_model=VoteResultResponse)
def rate_user(
    target_id: Optional[str] = Header(default=None, convert_underscores=False),
    vote: Optional[str] = Header(default=None),
    db: Session = Depends(get_db)
) -> VoteResultResponse:
    """
    Cast a credibility vote on a target user.

    The ``vote`` header is base64 of ``"<user_id>;<positive|negative>"``.
    Each user has at most one vote per target: voting the other way switches
    the vote, and repeating the same vote changes nothing.
    """
    if not target_id or not vote:
        raise HTTPException(status_code=400, detail=MISSING_HEADERS)

    try:
        request = build_vote_request(target_id, vote)
    except (InvalidIdentifierError, SelfVoteError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except InvalidPayloadError as e:
        raise HTTPException(
            status_code=400,
            detail=f"error parsing encoded vote field: {e}"
        )

    logger.info(f"Valid vote parsed for target {target_id}")

    outcome = CredibilityService(db).cast_vote(request)

    if outcome is VoteOutcome.ALREADY_VOTED:
        return VoteResultResponse(outcome=outcome, message=ALREADY_VOTED_MESSAGE)

    return VoteResultResponse(outcome=outcome, message=RECORDED_MESSAGE)
