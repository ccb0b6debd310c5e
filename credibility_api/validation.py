"""
Header validation and vote payload decoding.

The ``vote`` header carries base64 of ``"<voter_id>;<direction>"``.
"""

import base64
import binascii
import re
from typing import Tuple

from credibility_api.engine import VoteRequest
from credibility_api.errors import (
    InvalidIdentifierError, InvalidPayloadError, SelfVoteError
)
from credibility_api.models import VoteDirection


# User IDs are non-negative and fit in a signed 64-bit integer
_ID_PATTERN = re.compile(r"[0-9]{1,19}")
MAX_ID = 2 ** 63 - 1

PAYLOAD_SEPARATOR = ";"


def is_valid_id(value: str) -> bool:
    """True if ``value`` is a decimal number between 0 and ``MAX_ID``."""
    return (
        bool(value)
        and _ID_PATTERN.fullmatch(value) is not None
        and int(value) <= MAX_ID
    )


def require_id(value: str, field: str) -> str:
    """Return ``value`` unchanged, or raise if it is not a decimal ID."""
    if not is_valid_id(value):
        raise InvalidIdentifierError(f"{field} field must be a number")
    return value


def decode_vote(encoded: str) -> Tuple[str, VoteDirection]:
    """
    Decode the ``vote`` header into (voter_id, direction).

    Raises:
        InvalidPayloadError: If the header is not valid base64/UTF-8, does not
            have exactly two ``;``-separated fields, the voter ID is not a
            number, or the direction is unknown
    """
    try:
        raw = base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, ValueError) as e:
        raise InvalidPayloadError(f"invalid base64 encoding: {e}") from e

    fields = raw.split(PAYLOAD_SEPARATOR)
    if len(fields) != 2:
        raise InvalidPayloadError("invalid vote header")

    voter_id, direction = fields
    if not is_valid_id(voter_id):
        raise InvalidPayloadError("user_id encoded field must be a number")

    try:
        return voter_id, VoteDirection(direction)
    except ValueError:
        raise InvalidPayloadError("invalid vote type") from None


def build_vote_request(target_id: str, encoded_vote: str) -> VoteRequest:
    """
    Validate POST headers and build the request handed to the engine.

    Raises:
        InvalidIdentifierError: target_id is not a number
        InvalidPayloadError: the vote header cannot be decoded
        SelfVoteError: the voter and target are the same user
    """
    require_id(target_id, "target_id")
    voter_id, direction = decode_vote(encoded_vote)

    if voter_id == target_id:
        raise SelfVoteError("users cannot vote for themselves")

    return VoteRequest(voter_id=voter_id, target_id=target_id, direction=direction)
