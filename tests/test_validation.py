"""
Tests for identifier checks and vote header decoding.
"""

from __future__ import annotations

import base64

import pytest

from credibility_api.errors import (
    InvalidIdentifierError, InvalidPayloadError, SelfVoteError, VoteValidationError
)
from credibility_api.models import VoteDirection
from credibility_api.validation import (
    MAX_ID, build_vote_request, decode_vote, is_valid_id, require_id
)


def b64(raw: str) -> str:
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


def test_is_valid_id():
    assert is_valid_id("7")
    assert is_valid_id("2183734")
    assert not is_valid_id("")
    assert not is_valid_id("abc")
    assert not is_valid_id("12a")
    assert not is_valid_id("1.5")
    assert not is_valid_id(" 12")


def test_require_id_names_the_field():
    assert require_id("42", "target_id") == "42"
    with pytest.raises(InvalidIdentifierError, match="target_id field must be a number"):
        require_id("x", "target_id")


def test_decode_valid_payload():
    """base64("7;positive") decodes to voter 7 voting positive."""
    assert decode_vote(b64("7;positive")) == ("7", VoteDirection.POSITIVE)
    assert decode_vote(b64("12;negative")) == ("12", VoteDirection.NEGATIVE)


def test_decode_without_separator_fails():
    with pytest.raises(InvalidPayloadError, match="invalid vote header"):
        decode_vote(b64("abc"))


def test_decode_too_many_fields_fails():
    with pytest.raises(InvalidPayloadError, match="invalid vote header"):
        decode_vote(b64("7;positive;extra"))


def test_decode_non_numeric_voter_fails():
    with pytest.raises(InvalidPayloadError, match="must be a number"):
        decode_vote(b64("bob;positive"))


def test_decode_unknown_direction_fails():
    with pytest.raises(InvalidPayloadError, match="invalid vote type"):
        decode_vote(b64("7;Positive"))
    with pytest.raises(InvalidPayloadError, match="invalid vote type"):
        decode_vote(b64("7;neutral"))


def test_decode_invalid_base64_fails():
    with pytest.raises(InvalidPayloadError):
        decode_vote("not base64!")
    with pytest.raises(InvalidPayloadError):
        decode_vote("abc")


def test_decode_non_utf8_fails():
    encoded = base64.b64encode(b"\xff\xfe;positive").decode("ascii")
    with pytest.raises(InvalidPayloadError):
        decode_vote(encoded)


def test_ids_limited_to_64_bit_range():
    """IDs must fit a signed 64-bit integer; longer digit strings are rejected."""
    assert is_valid_id(str(MAX_ID))
    assert is_valid_id("0")
    assert not is_valid_id(str(MAX_ID + 1))
    assert not is_valid_id("9" * 20)
    assert not is_valid_id("9" * 40)


def test_oversized_ids_rejected_in_requests():
    with pytest.raises(InvalidIdentifierError):
        build_vote_request("9" * 40, b64("5;positive"))
    with pytest.raises(InvalidPayloadError, match="must be a number"):
        decode_vote(b64("9" * 40 + ";positive"))


def test_build_vote_request():
    request = build_vote_request("9", b64("5;negative"))
    assert request.voter_id == "5"
    assert request.target_id == "9"
    assert request.direction is VoteDirection.NEGATIVE


def test_build_vote_request_rejects_self_vote():
    with pytest.raises(SelfVoteError):
        build_vote_request("5", b64("5;positive"))


def test_build_vote_request_rejects_bad_target():
    with pytest.raises(InvalidIdentifierError):
        build_vote_request("nine", b64("5;positive"))


def test_validation_errors_share_a_base_class():
    for exc in (InvalidIdentifierError, InvalidPayloadError, SelfVoteError):
        assert issubclass(exc, VoteValidationError)
