"""
Exception types raised by the credibility core and store.

Validation errors map to HTTP 400, store errors to HTTP 500.
An already-recorded vote is an outcome, not an error.
"""


class CredibilityError(Exception):
    """Base class for all credibility service errors."""


class VoteValidationError(CredibilityError):
    """A request field is missing or malformed."""


class InvalidIdentifierError(VoteValidationError):
    """An identifier is not a decimal number."""


class InvalidPayloadError(VoteValidationError):
    """The encoded vote header could not be decoded."""


class SelfVoteError(VoteValidationError):
    """A user tried to vote on their own credibility."""


class InvalidDirection(CredibilityError, ValueError):
    """Vote direction is neither positive nor negative."""


class StoreError(CredibilityError):
    """Reading or writing the credibility table failed."""
