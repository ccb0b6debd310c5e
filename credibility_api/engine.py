"""
Vote-state transition logic for credibility records.

Everything here is pure: functions take a record and a request and return
new values without touching the database. The store layer is responsible
for loading records and persisting whatever ``apply_vote`` returns.
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional, Tuple

from credibility_api.errors import InvalidDirection
from credibility_api.models import VoteDirection, VoteOutcome


@dataclass(frozen=True)
class VoterList:
    """
    Ordered, duplicate-free sequence of voter IDs.

    The semicolon-joined string form only exists at the storage boundary
    (``from_storage``/``to_storage``); core logic works on this type.
    """

    voters: Tuple[str, ...] = ()

    SEPARATOR = ";"

    def __post_init__(self):
        # Keep first occurrence of each voter, preserving order
        object.__setattr__(self, "voters", tuple(dict.fromkeys(self.voters)))

    @classmethod
    def of(cls, voters: Iterable[str]) -> "VoterList":
        return cls(tuple(voters))

    @classmethod
    def from_storage(cls, raw: Optional[str]) -> "VoterList":
        """Parse the stored column value; empty or NULL means no voters."""
        if not raw:
            return cls()
        return cls(tuple(v for v in raw.split(cls.SEPARATOR) if v))

    def to_storage(self) -> str:
        return self.SEPARATOR.join(self.voters)

    def find(self, voter_id: str) -> Optional[int]:
        """Index of ``voter_id`` in the list, or None if absent."""
        try:
            return self.voters.index(voter_id)
        except ValueError:
            return None

    def without(self, voter_id: str) -> "VoterList":
        return VoterList(tuple(v for v in self.voters if v != voter_id))

    def appended(self, voter_id: str) -> "VoterList":
        return VoterList(self.voters + (voter_id,))

    def __contains__(self, voter_id: object) -> bool:
        return voter_id in self.voters

    def __iter__(self) -> Iterator[str]:
        return iter(self.voters)

    def __len__(self) -> int:
        return len(self.voters)


@dataclass(frozen=True)
class CredibilityRecord:
    """Positive and negative voters for one target."""

    target_id: str
    positive: VoterList = field(default_factory=VoterList)
    negative: VoterList = field(default_factory=VoterList)

    @classmethod
    def empty(cls, target_id: str) -> "CredibilityRecord":
        return cls(target_id=target_id)

    def voters_for(self, direction: VoteDirection) -> VoterList:
        if direction is VoteDirection.POSITIVE:
            return self.positive
        return self.negative


@dataclass(frozen=True)
class VoteRequest:
    """A single voter's vote on a target."""

    voter_id: str
    target_id: str
    direction: VoteDirection


@dataclass(frozen=True)
class Tally:
    """Vote counts for a target and, optionally, the viewer's own vote."""

    positives: int
    negatives: int
    voted: Optional[VoteDirection] = None


def _coerce_direction(direction) -> VoteDirection:
    try:
        return VoteDirection(direction)
    except ValueError:
        raise InvalidDirection(f"Invalid vote direction: {direction!r}") from None


def find_vote(record: CredibilityRecord, voter_id: str) -> Tuple[Optional[int], Optional[int]]:
    """Return the voter's index in the positive and negative lists."""
    return record.positive.find(voter_id), record.negative.find(voter_id)


def apply_vote(
    record: CredibilityRecord,
    request: VoteRequest
) -> Tuple[CredibilityRecord, VoteOutcome]:
    """
    Apply a vote to a target's record.

    A voter appears in at most one of the two lists. Repeating the current
    vote is a no-op reported as ``ALREADY_VOTED``; voting the other way moves
    the voter from one list to the end of the other. If a stored record has
    the voter in both lists, the vote removes them from the opposite list
    and is reported as ``RECORDED``.

    Args:
        record: Current record (use ``CredibilityRecord.empty`` for a target
            with no prior votes)
        request: The vote to apply

    Returns:
        Tuple of (new record, outcome). On ``ALREADY_VOTED`` the record is
        returned unchanged.

    Raises:
        InvalidDirection: If the request direction is not recognized
    """
    direction = _coerce_direction(request.direction)
    voter_id = request.voter_id

    pos_idx, neg_idx = find_vote(record, voter_id)
    same_idx, other_idx = (
        (pos_idx, neg_idx) if direction is VoteDirection.POSITIVE else (neg_idx, pos_idx)
    )

    if same_idx is not None and other_idx is None:
        return record, VoteOutcome.ALREADY_VOTED

    # A stored row may list the voter on both sides; keep the requested one
    same = record.voters_for(direction)
    if same_idx is None:
        same = same.appended(voter_id)
    other = record.voters_for(direction.opposite)
    if other_idx is not None:
        other = other.without(voter_id)

    if direction is VoteDirection.POSITIVE:
        new_record = CredibilityRecord(record.target_id, positive=same, negative=other)
    else:
        new_record = CredibilityRecord(record.target_id, positive=other, negative=same)

    return new_record, VoteOutcome.RECORDED


def tally(record: CredibilityRecord, viewer_id: Optional[str] = None) -> Tally:
    """Count votes on a record and report how ``viewer_id`` voted, if at all."""
    voted = None
    if viewer_id is not None:
        pos_idx, neg_idx = find_vote(record, viewer_id)
        if pos_idx is not None:
            voted = VoteDirection.POSITIVE
        elif neg_idx is not None:
            voted = VoteDirection.NEGATIVE

    return Tally(
        positives=len(record.positive),
        negatives=len(record.negative),
        voted=voted,
    )
