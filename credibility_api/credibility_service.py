"""
Credibility store and service.

``CredibilityStore`` reads and writes rows of the ``credibility`` table and
converts between stored strings and ``VoterList``. ``CredibilityService``
runs each vote as one unit of work: lock the target's row, apply the vote
with the engine, write back the changed lists and commit.
"""

import logging
from typing import Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from credibility_api.database import Credibility
from credibility_api.engine import (
    CredibilityRecord, Tally, VoteRequest, VoterList, apply_vote, tally
)
from credibility_api.errors import StoreError
from credibility_api.models import VoteDirection, VoteOutcome


logger = logging.getLogger(__name__)


class CredibilityStore:
    """
    Persistence for per-target voter lists.

    Methods never commit; the caller owns the transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def _query(self, target_id: str):
        return self.db.query(Credibility).filter(Credibility.torn_id == target_id)

    def fetch_lists(
        self,
        target_id: str,
        lock: bool = False
    ) -> Tuple[VoterList, VoterList, bool]:
        """
        Fetch the positive and negative voters of a target.

        Args:
            target_id: Target user ID
            lock: Take a row lock (SELECT ... FOR UPDATE) for the rest of
                the transaction

        Returns:
            Tuple of (positive voters, negative voters, row found)
        """
        query = self._query(target_id)
        if lock:
            query = query.with_for_update()
        row = query.first()

        if row is None:
            return VoterList(), VoterList(), False

        return VoterList.from_storage(row.positive), VoterList.from_storage(row.negative), True

    def overwrite_list(self, target_id: str, direction: VoteDirection, voters: VoterList):
        """Replace one of a target's voter lists with ``voters``."""
        column = Credibility.positive if direction is VoteDirection.POSITIVE else Credibility.negative
        logger.info(f"Updating {direction.value} voters for target {target_id}")

        updated = self._query(target_id).update(
            {column: voters.to_storage()},
            synchronize_session=False
        )
        if updated == 0:
            raise StoreError(f"No credibility row for target {target_id}")

    def create_row(self, target_id: str, voter_id: str, direction: VoteDirection):
        """Insert the first record for a target, holding a single vote."""
        voters = VoterList.of([voter_id]).to_storage()
        logger.info(f"Creating credibility row for target {target_id}")

        self.db.add(Credibility(
            torn_id=target_id,
            positive=voters if direction is VoteDirection.POSITIVE else "",
            negative=voters if direction is VoteDirection.NEGATIVE else "",
        ))
        self.db.flush()

    def count_targets(self) -> int:
        return self.db.query(Credibility).count()


class CredibilityService:
    """
    Service for reading tallies and casting credibility votes.

    Wraps ``CredibilityStore`` and the pure engine so that each vote is
    applied as one transaction.
    """

    def __init__(self, db: Session):
        self.db = db
        self.store = CredibilityStore(db)

    def get_record(self, target_id: str, lock: bool = False) -> Tuple[CredibilityRecord, bool]:
        """Load a target's record; a missing row is an empty record."""
        positive, negative, found = self.store.fetch_lists(target_id, lock=lock)
        return CredibilityRecord(target_id, positive=positive, negative=negative), found

    def get_credibility(self, target_id: str, viewer_id: Optional[str] = None) -> Tally:
        """
        Get vote counts for a target.

        Args:
            target_id: Target user ID
            viewer_id: If given, also report how this user voted

        Raises:
            StoreError: If the database read fails
        """
        try:
            record, _ = self.get_record(target_id)
        except SQLAlchemyError as e:
            logger.exception(f"Error fetching votes for target {target_id}")
            raise StoreError(f"Failed to fetch votes for target {target_id}") from e

        logger.info(f"Current votes fetched for target {target_id}")
        return tally(record, viewer_id)

    def cast_vote(self, request: VoteRequest) -> VoteOutcome:
        """
        Record a vote, switching direction if the voter already voted the other way.

        Both list writes of a switch are committed together or not at all.

        Returns:
            ``VoteOutcome.RECORDED`` or ``VoteOutcome.ALREADY_VOTED``

        Raises:
            StoreError: If any database read or write fails
        """
        try:
            record, found = self.get_record(request.target_id, lock=True)
            new_record, outcome = apply_vote(record, request)
            direction = VoteDirection(request.direction)

            if outcome is VoteOutcome.ALREADY_VOTED:
                # Nothing written; release the row lock
                self.db.rollback()
                logger.info(
                    f"User {request.voter_id} already voted {direction.value} "
                    f"on target {request.target_id}"
                )
                return outcome

            if not found:
                self.store.create_row(request.target_id, request.voter_id, direction)
            else:
                self._persist_changes(record, new_record)

            self.db.commit()

        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Error rating target {request.target_id}")
            raise StoreError(f"Failed to record vote on target {request.target_id}") from e
        except StoreError:
            self.db.rollback()
            logger.exception(f"Error rating target {request.target_id}")
            raise

        logger.info(
            f"Recorded {direction.value} vote from user {request.voter_id} "
            f"on target {request.target_id}"
        )
        return outcome

    def _persist_changes(self, old: CredibilityRecord, new: CredibilityRecord):
        """Overwrite each voter list that differs between ``old`` and ``new``."""
        for direction in VoteDirection:
            voters = new.voters_for(direction)
            if voters != old.voters_for(direction):
                self.store.overwrite_list(new.target_id, direction, voters)
