"""Service-level tests for the submission confirmation quorum."""

from __future__ import annotations

import unittest
from unittest.mock import patch

from sqlalchemy import create_engine, delete, func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.identity import ActingUser
from app.models.base import Base
from app.models.store import Store
from app.models.store_confirmation import StoreConfirmation
from app.models.store_submission import StoreSubmission
from app.services.errors import DuplicateVote, SelfVote, SubmissionNotPending, TransientIO
from app.services.quorum import (
    confirm_submission,
    count_confirmations,
    get_confirmation_counts,
    promote_submission,
    toggle_confirmation,
    unconfirm_submission,
)

PROPOSER = ActingUser(user_id="proposer")
VOTERS = [ActingUser(user_id=f"voter-{label}") for label in "abcdef"]


class QuorumTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.engine = create_engine(
            "sqlite+pysqlite:///:memory:",
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        cls.SessionLocal = sessionmaker(bind=cls.engine, autoflush=False, autocommit=False, future=True)
        Base.metadata.create_all(cls.engine)

    @classmethod
    def tearDownClass(cls) -> None:
        Base.metadata.drop_all(cls.engine)
        cls.engine.dispose()

    def setUp(self) -> None:
        self.db: Session = self.SessionLocal()
        self._reset_tables()
        self.submission = StoreSubmission(
            user_id=PROPOSER.user_id,
            name="Mangwon Dumplings",
            address="Seoul Mapo-gu Mangwon-ro 12",
            category="restaurant",
            status="pending",
        )
        self.db.add(self.submission)
        self.db.commit()
        self.db.refresh(self.submission)

    def tearDown(self) -> None:
        self.db.close()

    def test_fifth_confirmation_promotes_submission(self) -> None:
        for voter in VOTERS[:4]:
            result = confirm_submission(self.db, voter, self.submission.id)
            self.assertFalse(result.approved)
            self.assertIsNone(result.store_id)

        self.assertEqual(count_confirmations(self.db, self.submission.id), 4)
        self.assertEqual(self._store_count(), 0)
        self.assertEqual(self._status(), "pending")

        result = confirm_submission(self.db, VOTERS[4], self.submission.id)
        self.assertTrue(result.approved)
        self.assertEqual(result.confirm_count, 5)
        self.assertEqual(result.threshold, 5)
        self.assertEqual(self._status(), "approved")

        stores = list(self.db.scalars(select(Store)).all())
        self.assertEqual(len(stores), 1)
        store = stores[0]
        self.assertEqual(store.id, result.store_id)
        self.assertEqual(store.name, "Mangwon Dumplings")
        self.assertEqual(store.address, "Seoul Mapo-gu Mangwon-ro 12")
        self.assertEqual(store.category, "restaurant")
        self.assertEqual((store.lat, store.lng), (0.0, 0.0))
        self.assertEqual(store.source_submission_id, self.submission.id)

    def test_votes_after_approval_are_rejected_as_not_pending(self) -> None:
        for voter in VOTERS[:5]:
            confirm_submission(self.db, voter, self.submission.id)

        with self.assertRaises(SubmissionNotPending):
            confirm_submission(self.db, VOTERS[5], self.submission.id)
        with self.assertRaises(SubmissionNotPending):
            unconfirm_submission(self.db, VOTERS[0], self.submission.id)
        self.assertEqual(self._store_count(), 1)

    def test_promotion_keeps_submitted_coordinates(self) -> None:
        self.submission.lat = 37.55
        self.submission.lng = 126.91
        self.db.commit()

        result = confirm_submission(self.db, VOTERS[0], self.submission.id, threshold=1)

        store = self.db.get(Store, result.store_id)
        assert store is not None
        self.assertEqual((store.lat, store.lng), (37.55, 126.91))

    def test_proposer_cannot_confirm_own_submission(self) -> None:
        with self.assertRaises(SelfVote):
            confirm_submission(self.db, PROPOSER, self.submission.id)
        self.assertEqual(count_confirmations(self.db, self.submission.id), 0)

    def test_duplicate_confirmation_does_not_change_count(self) -> None:
        confirm_submission(self.db, VOTERS[0], self.submission.id)
        with self.assertRaises(DuplicateVote):
            confirm_submission(self.db, VOTERS[0], self.submission.id)
        self.assertEqual(count_confirmations(self.db, self.submission.id), 1)

    def test_unique_ledger_constraint_rejects_vote_missed_by_precheck(self) -> None:
        confirm_submission(self.db, VOTERS[0], self.submission.id)

        with patch("app.services.quorum._has_confirmed", return_value=False):
            with self.assertRaises(DuplicateVote):
                confirm_submission(self.db, VOTERS[0], self.submission.id)

        self.assertEqual(count_confirmations(self.db, self.submission.id), 1)
        self.assertEqual(self._status(), "pending")

    def test_database_failure_mid_vote_rolls_back_ledger_row(self) -> None:
        lost_connection = OperationalError("SELECT count(*)", {}, Exception("database unavailable"))

        with patch("app.services.quorum.count_confirmations", side_effect=lost_connection):
            with self.assertRaises(TransientIO):
                confirm_submission(self.db, VOTERS[0], self.submission.id)

        self.assertEqual(self.db.scalar(select(func.count(StoreConfirmation.id))), 0)
        self.assertEqual(self._status(), "pending")

    def test_explicit_zero_threshold_is_not_replaced_by_default(self) -> None:
        result = confirm_submission(self.db, VOTERS[0], self.submission.id, threshold=0)

        self.assertTrue(result.approved)
        self.assertEqual(result.threshold, 0)
        self.assertEqual(self._store_count(), 1)

    def test_confirm_then_unconfirm_restores_count(self) -> None:
        confirm_submission(self.db, VOTERS[1], self.submission.id)
        before = count_confirmations(self.db, self.submission.id)

        confirm_submission(self.db, VOTERS[0], self.submission.id)
        result = unconfirm_submission(self.db, VOTERS[0], self.submission.id)

        self.assertFalse(result.confirmed)
        self.assertEqual(result.confirm_count, before)
        self.assertEqual(self._status(), "pending")
        remaining = self.db.scalar(
            select(func.count(StoreConfirmation.id)).where(
                StoreConfirmation.submission_id == self.submission.id,
                StoreConfirmation.user_id == VOTERS[0].user_id,
            )
        )
        self.assertEqual(remaining, 0)

    def test_unconfirm_without_vote_is_noop(self) -> None:
        confirm_submission(self.db, VOTERS[1], self.submission.id)
        result = unconfirm_submission(self.db, VOTERS[0], self.submission.id)
        self.assertEqual(result.confirm_count, 1)

    def test_missing_submission_is_not_pending(self) -> None:
        with self.assertRaises(SubmissionNotPending):
            confirm_submission(self.db, VOTERS[0], 9999)

    def test_toggle_alternates_between_confirm_and_unconfirm(self) -> None:
        first = toggle_confirmation(self.db, VOTERS[0], self.submission.id)
        second = toggle_confirmation(self.db, VOTERS[0], self.submission.id)

        self.assertTrue(first.confirmed)
        self.assertEqual(first.confirm_count, 1)
        self.assertFalse(second.confirmed)
        self.assertEqual(second.confirm_count, 0)

    def test_promote_is_exactly_once(self) -> None:
        promote_submission(self.db, self.submission.id)
        with self.assertRaises(SubmissionNotPending):
            promote_submission(self.db, self.submission.id)
        self.db.rollback()
        self.assertEqual(self._store_count(), 1)

    def test_existing_linked_store_blocks_second_promotion(self) -> None:
        self.db.add(
            Store(
                name=self.submission.name,
                address=self.submission.address,
                source_submission_id=self.submission.id,
            )
        )
        self.db.commit()

        with self.assertRaises(SubmissionNotPending):
            confirm_submission(self.db, VOTERS[0], self.submission.id, threshold=1)

        self.assertEqual(self._store_count(), 1)
        self.assertEqual(self._status(), "pending")
        self.assertEqual(count_confirmations(self.db, self.submission.id), 0)

    def test_confirmation_counts_report_user_votes(self) -> None:
        other = StoreSubmission(user_id="someone", name="Tongin Kimbap", address="Seoul Jongno-gu 3", status="pending")
        self.db.add(other)
        self.db.commit()

        confirm_submission(self.db, VOTERS[0], self.submission.id)
        confirm_submission(self.db, VOTERS[1], self.submission.id)
        confirm_submission(self.db, VOTERS[1], other.id)

        counts, confirmed = get_confirmation_counts(self.db, [self.submission.id, other.id], VOTERS[0].user_id)
        self.assertEqual(counts, {self.submission.id: 2, other.id: 1})
        self.assertEqual(confirmed, {self.submission.id})
        self.assertEqual(get_confirmation_counts(self.db, []), ({}, set()))

    def _status(self) -> str:
        self.db.expire_all()
        return self.db.scalar(select(StoreSubmission.status).where(StoreSubmission.id == self.submission.id))

    def _store_count(self) -> int:
        return int(self.db.scalar(select(func.count(Store.id))) or 0)

    def _reset_tables(self) -> None:
        self.db.execute(delete(StoreConfirmation))
        self.db.execute(delete(Store))
        self.db.execute(delete(StoreSubmission))
        self.db.commit()


if __name__ == "__main__":
    unittest.main()
