"""Tests for Database.run_transaction retry and conflict behaviour."""

import tempfile
import unittest
from pathlib import Path

import support  # noqa: F401

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from luna_ops.db import Database
from luna_ops.db.models import ActivityLog, ProductSize, User
from luna_ops.exceptions import TransactionConflict, ValidationError


class TestRunTransaction(unittest.TestCase):
    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        self.db = Database(f"sqlite:///{Path(self._tmpdir.name) / 'txn.sqlite'}", max_attempts=3)
        self.db.init()

    def tearDown(self):
        self.db.dispose()
        self._tmpdir.cleanup()

    def test_returns_result_and_commits(self):
        def _write(session):
            session.add(ActivityLog(description="hello", user_id="u1", user_name="Amina"))
            return "ok"

        self.assertEqual(self.db.run_transaction(_write), "ok")
        with self.db.session() as session:
            self.assertEqual(session.query(ActivityLog).count(), 1)

    def test_retries_stale_data_then_succeeds(self):
        calls = []

        def _flaky(session):
            calls.append(1)
            if len(calls) < 3:
                raise StaleDataError("version mismatch")
            return len(calls)

        self.assertEqual(self.db.run_transaction(_flaky), 3)

    def test_conflict_after_max_attempts(self):
        calls = []

        def _always_stale(session):
            calls.append(1)
            session.add(ActivityLog(description="never", user_id="u1", user_name="Amina"))
            raise StaleDataError("version mismatch")

        with self.assertRaises(TransactionConflict) as ctx:
            self.db.run_transaction(_always_stale)
        self.assertEqual(len(calls), 3)
        self.assertEqual(ctx.exception.attempts, 3)
        self.assertEqual(ctx.exception.status_code, 409)
        with self.db.session() as session:
            self.assertEqual(session.query(ActivityLog).count(), 0)

    def test_business_error_is_not_retried(self):
        calls = []

        def _reject(session):
            calls.append(1)
            session.add(ActivityLog(description="rolled back", user_id="u1", user_name="Amina"))
            raise ValidationError("bad input")

        with self.assertRaises(ValidationError):
            self.db.run_transaction(_reject)
        self.assertEqual(len(calls), 1)
        with self.db.session() as session:
            self.assertEqual(session.query(ActivityLog).count(), 0)

    def test_not_null_violation_is_not_retried(self):
        calls = []

        def _incomplete(session):
            calls.append(1)
            session.add(ActivityLog(description=None, user_id="u1", user_name="Amina"))
            session.flush()

        with self.assertRaises(IntegrityError):
            self.db.run_transaction(_incomplete)
        self.assertEqual(len(calls), 1)

    def test_foreign_key_violation_is_not_retried(self):
        calls = []

        def _orphan(session):
            calls.append(1)
            session.add(ProductSize(product_id="no-such-product", size="500ml", price=250.0))
            session.flush()

        with self.assertRaises(IntegrityError):
            self.db.run_transaction(_orphan)
        self.assertEqual(len(calls), 1)

    def test_unique_collision_is_retried(self):
        with self.db.session() as session:
            session.add(User(email="achieng@luna.co.ke", display_name="Achieng", roles="admin"))
        calls = []

        def _duplicate(session):
            calls.append(1)
            session.add(User(email="achieng@luna.co.ke", display_name="Achieng", roles="sales"))
            session.flush()

        with self.assertRaises(TransactionConflict):
            self.db.run_transaction(_duplicate)
        self.assertEqual(len(calls), 3)


if __name__ == "__main__":
    unittest.main()
