"""Unit and integration tests for the refresh-token sweep: delete-only run_token_sweep."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

from app.models import RefreshToken
from app.services.token_sweep import run_token_sweep
from app.services.tokens import issue_token_pair, revoke_all_for_user
from support import DatabaseTestCase


class TestSweepDisabled(unittest.TestCase):
    """When TOKEN_SWEEP_ENABLED is False, run_token_sweep does nothing."""

    def test_returns_zero_and_does_not_query(self) -> None:
        settings = MagicMock()
        settings.TOKEN_SWEEP_ENABLED = False
        settings.REFRESH_TOKEN_STATEFUL = True
        session = MagicMock()
        self.assertEqual(run_token_sweep(session, settings), 0)
        session.query.assert_not_called()


class TestSweepStateless(unittest.TestCase):
    """Stateless refresh tokens have no rows to sweep."""

    def test_returns_zero_and_does_not_query(self) -> None:
        settings = MagicMock()
        settings.TOKEN_SWEEP_ENABLED = True
        settings.REFRESH_TOKEN_STATEFUL = False
        session = MagicMock()
        self.assertEqual(run_token_sweep(session, settings), 0)
        session.query.assert_not_called()


class TestSweepNothingToDelete(unittest.TestCase):
    def test_returns_zero(self) -> None:
        settings = MagicMock()
        settings.TOKEN_SWEEP_ENABLED = True
        settings.REFRESH_TOKEN_STATEFUL = True
        session = MagicMock()
        session.query.return_value.filter.return_value.delete.return_value = 0
        self.assertEqual(run_token_sweep(session, settings), 0)
        session.commit.assert_called_once()


class TestSweepDeletes(unittest.TestCase):
    def test_returns_deleted_count(self) -> None:
        settings = MagicMock()
        settings.TOKEN_SWEEP_ENABLED = True
        settings.REFRESH_TOKEN_STATEFUL = True
        session = MagicMock()
        session.query.return_value.filter.return_value.delete.return_value = 3
        self.assertEqual(run_token_sweep(session, settings), 3)
        session.add.assert_not_called()
        session.commit.assert_called_once()


class TestSweepIntegration(DatabaseTestCase):
    """Real database: expired and revoked rows go, live rows stay."""

    def test_sweep_keeps_live_tokens(self) -> None:
        alice = self.make_user(email="alice@example.com")
        bob = self.make_user(email="bob@example.com")
        live = issue_token_pair(self.db, alice, self.settings)
        expired = issue_token_pair(self.db, alice, self.settings)
        issue_token_pair(self.db, bob, self.settings)
        revoke_all_for_user(self.db, bob.id)

        row = (
            self.db.query(RefreshToken)
            .filter(RefreshToken.user_id == alice.id)
            .order_by(RefreshToken.id.desc())
            .first()
        )
        row.expires_at = datetime.now(UTC) - timedelta(days=1)
        self.db.commit()

        self.assertEqual(run_token_sweep(self.db, self.settings), 2)
        remaining = self.db.query(RefreshToken).all()
        self.assertEqual(len(remaining), 1)
        self.assertEqual(remaining[0].user_id, alice.id)
        self.assertIsNotNone(live.refresh_token)
        self.assertNotEqual(live.refresh_token, expired.refresh_token)

        self.assertEqual(run_token_sweep(self.db, self.settings), 0)


if __name__ == "__main__":
    unittest.main()
