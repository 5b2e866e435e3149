"""Tests for app.services.tokens: rotation, revocation, stored expiry and the stateless variant."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest import mock

from app.core.errors import UnauthorizedError
from app.core.security import create_access_token, hash_token
from app.models import RefreshToken
from app.services.tokens import (
    delete_expired_tokens,
    issue_token_pair,
    revoke_all_for_user,
    revoke_refresh_token,
    rotate_refresh_token,
)
from app.services.users import approve_user, deactivate_user
from support import DatabaseTestCase, make_settings


class TestIssue(DatabaseTestCase):
    def test_stateful_issue_persists_digest_only(self) -> None:
        user = self.make_user()
        pair = issue_token_pair(self.db, user, self.settings)
        rows = self.db.query(RefreshToken).all()
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0].token_hash, hash_token(pair.refresh_token))
        self.assertNotEqual(rows[0].token_hash, pair.refresh_token)
        self.assertFalse(rows[0].revoked)

    def test_stateless_issue_writes_nothing(self) -> None:
        user = self.make_user()
        issue_token_pair(self.db, user, make_settings(REFRESH_TOKEN_STATEFUL=False))
        self.assertEqual(self.db.query(RefreshToken).count(), 0)


class TestRotate(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user = self.make_user()
        self.pair = issue_token_pair(self.db, self.user, self.settings)

    def _message(self, token: str) -> str:
        with self.assertRaises(UnauthorizedError) as ctx:
            rotate_refresh_token(self.db, token, self.settings)
        return ctx.exception.message

    def test_rotation_returns_new_pair_and_revokes_old(self) -> None:
        user, new_pair = rotate_refresh_token(self.db, self.pair.refresh_token, self.settings)
        self.assertEqual(user.id, self.user.id)
        self.assertNotEqual(new_pair.refresh_token, self.pair.refresh_token)

        old = self.db.query(RefreshToken).filter(
            RefreshToken.token_hash == hash_token(self.pair.refresh_token)
        ).one()
        self.db.refresh(old)
        self.assertTrue(old.revoked)
        self.assertEqual(self.db.query(RefreshToken).count(), 2)

    def test_old_token_is_rejected_after_rotation(self) -> None:
        rotate_refresh_token(self.db, self.pair.refresh_token, self.settings)
        self.assertEqual(self._message(self.pair.refresh_token), "Refresh token has been revoked")

    def test_new_token_rotates_again(self) -> None:
        _, second = rotate_refresh_token(self.db, self.pair.refresh_token, self.settings)
        _, third = rotate_refresh_token(self.db, second.refresh_token, self.settings)
        self.assertNotEqual(third.refresh_token, second.refresh_token)

    def test_garbage_token(self) -> None:
        self.assertEqual(self._message("not-a-jwt"), "Invalid or expired refresh token")

    def test_access_token_is_not_a_refresh_token(self) -> None:
        access = create_access_token(self.user.id, self.user.email, self.settings)
        self.assertEqual(self._message(access), "Invalid or expired refresh token")

    def test_signed_but_unknown_token(self) -> None:
        stateless_pair = issue_token_pair(
            self.db, self.user, make_settings(REFRESH_TOKEN_STATEFUL=False)
        )
        self.assertEqual(self._message(stateless_pair.refresh_token), "Invalid refresh token")

    def test_stored_expiry_is_checked_independently(self) -> None:
        row = self.db.query(RefreshToken).one()
        row.expires_at = datetime.now(UTC) - timedelta(minutes=1)
        self.db.commit()
        self.assertEqual(self._message(self.pair.refresh_token), "Refresh token has expired")

    def test_logged_out_token_is_rejected(self) -> None:
        revoke_refresh_token(self.db, self.pair.refresh_token, self.settings)
        self.assertEqual(self._message(self.pair.refresh_token), "Refresh token has been revoked")

    def test_deactivated_user_cannot_refresh(self) -> None:
        other = self.make_user(email="other@example.com")
        other_pair = issue_token_pair(self.db, other, self.settings)
        other.active = False
        self.db.commit()
        self.assertEqual(self._message(other_pair.refresh_token), "User not found or inactive")

    def test_losing_a_concurrent_rotation_is_rejected(self) -> None:
        racer = self.SessionLocal()
        try:
            # The racer holds the row as still live while the other session rotates it.
            self.assertFalse(racer.query(RefreshToken).one().revoked)
            rotate_refresh_token(self.db, self.pair.refresh_token, self.settings)

            with self.assertRaises(UnauthorizedError) as ctx:
                rotate_refresh_token(racer, self.pair.refresh_token, self.settings)
            self.assertEqual(ctx.exception.message, "Refresh token has been revoked")
        finally:
            racer.close()

        self.assertEqual(self.db.query(RefreshToken).count(), 2)
        self.assertEqual(
            self.db.query(RefreshToken).filter(RefreshToken.revoked.is_(False)).count(), 1
        )

    def test_unapproved_user_cannot_refresh(self) -> None:
        pending = self.make_user(email="pending@example.com", approved=False)
        pending_pair = issue_token_pair(self.db, pending, self.settings)
        self.assertEqual(self._message(pending_pair.refresh_token), "User not found or inactive")
        approve_user(self.db, pending.id)
        user, _ = rotate_refresh_token(self.db, pending_pair.refresh_token, self.settings)
        self.assertEqual(user.id, pending.id)


class TestStateless(DatabaseTestCase):
    def test_rotation_without_rows(self) -> None:
        settings = make_settings(REFRESH_TOKEN_STATEFUL=False)
        user = self.make_user()
        pair = issue_token_pair(self.db, user, settings)
        rotated_user, new_pair = rotate_refresh_token(self.db, pair.refresh_token, settings)
        self.assertEqual(rotated_user.id, user.id)
        self.assertTrue(new_pair.refresh_token)
        # Without a store the old token stays usable until it expires.
        rotate_refresh_token(self.db, pair.refresh_token, settings)
        self.assertEqual(self.db.query(RefreshToken).count(), 0)

    def test_logout_is_a_no_op(self) -> None:
        settings = make_settings(REFRESH_TOKEN_STATEFUL=False)
        user = self.make_user()
        pair = issue_token_pair(self.db, user, settings)
        revoke_refresh_token(self.db, pair.refresh_token, settings)
        rotate_refresh_token(self.db, pair.refresh_token, settings)


class TestRevocation(DatabaseTestCase):
    def test_logout_is_idempotent(self) -> None:
        user = self.make_user()
        pair = issue_token_pair(self.db, user, self.settings)
        revoke_refresh_token(self.db, pair.refresh_token, self.settings)
        revoke_refresh_token(self.db, pair.refresh_token, self.settings)
        revoke_refresh_token(self.db, "unknown-token", self.settings)
        self.assertEqual(
            self.db.query(RefreshToken).filter(RefreshToken.revoked.is_(True)).count(), 1
        )

    def test_revoke_all_for_user(self) -> None:
        alice = self.make_user(email="alice@example.com")
        bob = self.make_user(email="bob@example.com")
        issue_token_pair(self.db, alice, self.settings)
        issue_token_pair(self.db, alice, self.settings)
        bob_pair = issue_token_pair(self.db, bob, self.settings)

        self.assertEqual(revoke_all_for_user(self.db, alice.id), 2)
        self.assertEqual(revoke_all_for_user(self.db, alice.id), 0)
        rotate_refresh_token(self.db, bob_pair.refresh_token, self.settings)

    def test_deactivate_user_revokes_tokens(self) -> None:
        user = self.make_user()
        pair = issue_token_pair(self.db, user, self.settings)
        deactivate_user(self.db, user.id)
        with self.assertRaises(UnauthorizedError):
            rotate_refresh_token(self.db, pair.refresh_token, self.settings)
        self.assertEqual(
            self.db.query(RefreshToken).filter(RefreshToken.revoked.is_(False)).count(), 0
        )

    def test_deactivation_is_one_transaction(self) -> None:
        user = self.make_user()
        issue_token_pair(self.db, user, self.settings)
        issue_token_pair(self.db, user, self.settings)
        with mock.patch.object(self.db, "commit", wraps=self.db.commit) as commit:
            deactivated = deactivate_user(self.db, user.id)
        self.assertEqual(commit.call_count, 1)
        self.assertFalse(deactivated.active)
        self.assertEqual(
            self.db.query(RefreshToken).filter(RefreshToken.revoked.is_(True)).count(), 2
        )

    def test_staged_revocation_is_discarded_on_rollback(self) -> None:
        user = self.make_user()
        issue_token_pair(self.db, user, self.settings)
        self.assertEqual(revoke_all_for_user(self.db, user.id, commit=False), 1)
        self.db.rollback()
        self.assertFalse(self.db.query(RefreshToken).one().revoked)

    def test_delete_expired_tokens(self) -> None:
        user = self.make_user()
        live = issue_token_pair(self.db, user, self.settings)
        revoked = issue_token_pair(self.db, user, self.settings)
        expired = issue_token_pair(self.db, user, self.settings)
        revoke_refresh_token(self.db, revoked.refresh_token, self.settings)
        row = self.db.query(RefreshToken).filter(
            RefreshToken.token_hash == hash_token(expired.refresh_token)
        ).one()
        row.expires_at = datetime.now(UTC) - timedelta(hours=1)
        self.db.commit()

        self.assertEqual(delete_expired_tokens(self.db), 2)
        remaining = self.db.query(RefreshToken).all()
        self.assertEqual([r.token_hash for r in remaining], [hash_token(live.refresh_token)])
        self.assertEqual(delete_expired_tokens(self.db), 0)


if __name__ == "__main__":
    unittest.main()
