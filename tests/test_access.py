"""Tests for app.services.access: source tagging, point checks and the resolver agreement property."""

import unittest

from hypothesis import given, settings, strategies as st

from app.core.errors import NotFoundError
from app.models import Base, Module, Role, RoleModule, User, UserModule
from app.services.access import (
    accessible_modules,
    effective_access,
    has_access,
    permissions_matrix,
    role_access,
    user_permissions,
)
from app.services.grants import grant_to_role, grant_to_user, revoke_from_role
from app.services.modules import delete_module, set_module_active
from app.services.users import assign_role
from support import DatabaseTestCase, make_sessionmaker


class TestEffectiveAccess(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.role = self.make_role("editor")
        self.user = self.make_user(role_id=self.role.id)
        self.role_only = self.make_module("role-only")
        self.user_only = self.make_module("user-only")
        self.both = self.make_module("both")
        self.neither = self.make_module("neither")
        grant_to_role(self.db, self.role.id, self.role_only.id)
        grant_to_role(self.db, self.role.id, self.both.id)
        grant_to_user(self.db, self.user.id, self.user_only.id)
        grant_to_user(self.db, self.user.id, self.both.id)

    def test_sources(self) -> None:
        rows = {row.module_name: row for row in effective_access(self.db, self.user.id)}
        self.assertEqual((rows["role-only"].has_access, rows["role-only"].source), (True, "role"))
        self.assertEqual((rows["user-only"].has_access, rows["user-only"].source), (True, "user"))
        self.assertEqual((rows["both"].has_access, rows["both"].source), (True, "combined"))
        self.assertEqual((rows["neither"].has_access, rows["neither"].source), (False, "role"))

    def test_rows_are_ordered_by_module_id(self) -> None:
        ids = [row.module_id for row in effective_access(self.db, self.user.id)]
        self.assertEqual(ids, sorted(ids))

    def test_accessible_modules_lists_granted_only(self) -> None:
        names = [m.module_name for m in accessible_modules(self.db, self.user.id)]
        self.assertEqual(names, ["role-only", "user-only", "both"])

    def test_inactive_module_is_hidden(self) -> None:
        set_module_active(self.db, self.both.id, False)
        names = [row.module_name for row in effective_access(self.db, self.user.id)]
        self.assertNotIn("both", names)
        self.assertFalse(has_access(self.db, self.user.id, "both"))

    def test_has_access_point_queries(self) -> None:
        self.assertTrue(has_access(self.db, self.user.id, "role-only"))
        self.assertTrue(has_access(self.db, self.user.id, "user-only"))
        self.assertFalse(has_access(self.db, self.user.id, "neither"))
        self.assertFalse(has_access(self.db, self.user.id, "no-such-module"))
        self.assertFalse(has_access(self.db, 999, "role-only"))

    def test_unknown_user(self) -> None:
        with self.assertRaises(NotFoundError):
            effective_access(self.db, 999)

    def test_user_without_role_sees_direct_grants(self) -> None:
        loner = self.make_user(email="loner@example.com")
        grant_to_user(self.db, loner.id, self.neither.id)
        names = [m.module_name for m in accessible_modules(self.db, loner.id)]
        self.assertEqual(names, ["neither"])

    def test_role_grant_changes_apply_to_members_immediately(self) -> None:
        revoke_from_role(self.db, self.role.id, self.role_only.id)
        self.assertFalse(has_access(self.db, self.user.id, "role-only"))
        rows = {row.module_name: row for row in effective_access(self.db, self.user.id)}
        self.assertEqual(rows["both"].source, "user")

    def test_admin_views(self) -> None:
        role_rows = {row.module_name: row.has_access for row in role_access(self.db, self.role.id)}
        self.assertEqual(
            role_rows,
            {"role-only": True, "user-only": False, "both": True, "neither": False},
        )

        perms = user_permissions(self.db, self.user.id)
        self.assertEqual(perms.role.name, "editor")
        self.assertEqual(len(perms.modules), 4)

        matrix = permissions_matrix(self.db)
        self.assertEqual([r.name for r in matrix.roles], ["editor"])
        self.assertEqual(len(matrix.modules), 4)
        self.assertEqual(
            {(g.role_id, g.module_id) for g in matrix.grants},
            {(self.role.id, self.role_only.id), (self.role.id, self.both.id)},
        )

    def test_role_access_unknown_role(self) -> None:
        with self.assertRaises(NotFoundError):
            role_access(self.db, 999)


class TestEditorScenario(DatabaseTestCase):
    """Role grant, direct grant, revoke and module deletion seen through one user."""

    def test_end_to_end(self) -> None:
        editor = self.make_role("editor")
        reports = self.make_module("reports")
        billing = self.make_module("billing")
        reports_id = reports.id
        alice = self.make_user(email="alice@example.com")

        self.assertFalse(has_access(self.db, alice.id, "reports"))

        grant_to_role(self.db, editor.id, reports.id)
        assign_role(self.db, alice.id, editor.id)
        self.assertTrue(has_access(self.db, alice.id, "reports"))
        self.assertFalse(has_access(self.db, alice.id, "billing"))
        rows = {row.module_id: row for row in effective_access(self.db, alice.id)}
        self.assertEqual(rows[reports.id].module_name, "reports")
        self.assertEqual((rows[reports.id].has_access, rows[reports.id].source), (True, "role"))

        grant_to_user(self.db, alice.id, billing.id)
        grant_to_user(self.db, alice.id, reports.id)
        sources = {row.module_name: row.source for row in effective_access(self.db, alice.id)}
        self.assertEqual(sources, {"reports": "combined", "billing": "user"})

        revoke_from_role(self.db, editor.id, reports.id)
        self.assertTrue(has_access(self.db, alice.id, "reports"))
        sources = {row.module_name: row.source for row in effective_access(self.db, alice.id)}
        self.assertEqual(sources["reports"], "user")

        delete_module(self.db, reports_id)
        self.assertFalse(has_access(self.db, alice.id, "reports"))
        self.assertEqual(self.db.query(UserModule).filter(UserModule.module_id == reports_id).count(), 0)
        self.assertEqual(
            [m.module_name for m in accessible_modules(self.db, alice.id)],
            ["billing"],
        )


MODULE_COUNT = 5
module_index_sets = st.sets(st.integers(min_value=0, max_value=MODULE_COUNT - 1))


class TestResolverAgreement(unittest.TestCase):
    """has_access and effective_access must agree on every (user, module) pair."""

    @settings(deadline=None, max_examples=40)
    @given(
        role_grants=module_index_sets,
        user_grants=module_index_sets,
        inactive=module_index_sets,
        has_role=st.booleans(),
    )
    def test_point_and_list_resolvers_agree(
        self,
        role_grants: set[int],
        user_grants: set[int],
        inactive: set[int],
        has_role: bool,
    ) -> None:
        SessionLocal = make_sessionmaker()
        db = SessionLocal()
        try:
            role = Role(name="r", active=True)
            db.add(role)
            db.flush()
            modules = [
                Module(name=f"m{i}", active=i not in inactive) for i in range(MODULE_COUNT)
            ]
            db.add_all(modules)
            db.flush()
            user = User(
                name="u",
                email="u@example.com",
                password_hash="unused",
                approved=True,
                active=True,
                role_id=role.id if has_role else None,
            )
            db.add(user)
            db.flush()
            db.add_all(RoleModule(role_id=role.id, module_id=modules[i].id) for i in role_grants)
            db.add_all(UserModule(user_id=user.id, module_id=modules[i].id) for i in user_grants)
            db.commit()

            rows = {row.module_name: row for row in effective_access(db, user.id)}
            for i, module in enumerate(modules):
                point = has_access(db, user.id, module.name)
                if i in inactive:
                    self.assertFalse(point)
                    self.assertNotIn(module.name, rows)
                    continue
                self.assertEqual(point, rows[module.name].has_access)
                expected = (has_role and i in role_grants) or i in user_grants
                self.assertEqual(point, expected)
        finally:
            db.close()
            engine = SessionLocal.kw["bind"]
            Base.metadata.drop_all(bind=engine)
            engine.dispose()


if __name__ == "__main__":
    unittest.main()
