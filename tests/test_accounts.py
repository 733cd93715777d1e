"""Tests for accounts: admin limit, leader management, password change and emergency admins."""

import asyncio
import unittest

from pydantic import SecretStr

from app.core.errors import (
    AdminLimitExceeded,
    BadRequest,
    Conflict,
    Forbidden,
    NotFound,
    Unauthenticated,
)
from app.core.security import verify_password
from app.models import ROLE_ADMIN, ROLE_LEADER
from app.schemas.auth import ChangePasswordRequest
from app.schemas.users import EmergencyAdminRequest, LeaderCreate, LeaderUpdate
from app.services.accounts import (
    authenticate,
    change_password,
    count_admins,
    create_leader,
    create_user,
    delete_leader,
    get_user,
    register_emergency_admin,
    resolve_province_context,
    update_leader,
    update_user,
)
from app.services.notifier import NotifierError
from tests.support import (
    TEST_PASSWORD,
    add_admin,
    add_province,
    add_user,
    make_notifier,
    make_session_factory,
    make_settings,
)


class AccountsTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session_factory()()
        self.settings = make_settings()
        self.notifier = make_notifier()
        self.luanda = add_province(self.db, "Luanda")
        self.huambo = add_province(self.db, "Huambo")

    def tearDown(self) -> None:
        self.db.close()


class TestAdminLimit(AccountsTestCase):
    """At most MAX_ADMINS_PER_PROVINCE admins per province."""

    def _create_admin(self, n: int, province_id: str):
        return create_user(
            self.db,
            username=f"admin{n}",
            email=f"admin{n}@example.org",
            password=TEST_PASSWORD,
            name=f"Admin {n}",
            province_id=province_id,
            role=ROLE_ADMIN,
            is_provisional=False,
            max_admins=5,
        )

    def test_fifth_admin_allowed_sixth_refused(self) -> None:
        for n in range(5):
            self._create_admin(n, self.luanda.id)
        self.assertEqual(count_admins(self.db, self.luanda.id), 5)
        with self.assertRaises(AdminLimitExceeded) as ctx:
            self._create_admin(5, self.luanda.id)
        self.assertEqual(ctx.exception.status_code, 403)
        self.assertEqual(
            ctx.exception.message,
            "Limite máximo de 5 administradores por província atingido",
        )

    def test_other_province_unaffected(self) -> None:
        for n in range(5):
            self._create_admin(n, self.luanda.id)
        self._create_admin(5, self.huambo.id)
        self.assertEqual(count_admins(self.db, self.huambo.id), 1)

    def test_update_rechecks_limit(self) -> None:
        for n in range(5):
            self._create_admin(n, self.luanda.id)
        mover = self._create_admin(9, self.huambo.id)
        with self.assertRaises(AdminLimitExceeded):
            update_user(self.db, mover, max_admins=5, province_id=self.luanda.id)

    def test_update_within_province_does_not_count_self(self) -> None:
        admins = [self._create_admin(n, self.luanda.id) for n in range(5)]
        updated = update_user(
            self.db, admins[0], max_admins=5, province_id=self.luanda.id, name="Renomeado"
        )
        self.assertEqual(updated.name, "Renomeado")

    def test_leaders_do_not_count(self) -> None:
        for n in range(5):
            self._create_admin(n, self.luanda.id)
        leader = create_user(
            self.db,
            username="lider",
            email="lider@example.org",
            password=TEST_PASSWORD,
            name="Lider",
            province_id=self.luanda.id,
            role=ROLE_LEADER,
            max_admins=5,
        )
        self.assertEqual(leader.role, ROLE_LEADER)
        self.assertEqual(count_admins(self.db, self.luanda.id), 5)


class TestAuthenticate(AccountsTestCase):
    def test_valid_and_invalid_credentials(self) -> None:
        user = add_user(self.db, "lider", self.luanda.id)
        self.assertEqual(authenticate(self.db, "lider", TEST_PASSWORD).id, user.id)
        with self.assertRaises(Unauthenticated):
            authenticate(self.db, "lider", "wrong-password")
        with self.assertRaises(Unauthenticated):
            authenticate(self.db, "ninguem", TEST_PASSWORD)

    def test_province_context(self) -> None:
        leader = add_user(self.db, "lider", self.luanda.id)
        admin = add_admin(self.db, "admin", self.luanda.id)
        self.assertEqual(resolve_province_context(self.db, leader, None), self.luanda.id)
        self.assertEqual(
            resolve_province_context(self.db, admin, self.huambo.id), self.huambo.id
        )
        with self.assertRaises(Forbidden):
            resolve_province_context(self.db, leader, self.huambo.id)

    def test_unknown_province_context_is_rejected(self) -> None:
        admin = add_admin(self.db, "admin", self.luanda.id)
        with self.assertRaises(BadRequest) as ctx:
            resolve_province_context(self.db, admin, "no-such-province")
        self.assertEqual(ctx.exception.message, "Província não encontrada")


class TestChangePassword(AccountsTestCase):
    def _body(self, current: str = TEST_PASSWORD) -> ChangePasswordRequest:
        return ChangePasswordRequest(
            current_password=current, new_password="nova-senha", confirm_password="nova-senha"
        )

    def test_provisional_account_gets_welcome_email(self) -> None:
        user = add_user(self.db, "lider", self.luanda.id, is_provisional=True)
        asyncio.run(change_password(self.db, self.notifier, user, self._body()))
        self.assertFalse(user.is_provisional)
        self.assertTrue(verify_password("nova-senha", user.password_hash))
        self.notifier.send_welcome.assert_awaited_once_with(user.email, user.name)

    def test_welcome_failure_does_not_undo_change(self) -> None:
        user = add_user(self.db, "lider", self.luanda.id, is_provisional=True)
        self.notifier.send_welcome.side_effect = NotifierError("down")
        asyncio.run(change_password(self.db, self.notifier, user, self._body()))
        self.assertTrue(verify_password("nova-senha", user.password_hash))

    def test_wrong_current_password(self) -> None:
        user = add_user(self.db, "lider", self.luanda.id)
        with self.assertRaises(BadRequest):
            asyncio.run(change_password(self.db, self.notifier, user, self._body("errada")))
        self.notifier.send_welcome.assert_not_called()


class TestLeaders(AccountsTestCase):
    def test_create_leader_is_provisional_and_emailed(self) -> None:
        body = LeaderCreate(name="Joana", email="joana@example.org", province_id=self.luanda.id)
        leader, password = asyncio.run(create_leader(self.db, self.settings, self.notifier, body))
        self.assertEqual(leader.username, "joana@example.org")
        self.assertEqual(leader.role, ROLE_LEADER)
        self.assertTrue(leader.is_provisional)
        self.assertTrue(verify_password(password, leader.password_hash))
        self.notifier.send_provisional_password.assert_awaited_once_with(
            "joana@example.org", "Joana", password
        )

    def test_email_failure_keeps_the_account(self) -> None:
        self.notifier.send_provisional_password.side_effect = NotifierError("down", 500)
        body = LeaderCreate(name="Joana", email="joana@example.org", province_id=self.luanda.id)
        leader, _ = asyncio.run(create_leader(self.db, self.settings, self.notifier, body))
        self.assertIsNotNone(get_user(self.db, leader.id))

    def test_duplicate_email(self) -> None:
        add_user(self.db, "joana", self.luanda.id)
        body = LeaderCreate(name="Joana", email="joana@example.org", province_id=self.luanda.id)
        with self.assertRaises(Conflict):
            asyncio.run(create_leader(self.db, self.settings, self.notifier, body))

    def test_unknown_province(self) -> None:
        body = LeaderCreate(name="Joana", email="joana@example.org", province_id="nope")
        with self.assertRaises(BadRequest):
            asyncio.run(create_leader(self.db, self.settings, self.notifier, body))

    def test_update_leader(self) -> None:
        leader = add_user(self.db, "lider", self.luanda.id)
        body = LeaderUpdate(name="Novo", email="novo@example.org", province_id=self.huambo.id)
        updated = update_leader(self.db, self.settings, leader.id, body)
        self.assertEqual(updated.username, "novo@example.org")
        self.assertEqual(updated.province_id, self.huambo.id)

    def test_update_leader_email_conflict(self) -> None:
        leader = add_user(self.db, "lider", self.luanda.id)
        other = add_user(self.db, "outro", self.luanda.id)
        body = LeaderUpdate(name="X", email=other.email, province_id=self.luanda.id)
        with self.assertRaises(Conflict):
            update_leader(self.db, self.settings, leader.id, body)

    def test_update_leader_email_taken_as_username(self) -> None:
        leader = add_user(self.db, "lider", self.luanda.id)
        add_user(self.db, "taken@example.org", self.luanda.id)
        body = LeaderUpdate(name="X", email="taken@example.org", province_id=self.luanda.id)
        with self.assertRaises(Conflict):
            update_leader(self.db, self.settings, leader.id, body)

    def test_delete_self_and_missing(self) -> None:
        admin = add_admin(self.db, "admin", self.luanda.id)
        with self.assertRaises(BadRequest):
            delete_leader(self.db, admin.id, admin.id)
        with self.assertRaises(NotFound):
            delete_leader(self.db, admin.id, "missing")


class TestEmergencyAdmin(AccountsTestCase):
    def _body(self, **overrides) -> EmergencyAdminRequest:
        values = {
            "name": "Socorro",
            "email": "socorro@example.org",
            "username": "socorro",
            "province_id": self.luanda.id,
            "password": "socorro123",
        }
        values.update(overrides)
        return EmergencyAdminRequest(**values)

    def test_dev_creates_admin_without_key(self) -> None:
        admin = register_emergency_admin(self.db, self.settings, self._body())
        self.assertEqual(admin.role, ROLE_ADMIN)
        self.assertFalse(admin.is_provisional)

    def test_prod_requires_matching_key(self) -> None:
        settings = make_settings(APP_ENV="prod", EMERGENCY_ADMIN_KEY=SecretStr("k3y"))
        with self.assertRaises(Forbidden):
            register_emergency_admin(self.db, settings, self._body(emergency_key="wrong"))
        admin = register_emergency_admin(self.db, settings, self._body(emergency_key="k3y"))
        self.assertEqual(admin.username, "socorro")

    def test_prod_without_configured_key_refuses(self) -> None:
        settings = make_settings(APP_ENV="prod")
        with self.assertRaises(Forbidden):
            register_emergency_admin(self.db, settings, self._body(emergency_key="anything"))

    def test_missing_fields(self) -> None:
        with self.assertRaises(BadRequest):
            register_emergency_admin(self.db, self.settings, self._body(password=None))

    def test_duplicate_username(self) -> None:
        add_user(self.db, "socorro", self.luanda.id)
        with self.assertRaises(Conflict):
            register_emergency_admin(self.db, self.settings, self._body(email="x@example.org"))


if __name__ == "__main__":
    unittest.main()
