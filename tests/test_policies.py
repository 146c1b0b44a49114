"""
Unit tests for app/policies.py: pure row rules and query scopes.
No DB, no HTTP.
"""

from __future__ import annotations

from types import SimpleNamespace
from uuid import uuid4

from app.policies import (
    account_scope,
    booking_read_scope,
    booking_update_scope,
    can_insert_booking,
    can_read_account,
    can_read_booking,
    can_read_notification,
    can_update_account,
    can_update_booking,
    can_update_notification,
    notification_scope,
)

from .factories import (
    ADMIN_ID,
    CLIENT_ID,
    OTHER_ADMIN_ID,
    make_admin,
    make_client,
    make_super_admin,
)


def _booking(client_id=CLIENT_ID, assigned_admin_id=ADMIN_ID):
    return SimpleNamespace(client_id=client_id, assigned_admin_id=assigned_admin_id)


class TestAccountRules:
    def test_own_row_readable_and_updatable(self):
        caller = make_client()
        row = SimpleNamespace(id=CLIENT_ID)
        assert can_read_account(caller, row)
        assert can_update_account(caller, row)

    def test_staff_cannot_read_other_account_rows(self):
        row = SimpleNamespace(id=CLIENT_ID)
        assert not can_read_account(make_super_admin(), row)
        assert not can_update_account(make_admin(), row)

    def test_scope_is_own_id(self):
        assert account_scope(make_admin()) == {"id": ADMIN_ID}


class TestBookingRead:
    def test_client_reads_own(self):
        assert can_read_booking(make_client(), _booking())

    def test_client_cannot_read_others(self):
        assert not can_read_booking(make_client(), _booking(client_id=uuid4()))

    def test_staff_read_everything(self):
        row = _booking(client_id=uuid4(), assigned_admin_id=None)
        assert can_read_booking(make_admin(OTHER_ADMIN_ID), row)
        assert can_read_booking(make_super_admin(), row)

    def test_anonymous_booking_invisible_to_clients(self):
        assert not can_read_booking(make_client(), _booking(client_id=None))

    def test_read_scope(self):
        assert booking_read_scope(make_client()) == {"client_id": CLIENT_ID}
        assert booking_read_scope(make_admin()) == {}
        assert booking_read_scope(make_super_admin()) == {}


class TestBookingUpdate:
    def test_assigned_admin_may_update(self):
        assert can_update_booking(make_admin(), _booking())

    def test_other_admin_may_not_update(self):
        assert not can_update_booking(make_admin(OTHER_ADMIN_ID), _booking())

    def test_super_admin_may_update_anything(self):
        assert can_update_booking(make_super_admin(), _booking(assigned_admin_id=None))

    def test_client_may_not_update_own_booking(self):
        assert not can_update_booking(make_client(), _booking())

    def test_anyone_may_insert(self):
        assert can_insert_booking(make_client())
        assert can_insert_booking(make_admin())

    def test_update_scope(self):
        assert booking_update_scope(make_admin()) == {"assigned_admin_id": ADMIN_ID}
        assert booking_update_scope(make_client()) == {"assigned_admin_id": CLIENT_ID}
        assert booking_update_scope(make_super_admin()) == {}


class TestNotificationRules:
    def test_owner_only(self):
        row = SimpleNamespace(user_id=ADMIN_ID)
        assert can_read_notification(make_admin(), row)
        assert can_update_notification(make_admin(), row)
        assert not can_read_notification(make_super_admin(), row)
        assert not can_update_notification(make_admin(OTHER_ADMIN_ID), row)

    def test_scope(self):
        assert notification_scope(make_client()) == {"user_id": CLIENT_ID}


class TestCallerFlags:
    def test_staff_flags(self):
        assert not make_client().is_staff
        assert make_admin().is_staff
        assert not make_admin().is_super_admin
        assert make_super_admin().is_super_admin
