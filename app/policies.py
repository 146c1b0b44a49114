"""
Row-level authorization rules for accounts, bookings and notifications.

Every rule takes the caller explicitly. The caller's role is resolved once,
from the caller's own account row, before any rule runs; no rule ever looks
at the table it protects to decide whether the caller is privileged.

Two forms of each rule live here:
  - predicates (can_*), evaluated against a single loaded row
  - scopes (*_scope), ORM filter kwargs applied inside the query itself

Listing every account is deliberately not expressible as a row rule. That
capability is a separate elevated operation guarded by a role check
(see AccountCRUD.list_staff).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol
from uuid import UUID

from app.roles import STAFF_ROLES, AccountRole


@dataclass(frozen=True)
class CurrentUser:
    id: UUID
    email: str
    role: AccountRole

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    @property
    def is_super_admin(self) -> bool:
        return self.role == AccountRole.SUPER_ADMIN


class _AccountRow(Protocol):
    id: UUID


class _BookingRow(Protocol):
    client_id: UUID | None
    assigned_admin_id: UUID | None


class _NotificationRow(Protocol):
    user_id: UUID


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


def can_read_account(caller: CurrentUser, account: _AccountRow) -> bool:
    return account.id == caller.id


def can_update_account(caller: CurrentUser, account: _AccountRow) -> bool:
    return account.id == caller.id


def account_scope(caller: CurrentUser) -> dict[str, Any]:
    return {"id": caller.id}


# ---------------------------------------------------------------------------
# Bookings
# ---------------------------------------------------------------------------


def can_read_booking(caller: CurrentUser, booking: _BookingRow) -> bool:
    return booking.client_id == caller.id or caller.is_staff


def can_insert_booking(caller: CurrentUser) -> bool:
    """Any authenticated caller may submit an inquiry."""
    return True


def can_update_booking(caller: CurrentUser, booking: _BookingRow) -> bool:
    return booking.assigned_admin_id == caller.id or caller.is_super_admin


def booking_read_scope(caller: CurrentUser) -> dict[str, Any]:
    if caller.is_staff:
        return {}
    return {"client_id": caller.id}


def booking_update_scope(caller: CurrentUser) -> dict[str, Any]:
    if caller.is_super_admin:
        return {}
    return {"assigned_admin_id": caller.id}


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


def can_read_notification(caller: CurrentUser, notification: _NotificationRow) -> bool:
    return notification.user_id == caller.id


def can_update_notification(
    caller: CurrentUser, notification: _NotificationRow
) -> bool:
    return notification.user_id == caller.id


def can_insert_notification(caller: CurrentUser) -> bool:
    """Notification creation is trusted; the target is not checked."""
    return True


def notification_scope(caller: CurrentUser) -> dict[str, Any]:
    return {"user_id": caller.id}
