from __future__ import annotations

from datetime import date
from uuid import UUID

from fastapi import HTTPException, status
from loguru import logger
from tortoise import timezone
from tortoise.exceptions import IntegrityError

from app import policies
from app.models import Account, Booking, BookingStatus, Notification
from app.policies import CurrentUser
from app.roles import STAFF_ROLES, AccountRole
from app.schemas import (
    AccountResponse,
    AccountUpdate,
    AdminConversionStats,
    BookingCreate,
    BookingFilters,
    BookingResponse,
    NotificationCreate,
    NotificationResponse,
    ReceiptsUpdate,
)
from app.stats import conversion_stats


def _local_part(email: str) -> str:
    return email.split("@", 1)[0]


class AccountCRUD:
    async def lookup_role(self, identity_id: UUID) -> AccountResponse | None:
        """
        Single-row lookup of the caller's own account, keyed by identity id.
        This is how a caller's role is resolved before any policy runs.
        """
        inst = await Account.get_or_none(id=identity_id)
        if not inst:
            return None
        return AccountResponse.model_validate(inst, from_attributes=True)

    async def get_account(self, caller: CurrentUser) -> AccountResponse | None:
        inst = await Account.get_or_none(**policies.account_scope(caller))
        if not inst:
            return None
        return AccountResponse.model_validate(inst, from_attributes=True)

    async def update_account(
        self, caller: CurrentUser, payload: AccountUpdate
    ) -> AccountResponse | None:
        inst = await Account.get_or_none(**policies.account_scope(caller))
        if not inst:
            return None
        changes = payload.model_dump(exclude_unset=True)
        if changes:
            for key, value in changes.items():
                setattr(inst, key, value)
            await inst.save(update_fields=[*changes, "updated_at"])
        return AccountResponse.model_validate(inst, from_attributes=True)

    async def list_staff(self) -> list[AccountResponse]:
        """Elevated: every admin and super-admin, outside any row rule."""
        accounts = await Account.filter(role__in=list(STAFF_ROLES))
        return [AccountResponse.model_validate(a, from_attributes=True) for a in accounts]

    async def get_staff_member(self, account_id: UUID) -> AccountResponse | None:
        inst = await Account.get_or_none(id=account_id, role__in=list(STAFF_ROLES))
        if not inst:
            return None
        return AccountResponse.model_validate(inst, from_attributes=True)

    async def provision_account(
        self,
        identity_id: UUID,
        email: str,
        name: str | None = None,
        role: AccountRole | None = None,
    ) -> tuple[AccountResponse, bool]:
        """
        Create the account row for a freshly created identity.

        Returns (account, created). Calling it again for the same identity id
        returns the existing row untouched.
        """
        existing = await Account.get_or_none(id=identity_id)
        if existing:
            return AccountResponse.model_validate(existing, from_attributes=True), False

        try:
            inst = await Account.create(
                id=identity_id,
                email=email,
                name=name or _local_part(email),
                role=role or AccountRole.CLIENT,
            )
        except IntegrityError:
            # Lost a race against another delivery for the same identity
            existing = await Account.get_or_none(id=identity_id)
            if existing:
                return (
                    AccountResponse.model_validate(existing, from_attributes=True),
                    False,
                )
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="An account with this email already exists",
            ) from None

        logger.info("Provisioned account {} with role {}", inst.id, inst.role)
        return AccountResponse.model_validate(inst, from_attributes=True), True


class BookingCRUD:
    async def create_booking(
        self, caller: CurrentUser, payload: BookingCreate
    ) -> BookingResponse:
        inst = await Booking.create(client_id=caller.id, **payload.model_dump())
        return BookingResponse.model_validate(inst, from_attributes=True)

    async def get_booking(
        self, caller: CurrentUser, booking_id: UUID
    ) -> BookingResponse | None:
        inst = await Booking.get_or_none(
            id=booking_id, **policies.booking_read_scope(caller)
        )
        if not inst:
            return None
        return BookingResponse.model_validate(inst, from_attributes=True)

    async def list_bookings(
        self, caller: CurrentUser, filters: BookingFilters
    ) -> list[BookingResponse]:
        qs = Booking.filter(**policies.booking_read_scope(caller))

        if filters.status is not None:
            qs = qs.filter(status=filters.status)
        if filters.unassigned:
            qs = qs.filter(assigned_admin_id__isnull=True)
        elif filters.assigned_admin_id is not None:
            qs = qs.filter(assigned_admin_id=filters.assigned_admin_id)

        offset = (filters.page - 1) * filters.page_size
        qs = qs.offset(offset).limit(filters.page_size)

        bookings = await qs
        return [
            BookingResponse.model_validate(b, from_attributes=True) for b in bookings
        ]

    async def list_dashboard_bookings(
        self,
        caller: CurrentUser,
        booking_status: BookingStatus,
        start: date | None = None,
        end: date | None = None,
    ) -> list[BookingResponse]:
        """
        Bookings for a dashboard tab. Regular admins only work their own
        assignments; super-admins see everything in the status.
        """
        qs = Booking.filter(
            status=booking_status, **policies.booking_read_scope(caller)
        )
        if caller.role == AccountRole.ADMIN:
            qs = qs.filter(assigned_admin_id=caller.id)
        if start is not None:
            qs = qs.filter(event_date__gte=start)
        if end is not None:
            qs = qs.filter(event_date__lte=end)

        bookings = await qs
        return [
            BookingResponse.model_validate(b, from_attributes=True) for b in bookings
        ]

    async def _update(
        self,
        caller: CurrentUser,
        booking_id: UUID,
        match: dict | None = None,
        **changes,
    ) -> BookingResponse | None:
        """
        Apply `changes` if the update rule matches the row, else touch nothing.
        `match` narrows the row further, e.g. to the status the caller last saw.
        """
        updated = await Booking.filter(
            id=booking_id, **policies.booking_update_scope(caller), **(match or {})
        ).update(**changes, updated_at=timezone.now())
        if not updated:
            return None
        inst = await Booking.get(id=booking_id)
        return BookingResponse.model_validate(inst, from_attributes=True)

    async def update_booking_status(
        self,
        caller: CurrentUser,
        booking_id: UUID,
        new_status: BookingStatus,
        expected_status: BookingStatus | None = None,
    ) -> BookingResponse | None:
        match = {"status": expected_status} if expected_status is not None else None
        return await self._update(caller, booking_id, match, status=new_status)

    async def assign_booking(
        self, caller: CurrentUser, booking_id: UUID, admin_id: UUID | None
    ) -> BookingResponse | None:
        return await self._update(caller, booking_id, assigned_admin_id=admin_id)

    async def update_receipts(
        self, caller: CurrentUser, booking_id: UUID, payload: ReceiptsUpdate
    ) -> BookingResponse | None:
        return await self._update(
            caller, booking_id, **payload.model_dump(exclude_none=True)
        )

    async def list_unassigned_inquiries(self) -> list[BookingResponse]:
        """Elevated: open inquiries nobody has picked up yet."""
        bookings = await Booking.filter(
            status=BookingStatus.INQUIRY, assigned_admin_id__isnull=True
        )
        return [
            BookingResponse.model_validate(b, from_attributes=True) for b in bookings
        ]

    async def list_converted(self) -> list[BookingResponse]:
        """Elevated: every confirmed or cleared booking."""
        bookings = await Booking.filter(
            status__in=[BookingStatus.CONFIRMED, BookingStatus.CLEARED]
        )
        return [
            BookingResponse.model_validate(b, from_attributes=True) for b in bookings
        ]

    async def admin_conversion_stats(self) -> list[AdminConversionStats]:
        """
        Elevated aggregate: one row per admin-role account with its assigned
        bookings grouped in. Admins with no assignments still get a row.
        """
        admins = await Account.filter(role=AccountRole.ADMIN).prefetch_related(
            "assigned_bookings"
        )
        return [conversion_stats(a, list(a.assigned_bookings)) for a in admins]


class NotificationCRUD:
    async def create_notification(
        self, payload: NotificationCreate
    ) -> NotificationResponse | None:
        """Returns None when the target account or booking does not exist."""
        if not await Account.exists(id=payload.user_id):
            return None
        if payload.booking_id and not await Booking.exists(id=payload.booking_id):
            return None
        inst = await Notification.create(**payload.model_dump())
        return NotificationResponse.model_validate(inst, from_attributes=True)

    async def list_notifications(
        self, caller: CurrentUser, unread_only: bool = False
    ) -> list[NotificationResponse]:
        qs = Notification.filter(**policies.notification_scope(caller))
        if unread_only:
            qs = qs.filter(read=False)
        notifications = await qs
        return [
            NotificationResponse.model_validate(n, from_attributes=True)
            for n in notifications
        ]

    async def mark_read(
        self, caller: CurrentUser, notification_id: UUID
    ) -> NotificationResponse | None:
        updated = await Notification.filter(
            id=notification_id, **policies.notification_scope(caller)
        ).update(read=True)
        if not updated:
            return None
        inst = await Notification.get(id=notification_id)
        return NotificationResponse.model_validate(inst, from_attributes=True)


account_crud = AccountCRUD()
booking_crud = BookingCRUD()
notification_crud = NotificationCRUD()
