from enum import StrEnum

from tortoise import fields
from tortoise.models import Model

from app.roles import AccountRole


class BookingStatus(StrEnum):
    INQUIRY = "inquiry"  # submitted by the client, awaiting an admin
    CONFIRMED = "confirmed"  # admin agreed the event with the client
    CLEARED = "cleared"  # event done and settled, final


class NotificationType(StrEnum):
    BOOKING_INQUIRY = "booking_inquiry"
    BOOKING_CONFIRMED = "booking_confirmed"
    BOOKING_CLEARED = "booking_cleared"
    ASSIGNMENT = "assignment"


class Account(Model):
    # Same value as the identity id issued by the auth service
    id = fields.UUIDField(primary_key=True)

    email = fields.CharField(max_length=255, unique=True)
    name = fields.CharField(max_length=255)
    phone = fields.CharField(max_length=50, null=True)

    role = fields.CharEnumField(AccountRole, default=AccountRole.CLIENT)
    admin_color = fields.CharField(max_length=7, null=True)  # staff only

    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:  # type: ignore
        table = "accounts"
        ordering = ["name"]


class Booking(Model):
    id = fields.UUIDField(primary_key=True)

    client = fields.ForeignKeyField(
        "models.Account",
        related_name="bookings",
        null=True,
        on_delete=fields.CASCADE,
    )

    # Contact snapshot taken at submission time, not kept in sync with Account
    client_name = fields.CharField(max_length=255)
    email = fields.CharField(max_length=255)
    phone_number = fields.CharField(max_length=50)

    event_date = fields.DateField(db_index=True)
    time_slot = fields.CharField(max_length=50)
    facility = fields.CharField(max_length=100)
    package = fields.CharField(max_length=100)
    special_requests = fields.TextField(null=True)

    status = fields.CharEnumField(
        BookingStatus, default=BookingStatus.INQUIRY, db_index=True
    )
    assigned_admin = fields.ForeignKeyField(
        "models.Account",
        related_name="assigned_bookings",
        null=True,
        on_delete=fields.SET_NULL,
        db_index=True,
    )

    total_spend = fields.DecimalField(max_digits=10, decimal_places=2, null=True)
    receipts_uploaded = fields.BooleanField(default=False)
    receipts_approved = fields.BooleanField(default=False)

    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:  # type: ignore
        table = "bookings"
        ordering = ["-created_at"]


class Notification(Model):
    id = fields.UUIDField(primary_key=True)

    user = fields.ForeignKeyField(
        "models.Account",
        related_name="notifications",
        on_delete=fields.CASCADE,
        db_index=True,
    )
    type = fields.CharEnumField(NotificationType)
    title = fields.CharField(max_length=255)
    message = fields.TextField()
    read = fields.BooleanField(default=False, db_index=True)
    booking = fields.ForeignKeyField(
        "models.Booking",
        related_name="notifications",
        null=True,
        on_delete=fields.CASCADE,
    )

    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:  # type: ignore
        table = "notifications"
        ordering = ["-created_at"]
