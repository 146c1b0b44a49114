from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)

from app.models import BookingStatus, NotificationType
from app.roles import AccountRole

# Options offered by the booking form
TIME_SLOTS: tuple[str, ...] = (
    "9:00 AM - 12:00 PM",
    "12:00 PM - 3:00 PM",
    "3:00 PM - 6:00 PM",
    "6:00 PM - 9:00 PM",
    "9:00 PM - 12:00 AM",
)

FACILITIES: tuple[str, ...] = (
    "Conference Hall A",
    "Conference Hall B",
    "Banquet Room",
    "Outdoor Pavilion",
    "Meeting Room 1",
    "Meeting Room 2",
)

PACKAGES: tuple[str, ...] = (
    "Basic Package - $500",
    "Standard Package - $1,000",
    "Premium Package - $2,000",
    "Deluxe Package - $3,500",
    "Custom Package - Contact for pricing",
)


# ---------------------------------------------------------------------------
# Accounts & identities
# ---------------------------------------------------------------------------


class AccountResponse(BaseModel):
    id: UUID
    email: str
    name: str
    phone: str | None
    role: AccountRole
    admin_color: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AccountUpdate(BaseModel):
    """Fields an account holder may change on their own row. Role is not one of them."""

    name: str | None = Field(default=None, min_length=2, max_length=255)
    phone: str | None = Field(default=None, max_length=50)

    model_config = ConfigDict(extra="forbid")

    @field_validator("name", mode="after")
    @classmethod
    def name_not_null(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("name cannot be cleared")
        return v


class IdentityMetadata(BaseModel):
    name: str | None = None
    role: AccountRole | None = None


class IdentityCreated(BaseModel):
    """Payload the auth service posts when it creates a new identity."""

    id: UUID
    email: EmailStr
    metadata: IdentityMetadata = Field(default_factory=IdentityMetadata)


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: str | None = Field(default=None, min_length=2, max_length=255)
    role: AccountRole = AccountRole.CLIENT


class SignInRequest(BaseModel):
    email: EmailStr
    password: str


# ---------------------------------------------------------------------------
# Bookings
# ---------------------------------------------------------------------------


class BookingCreate(BaseModel):
    client_name: str = Field(min_length=2, max_length=255)
    email: EmailStr
    phone_number: str = Field(min_length=10, max_length=50)
    event_date: date
    time_slot: str
    facility: str
    package: str
    special_requests: str | None = Field(default=None, max_length=2000)

    @field_validator("event_date", mode="after")
    @classmethod
    def not_in_past(cls, v: date) -> date:
        if v < date.today():
            raise ValueError("event_date cannot be in the past")
        return v

    @field_validator("time_slot", mode="after")
    @classmethod
    def known_time_slot(cls, v: str) -> str:
        if v not in TIME_SLOTS:
            raise ValueError(f"time_slot must be one of {list(TIME_SLOTS)}")
        return v

    @field_validator("facility", mode="after")
    @classmethod
    def known_facility(cls, v: str) -> str:
        if v not in FACILITIES:
            raise ValueError(f"facility must be one of {list(FACILITIES)}")
        return v

    @field_validator("package", mode="after")
    @classmethod
    def known_package(cls, v: str) -> str:
        if v not in PACKAGES:
            raise ValueError(f"package must be one of {list(PACKAGES)}")
        return v


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class BookingAssignment(BaseModel):
    assigned_admin_id: UUID | None


class ReceiptsUpdate(BaseModel):
    total_spend: Decimal | None = Field(
        default=None, ge=0, max_digits=10, decimal_places=2
    )
    receipts_uploaded: bool | None = None
    receipts_approved: bool | None = None

    @model_validator(mode="after")
    def at_least_one_field(self) -> ReceiptsUpdate:
        if (
            self.total_spend is None
            and self.receipts_uploaded is None
            and self.receipts_approved is None
        ):
            raise ValueError("Nothing to update")
        return self


class BookingResponse(BaseModel):
    id: UUID
    client_id: UUID | None
    client_name: str
    email: str
    phone_number: str
    event_date: date
    time_slot: str
    facility: str
    package: str
    special_requests: str | None
    status: BookingStatus
    assigned_admin_id: UUID | None
    total_spend: Decimal | None
    receipts_uploaded: bool
    receipts_approved: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BookingFilters(BaseModel):
    """Bind to a FastAPI route via Depends(BookingFilters)."""

    status: BookingStatus | None = None
    assigned_admin_id: UUID | None = None
    unassigned: bool = False

    # Pagination
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


class NotificationCreate(BaseModel):
    user_id: UUID
    type: NotificationType
    title: str = Field(min_length=1, max_length=255)
    message: str = Field(min_length=1)
    booking_id: UUID | None = None


class NotificationResponse(BaseModel):
    id: UUID
    user_id: UUID
    type: NotificationType
    title: str
    message: str
    read: bool
    booking_id: UUID | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Dashboards
# ---------------------------------------------------------------------------


class AdminConversionStats(BaseModel):
    admin_id: UUID
    admin_name: str
    admin_color: str | None
    inquiries_assigned: int
    confirmed_bookings: int
    conversion_rate: float
    avg_response_time: float


class SuperAdminOverview(BaseModel):
    total_admins: int
    unassigned_inquiries: list[BookingResponse]
    average_conversion_rate: float
    total_revenue: Decimal
    admin_stats: list[AdminConversionStats]


class CalendarEvent(BaseModel):
    """One booking placed on the dashboard calendar."""

    id: str
    booking_id: UUID
    title: str
    event_date: date
    time_slot: str
    status: BookingStatus
    color: str
    admin_name: str | None = None


class ViewDecision(BaseModel):
    view: str
    path: str
    redirected: bool
    role_label: str | None = None
