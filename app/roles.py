from enum import StrEnum


class AccountRole(StrEnum):
    CLIENT = "client"  # submits booking inquiries
    ADMIN = "admin"  # works the inquiries assigned to them
    SUPER_ADMIN = "super_admin"  # assigns work, clears events, sees metrics


STAFF_ROLES: frozenset[AccountRole] = frozenset(
    {AccountRole.ADMIN, AccountRole.SUPER_ADMIN}
)


ROLE_DISPLAY_NAMES: dict[str, str] = {
    AccountRole.CLIENT: "Client",
    AccountRole.ADMIN: "Admin",
    AccountRole.SUPER_ADMIN: "Super Admin",
}
