"""Maps a session's role to the single screen it is allowed to see."""

from __future__ import annotations

from app.roles import ROLE_DISPLAY_NAMES, AccountRole
from app.schemas import ViewDecision

SIGN_IN_VIEW = "sign_in"
SIGN_IN_PATH = "/auth"

ROLE_VIEWS: dict[AccountRole, tuple[str, str]] = {
    AccountRole.CLIENT: ("booking_form", "/booking"),
    AccountRole.ADMIN: ("admin_dashboard", "/admin"),
    AccountRole.SUPER_ADMIN: ("super_admin_dashboard", "/super-admin"),
}


def _normalize(path: str) -> str:
    path = "/" + path.strip().strip("/")
    return path


def resolve_view(role: AccountRole | None, path: str = "/") -> ViewDecision:
    """
    Pick the view for `role` at `path`.

    Anonymous sessions always land on the sign-in view. A signed-in session
    that asks for anything other than its own view (the root, another role's
    dashboard, an unknown path) is redirected to its default view.
    """
    requested = _normalize(path)

    if role is None:
        return ViewDecision(
            view=SIGN_IN_VIEW,
            path=SIGN_IN_PATH,
            redirected=requested != SIGN_IN_PATH,
        )

    view, home = ROLE_VIEWS[role]
    return ViewDecision(
        view=view,
        path=home,
        redirected=requested != home,
        role_label=ROLE_DISPLAY_NAMES[role],
    )
