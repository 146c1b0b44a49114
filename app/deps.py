from dataclasses import dataclass
from functools import lru_cache
from uuid import UUID

import httpx
from fastapi import Depends, Header, HTTPException, status
from loguru import logger

from app import settings
from app.crud import account_crud
from app.policies import CurrentUser
from app.roles import AccountRole

__all__ = [
    "AuthClient",
    "CurrentUser",
    "Identity",
    "get_auth_client",
    "get_current_user",
    "get_identity",
    "get_optional_user",
    "require_internal_token",
    "require_roles",
    "require_staff",
    "require_super_admin",
]


@dataclass
class Identity:
    """Identity verified by the gateway; no role attached yet."""

    id: UUID
    email: str


def _parse_identity(x_user_id: str, x_user_email: str) -> Identity:
    try:
        user_id = UUID(x_user_id)
    except (ValueError, TypeError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user identity from gateway",
        ) from None
    return Identity(id=user_id, email=x_user_email)


def get_identity(
    x_user_id: str = Header(...),
    x_user_email: str = Header(default=""),
) -> Identity:
    """
    Reads the identity headers injected by the gateway after token validation.
    The token has already been verified; these headers are trusted as-is.
    """
    return _parse_identity(x_user_id, x_user_email)


async def _resolve(identity: Identity) -> CurrentUser | None:
    account = await account_crud.lookup_role(identity.id)
    if account is None:
        return None
    return CurrentUser(id=account.id, email=account.email, role=account.role)


async def get_current_user(
    identity: Identity = Depends(get_identity),
) -> CurrentUser:
    """Resolve the caller's role once from its own account row."""
    current_user = await _resolve(identity)
    if current_user is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No account provisioned for this identity",
        )
    return current_user


async def get_optional_user(
    x_user_id: str | None = Header(default=None),
    x_user_email: str = Header(default=""),
) -> CurrentUser | None:
    """Like get_current_user, but anonymous or unprovisioned sessions yield None."""
    if not x_user_id:
        return None
    return await _resolve(_parse_identity(x_user_id, x_user_email))


def require_roles(*allowed: AccountRole):
    """
    Factory that returns a dependency admitting only the given roles.

    Usage:
        @router.get("/protected")
        async def route(user = Depends(require_roles(AccountRole.ADMIN))):
            ...
    """

    async def _dep(
        current_user: CurrentUser = Depends(get_current_user),
    ) -> CurrentUser:
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires role: {', '.join(allowed)}",
            )
        return current_user

    return _dep


# ---------------------------------------------------------------------------
# Pre-built role dependencies
# ---------------------------------------------------------------------------

require_staff = require_roles(AccountRole.ADMIN, AccountRole.SUPER_ADMIN)
require_super_admin = require_roles(AccountRole.SUPER_ADMIN)


def require_internal_token(x_internal_token: str = Header(...)) -> None:
    """Guards hooks that only the auth service may call."""
    if x_internal_token != settings.internal_api_token:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid internal token",
        )


# ---------------------------------------------------------------------------
# AuthClient: thin async wrapper around the auth service API
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def _get_auth_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=settings.auth_service_url,
        timeout=httpx.Timeout(5.0),
        follow_redirects=True,
    )


class AuthClient:
    """
    Thin async wrapper around the auth service's sign-up and sign-in calls.
    4xx answers are passed through to the caller; anything else is a 502.
    """

    @property
    def _client(self) -> httpx.AsyncClient:
        return _get_auth_http_client()

    def _raise_for(self, resp: httpx.Response, action: str) -> None:
        if resp.status_code < 400:
            return
        if resp.status_code < 500:
            try:
                detail = resp.json().get("detail", resp.text)
            except ValueError:
                detail = resp.text
            raise HTTPException(status_code=resp.status_code, detail=detail)
        logger.warning("Auth service {} failed with {}", action, resp.status_code)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"auth service returned {resp.status_code}",
        )

    async def sign_up(self, email: str, password: str, metadata: dict) -> dict:
        """Create an identity. Returns the identity dict (id, email, metadata)."""
        try:
            resp = await self._client.post(
                "/auth/signup",
                json={"email": email, "password": password, "metadata": metadata},
            )
        except httpx.RequestError:
            logger.warning("Auth service unreachable during sign-up", exc_info=True)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="auth service unreachable",
            ) from None
        self._raise_for(resp, "sign-up")
        return resp.json()

    async def sign_in(self, email: str, password: str) -> dict:
        """Exchange credentials for a token payload."""
        try:
            resp = await self._client.post(
                "/auth/token",
                data={"username": email, "password": password},
            )
        except httpx.RequestError:
            logger.warning("Auth service unreachable during sign-in", exc_info=True)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="auth service unreachable",
            ) from None
        self._raise_for(resp, "sign-in")
        return resp.json()


_auth_client = AuthClient()


def get_auth_client() -> AuthClient:
    return _auth_client
