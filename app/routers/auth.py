from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from loguru import logger

from app import settings
from app.crud import account_crud
from app.deps import AuthClient, get_auth_client, require_internal_token
from app.roles import STAFF_ROLES
from app.schemas import AccountResponse, IdentityCreated, SignInRequest, SignUpRequest

router = APIRouter(tags=["auth"])


def _is_organization_email(email: str) -> bool:
    domain = email.rsplit("@", 1)[-1].lower()
    return domain in settings.allowed_staff_domains


@router.post(
    "/auth/signup",
    response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
)
async def sign_up(
    payload: SignUpRequest,
    auth_client: AuthClient = Depends(get_auth_client),
) -> AccountResponse:
    """
    Create the identity in the auth service, then provision its account
    right away so the first authenticated request already has a role.
    """
    if payload.role in STAFF_ROLES and not _is_organization_email(payload.email):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Staff accounts are restricted to organization emails",
        )

    metadata = {"role": payload.role.value}
    if payload.name:
        metadata["name"] = payload.name

    identity = await auth_client.sign_up(payload.email, payload.password, metadata)
    identity_id = UUID(str(identity["id"]))

    try:
        account, _ = await account_crud.provision_account(
            identity_id,
            identity.get("email", payload.email),
            name=payload.name,
            role=payload.role,
        )
    except Exception:
        logger.exception("Account provisioning failed for identity {}", identity_id)
        raise
    return account


@router.post("/auth/signin")
async def sign_in(
    payload: SignInRequest,
    auth_client: AuthClient = Depends(get_auth_client),
) -> dict:
    return await auth_client.sign_in(payload.email, payload.password)


@router.post(
    "/internal/identities",
    response_model=AccountResponse,
    dependencies=[Depends(require_internal_token)],
)
async def identity_created(
    payload: IdentityCreated,
    response: Response,
) -> AccountResponse:
    """Hook the auth service calls after creating an identity. Safe to redeliver."""
    account, created = await account_crud.provision_account(
        payload.id,
        payload.email,
        name=payload.metadata.name,
        role=payload.metadata.role,
    )
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return account
