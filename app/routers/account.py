from fastapi import APIRouter, Depends, HTTPException, status

from app.crud import account_crud
from app.deps import CurrentUser, get_current_user, require_super_admin
from app.schemas import AccountResponse, AccountUpdate

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.get("/me", response_model=AccountResponse)
async def get_my_account(
    current_user: CurrentUser = Depends(get_current_user),
) -> AccountResponse:
    account = await account_crud.get_account(current_user)
    if not account:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Account not found"
        )
    return account


@router.patch("/me", response_model=AccountResponse)
async def update_my_account(
    payload: AccountUpdate,
    current_user: CurrentUser = Depends(get_current_user),
) -> AccountResponse:
    """Name and phone only. Role changes are not possible through this path."""
    account = await account_crud.update_account(current_user, payload)
    if not account:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Account not found"
        )
    return account


@router.get(
    "/staff",
    response_model=list[AccountResponse],
    dependencies=[Depends(require_super_admin)],
)
async def list_staff() -> list[AccountResponse]:
    return await account_crud.list_staff()
