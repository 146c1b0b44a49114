from fastapi import APIRouter, Depends

from app.deps import CurrentUser, get_optional_user
from app.schemas import ViewDecision
from app.views import resolve_view

router = APIRouter(prefix="/views", tags=["views"])


@router.get("/resolve", response_model=ViewDecision)
async def resolve(
    path: str = "/",
    current_user: CurrentUser | None = Depends(get_optional_user),
) -> ViewDecision:
    return resolve_view(current_user.role if current_user else None, path)
