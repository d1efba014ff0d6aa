"""Admin user management routes."""

from typing import Annotated

from fastapi import APIRouter, Query, Request, Response
from pydantic import BaseModel

from agentmart.config import settings
from agentmart.dependencies import UserAdminServiceDep
from agentmart.middleware.admin import require_admin
from agentmart.middleware.rate_limit import limiter
from agentmart.models.profile import Profile, UserSummary

router = APIRouter()


class UserListResponse(BaseModel):
    items: list[UserSummary]
    total: int


@router.get("", response_model=UserListResponse)
@limiter.limit(settings.RATE_LIMIT_ADMIN)
@require_admin
async def list_users(
    request: Request,  # noqa: ARG001
    response: Response,  # noqa: ARG001
    users: UserAdminServiceDep,
    search: Annotated[str | None, Query(max_length=200)] = None,
) -> UserListResponse:
    """All profiles, admins first, filtered by e-mail, name or role."""
    items = await users.list_users(search)
    return UserListResponse(items=items, total=len(items))


@router.post("/{user_id}/toggle-role", response_model=Profile)
@limiter.limit(settings.RATE_LIMIT_ADMIN)
@require_admin
async def toggle_role(
    user_id: str,
    request: Request,  # noqa: ARG001
    response: Response,  # noqa: ARG001
    users: UserAdminServiceDep,
) -> Profile:
    """Promote a user to admin. Admin roles cannot be changed here."""
    return await users.toggle_role(user_id)
