"""Session introspection and sign-out."""

from fastapi import APIRouter, status
from pydantic import BaseModel

from agentmart.dependencies import BackendDep, SessionDep
from agentmart.exceptions import AuthenticationRequiredError
from agentmart.models.profile import Profile, Role

router = APIRouter(prefix="/auth", tags=["auth"])


class SessionResponse(BaseModel):
    is_logged_in: bool
    is_admin: bool
    user_id: str | None = None
    email: str | None = None
    role: Role = Role.USER
    profile: Profile | None = None


@router.get("/session", response_model=SessionResponse)
async def get_session_info(session: SessionDep) -> SessionResponse:
    """Who the caller is, as the pages see it."""
    return SessionResponse(
        is_logged_in=session.is_logged_in,
        is_admin=session.is_admin,
        user_id=session.user_id,
        email=session.email,
        role=session.role,
        profile=session.profile,
    )


@router.post("/sign-out", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(session: SessionDep, backend: BackendDep) -> None:
    """Revoke the caller's session with the identity provider."""
    if not session.access_token:
        raise AuthenticationRequiredError
    await backend.auth.sign_out(session.access_token)
