"""FastAPI dependency functions."""

from typing import Annotated

from fastapi import Depends, Request

from agentmart.backend import BackendClient
from agentmart.config import settings
from agentmart.drafts import DraftStore
from agentmart.files import AgentFileStore
from agentmart.payments import PaymentGateway
from agentmart.redis_client import RedisClient
from agentmart.repositories import (
    AgentRepository,
    ContactRequestRepository,
    PackageRepository,
    ProfileRepository,
    PurchaseRepository,
)
from agentmart.services.admin_agents import AdminAgentService
from agentmart.services.purchases import PurchaseService
from agentmart.services.users import UserAdminService
from agentmart.session import UserSession


def get_session(request: Request) -> UserSession:
    """The caller's session as resolved by AuthMiddleware."""
    session = getattr(request.state, "session", None)
    return session if isinstance(session, UserSession) else UserSession.anonymous()


SessionDep = Annotated[UserSession, Depends(get_session)]


def get_backend(request: Request, session: SessionDep) -> BackendClient:
    """Backend client acting as the caller."""
    client: BackendClient = request.app.state.backend
    return client.with_token(session.access_token)


BackendDep = Annotated[BackendClient, Depends(get_backend)]


def get_agent_repository(backend: BackendDep) -> AgentRepository:
    return AgentRepository(backend)


def get_package_repository(backend: BackendDep) -> PackageRepository:
    return PackageRepository(backend)


def get_contact_repository(backend: BackendDep) -> ContactRequestRepository:
    return ContactRequestRepository(backend)


def get_profile_repository(backend: BackendDep) -> ProfileRepository:
    return ProfileRepository(backend)


def get_purchase_repository(backend: BackendDep) -> PurchaseRepository:
    return PurchaseRepository(backend)


def get_file_store(backend: BackendDep) -> AgentFileStore:
    return AgentFileStore(backend)


def get_draft_store(request: Request) -> DraftStore:
    redis: RedisClient = request.app.state.redis
    return DraftStore(redis, ttl_seconds=settings.DRAFT_TTL_SECONDS)


def get_payment_gateway(request: Request) -> PaymentGateway:
    gateway: PaymentGateway = request.app.state.payment_gateway
    return gateway


AgentRepoDep = Annotated[AgentRepository, Depends(get_agent_repository)]
PackageRepoDep = Annotated[PackageRepository, Depends(get_package_repository)]
ContactRepoDep = Annotated[ContactRequestRepository, Depends(get_contact_repository)]
ProfileRepoDep = Annotated[ProfileRepository, Depends(get_profile_repository)]
PurchaseRepoDep = Annotated[PurchaseRepository, Depends(get_purchase_repository)]
FileStoreDep = Annotated[AgentFileStore, Depends(get_file_store)]
DraftStoreDep = Annotated[DraftStore, Depends(get_draft_store)]


def get_purchase_service(
    agents: AgentRepoDep,
    purchases: PurchaseRepoDep,
    files: FileStoreDep,
    gateway: Annotated[PaymentGateway, Depends(get_payment_gateway)],
) -> PurchaseService:
    return PurchaseService(agents, purchases, files, gateway)


def get_admin_agent_service(
    agents: AgentRepoDep,
    files: FileStoreDep,
    drafts: DraftStoreDep,
) -> AdminAgentService:
    return AdminAgentService(agents, files, drafts)


def get_user_admin_service(backend: BackendDep, profiles: ProfileRepoDep) -> UserAdminService:
    return UserAdminService(backend, profiles, settings.admin_emails)


PurchaseServiceDep = Annotated[PurchaseService, Depends(get_purchase_service)]
AdminAgentServiceDep = Annotated[AdminAgentService, Depends(get_admin_agent_service)]
UserAdminServiceDep = Annotated[UserAdminService, Depends(get_user_admin_service)]
