"""Admin routes module."""

from fastapi import APIRouter

from agentmart.routes.admin import agents, contact_requests, packages, users

router = APIRouter(prefix="/admin", tags=["admin"])

router.include_router(agents.router, prefix="/agents", tags=["admin-agents"])
router.include_router(packages.router, prefix="/packages", tags=["admin-packages"])
router.include_router(
    contact_requests.router, prefix="/contact-requests", tags=["admin-contact-requests"]
)
router.include_router(users.router, prefix="/users", tags=["admin-users"])
