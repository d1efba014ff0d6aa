"""API routes."""

from fastapi import APIRouter

from agentmart.routes import agents, auth, contact, packages, services
from agentmart.routes.admin import router as admin_router

api_router = APIRouter(prefix="/api")
api_router.include_router(agents.router)
api_router.include_router(services.router)
api_router.include_router(packages.router)
api_router.include_router(contact.router)
api_router.include_router(auth.router)
api_router.include_router(admin_router)
