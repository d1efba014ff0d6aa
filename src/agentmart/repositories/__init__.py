"""Validated access to the backend's tables."""

from agentmart.repositories.agents import AgentRepository
from agentmart.repositories.contact_requests import ContactRequestRepository
from agentmart.repositories.packages import PackageRepository
from agentmart.repositories.profiles import ProfileRepository
from agentmart.repositories.purchases import PurchaseRepository

__all__ = [
    "AgentRepository",
    "ContactRequestRepository",
    "PackageRepository",
    "ProfileRepository",
    "PurchaseRepository",
]
