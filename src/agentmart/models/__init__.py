"""Record models validated at the backend boundary."""

from agentmart.models.agent import FAQ, Agent, AgentCreate, AgentDetail, AgentPage, Importance
from agentmart.models.contact import ContactRequest, ContactRequestCreate, ContactStatus
from agentmart.models.package import (
    CUSTOM_PRICE,
    Package,
    PackageCreate,
    normalize_features,
    parse_package_price,
)
from agentmart.models.profile import Profile, Role, UserSummary
from agentmart.models.purchase import PaymentStatus, Purchase, check_transition
from agentmart.models.result import FileCheck, Result, UploadResult, validate_row, validate_rows

__all__ = [
    "CUSTOM_PRICE",
    "FAQ",
    "Agent",
    "AgentCreate",
    "AgentDetail",
    "AgentPage",
    "ContactRequest",
    "ContactRequestCreate",
    "ContactStatus",
    "FileCheck",
    "Importance",
    "Package",
    "PackageCreate",
    "PaymentStatus",
    "Profile",
    "Purchase",
    "Result",
    "Role",
    "UploadResult",
    "UserSummary",
    "check_transition",
    "normalize_features",
    "parse_package_price",
    "validate_row",
    "validate_rows",
]
