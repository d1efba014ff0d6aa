"""Public subscription packages."""

import structlog
from fastapi import APIRouter
from pydantic import BaseModel

from agentmart.dependencies import PackageRepoDep
from agentmart.exceptions import BackendError
from agentmart.models.package import Package
from agentmart.sample_data import SAMPLE_PACKAGES

logger = structlog.get_logger()

router = APIRouter(prefix="/packages", tags=["packages"])


class PackageListResponse(BaseModel):
    items: list[Package]
    fallback: bool = False


@router.get("", response_model=PackageListResponse)
async def list_packages(packages: PackageRepoDep) -> PackageListResponse:
    """Pricing tiers, or the sample tiers when none can be loaded."""
    try:
        items = await packages.list_all()
    except BackendError as e:
        logger.warning("Packages unavailable, serving samples", error=e.message)
        items = []
    if not items:
        return PackageListResponse(items=list(SAMPLE_PACKAGES), fallback=True)
    return PackageListResponse(items=items)
