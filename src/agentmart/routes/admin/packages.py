"""Admin package management routes."""

from typing import Any

import structlog
from fastapi import APIRouter, Request, Response, status
from pydantic import BaseModel

from agentmart.config import settings
from agentmart.dependencies import PackageRepoDep
from agentmart.exceptions import RecordNotFoundError
from agentmart.middleware.admin import require_admin
from agentmart.middleware.rate_limit import limiter
from agentmart.models.package import Package, PackageCreate, normalize_features

logger = structlog.get_logger()

router = APIRouter()


class FeaturesUpdate(BaseModel):
    """New feature list; a JSON string or object is accepted as well."""

    features: list[str] | str | dict[str, Any] | None = None


@router.get("", response_model=list[Package])
@limiter.limit(settings.RATE_LIMIT_ADMIN)
@require_admin
async def list_packages(
    request: Request,  # noqa: ARG001
    response: Response,  # noqa: ARG001
    packages: PackageRepoDep,
) -> list[Package]:
    return await packages.list_all()


@router.post("", response_model=Package, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.RATE_LIMIT_ADMIN)
@require_admin
async def create_package(
    data: PackageCreate,
    request: Request,  # noqa: ARG001
    response: Response,  # noqa: ARG001
    packages: PackageRepoDep,
) -> Package:
    created = await packages.create(data)
    logger.info("Package created", package_id=created.id)
    return created


@router.put("/{package_id}/features", response_model=Package)
@limiter.limit(settings.RATE_LIMIT_ADMIN)
@require_admin
async def update_features(
    package_id: str,
    data: FeaturesUpdate,
    request: Request,  # noqa: ARG001
    response: Response,  # noqa: ARG001
    packages: PackageRepoDep,
) -> Package:
    updated = await packages.update_features(package_id, normalize_features(data.features))
    if updated is None:
        raise RecordNotFoundError("Package", package_id)
    return updated


@router.post("/{package_id}/toggle-popular", response_model=Package)
@limiter.limit(settings.RATE_LIMIT_ADMIN)
@require_admin
async def toggle_popular(
    package_id: str,
    request: Request,  # noqa: ARG001
    response: Response,  # noqa: ARG001
    packages: PackageRepoDep,
) -> Package:
    package = await packages.get(package_id)
    if package is None:
        raise RecordNotFoundError("Package", package_id)
    updated = await packages.set_popular(package_id, not package.is_popular)
    return updated or package.model_copy(update={"is_popular": not package.is_popular})


@router.delete("/{package_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(settings.RATE_LIMIT_ADMIN)
@require_admin
async def delete_package(
    package_id: str,
    request: Request,  # noqa: ARG001
    response: Response,  # noqa: ARG001
    packages: PackageRepoDep,
) -> None:
    if not await packages.delete(package_id):
        raise RecordNotFoundError("Package", package_id)
    logger.info("Package deleted", package_id=package_id)
