"""Health check endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from lumina.advisory import AdvisoryService
from lumina.api.dependencies import get_advisory, get_app_settings, get_catalog
from lumina.catalog import CatalogStore
from lumina.config import Settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
    version: str
    product_count: int
    catalog_version: int
    advisory_enabled: bool


@router.get("/health", response_model=HealthResponse)
async def health_check(
    catalog: Annotated[CatalogStore, Depends(get_catalog)],
    advisory: Annotated[AdvisoryService, Depends(get_advisory)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> HealthResponse:
    """Check service health.

    Returns:
        Health status with service name, version and catalog size.
    """
    return HealthResponse(
        status="healthy",
        service=settings.app_name,
        version=settings.api_version,
        product_count=len(catalog),
        catalog_version=catalog.version,
        advisory_enabled=advisory.enabled,
    )
