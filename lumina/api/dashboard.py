"""Dashboard endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends

from lumina.aggregation import build_dashboard
from lumina.api.dependencies import get_app_settings, get_catalog
from lumina.catalog import CatalogStore
from lumina.config import Settings
from lumina.schemas import DashboardResponse

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get(
    "",
    response_model=DashboardResponse,
    summary="Dashboard aggregates",
    description="Stat cards, category breakdown and price distribution sample.",
)
async def get_dashboard(
    catalog: Annotated[CatalogStore, Depends(get_catalog)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> DashboardResponse:
    """Recompute the dashboard from the current catalog snapshot."""
    return build_dashboard(catalog.snapshot(), price_limit=settings.price_chart_limit)
