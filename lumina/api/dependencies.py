"""Request dependencies.

Each application owns its catalog, inventory view and advisory service on
`app.state`; handlers receive them through these functions.
"""

from fastapi import Request

from lumina.advisory import AdvisoryService, AnalysisBoard
from lumina.catalog import CatalogStore
from lumina.config import Settings
from lumina.query import InventoryView


def get_catalog(request: Request) -> CatalogStore:
    """Get the application's catalog store."""
    return request.app.state.catalog


def get_inventory_view(request: Request) -> InventoryView:
    """Get the application's inventory view."""
    return request.app.state.inventory_view


def get_advisory(request: Request) -> AdvisoryService:
    """Get the application's advisory service."""
    return request.app.state.advisory


def get_analysis_board(request: Request) -> AnalysisBoard:
    """Get the application's analysis board."""
    return request.app.state.analysis_board


def get_app_settings(request: Request) -> Settings:
    """Get the settings the application was created with."""
    return request.app.state.settings
