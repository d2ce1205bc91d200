"""Inventory table endpoints.

The inventory view keeps a filter spec and a selection between requests.
Batch actions apply to the selected products still in the catalog and
then clear the selection.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from lumina.api.dependencies import get_app_settings, get_catalog, get_inventory_view
from lumina.catalog import CatalogStore
from lumina.config import Settings
from lumina.export import export_csv, export_filename
from lumina.query import InventoryView
from lumina.schemas import (
    BatchResult,
    FilterSpec,
    InventoryResponse,
    SelectionResponse,
)

router = APIRouter(prefix="/inventory", tags=["Inventory"])


# ============================================================================
# Converters
# ============================================================================


def selection_to_response(view: InventoryView, catalog: CatalogStore) -> SelectionResponse:
    """Describe the selection against the current snapshot and filter."""
    snapshot = catalog.snapshot()
    ids = view.selection.resolve(snapshot)
    return SelectionResponse(
        ids=ids,
        count=len(ids),
        state=view.selection.state(view.visible(snapshot), snapshot),
    )


def inventory_to_response(view: InventoryView, catalog: CatalogStore) -> InventoryResponse:
    """Render the inventory table."""
    snapshot = catalog.snapshot()
    rows = view.rows(snapshot)
    return InventoryResponse(
        items=rows,
        total=len(snapshot),
        visible=len(rows),
        filter=view.spec,
        selection=selection_to_response(view, catalog),
    )


# ============================================================================
# Table and Filter
# ============================================================================


@router.get("", response_model=InventoryResponse, summary="Filtered inventory table")
async def get_inventory(
    catalog: Annotated[CatalogStore, Depends(get_catalog)],
    view: Annotated[InventoryView, Depends(get_inventory_view)],
) -> InventoryResponse:
    """Visible rows under the current filter, with selection state."""
    return inventory_to_response(view, catalog)


@router.put("/filter", response_model=InventoryResponse, summary="Set the filter")
async def set_filter(
    spec: FilterSpec,
    catalog: Annotated[CatalogStore, Depends(get_catalog)],
    view: Annotated[InventoryView, Depends(get_inventory_view)],
) -> InventoryResponse:
    """Replace the filter spec and return the new table."""
    view.set_filter(spec)
    return inventory_to_response(view, catalog)


@router.delete("/filter", response_model=InventoryResponse, summary="Reset the filter")
async def reset_filter(
    catalog: Annotated[CatalogStore, Depends(get_catalog)],
    view: Annotated[InventoryView, Depends(get_inventory_view)],
) -> InventoryResponse:
    """Show every product again."""
    view.reset_filter()
    return inventory_to_response(view, catalog)


# ============================================================================
# Selection
# ============================================================================


@router.get("/selection", response_model=SelectionResponse, summary="Current selection")
async def get_selection(
    catalog: Annotated[CatalogStore, Depends(get_catalog)],
    view: Annotated[InventoryView, Depends(get_inventory_view)],
) -> SelectionResponse:
    """Selected IDs that still exist, and the select-all state."""
    return selection_to_response(view, catalog)


@router.post(
    "/selection/toggle/{product_id}",
    response_model=SelectionResponse,
    summary="Toggle one product",
)
async def toggle_selection(
    product_id: str,
    catalog: Annotated[CatalogStore, Depends(get_catalog)],
    view: Annotated[InventoryView, Depends(get_inventory_view)],
) -> SelectionResponse:
    """Flip selection of a single product."""
    view.selection.toggle(product_id)
    return selection_to_response(view, catalog)


@router.post(
    "/selection/select-all",
    response_model=SelectionResponse,
    summary="Select-all checkbox",
    description=(
        "Deselects the visible rows if all are selected, otherwise selects them. "
        "Selections outside the current filter are kept."
    ),
)
async def select_all(
    catalog: Annotated[CatalogStore, Depends(get_catalog)],
    view: Annotated[InventoryView, Depends(get_inventory_view)],
) -> SelectionResponse:
    """Apply the select-all checkbox to the visible rows."""
    view.select_all_visible(catalog.snapshot())
    return selection_to_response(view, catalog)


@router.delete("/selection", response_model=SelectionResponse, summary="Clear selection")
async def clear_selection(
    catalog: Annotated[CatalogStore, Depends(get_catalog)],
    view: Annotated[InventoryView, Depends(get_inventory_view)],
) -> SelectionResponse:
    """Empty the selection."""
    view.selection.clear()
    return selection_to_response(view, catalog)


# ============================================================================
# Batch Actions
# ============================================================================


@router.post("/batch/delete", response_model=BatchResult, summary="Delete selected")
async def batch_delete(
    catalog: Annotated[CatalogStore, Depends(get_catalog)],
    view: Annotated[InventoryView, Depends(get_inventory_view)],
) -> BatchResult:
    """Delete every selected product and clear the selection."""
    ids = view.batch_delete(catalog)
    return BatchResult(action="delete", affected=len(ids), ids=ids)


@router.post(
    "/batch/mark-low-stock",
    response_model=BatchResult,
    summary="Mark selected as low stock",
)
async def batch_mark_low_stock(
    catalog: Annotated[CatalogStore, Depends(get_catalog)],
    view: Annotated[InventoryView, Depends(get_inventory_view)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> BatchResult:
    """Set every selected product to the low-stock quantity and clear the selection."""
    ids = view.batch_mark_low_stock(catalog, settings.batch_low_stock_quantity)
    return BatchResult(action="mark_low_stock", affected=len(ids), ids=ids)


# ============================================================================
# Export
# ============================================================================


@router.get(
    "/export",
    summary="Export visible rows as CSV",
    responses={
        200: {"content": {"text/csv": {}}},
        204: {"description": "Nothing visible to export"},
    },
)
async def export_inventory(
    catalog: Annotated[CatalogStore, Depends(get_catalog)],
    view: Annotated[InventoryView, Depends(get_inventory_view)],
) -> Response:
    """Download the visible rows in filter order."""
    visible = view.visible(catalog.snapshot())
    if not visible:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return Response(
        content=export_csv(visible),
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{export_filename()}"',
        },
    )
