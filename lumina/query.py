"""Inventory filtering and selection.

`filtered_view` is a pure function of a snapshot and a filter spec.
`SelectionSet` tracks the IDs marked for a batch action, and
`InventoryView` ties the current filter spec and selection together for
the inventory table.
"""

from collections.abc import Iterable, Iterator, Sequence

import structlog

from lumina.aggregation import LOW_STOCK_THRESHOLD, stock_trend
from lumina.catalog import CatalogStore
from lumina.schemas import (
    ALL_CATEGORIES,
    FilterSpec,
    InventoryRow,
    Product,
    SelectionState,
    StockFilter,
)

logger = structlog.get_logger()

# Quantity the "mark as low stock" batch action sets.
LOW_STOCK_MARK_QUANTITY = 5


# ============================================================================
# Filtering
# ============================================================================


def stock_status(quantity: int) -> StockFilter:
    """Bucket a quantity into In Stock, Low Stock or Out of Stock."""
    if quantity == 0:
        return StockFilter.OUT_OF_STOCK
    if quantity < LOW_STOCK_THRESHOLD:
        return StockFilter.LOW_STOCK
    return StockFilter.IN_STOCK


def filtered_view(snapshot: Sequence[Product], spec: FilterSpec) -> list[Product]:
    """Products matching every predicate of the filter spec, in snapshot order.

    Args:
        snapshot: Catalog snapshot.
        spec: Search text, category and stock bucket.

    Returns:
        Matching products.
    """
    filtered = list(snapshot)

    if spec.search_text:
        search_lower = spec.search_text.lower()
        filtered = [
            p
            for p in filtered
            if search_lower in p.name.lower() or search_lower in p.sku.lower()
        ]

    if spec.category != ALL_CATEGORIES:
        filtered = [p for p in filtered if p.category == spec.category]

    if spec.stock != StockFilter.ALL:
        filtered = [p for p in filtered if stock_status(p.quantity) == spec.stock]

    return filtered


# ============================================================================
# Selection
# ============================================================================


class SelectionSet:
    """IDs marked for a batch action.

    IDs are not pruned when products disappear from the catalog; use
    `resolve` to read only the IDs that still exist.
    """

    def __init__(self, ids: Iterable[str] = ()) -> None:
        self._ids: set[str] = set(ids)

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._ids

    def __iter__(self) -> Iterator[str]:
        return iter(self._ids)

    @property
    def ids(self) -> frozenset[str]:
        """Raw selected IDs, including any that no longer exist."""
        return frozenset(self._ids)

    def toggle(self, product_id: str) -> bool:
        """Flip membership of one ID.

        Returns:
            True if the ID is selected afterwards.
        """
        if product_id in self._ids:
            self._ids.discard(product_id)
            return False
        self._ids.add(product_id)
        return True

    def all_selected(self, view: Sequence[Product]) -> bool:
        """Whether the view is non-empty and every row in it is selected."""
        return bool(view) and all(p.id in self._ids for p in view)

    def select_all_visible(self, view: Sequence[Product]) -> None:
        """Select-all checkbox over the visible rows.

        Deselects exactly the visible IDs when all of them are already
        selected; otherwise adds them to the selection. IDs outside the view
        are never touched.
        """
        visible_ids = {p.id for p in view}
        if self.all_selected(view):
            self._ids -= visible_ids
        else:
            self._ids |= visible_ids

    def clear(self) -> None:
        """Empty the selection."""
        self._ids.clear()

    def state(
        self, view: Sequence[Product], snapshot: Sequence[Product] | None = None
    ) -> SelectionState:
        """Tri-state of the select-all checkbox for the given view.

        When a snapshot is given, IDs missing from it do not count as
        selected, so a selection made only of deleted products is unchecked.
        """
        if self.all_selected(view):
            return SelectionState.CHECKED
        live = self._ids if snapshot is None else self.resolve(snapshot)
        if live:
            return SelectionState.INDETERMINATE
        return SelectionState.UNCHECKED

    def resolve(self, snapshot: Sequence[Product]) -> list[str]:
        """Selected IDs present in the snapshot, in snapshot order."""
        return [p.id for p in snapshot if p.id in self._ids]


# ============================================================================
# Inventory View
# ============================================================================


class InventoryView:
    """Filter spec and selection of the inventory table.

    Both live until explicitly reset; catalog changes do not reset them.
    """

    def __init__(self, spec: FilterSpec | None = None) -> None:
        self.spec = spec or FilterSpec()
        self.selection = SelectionSet()

    def set_filter(self, spec: FilterSpec) -> None:
        """Replace the current filter spec."""
        self.spec = spec

    def reset_filter(self) -> None:
        """Restore the match-everything filter spec."""
        self.spec = FilterSpec()

    def visible(self, snapshot: Sequence[Product]) -> list[Product]:
        """Rows matching the current filter spec."""
        return filtered_view(snapshot, self.spec)

    def rows(self, snapshot: Sequence[Product]) -> list[InventoryRow]:
        """Visible rows with stock status, trend and selection flags."""
        return [
            InventoryRow(
                product=product,
                stock_status=stock_status(product.quantity),
                needs_attention=product.quantity < LOW_STOCK_THRESHOLD,
                trend=stock_trend(product.history),
                selected=product.id in self.selection,
            )
            for product in self.visible(snapshot)
        ]

    def select_all_visible(self, snapshot: Sequence[Product]) -> None:
        """Apply the select-all checkbox to the currently visible rows."""
        self.selection.select_all_visible(self.visible(snapshot))

    def batch_delete(self, store: CatalogStore) -> list[str]:
        """Delete the selected products still in the catalog, then clear.

        Returns:
            IDs that were deleted.
        """
        ids = self.selection.resolve(store.snapshot())
        store.batch_delete(ids)
        self.selection.clear()
        logger.info("Selection deleted", count=len(ids))
        return ids

    def batch_mark_low_stock(
        self, store: CatalogStore, quantity: int = LOW_STOCK_MARK_QUANTITY
    ) -> list[str]:
        """Set the selected products to a low-stock quantity, then clear.

        Returns:
            IDs that were changed.
        """
        ids = self.selection.resolve(store.snapshot())
        store.batch_set_quantity(ids, quantity)
        self.selection.clear()
        logger.info("Selection marked low stock", count=len(ids), quantity=quantity)
        return ids
