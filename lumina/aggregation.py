"""Dashboard aggregates derived from a catalog snapshot.

Pure functions; callers recompute them on every read instead of caching.
"""

from collections.abc import Sequence

from lumina.schemas import (
    Category,
    CategoryCount,
    DashboardResponse,
    DashboardStats,
    PricePoint,
    Product,
    StockTrend,
)

# Dashboard counts zero-quantity products as low stock; the inventory
# filter's Low Stock bucket does not (see lumina.query).
LOW_STOCK_THRESHOLD = 10

# The dashboard raises its alert only when more than this many items are low.
LOW_STOCK_ALERT_COUNT = 1


def compute_stats(snapshot: Sequence[Product]) -> DashboardStats:
    """Compute the dashboard card statistics.

    Args:
        snapshot: Catalog snapshot.

    Returns:
        Totals and low/out-of-stock counts.
    """
    return DashboardStats(
        total_products=len(snapshot),
        total_value=sum(p.price * p.quantity for p in snapshot),
        low_stock_items=sum(1 for p in snapshot if p.quantity < LOW_STOCK_THRESHOLD),
        out_of_stock_items=sum(1 for p in snapshot if p.quantity == 0),
    )


def compute_category_breakdown(snapshot: Sequence[Product]) -> dict[Category, int]:
    """Count products per category.

    Only categories present in the snapshot appear, in order of first
    appearance.
    """
    counts: dict[Category, int] = {}
    for product in snapshot:
        counts[product.category] = counts.get(product.category, 0) + 1
    return counts


def compute_price_distribution(
    snapshot: Sequence[Product], limit: int = 8
) -> list[PricePoint]:
    """Sample of individual product prices for the bar chart."""
    return [PricePoint(name=p.name, price=p.price) for p in snapshot[:limit]]


def stock_trend(history: Sequence[int]) -> StockTrend | None:
    """Direction of a quantity history, comparing last to first observation.

    Returns:
        None when there are fewer than two observations.
    """
    if len(history) < 2:
        return None
    first, last = history[0], history[-1]
    if last > first:
        return StockTrend.UP
    if last < first:
        return StockTrend.DOWN
    return StockTrend.FLAT


def build_dashboard(snapshot: Sequence[Product], price_limit: int = 8) -> DashboardResponse:
    """Assemble everything the dashboard view shows."""
    stats = compute_stats(snapshot)
    return DashboardResponse(
        stats=stats,
        categories=[
            CategoryCount(name=category, value=count)
            for category, count in compute_category_breakdown(snapshot).items()
        ],
        price_distribution=compute_price_distribution(snapshot, price_limit),
        low_stock_alert=stats.low_stock_items > LOW_STOCK_ALERT_COUNT,
    )
