"""Tests for dashboard aggregates."""

import itertools

import pytest

from lumina.aggregation import (
    build_dashboard,
    compute_category_breakdown,
    compute_price_distribution,
    compute_stats,
    stock_trend,
)
from lumina.schemas import Category, StockTrend
from tests.conftest import make_draft


class TestComputeStats:
    """Tests for the stat cards."""

    def test_scenario_quantities(self, scenario_store):
        """Quantities 15, 4, 8, 42, 120 give two low-stock items and none out."""
        stats = compute_stats(scenario_store.snapshot())

        assert stats.total_products == 5
        assert stats.low_stock_items == 2
        assert stats.out_of_stock_items == 0

    def test_total_value(self, scenario_store):
        """Total value sums price times quantity."""
        stats = compute_stats(scenario_store.snapshot())

        expected = 349.99 * 15 + 129.5 * 4 + 299.0 * 8 + 89.99 * 42 + 45.0 * 120
        assert stats.total_value == pytest.approx(expected)

    def test_zero_quantity_counts_as_low_and_out(self, store):
        """Out-of-stock products are also counted as low stock."""
        store.add(make_draft(quantity=0))
        store.add(make_draft(quantity=9))
        store.add(make_draft(quantity=10))

        stats = compute_stats(store.snapshot())

        assert stats.low_stock_items == 2
        assert stats.out_of_stock_items == 1

    def test_empty_snapshot(self):
        """Empty catalog gives all zeros."""
        stats = compute_stats(())

        assert stats.total_products == 0
        assert stats.total_value == 0
        assert stats.low_stock_items == 0
        assert stats.out_of_stock_items == 0

    def test_order_independent(self, scenario_store):
        """Reordering the snapshot does not change the stats."""
        snapshot = scenario_store.snapshot()
        baseline = compute_stats(snapshot)

        for permutation in itertools.islice(itertools.permutations(snapshot), 30):
            stats = compute_stats(permutation)
            assert stats.total_products == baseline.total_products
            assert stats.low_stock_items == baseline.low_stock_items
            assert stats.out_of_stock_items == baseline.out_of_stock_items
            assert stats.total_value == pytest.approx(baseline.total_value)


class TestCategoryBreakdown:
    """Tests for the category pie chart data."""

    def test_counts_present_categories(self, scenario_store):
        """Only categories in the catalog appear."""
        breakdown = compute_category_breakdown(scenario_store.snapshot())

        assert breakdown == {
            Category.FURNITURE: 2,
            Category.ELECTRONICS: 2,
            Category.CLOTHING: 1,
        }
        assert Category.OFFICE not in breakdown

    def test_first_appearance_order(self, scenario_store):
        """Categories are listed in order of first appearance."""
        breakdown = compute_category_breakdown(scenario_store.snapshot())
        assert list(breakdown) == [Category.FURNITURE, Category.ELECTRONICS, Category.CLOTHING]

    def test_empty(self):
        """Empty catalog gives an empty breakdown."""
        assert compute_category_breakdown(()) == {}


class TestPriceDistribution:
    """Tests for the price bar chart sample."""

    def test_limits_sample(self, store):
        """Only the first products are sampled."""
        for i in range(10):
            store.add(make_draft(name=f"P{i}", price=float(i)))

        points = compute_price_distribution(store.snapshot(), limit=8)

        assert [p.name for p in points] == [f"P{i}" for i in range(8)]
        assert points[3].price == 3.0


class TestStockTrend:
    """Tests for sparkline direction."""

    @pytest.mark.parametrize(
        "history, expected",
        [
            ((), None),
            ((5,), None),
            ((12, 15, 13, 18, 15, 20, 15), StockTrend.UP),
            ((8, 6, 5, 7, 5, 4, 4), StockTrend.DOWN),
            ((5, 8, 12, 10, 9, 8, 5), StockTrend.FLAT),
        ],
    )
    def test_trend(self, history, expected):
        """Trend compares the last observation to the first."""
        assert stock_trend(history) == expected


class TestBuildDashboard:
    """Tests for the assembled dashboard."""

    def test_dashboard(self, scenario_store):
        """Dashboard combines stats, categories and price sample."""
        dashboard = build_dashboard(scenario_store.snapshot())

        assert dashboard.stats.total_products == 5
        assert [c.name for c in dashboard.categories] == [
            Category.FURNITURE,
            Category.ELECTRONICS,
            Category.CLOTHING,
        ]
        assert len(dashboard.price_distribution) == 5
        assert dashboard.low_stock_alert is True

    def test_alert_needs_more_than_one_low_item(self, store):
        """A single low-stock item does not raise the alert."""
        store.add(make_draft(quantity=3))
        store.add(make_draft(quantity=30))

        assert build_dashboard(store.snapshot()).low_stock_alert is False
