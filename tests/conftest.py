"""Shared fixtures for Lumina tests."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from lumina.advisory import AdvisoryService
from lumina.catalog import CatalogStore
from lumina.config import Settings
from lumina.main import create_app
from lumina.schemas import Category, ProductDraft


class FakeClock:
    """Clock that advances one second per reading."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


def make_draft(
    name: str = "Widget",
    sku: str = "WID-001",
    category: Category = Category.OTHER,
    price: float = 10.0,
    quantity: int = 20,
    **kwargs,
) -> ProductDraft:
    """Build a draft with overridable defaults."""
    return ProductDraft(
        name=name, sku=sku, category=category, price=price, quantity=quantity, **kwargs
    )


@pytest.fixture
def clock() -> FakeClock:
    """Deterministic timestamp source."""
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> CatalogStore:
    """Empty catalog store."""
    return CatalogStore(clock=clock)


@pytest.fixture
def scenario_store(clock: FakeClock) -> CatalogStore:
    """Catalog with quantities 15, 4, 8, 42 and 120."""
    return CatalogStore(
        [
            make_draft(name="Ergo Chair Ultra", sku="FUR-001", category=Category.FURNITURE, price=349.99, quantity=15),
            make_draft(name="Wireless Mech Keyboard", sku="ELE-045", category=Category.ELECTRONICS, price=129.5, quantity=4),
            make_draft(name="Standing Desk Frame", sku="FUR-022", category=Category.FURNITURE, price=299.0, quantity=8),
            make_draft(name="USB-C Docking Station", sku="ELE-102", category=Category.ELECTRONICS, price=89.99, quantity=42),
            make_draft(name="Cotton Hoodie", sku="CLO-552", category=Category.CLOTHING, price=45.0, quantity=120),
        ],
        clock=clock,
    )


@pytest.fixture
def settings() -> Settings:
    """Settings with the demo catalog and no Gemini key."""
    return Settings(
        seed_demo_catalog=True,
        gemini_api_key=None,
        log_json=False,
    )


@pytest.fixture
def app(settings: Settings):
    """Fresh application with its own catalog."""
    return create_app(settings)


@pytest.fixture
def client(app):
    """Create test client."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def mock_model() -> MagicMock:
    """Gemini model whose responses tests configure."""
    model = MagicMock()
    model.generate_content_async = AsyncMock()
    return model


@pytest.fixture
def advisory(mock_model: MagicMock) -> AdvisoryService:
    """Advisory service wired to the mock model."""
    service = AdvisoryService(api_key="test-key")
    service._get_model = MagicMock(return_value=mock_model)
    return service


def model_response(text: str | None) -> MagicMock:
    """Fake Gemini response carrying the given text."""
    response = MagicMock()
    response.text = text
    return response
