"""Pydantic schemas for Lumina.

Defines the product record, the dashboard and inventory views, advisory
payloads, and the request/response models of the HTTP surface.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ============================================================================
# Common Types
# ============================================================================


class Category(str, Enum):
    """Product categories."""

    ELECTRONICS = "Electronics"
    FURNITURE = "Furniture"
    CLOTHING = "Clothing"
    OFFICE = "Office Supplies"
    OTHER = "Other"


class StockFilter(str, Enum):
    """Stock-status buckets used by the inventory filter."""

    ALL = "All"
    IN_STOCK = "In Stock"
    LOW_STOCK = "Low Stock"
    OUT_OF_STOCK = "Out of Stock"


class SelectionState(str, Enum):
    """State of the select-all checkbox over the visible rows."""

    UNCHECKED = "unchecked"
    CHECKED = "checked"
    INDETERMINATE = "indeterminate"


class StockTrend(str, Enum):
    """Direction of a product's quantity history."""

    UP = "up"
    DOWN = "down"
    FLAT = "flat"


ALL_CATEGORIES = "All"


class ErrorResponse(BaseModel):
    """Standard error response."""

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable message")
    details: list | dict = Field(default_factory=list, description="Extra context")
    request_id: str | None = Field(None, description="Request correlation ID")


# ============================================================================
# Product Schemas
# ============================================================================


class ProductDraft(BaseModel):
    """Product fields supplied by the user, without identity or timestamp.

    Blank names and SKUs fall back to the placeholders the edit form used.
    """

    name: str = Field(default="Untitled", max_length=255, description="Display name")
    sku: str = Field(default="N/A", max_length=64, description="Stock Keeping Unit")
    category: Category = Field(default=Category.OTHER, description="Product category")
    price: float = Field(default=0, ge=0, allow_inf_nan=False, description="Unit price")
    quantity: int = Field(default=0, ge=0, description="Units on hand")
    description: str = Field(default="", description="Free-text description")
    history: tuple[int, ...] = Field(
        default=(), description="Past quantity observations, oldest first"
    )

    @field_validator("name", "sku", mode="before")
    @classmethod
    def _blank_to_placeholder(cls, value, info):
        if value is None or (isinstance(value, str) and not value.strip()):
            return "Untitled" if info.field_name == "name" else "N/A"
        return value


class Product(BaseModel):
    """A catalog record.

    Instances are frozen; the catalog store replaces records instead of
    mutating them, so snapshots handed to readers never change underneath.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Product ID")
    name: str = Field(..., description="Display name")
    sku: str = Field(..., description="Stock Keeping Unit")
    category: Category = Field(..., description="Product category")
    price: float = Field(..., description="Unit price")
    quantity: int = Field(..., description="Units on hand")
    description: str = Field(default="", description="Free-text description")
    last_updated: datetime = Field(..., description="Time of the last create/update (UTC)")
    history: tuple[int, ...] = Field(
        default=(), description="Past quantity observations, oldest first"
    )

    @property
    def stock_value(self) -> float:
        """Value of the units on hand."""
        return self.price * self.quantity


class ProductUpdateResponse(BaseModel):
    """Result of an update; `product` is null when the ID was unknown."""

    updated: bool
    product: Product | None = None


class BatchResult(BaseModel):
    """Result of a batch action over the selection."""

    action: str
    affected: int = Field(..., ge=0, description="Number of products changed or removed")
    ids: list[str] = Field(default_factory=list, description="IDs the action applied to")


# ============================================================================
# Dashboard Schemas
# ============================================================================


class DashboardStats(BaseModel):
    """Aggregate statistics shown on the dashboard cards."""

    total_products: int
    total_value: float
    low_stock_items: int
    out_of_stock_items: int


class CategoryCount(BaseModel):
    """One slice of the category pie chart."""

    name: Category
    value: int = Field(..., ge=1)


class PricePoint(BaseModel):
    """One bar of the price distribution chart."""

    name: str
    price: float


class DashboardResponse(BaseModel):
    """Everything the dashboard view renders."""

    stats: DashboardStats
    categories: list[CategoryCount]
    price_distribution: list[PricePoint]
    low_stock_alert: bool = Field(
        ..., description="Whether more than one item is running low"
    )


# ============================================================================
# Inventory Schemas
# ============================================================================


class FilterSpec(BaseModel):
    """Search text, category and stock-status bucket defining the visible rows."""

    model_config = ConfigDict(frozen=True)

    search_text: str = Field(default="", description="Matched against name or SKU")
    category: Category | str = Field(
        default=ALL_CATEGORIES, description="'All' or one category"
    )
    stock: StockFilter = Field(default=StockFilter.ALL, description="Stock-status bucket")

    @field_validator("category", mode="before")
    @classmethod
    def _check_category(cls, value):
        if value == ALL_CATEGORIES or isinstance(value, Category):
            return value
        return Category(value)


class InventoryRow(BaseModel):
    """A visible product with its row decorations."""

    product: Product
    stock_status: StockFilter
    needs_attention: bool = Field(..., description="Quantity below the low-stock threshold")
    trend: StockTrend | None = None
    selected: bool = False


class SelectionResponse(BaseModel):
    """Current selection, restricted to IDs still in the catalog."""

    ids: list[str]
    count: int
    state: SelectionState


class InventoryResponse(BaseModel):
    """The inventory table: filtered rows plus filter and selection state."""

    items: list[InventoryRow]
    total: int = Field(..., description="Products in the catalog")
    visible: int = Field(..., description="Products matching the filter")
    filter: FilterSpec
    selection: SelectionResponse


# ============================================================================
# Advisory Schemas
# ============================================================================


class ProductSummary(BaseModel):
    """Compact product summary sent to the risk analysis prompt."""

    name: str
    qty: int
    cat: Category
    price: float


class PriceSuggestion(BaseModel):
    """Suggested price range for a product."""

    min: float = Field(..., ge=0, allow_inf_nan=False)
    max: float = Field(..., ge=0, allow_inf_nan=False)
    reasoning: str = ""

    @property
    def suggested_price(self) -> float:
        """Midpoint of the range, rounded to cents."""
        return round((self.min + self.max) / 2, 2)


class AdvisoryRequest(BaseModel):
    """Name and category of the product being edited."""

    name: str = Field(..., min_length=1, description="Product name")
    category: Category = Field(default=Category.OTHER, description="Product category")


class DescriptionResponse(BaseModel):
    """Generated product description."""

    description: str


class PriceSuggestionResponse(BaseModel):
    """Price suggestion with the midpoint the edit form would prefill."""

    min: float
    max: float
    reasoning: str
    suggested_price: float

    @classmethod
    def from_suggestion(cls, suggestion: PriceSuggestion) -> "PriceSuggestionResponse":
        """Build the response from a suggestion."""
        return cls(
            min=suggestion.min,
            max=suggestion.max,
            reasoning=suggestion.reasoning,
            suggested_price=suggestion.suggested_price,
        )


class AnalysisResponse(BaseModel):
    """Latest inventory risk analysis."""

    report: str | None = None
    analyzing: bool = False
    generated_at: datetime | None = None
    product_count: int | None = None
