"""CSV export of the visible inventory rows."""

from collections.abc import Sequence
from datetime import date, datetime, timezone

from lumina.schemas import Product

EXPORT_HEADERS = [
    "ID",
    "Name",
    "SKU",
    "Category",
    "Price",
    "Quantity",
    "Description",
    "Last Updated",
]

_SPECIAL_CHARS = (",", '"', "\n", "\r")


def quote(text: str) -> str:
    """Wrap a field in double quotes, doubling any embedded quotes."""
    return '"' + text.replace('"', '""') + '"'


def quote_if_needed(text: str) -> str:
    """Quote a field only when it would otherwise break the row."""
    if any(char in text for char in _SPECIAL_CHARS):
        return quote(text)
    return text


def format_number(value: float | int) -> str:
    """Render a number without a trailing `.0` for integral values."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with milliseconds and a `Z` suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def export_row(product: Product) -> str:
    """Serialize one product as a CSV row."""
    return ",".join(
        [
            product.id,
            quote(product.name),
            quote_if_needed(product.sku),
            quote_if_needed(product.category.value),
            format_number(product.price),
            format_number(product.quantity),
            quote(product.description),
            format_timestamp(product.last_updated),
        ]
    )


def export_csv(view: Sequence[Product]) -> str:
    """Serialize the visible products, header first, rows in view order."""
    return "\n".join([",".join(EXPORT_HEADERS), *(export_row(p) for p in view)])


def export_filename(day: date | None = None) -> str:
    """Download file name for an export taken on the given day."""
    day = day or datetime.now(timezone.utc).date()
    return f"lumina_inventory_export_{day.isoformat()}.csv"
