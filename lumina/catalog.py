"""In-memory catalog store.

Owns the authoritative, insertion-ordered list of products. Every other
component reads immutable snapshots; only the store writes.
"""

import math
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from uuid import uuid4

import structlog

from lumina.exceptions import ProductValidationError
from lumina.schemas import Category, Product, ProductDraft

logger = structlog.get_logger()


# ============================================================================
# Demo Data
# ============================================================================

DEMO_PRODUCTS = [
    ProductDraft(
        name="Ergo Chair Ultra",
        sku="FUR-001",
        category=Category.FURNITURE,
        price=349.99,
        quantity=15,
        description="High-end ergonomic office chair with lumbar support.",
        history=(12, 15, 13, 18, 15, 20, 15),
    ),
    ProductDraft(
        name="Wireless Mech Keyboard",
        sku="ELE-045",
        category=Category.ELECTRONICS,
        price=129.50,
        quantity=4,
        description="Mechanical keyboard with RGB and brown switches.",
        history=(8, 6, 5, 7, 5, 4, 4),
    ),
    ProductDraft(
        name="Standing Desk Frame",
        sku="FUR-022",
        category=Category.FURNITURE,
        price=299.00,
        quantity=8,
        description="Dual motor electric standing desk frame.",
        history=(5, 8, 12, 10, 9, 8, 8),
    ),
    ProductDraft(
        name="USB-C Docking Station",
        sku="ELE-102",
        category=Category.ELECTRONICS,
        price=89.99,
        quantity=42,
        description="12-in-1 docking station for laptops.",
        history=(30, 35, 32, 40, 45, 42, 42),
    ),
    ProductDraft(
        name="Cotton Hoodie",
        sku="CLO-552",
        category=Category.CLOTHING,
        price=45.00,
        quantity=120,
        description="Premium heavyweight cotton hoodie.",
        history=(150, 140, 135, 130, 125, 120, 120),
    ),
]


def utcnow() -> datetime:
    """Current time in UTC."""
    return datetime.now(timezone.utc)


def validate_product(product: Product | ProductDraft) -> None:
    """Check a product against the catalog invariants.

    The store only calls this in strict mode; by default input is trusted
    to have been constrained by the caller.

    Raises:
        ProductValidationError: If a field breaks an invariant.
    """
    if not product.name.strip():
        raise ProductValidationError("name", product.name, "must not be empty")
    if not product.sku.strip():
        raise ProductValidationError("sku", product.sku, "must not be empty")
    if not math.isfinite(product.price) or product.price < 0:
        raise ProductValidationError(
            "price", product.price, "must be a finite non-negative number"
        )
    if product.quantity < 0:
        raise ProductValidationError("quantity", product.quantity, "must be non-negative")


# ============================================================================
# Catalog Store
# ============================================================================


class CatalogStore:
    """Insertion-ordered in-memory product catalog.

    Records are frozen models keyed by ID in a dict, so replacing a record
    keeps its position and `snapshot()` can hand out a tuple without copying
    the records themselves.

    Updates and deletes for unknown IDs are no-ops reported through the
    return value, never exceptions.
    """

    def __init__(
        self,
        products: Iterable[ProductDraft] = (),
        strict: bool = False,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize catalog store.

        Args:
            products: Drafts to add in order.
            strict: Validate every record before it is stored.
            clock: Source of `last_updated` timestamps.
        """
        self.strict = strict
        self._clock = clock
        self._products: dict[str, Product] = {}
        self._version = 0
        for draft in products:
            self.add(draft)

    def __len__(self) -> int:
        return len(self._products)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._products

    @property
    def version(self) -> int:
        """Counter bumped by every state-changing mutation."""
        return self._version

    # ------------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------------

    def snapshot(self) -> tuple[Product, ...]:
        """Current products in insertion order."""
        return tuple(self._products.values())

    def get(self, product_id: str) -> Product | None:
        """Get product by ID.

        Args:
            product_id: Product ID.

        Returns:
            Product or None if not found.
        """
        return self._products.get(product_id)

    # ------------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------------

    def add(self, draft: ProductDraft) -> Product:
        """Store a new product.

        Args:
            draft: Product fields.

        Returns:
            The stored product with its new ID and timestamp.
        """
        if self.strict:
            validate_product(draft)

        product_id = str(uuid4())
        while product_id in self._products:
            product_id = str(uuid4())

        product = Product(
            id=product_id,
            last_updated=self._clock(),
            **draft.model_dump(),
        )
        self._products[product_id] = product
        self._version += 1

        logger.info("Product added", product_id=product_id, sku=product.sku)
        return product

    def update(self, product: Product) -> bool:
        """Replace the record with the same ID, keeping its position.

        Args:
            product: New record contents.

        Returns:
            True if a record was replaced, False if the ID is unknown.
        """
        if product.id not in self._products:
            logger.debug("Update ignored for unknown product", product_id=product.id)
            return False
        if self.strict:
            validate_product(product)

        self._products[product.id] = product.model_copy(
            update={"last_updated": self._clock()}
        )
        self._version += 1

        logger.info("Product updated", product_id=product.id)
        return True

    def replace(self, product_id: str, draft: ProductDraft) -> Product | None:
        """Overwrite a product's fields from a draft, keeping its ID.

        Args:
            product_id: ID of the product to edit.
            draft: New field values.

        Returns:
            The updated product, or None if the ID is unknown.
        """
        current = self._products.get(product_id)
        if current is None:
            return None
        product = Product(
            id=product_id,
            last_updated=current.last_updated,
            **draft.model_dump(),
        )
        self.update(product)
        return self._products[product_id]

    def delete(self, product_id: str) -> bool:
        """Remove a product. Deleting an unknown ID is not an error.

        Args:
            product_id: Product ID.

        Returns:
            True if a record was removed.
        """
        if self._products.pop(product_id, None) is None:
            return False
        self._version += 1

        logger.info("Product deleted", product_id=product_id)
        return True

    def batch_delete(self, product_ids: Iterable[str]) -> int:
        """Remove every product whose ID is given; unknown IDs are ignored.

        Args:
            product_ids: IDs to remove.

        Returns:
            Number of products removed.
        """
        removed = 0
        for product_id in set(product_ids):
            if self._products.pop(product_id, None) is not None:
                removed += 1

        if removed:
            self._version += 1
        logger.info("Batch delete", removed=removed)
        return removed

    def batch_set_quantity(self, product_ids: Iterable[str], quantity: int) -> int:
        """Set the quantity of every matching product.

        Args:
            product_ids: IDs to change; unknown IDs are ignored.
            quantity: New quantity.

        Returns:
            Number of products changed.
        """
        targets = set(product_ids)
        now = self._clock()
        changed = 0
        for product_id in self._products:
            if product_id in targets:
                self._products[product_id] = self._products[product_id].model_copy(
                    update={"quantity": quantity, "last_updated": now}
                )
                changed += 1

        if changed:
            self._version += 1
        logger.info("Batch quantity set", changed=changed, quantity=quantity)
        return changed


def seed_catalog(strict: bool = False) -> CatalogStore:
    """Create a catalog store holding the demo products."""
    return CatalogStore(DEMO_PRODUCTS, strict=strict)
