"""Product API endpoints.

Create, read, update and delete single products. Updates and deletes of
unknown IDs are no-ops rather than errors.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from lumina.api.dependencies import get_catalog
from lumina.catalog import CatalogStore
from lumina.exceptions import ProductNotFoundError
from lumina.schemas import ErrorResponse, Product, ProductDraft, ProductUpdateResponse

router = APIRouter(prefix="/products", tags=["Products"])


@router.get(
    "",
    response_model=list[Product],
    summary="List all products",
    description="Full catalog in insertion order.",
)
async def list_products(
    catalog: Annotated[CatalogStore, Depends(get_catalog)],
) -> list[Product]:
    """Return the catalog snapshot."""
    return list(catalog.snapshot())


@router.post(
    "",
    response_model=Product,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
    summary="Create a new product",
)
async def create_product(
    draft: ProductDraft,
    catalog: Annotated[CatalogStore, Depends(get_catalog)],
) -> Product:
    """Add a product to the catalog.

    Args:
        draft: Product fields; missing fields take form defaults.

    Returns:
        The stored product with its ID and timestamp.
    """
    return catalog.add(draft)


@router.get(
    "/{product_id}",
    response_model=Product,
    responses={404: {"model": ErrorResponse}},
    summary="Get product by ID",
)
async def get_product(
    product_id: str,
    catalog: Annotated[CatalogStore, Depends(get_catalog)],
) -> Product:
    """Get a single product.

    Raises:
        ProductNotFoundError: If the ID is unknown.
    """
    product = catalog.get(product_id)
    if product is None:
        raise ProductNotFoundError(product_id)
    return product


@router.put(
    "/{product_id}",
    response_model=ProductUpdateResponse,
    responses={422: {"model": ErrorResponse}},
    summary="Update a product",
    description="Replace a product's fields. Unknown IDs report `updated: false`.",
)
async def update_product(
    product_id: str,
    draft: ProductDraft,
    catalog: Annotated[CatalogStore, Depends(get_catalog)],
) -> ProductUpdateResponse:
    """Edit a product in place, keeping its ID and position."""
    product = catalog.replace(product_id, draft)
    return ProductUpdateResponse(updated=product is not None, product=product)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a product",
    description="Delete a product by ID. Deleting an unknown ID succeeds.",
)
async def delete_product(
    product_id: str,
    catalog: Annotated[CatalogStore, Depends(get_catalog)],
) -> Response:
    """Delete a product."""
    catalog.delete(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
