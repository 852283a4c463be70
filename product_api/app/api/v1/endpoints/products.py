"""
Product endpoints for API v1.

These routes expose a CRUD API for the product catalogue.  Path ids
go through ``get_product_id``, which accepts only integer text, so
anything else is rejected before a handler runs (rendered as
``400 Invalid id`` by the application's exception handlers).  Handlers validate the payload, call the repository and map
its errors to HTTP statuses; authentication has already been enforced
by ``TokenAuthMiddleware`` and is not checked again here.

Handlers are plain functions, so FastAPI runs each request on its
thread pool; the repository serialises access to the shared catalogue.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from product_api.app.api.deps import get_product_id, get_repository, get_settings
from product_api.app.core.config import Settings
from product_api.app.core.db import ProductRepository
from product_api.app.core.exceptions import DuplicateCodeValue, ProductNotFound
from product_api.app.schemas.product import (
    Product,
    ProductAttributes,
    ProductCreate,
    ProductEnvelope,
    ProductListEnvelope,
    ProductPatch,
    ProductRead,
)
from product_api.app.services.validation import format_errors, parse_expiration, validate_product

router = APIRouter()

PRODUCT_NOT_FOUND = "Product not found"


def _read(product: Product, settings: Settings) -> ProductRead:
    return ProductRead.from_product(product, settings.layout_date)


def _validated(data: Dict[str, Any], settings: Settings, partial: bool = False) -> Dict[str, Any]:
    """Run the field checks and return ``data`` with ``expiration`` parsed.

    Raises a 400 ``HTTPException`` listing every failing field.
    """
    errors = validate_product(data, settings.layout_date, partial=partial)
    if errors:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=format_errors(errors))
    if "expiration" in data:
        data = {**data, "expiration": parse_expiration(data["expiration"], settings.layout_date)}
    return data


@router.get("", response_model=ProductListEnvelope)
def list_products(
    repository: ProductRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
) -> ProductListEnvelope:
    """Return every stored product."""
    products: List[ProductRead] = [_read(product, settings) for product in repository.get_all()]
    return ProductListEnvelope(data=products, message="products")


@router.get("/{product_id}", response_model=ProductEnvelope)
def get_product(
    product_id: int = Depends(get_product_id),
    repository: ProductRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
) -> ProductEnvelope:
    """Retrieve a single product by ID.

    Returns HTTP 404 if the product is not found.
    """
    product = repository.get_by_id(product_id)
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND)
    return ProductEnvelope(data=_read(product, settings), message="product")


@router.post("", response_model=ProductEnvelope, status_code=status.HTTP_201_CREATED)
def create_product(
    product_in: ProductCreate,
    repository: ProductRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
) -> ProductEnvelope:
    """Create a product; the id is assigned by the repository."""
    candidate = ProductAttributes(**_validated(product_in.model_dump(), settings))
    try:
        product = repository.save(candidate)
    except DuplicateCodeValue as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return ProductEnvelope(data=_read(product, settings), message="product created")


@router.put("/{product_id}", response_model=ProductEnvelope)
def update_product(
    product_in: ProductCreate,
    product_id: int = Depends(get_product_id),
    repository: ProductRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
) -> ProductEnvelope:
    """Replace every field of an existing product."""
    candidate = ProductAttributes(**_validated(product_in.model_dump(), settings))
    try:
        product = repository.update(product_id, candidate)
    except ProductNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND)
    except DuplicateCodeValue as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return ProductEnvelope(data=_read(product, settings), message="product updated")


@router.patch("/{product_id}", response_model=ProductEnvelope)
def patch_product(
    product_in: ProductPatch,
    product_id: int = Depends(get_product_id),
    repository: ProductRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
) -> ProductEnvelope:
    """Update only the fields present in the body.

    Fields sent as ``null`` are treated as absent.
    """
    patch = _validated(product_in.model_dump(exclude_unset=True, exclude_none=True), settings, partial=True)
    try:
        product = repository.update_partial(product_id, patch)
    except ProductNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND)
    except DuplicateCodeValue as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return ProductEnvelope(data=_read(product, settings), message="product updated")


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: int = Depends(get_product_id),
    repository: ProductRepository = Depends(get_repository),
) -> Response:
    """Delete a product.  The response has no body and no content type."""
    try:
        repository.delete(product_id)
    except ProductNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
