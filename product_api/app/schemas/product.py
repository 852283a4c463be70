"""
Pydantic models for product data.

``ProductAttributes`` and ``Product`` are the immutable records held by
the repository; ``expiration`` is a real ``date`` there.  The request
schemas (``ProductCreate``, ``ProductPatch``) carry ``expiration`` as
text because its layout is configurable and is checked by the
validator rather than by pydantic.  Both request schemas are strict:
``"10"`` is not a quantity and ``1`` is not a boolean.  ``ProductRead``
is the wire shape of a stored product, with the date already formatted.
"""

from datetime import date
from typing import List

from pydantic import BaseModel, Field

PRODUCT_FIELDS = ("name", "quantity", "code_value", "is_published", "expiration", "price")


class ProductAttributes(BaseModel):
    """Every product field except the repository-assigned ``id``."""

    name: str
    quantity: int
    code_value: str
    is_published: bool
    expiration: date
    price: float

    model_config = {
        "frozen": True,
    }


class Product(ProductAttributes):
    """A stored product."""

    id: int


class ProductCreate(BaseModel):
    """Request body for create and full update; all fields are required."""

    name: str = Field(..., examples=["Product 1"])
    quantity: int = Field(..., examples=[10])
    code_value: str = Field(..., examples=["code1"])
    is_published: bool = Field(..., examples=[True])
    expiration: str = Field(..., examples=["2021-12-31"])
    price: float = Field(..., examples=[100.0])

    model_config = {
        "strict": True,
    }


class ProductPatch(BaseModel):
    """Request body for partial update.

    All fields are optional; only provided values will be applied.
    """

    name: str | None = None
    quantity: int | None = None
    code_value: str | None = None
    is_published: bool | None = None
    expiration: str | None = None
    price: float | None = None

    model_config = {
        "strict": True,
    }


class ProductRead(BaseModel):
    """Wire representation of a stored product."""

    id: int
    name: str
    quantity: int
    code_value: str
    is_published: bool
    expiration: str
    price: float

    @classmethod
    def from_product(cls, product: Product, layout: str) -> "ProductRead":
        return cls(
            id=product.id,
            name=product.name,
            quantity=product.quantity,
            code_value=product.code_value,
            is_published=product.is_published,
            expiration=product.expiration.strftime(layout),
            price=product.price,
        )


class ProductEnvelope(BaseModel):
    data: ProductRead
    message: str


class ProductListEnvelope(BaseModel):
    data: List[ProductRead]
    message: str
