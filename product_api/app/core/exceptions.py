"""Product domain exceptions.

Raised by the repository and the seed loader.  The API layer catches
them and translates them into HTTP responses.
"""

from __future__ import annotations


class ProductError(Exception):
    """Base class for product storage errors."""


class ProductNotFound(ProductError):
    """No product is stored under the requested id."""

    def __init__(self, product_id: int) -> None:
        super().__init__(f"product {product_id} not found")
        self.product_id = product_id


class DuplicateCodeValue(ProductError):
    """Another product already uses the same ``code_value``."""

    def __init__(self, code_value: str) -> None:
        super().__init__(f"code_value {code_value!r} already exists")
        self.code_value = code_value


class SeedDataError(ProductError):
    """The initial catalogue file could not be loaded."""
