"""
Shared FastAPI dependencies.

The repository and settings live on ``app.state`` (see ``create_app``)
so that tests can build an application around their own repository
instead of a module-level singleton.
"""

from fastapi import Path, Request

from product_api.app.core.config import Settings
from product_api.app.core.db import ProductRepository

# Optional sign, then ASCII digits only: no "1.0", " 1", "1_0" or "1e3".
PRODUCT_ID_PATTERN = r"^[+-]?[0-9]+$"


def get_product_id(
    product_id: str = Path(..., description="ID of the product", pattern=PRODUCT_ID_PATTERN),
) -> int:
    """Parse the ``{product_id}`` path segment as a plain integer.

    A mismatch is reported against ``("path", "product_id")`` and so is
    rendered as ``400 Invalid id``.
    """
    return int(product_id)


def get_repository(request: Request) -> ProductRepository:
    return request.app.state.repository


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
