"""
Top‑level router for version 1 of the API.

This router aggregates domain‑specific routers under a unified prefix.
The product catalogue is currently the only domain; new domains are
added here by including their routers.
"""

from fastapi import APIRouter

from .endpoints import products

router = APIRouter()

# Routes inside ``products`` use "" for the collection so that
# ``/products`` is served directly instead of redirecting to ``/products/``.
router.include_router(products.router, prefix="/products", tags=["products"])
