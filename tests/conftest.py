from datetime import date
from typing import Callable, Optional

import pytest
from fastapi.testclient import TestClient

from product_api.app.core.config import Settings
from product_api.app.core.db import ProductRepository
from product_api.app.main import create_app
from product_api.app.schemas.product import Product


def make_product(**overrides) -> Product:
    defaults = {
        "id": 1,
        "name": "Product 1",
        "quantity": 10,
        "code_value": "code1",
        "is_published": True,
        "expiration": date(2021, 12, 31),
        "price": 100.0,
    }
    defaults.update(overrides)
    return Product(**defaults)


@pytest.fixture()
def product_factory() -> Callable[..., Product]:
    return make_product


@pytest.fixture()
def product_payload() -> dict:
    """A valid create/full-update body."""
    return {
        "name": "Product 1",
        "quantity": 10,
        "code_value": "code1",
        "is_published": True,
        "expiration": "2020-02-02",
        "price": 100.0,
    }


@pytest.fixture()
def repository() -> ProductRepository:
    return ProductRepository()


@pytest.fixture()
def seeded_repository() -> ProductRepository:
    return ProductRepository([make_product()])


@pytest.fixture()
def make_client() -> Callable[..., TestClient]:
    """Build a TestClient around an app with the given repository and token."""

    def _make(repository: Optional[ProductRepository] = None, token: str = "", **kwargs) -> TestClient:
        settings = Settings(api_token=token, server_addr="localhost:8080", layout_date="%Y-%m-%d", products_file="")
        app = create_app(settings, repository if repository is not None else ProductRepository())
        return TestClient(app, **kwargs)

    return _make


@pytest.fixture()
def client(make_client, repository) -> TestClient:
    return make_client(repository)


@pytest.fixture()
def seeded_client(make_client, seeded_repository) -> TestClient:
    return make_client(seeded_repository)
