"""Unit tests for ProductRepository and the JSON seed loader."""

import json
from concurrent.futures import ThreadPoolExecutor
from datetime import date

import pytest
from pydantic import ValidationError

from product_api.app.core.db import ProductRepository, load_products
from product_api.app.core.exceptions import DuplicateCodeValue, ProductNotFound, SeedDataError
from product_api.app.schemas.product import ProductAttributes


def _attributes(**overrides) -> ProductAttributes:
    defaults = {
        "name": "Product",
        "quantity": 1,
        "code_value": "code",
        "is_published": False,
        "expiration": date(2022, 1, 1),
        "price": 1.5,
    }
    defaults.update(overrides)
    return ProductAttributes(**defaults)


def test_save_on_empty_repository_assigns_id_1(repository):
    product = repository.save(_attributes())
    assert product.id == 1
    assert repository.get_by_id(1) == product


def test_save_assigns_max_id_plus_one(product_factory):
    repository = ProductRepository([product_factory(id=1), product_factory(id=5, code_value="code5")])
    product = repository.save(_attributes(code_value="new"))
    assert product.id == 6


def test_save_rejects_duplicate_code_value(seeded_repository):
    with pytest.raises(DuplicateCodeValue):
        seeded_repository.save(_attributes(code_value="code1"))
    assert len(seeded_repository) == 1


def test_get_all_keeps_insertion_order(product_factory):
    repository = ProductRepository([product_factory(id=3, code_value="c3"), product_factory(id=1, code_value="c1")])
    assert [product.id for product in repository.get_all()] == [3, 1]


def test_get_by_id_missing_returns_none(repository):
    assert repository.get_by_id(42) is None


def test_update_replaces_fields_and_keeps_id(seeded_repository):
    updated = seeded_repository.update(1, _attributes(name="Renamed", code_value="code1"))
    assert updated.id == 1
    assert updated.name == "Renamed"
    assert seeded_repository.get_by_id(1) == updated


def test_update_missing_id_raises_not_found(repository):
    with pytest.raises(ProductNotFound):
        repository.update(1, _attributes())


def test_update_rejects_code_value_of_another_product(product_factory):
    repository = ProductRepository([product_factory(id=1), product_factory(id=2, code_value="code2")])
    with pytest.raises(DuplicateCodeValue):
        repository.update(2, _attributes(code_value="code1"))
    assert repository.get_by_id(2).code_value == "code2"


def test_update_partial_leaves_other_fields_untouched(seeded_repository):
    before = seeded_repository.get_by_id(1)
    after = seeded_repository.update_partial(1, {"price": 55.5})
    assert after.price == 55.5
    assert after.model_dump(exclude={"price"}) == before.model_dump(exclude={"price"})


def test_update_partial_ignores_none_values(seeded_repository):
    after = seeded_repository.update_partial(1, {"name": None, "quantity": 3})
    assert after.name == "Product 1"
    assert after.quantity == 3


def test_update_partial_missing_id_raises_not_found(repository):
    with pytest.raises(ProductNotFound):
        repository.update_partial(7, {"name": "x"})


def test_update_partial_checks_code_value_uniqueness(product_factory):
    repository = ProductRepository([product_factory(id=1), product_factory(id=2, code_value="code2")])
    with pytest.raises(DuplicateCodeValue):
        repository.update_partial(2, {"code_value": "code1"})
    # Keeping its own code value is not a conflict.
    assert repository.update_partial(1, {"code_value": "code1"}).code_value == "code1"


def test_delete_removes_product(seeded_repository):
    seeded_repository.delete(1)
    assert seeded_repository.get_by_id(1) is None
    assert len(seeded_repository) == 0


def test_delete_missing_id_raises_not_found(repository):
    with pytest.raises(ProductNotFound):
        repository.delete(1)


def test_returned_products_are_immutable(seeded_repository):
    product = seeded_repository.get_by_id(1)
    with pytest.raises(ValidationError):
        product.name = "changed"
    assert seeded_repository.get_by_id(1).name == "Product 1"


def test_concurrent_saves_get_distinct_ids(repository):
    with ThreadPoolExecutor(max_workers=8) as pool:
        products = list(pool.map(lambda i: repository.save(_attributes(code_value=f"code-{i}")), range(100)))
    assert sorted(product.id for product in products) == list(range(1, 101))
    assert len(repository) == 100


def test_concurrent_saves_with_same_code_value_store_one(repository):
    def attempt(_):
        try:
            return repository.save(_attributes(code_value="same"))
        except DuplicateCodeValue:
            return None

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(attempt, range(20)))
    assert len([result for result in results if result is not None]) == 1
    assert len(repository) == 1


def test_constructor_rejects_duplicate_seed(product_factory):
    with pytest.raises(SeedDataError):
        ProductRepository([product_factory(id=1), product_factory(id=2)])


# ---------------------------------------------------------------------------
# load_products
# ---------------------------------------------------------------------------


def _write(tmp_path, data) -> str:
    path = tmp_path / "products.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_load_products_parses_records(tmp_path):
    path = _write(tmp_path, [
        {"id": 4, "name": "Oil", "quantity": 3, "code_value": "S1", "is_published": True,
         "expiration": "2022-12-15", "price": 71.42},
    ])
    products = load_products(path, "%Y-%m-%d")
    assert len(products) == 1
    assert products[0].id == 4
    assert products[0].expiration == date(2022, 12, 15)


def test_load_products_rejects_invalid_record(tmp_path):
    path = _write(tmp_path, [
        {"id": 1, "name": "", "quantity": 3, "code_value": "S1", "is_published": True,
         "expiration": "2022-12-15", "price": 1},
    ])
    with pytest.raises(SeedDataError, match="name must not be empty"):
        load_products(path, "%Y-%m-%d")


def test_load_products_rejects_missing_id(tmp_path):
    path = _write(tmp_path, [
        {"name": "Oil", "quantity": 3, "code_value": "S1", "is_published": True,
         "expiration": "2022-12-15", "price": 1},
    ])
    with pytest.raises(SeedDataError, match="invalid id"):
        load_products(path, "%Y-%m-%d")


def test_load_products_rejects_non_array(tmp_path):
    with pytest.raises(SeedDataError):
        load_products(_write(tmp_path, {"id": 1}), "%Y-%m-%d")


def test_load_products_missing_file(tmp_path):
    with pytest.raises(SeedDataError):
        load_products(str(tmp_path / "missing.json"), "%Y-%m-%d")
