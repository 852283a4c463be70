"""
In-memory product storage.

``ProductRepository`` owns the mapping from integer id to ``Product``
and is the only object allowed to touch it.  Requests are served on a
thread pool, so a single lock guards the mapping and every operation,
including the multi-step ones (compute id then insert, look up then
check uniqueness then replace), runs as one critical section.  Stored
records are frozen pydantic models; handing them out never exposes
mutable state.

``load_products`` reads the initial catalogue from a JSON file so the
service can start with a catalogue (see ``data/products.json``).
"""

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from product_api.app.schemas.product import PRODUCT_FIELDS, Product, ProductAttributes
from product_api.app.services.validation import format_errors, parse_expiration, validate_product
from .exceptions import DuplicateCodeValue, ProductNotFound, SeedDataError

logger = logging.getLogger(__name__)


class ProductRepository:
    """Lock-guarded id -> product mapping."""

    def __init__(self, products: Optional[Iterable[Product]] = None) -> None:
        self._lock = threading.Lock()
        self._products: Dict[int, Product] = {}
        for product in products or ():
            if product.id in self._products:
                raise SeedDataError(f"duplicate product id {product.id}")
            if self._code_value_taken(product.code_value):
                raise SeedDataError(f"duplicate code_value {product.code_value!r}")
            self._products[product.id] = product

    def __len__(self) -> int:
        with self._lock:
            return len(self._products)

    def get_all(self) -> List[Product]:
        """Return every stored product in insertion order."""
        with self._lock:
            return list(self._products.values())

    def get_by_id(self, product_id: int) -> Optional[Product]:
        """Return the product stored under ``product_id`` or ``None``."""
        with self._lock:
            return self._products.get(product_id)

    def save(self, candidate: ProductAttributes) -> Product:
        """Store a new product under ``max(id) + 1`` (1 when empty).

        Raises ``DuplicateCodeValue`` if the code value is already used.
        """
        with self._lock:
            if self._code_value_taken(candidate.code_value):
                raise DuplicateCodeValue(candidate.code_value)
            new_id = max(self._products, default=0) + 1
            product = Product(id=new_id, **candidate.model_dump())
            self._products[new_id] = product
        logger.info("Created product %s", new_id)
        return product

    def update(self, product_id: int, candidate: ProductAttributes) -> Product:
        """Replace every field of an existing product, keeping its id."""
        with self._lock:
            if product_id not in self._products:
                raise ProductNotFound(product_id)
            if self._code_value_taken(candidate.code_value, exclude_id=product_id):
                raise DuplicateCodeValue(candidate.code_value)
            product = Product(id=product_id, **candidate.model_dump())
            self._products[product_id] = product
        logger.info("Updated product %s", product_id)
        return product

    def update_partial(self, product_id: int, patch: Mapping[str, Any]) -> Product:
        """Merge the supplied fields of ``patch`` onto an existing product.

        Keys that are absent or ``None`` leave the stored value untouched.
        Only ``code_value`` uniqueness is re-checked after the merge.
        """
        changes = {field: patch[field] for field in PRODUCT_FIELDS if patch.get(field) is not None}
        with self._lock:
            current = self._products.get(product_id)
            if current is None:
                raise ProductNotFound(product_id)
            product = current.model_copy(update=changes)
            if self._code_value_taken(product.code_value, exclude_id=product_id):
                raise DuplicateCodeValue(product.code_value)
            self._products[product_id] = product
        logger.info("Patched product %s (%s)", product_id, ", ".join(sorted(changes)) or "no fields")
        return product

    def delete(self, product_id: int) -> None:
        """Remove a product; raises ``ProductNotFound`` if it does not exist."""
        with self._lock:
            if product_id not in self._products:
                raise ProductNotFound(product_id)
            del self._products[product_id]
        logger.info("Deleted product %s", product_id)

    def _code_value_taken(self, code_value: str, exclude_id: Optional[int] = None) -> bool:
        # Caller must hold the lock (or be the constructor).
        return any(
            product.code_value == code_value
            for product_id, product in self._products.items()
            if product_id != exclude_id
        )


def load_products(path: str, layout: str) -> List[Product]:
    """Read the initial catalogue from a JSON array of product objects.

    Each object must carry an integer ``id`` plus every product field.
    Records are validated with the same rules as the create endpoint;
    any failure raises ``SeedDataError`` naming the offending record.
    """
    file_path = Path(path)
    try:
        raw = json.loads(file_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise SeedDataError(f"cannot read products file {file_path}: {e}") from e
    if not isinstance(raw, list):
        raise SeedDataError(f"products file {file_path} must contain a JSON array")

    products: List[Product] = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            raise SeedDataError(f"record {index} is not an object")
        product_id = item.get("id")
        if not isinstance(product_id, int) or isinstance(product_id, bool) or product_id < 1:
            raise SeedDataError(f"record {index} has an invalid id")
        errors = validate_product(item, layout)
        if errors:
            raise SeedDataError(f"record {index}: {format_errors(errors)}")
        fields = {field: item[field] for field in PRODUCT_FIELDS}
        fields["expiration"] = parse_expiration(fields["expiration"], layout)
        products.append(Product(id=product_id, **fields))
    logger.info("Loaded %d products from %s", len(products), file_path)
    return products
