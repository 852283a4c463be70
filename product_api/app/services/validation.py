"""
Field validation for product payloads.

Every check is a pure function: it receives a value and returns either
``None`` or a ``FieldError`` describing why the value is rejected.
``validate_product`` runs the checks for a whole payload and returns the
failures in field order, so the same payload always produces the same
message.  Uniqueness of ``code_value`` is not checked here; that needs
the stored catalogue and belongs to the repository.

HTTP bodies reach these checks with their types already enforced by the
strict request schemas; the type branches matter for records read by
``load_products``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Mapping, Optional

from product_api.app.schemas.product import PRODUCT_FIELDS

# Reason codes
REQUIRED = "required"
EMPTY = "empty"
NEGATIVE = "negative"
INVALID_TYPE = "invalid_type"
INVALID_FORMAT = "invalid_format"


@dataclass(frozen=True)
class FieldError:
    field: str
    code: str
    reason: str

    def __str__(self) -> str:
        return f"{self.field} {self.reason}"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def check_name(value: Any) -> Optional[FieldError]:
    if not isinstance(value, str):
        return FieldError("name", INVALID_TYPE, "must be a string")
    if not value.strip():
        return FieldError("name", EMPTY, "must not be empty")
    return None


def check_quantity(value: Any) -> Optional[FieldError]:
    if not isinstance(value, int) or isinstance(value, bool):
        return FieldError("quantity", INVALID_TYPE, "must be an integer")
    if value < 0:
        return FieldError("quantity", NEGATIVE, "must be greater than or equal to 0")
    return None


def check_code_value(value: Any) -> Optional[FieldError]:
    if not isinstance(value, str):
        return FieldError("code_value", INVALID_TYPE, "must be a string")
    if not value.strip():
        return FieldError("code_value", EMPTY, "must not be empty")
    return None


def check_is_published(value: Any) -> Optional[FieldError]:
    if not isinstance(value, bool):
        return FieldError("is_published", INVALID_TYPE, "must be a boolean")
    return None


def check_expiration(value: Any, layout: str) -> Optional[FieldError]:
    if isinstance(value, date):
        return None
    if not isinstance(value, str):
        return FieldError("expiration", INVALID_TYPE, "must be a string")
    try:
        parse_expiration(value, layout)
    except ValueError:
        return FieldError("expiration", INVALID_FORMAT, f"must match the date layout {layout}")
    return None


def check_price(value: Any) -> Optional[FieldError]:
    if not _is_number(value) or math.isnan(value) or math.isinf(value):
        return FieldError("price", INVALID_TYPE, "must be a number")
    if value < 0:
        return FieldError("price", NEGATIVE, "must be greater than or equal to 0")
    return None


def parse_expiration(value: str | date, layout: str) -> date:
    """Parse ``value`` with ``layout``; raises ``ValueError`` on mismatch."""
    if isinstance(value, date):
        return value
    return datetime.strptime(value, layout).date()


def _checks(layout: str) -> Dict[str, Callable[[Any], Optional[FieldError]]]:
    return {
        "name": check_name,
        "quantity": check_quantity,
        "code_value": check_code_value,
        "is_published": check_is_published,
        "expiration": lambda value: check_expiration(value, layout),
        "price": check_price,
    }


def validate_product(data: Mapping[str, Any], layout: str, partial: bool = False) -> List[FieldError]:
    """Validate a product payload.

    With ``partial=False`` every field is required.  With ``partial=True``
    only the fields present in ``data`` are checked and absent ones are
    not an error.  Keys outside the product fields are ignored.
    """
    errors: List[FieldError] = []
    checks = _checks(layout)
    for field in PRODUCT_FIELDS:
        if field not in data:
            if not partial:
                errors.append(FieldError(field, REQUIRED, "is required"))
            continue
        error = checks[field](data[field])
        if error is not None:
            errors.append(error)
    return errors


def format_errors(errors: List[FieldError]) -> str:
    """Join validation failures into the single message of a 400 response."""
    return "; ".join(str(error) for error in errors)
