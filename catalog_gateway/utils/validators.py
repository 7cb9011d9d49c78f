"""Boundary validators for client input and upstream payloads.

Each validator returns a typed model on success and raises an ``AppError``
subclass listing every violated constraint on failure. Client input failures
are ``ValidationAppError`` (surfaced as 400); upstream payload failures are
``UpstreamAppError`` so the catalog service can refuse to cache partial data.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from catalog_gateway.core.errors import FieldViolation, UpstreamAppError, ValidationAppError
from catalog_gateway.schemas.product import CategoryQuery, Product, SearchQuery

logger = logging.getLogger(__name__)

_PRODUCT_LIST = TypeAdapter(list[Product])


def _violations(exc: PydanticValidationError) -> list[FieldViolation]:
    """Flatten pydantic errors into client-facing violation records."""

    return [
        {
            "field": ".".join(str(part) for part in err["loc"]) or "<root>",
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]


def _present(params: Mapping[str, Any]) -> dict[str, Any]:
    # Absent query/path values arrive as None; report them as missing.
    return {key: value for key, value in params.items() if value is not None}


def validate_search_query(params: Mapping[str, Any]) -> SearchQuery:
    """Validate search parameters.

    Args:
        params: Raw request parameters; must hold a ``query`` of 3+ chars.

    Returns:
        Parsed SearchQuery.

    Raises:
        ValidationAppError: If ``query`` is missing, not a string or too short.
    """

    try:
        return SearchQuery.model_validate(_present(params))
    except PydanticValidationError as exc:
        raise ValidationAppError(
            code="invalid_search_query",
            message="Invalid search query",
            details={"violations": _violations(exc)},
        ) from exc


def validate_category(params: Mapping[str, Any]) -> CategoryQuery:
    """Validate category parameters.

    Raises:
        ValidationAppError: If ``category`` is missing, not a string or too short.
    """

    try:
        return CategoryQuery.model_validate(_present(params))
    except PydanticValidationError as exc:
        raise ValidationAppError(
            code="invalid_category",
            message="Invalid category",
            details={"violations": _violations(exc)},
        ) from exc


def validate_product(record: Any) -> Product:
    """Validate a single upstream product record.

    Args:
        record: Decoded JSON value returned by the catalog API.

    Returns:
        Immutable Product.

    Raises:
        UpstreamAppError: If any required field is missing or mistyped.
    """

    try:
        return Product.model_validate(record)
    except PydanticValidationError as exc:
        raise UpstreamAppError(
            code="invalid_product_payload",
            message="Upstream product record does not match the product schema",
            details={"violations": _violations(exc)},
        ) from exc


def validate_product_list(payload: Any, *, products_field: str = "products") -> tuple[Product, ...]:
    """Validate an upstream product collection.

    Accepts a bare JSON array or an envelope object holding the array under
    ``products_field``. One bad element rejects the whole collection.

    Args:
        payload: Decoded JSON body of the collection endpoint.
        products_field: Envelope key holding the array.

    Returns:
        Tuple of Products in upstream order.

    Raises:
        UpstreamAppError: If the body is not an array (or envelope of one) or
            any element fails product validation.
    """

    items = payload.get(products_field) if isinstance(payload, Mapping) else payload
    if not isinstance(items, list):
        raise UpstreamAppError(
            code="invalid_product_payload",
            message="Upstream response does not contain a product array",
            details={"context": {"products_field": products_field, "body_type": type(payload).__name__}},
        )

    try:
        return tuple(_PRODUCT_LIST.validate_python(items))
    except PydanticValidationError as exc:
        raise UpstreamAppError(
            code="invalid_product_payload",
            message="Upstream product list does not match the product schema",
            details={"violations": _violations(exc)},
        ) from exc


def parse_product_id(raw: str | int) -> int | None:
    """Parse a path product id.

    Returns:
        The id as a positive int, or None when ``raw`` is not a positive
        decimal integer.
    """

    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if raw > 0 else None

    text = raw.strip()
    if not (text.isascii() and text.isdigit()):
        logger.debug("product_id.rejected", extra={"raw_length": len(raw)})
        return None

    value = int(text)
    return value if value > 0 else None
