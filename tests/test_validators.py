"""Unit tests for boundary validators."""

from typing import Any

import pytest

from catalog_gateway.core.errors import UpstreamAppError, ValidationAppError
from catalog_gateway.utils.validators import (
    parse_product_id,
    validate_category,
    validate_product,
    validate_product_list,
    validate_search_query,
)
from conftest import PHONE_RECORD


def _record(**overrides: Any) -> dict[str, Any]:
    record = dict(PHONE_RECORD)
    record.update(overrides)
    return record


class TestSearchQuery:
    def test_accepts_three_characters(self) -> None:
        assert validate_search_query({"query": "pho"}).query == "pho"

    @pytest.mark.parametrize("query", ["", "a", "ab"])
    def test_rejects_short_query(self, query: str) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            validate_search_query({"query": query})

        error = exc_info.value
        assert error.code == "invalid_search_query"
        assert error.message == "Invalid search query"
        violations = error.details["violations"]
        assert violations[0]["field"] == "query"
        assert violations[0]["type"] == "string_too_short"

    def test_missing_query_is_reported_as_missing(self) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            validate_search_query({"query": None})

        assert exc_info.value.details["violations"][0]["type"] == "missing"

    def test_non_string_query_rejected(self) -> None:
        with pytest.raises(ValidationAppError):
            validate_search_query({"query": 12345})


class TestCategory:
    def test_accepts_category(self) -> None:
        assert validate_category({"category": "beauty"}).category == "beauty"

    def test_rejects_short_category(self) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            validate_category({"category": "ab"})

        assert exc_info.value.code == "invalid_category"
        assert exc_info.value.message == "Invalid category"


class TestProduct:
    def test_valid_record(self) -> None:
        product = validate_product(PHONE_RECORD)

        assert product.id == 1
        assert product.model_dump() == PHONE_RECORD

    def test_title_is_accepted_as_name(self) -> None:
        record = _record()
        record["title"] = record.pop("name")

        product = validate_product(record)

        assert product.name == "Phone"
        assert "title" not in product.model_dump()

    def test_extra_fields_are_dropped(self) -> None:
        product = validate_product(_record(stock=5, rating=4.5))

        assert set(product.model_dump()) == {"id", "name", "price", "category", "description"}

    @pytest.mark.parametrize("field", ["id", "name", "price", "category", "description"])
    def test_missing_field_rejected(self, field: str) -> None:
        record = _record()
        record.pop(field)

        with pytest.raises(UpstreamAppError) as exc_info:
            validate_product(record)

        assert exc_info.value.code == "invalid_product_payload"
        assert exc_info.value.details["violations"][0]["type"] == "missing"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"id": "1"},
            {"id": True},
            {"id": 1.5},
            {"price": "100"},
            {"name": ""},
            {"category": 7},
            {"description": None},
        ],
    )
    def test_mistyped_field_rejected(self, overrides: dict[str, Any]) -> None:
        with pytest.raises(UpstreamAppError):
            validate_product(_record(**overrides))

    def test_float_price_kept(self) -> None:
        assert validate_product(_record(price=9.99)).price == 9.99

    def test_product_is_immutable(self) -> None:
        product = validate_product(PHONE_RECORD)

        with pytest.raises(Exception):
            product.name = "Other"  # type: ignore[misc]


class TestProductList:
    def test_envelope_is_unwrapped(self) -> None:
        products = validate_product_list({"products": [PHONE_RECORD], "total": 1})

        assert [p.id for p in products] == [1]

    def test_bare_array_is_accepted(self) -> None:
        assert len(validate_product_list([PHONE_RECORD, _record(id=2)])) == 2

    def test_custom_envelope_field(self) -> None:
        products = validate_product_list({"items": [PHONE_RECORD]}, products_field="items")

        assert products[0].name == "Phone"

    def test_one_bad_element_rejects_whole_list(self) -> None:
        with pytest.raises(UpstreamAppError) as exc_info:
            validate_product_list({"products": [PHONE_RECORD, _record(price=None)]})

        assert exc_info.value.details["violations"][0]["field"].startswith("1.")

    @pytest.mark.parametrize("payload", [{"unexpected": True}, "nope", None, {"products": {"id": 1}}])
    def test_non_array_payload_rejected(self, payload: Any) -> None:
        with pytest.raises(UpstreamAppError):
            validate_product_list(payload)

    def test_empty_array_is_valid(self) -> None:
        assert validate_product_list({"products": []}) == ()


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("1", 1),
        ("42", 42),
        (" 7 ", 7),
        (3, 3),
        ("0", None),
        ("-1", None),
        ("abc", None),
        ("1.5", None),
        ("", None),
        ("²", None),
        (0, None),
        (True, None),
    ],
)
def test_parse_product_id(raw: Any, expected: int | None) -> None:
    assert parse_product_id(raw) == expected
