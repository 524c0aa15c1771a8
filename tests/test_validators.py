"""
Unit tests for request validators.
"""

import bson
import pytest

from errors import NotFoundError, ValidationError
from validators import parse_lesson_id, validate_lesson_patch, validate_order


class TestValidateOrder:
    """Test cases for validate_order."""

    @pytest.fixture
    def valid_order(self):
        return {
            "name": "Jane Doe",
            "phone": "07123456789",
            "items": [{"id": 1, "quantity": 2}],
            "total": 200,
        }

    def test_valid_order(self, valid_order):
        doc = validate_order(valid_order)

        assert doc["name"] == "Jane Doe"
        assert doc["phone"] == "07123456789"
        assert doc["items"] == [{"id": 1, "quantity": 2}]
        assert doc["total"] == 200
        assert "createdAt" not in doc

    @pytest.mark.parametrize("total", [None, 0, "", False])
    def test_falsy_total_defaults_to_zero(self, valid_order, total):
        valid_order["total"] = total
        assert validate_order(valid_order)["total"] == 0

    def test_missing_total_defaults_to_zero(self, valid_order):
        del valid_order["total"]
        assert validate_order(valid_order)["total"] == 0

    def test_extra_item_keys_are_kept(self, valid_order):
        valid_order["items"] = [{"id": 3, "quantity": 1, "subject": "Biology"}]
        doc = validate_order(valid_order)
        assert doc["items"] == [{"id": 3, "quantity": 1, "subject": "Biology"}]

    @pytest.mark.parametrize("field", ["name", "phone", "items"])
    def test_missing_field(self, valid_order, field):
        del valid_order[field]
        with pytest.raises(ValidationError, match="Missing name, phone, or items."):
            validate_order(valid_order)

    def test_empty_name(self, valid_order):
        valid_order["name"] = ""
        with pytest.raises(ValidationError):
            validate_order(valid_order)

    def test_empty_items(self, valid_order):
        valid_order["items"] = []
        with pytest.raises(ValidationError, match="Missing name"):
            validate_order(valid_order)

    def test_items_not_a_list(self, valid_order):
        valid_order["items"] = {"id": 1, "quantity": 1}
        with pytest.raises(ValidationError, match="Missing name"):
            validate_order(valid_order)

    @pytest.mark.parametrize("phone", ["1234567", "0712-345678", "phone123", "+4471234567"])
    def test_bad_phone(self, valid_order, phone):
        valid_order["phone"] = phone
        with pytest.raises(ValidationError, match="at least 8 digits"):
            validate_order(valid_order)

    def test_phone_of_exactly_eight_digits(self, valid_order):
        valid_order["phone"] = "12345678"
        assert validate_order(valid_order)["phone"] == "12345678"

    def test_item_without_quantity(self, valid_order):
        valid_order["items"] = [{"id": 1}]
        with pytest.raises(ValidationError, match="numeric id and quantity"):
            validate_order(valid_order)

    @pytest.mark.parametrize("item", [
        {"id": 10 ** 20, "quantity": 1},
        {"id": 1, "quantity": 10 ** 20},
    ])
    def test_item_beyond_int64(self, valid_order, item):
        valid_order["items"] = [item]
        with pytest.raises(ValidationError, match="numeric id and quantity"):
            validate_order(valid_order)

    def test_total_beyond_int64(self, valid_order):
        valid_order["total"] = 10 ** 20
        with pytest.raises(ValidationError, match="out of range"):
            validate_order(valid_order)

    def test_valid_order_encodes_as_bson(self, valid_order):
        valid_order["items"] = [{"id": 2 ** 63 - 1, "quantity": 1}]
        bson.encode(validate_order(valid_order))

    def test_non_numeric_total(self, valid_order):
        valid_order["total"] = "lots"
        with pytest.raises(ValidationError, match="Total must be a number"):
            validate_order(valid_order)

    def test_payload_not_a_mapping(self):
        with pytest.raises(ValidationError):
            validate_order(["not", "an", "order"])


class TestParseLessonId:
    """Test cases for parse_lesson_id."""

    def test_numeric(self):
        assert parse_lesson_id("7") == 7

    @pytest.mark.parametrize("raw", ["abc", "12abc", "1.5", "", " 3"])
    def test_not_numeric(self, raw):
        with pytest.raises(ValidationError, match="Lesson id must be a number"):
            parse_lesson_id(raw)

    def test_beyond_int64_is_not_found(self):
        with pytest.raises(NotFoundError, match="Lesson not found"):
            parse_lesson_id("99999999999999999999")

    def test_int64_bounds(self):
        assert parse_lesson_id(str(2 ** 63 - 1)) == 2 ** 63 - 1
        assert parse_lesson_id(str(-2 ** 63)) == -2 ** 63


class TestValidateLessonPatch:
    """Test cases for validate_lesson_patch."""

    def test_spaces(self):
        assert validate_lesson_patch({"spaces": 3}) == {"spaces": 3}

    def test_several_fields(self):
        patch = {"spaces": 0, "location": "Hendon"}
        assert validate_lesson_patch(patch) == patch

    @pytest.mark.parametrize("field", ["id", "_id", "colour"])
    def test_rejects_identity_and_unknown_fields(self, field):
        with pytest.raises(ValidationError, match="cannot be updated"):
            validate_lesson_patch({field: 1})

    def test_rejects_spaces_beyond_int64(self):
        with pytest.raises(ValidationError, match="spaces"):
            validate_lesson_patch({"spaces": 10 ** 20})

    def test_rejects_negative_spaces(self):
        with pytest.raises(ValidationError, match="spaces"):
            validate_lesson_patch({"spaces": -1})

    @pytest.mark.parametrize("patch", [{}, {"spaces": None}, []])
    def test_rejects_empty_patch(self, patch):
        with pytest.raises(ValidationError, match="No lesson fields"):
            validate_lesson_patch(patch)
