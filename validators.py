import re
from typing import Any, Dict

import pydantic

from errors import NotFoundError, ValidationError
from schemas import INT64_MAX, INT64_MIN, LessonUpdate, Order, OrderItem

LESSON_ID_RE = re.compile(r"-?[0-9]+")
PHONE_RE = re.compile(r"[0-9]+")
MIN_PHONE_LENGTH = 8


def _present(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def validate_order(payload: Any) -> Dict[str, Any]:
    """Check an order submission and return the document to store.

    Raises ValidationError on the first rule the payload breaks. The
    returned dict has no createdAt; the order store stamps it on insert.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Missing name, phone, or items.")

    name = payload.get("name")
    phone = payload.get("phone")
    items = payload.get("items")
    total = payload.get("total")

    if not _present(name) or not _present(phone) or not isinstance(items, list) or not items:
        raise ValidationError("Missing name, phone, or items.")

    if not PHONE_RE.fullmatch(phone) or len(phone) < MIN_PHONE_LENGTH:
        raise ValidationError("Phone number must be at least 8 digits and contain only numbers.")

    try:
        order_items = [OrderItem.model_validate(item) for item in items]
    except pydantic.ValidationError:
        raise ValidationError("Each item needs a numeric id and quantity.")

    if not total:
        total = 0
    elif isinstance(total, bool) or not isinstance(total, (int, float)):
        raise ValidationError("Total must be a number.")
    elif isinstance(total, int) and not INT64_MIN <= total <= INT64_MAX:
        raise ValidationError("Total is out of range.")

    order = Order(name=name, phone=phone, items=order_items, total=total)
    doc = order.model_dump(exclude={"createdAt"})
    # keep integer totals as integers
    doc["total"] = total
    return doc


def parse_lesson_id(raw: str) -> int:
    if raw is None or not LESSON_ID_RE.fullmatch(raw):
        raise ValidationError("Lesson id must be a number")
    lesson_id = int(raw)
    # no stored lesson can carry an id outside the BSON int64 range
    if not INT64_MIN <= lesson_id <= INT64_MAX:
        raise NotFoundError("Lesson not found")
    return lesson_id


def validate_lesson_patch(patch: Any) -> Dict[str, Any]:
    """Restrict a lesson update to the mutable fields.

    id, _id and any field not on LessonUpdate are rejected, as is an
    empty patch.
    """
    if not isinstance(patch, dict) or not patch:
        raise ValidationError("No lesson fields to update")

    try:
        update = LessonUpdate.model_validate(patch)
    except pydantic.ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(p) for p in err["loc"])
        if err["type"] == "extra_forbidden":
            raise ValidationError(f"Field '{field}' cannot be updated")
        raise ValidationError(f"Invalid value for '{field}': {err['msg']}")

    fields = update.model_dump(exclude_unset=True, exclude_none=True)
    if not fields:
        raise ValidationError("No lesson fields to update")
    return fields
