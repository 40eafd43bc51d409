"""
Field-level validation for client input.

Each ``validate_*`` function inspects a raw JSON mapping and returns the list
of problems found; an empty list means the mapping can be coerced into the
matching input schema. ``partial=True`` validates an update patch, where
only the fields present are checked.
"""
from datetime import datetime
from numbers import Number
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import EmailStr, TypeAdapter, ValidationError as PydanticValidationError

from sportshub.core.exceptions import FieldError, ValidationError
from sportshub.db.models.sport import SportLevel

# Fields the server derives or owns
READ_ONLY_FIELDS = {
    "id", "slug", "location", "longitude", "latitude", "formatted_address",
    "street", "city", "state", "zipcode", "country", "photo", "average_rating",
    "user_id", "event_id", "exclusive_owner_id", "created_at",
}

EVENT_FIELDS = {"name", "description", "date", "address", "phone", "email"}
SPORT_FIELDS = {"title", "description", "rules", "cost", "level"}
REVIEW_FIELDS = {"title", "comment", "rating"}

_datetime_adapter = TypeAdapter(datetime)
_email_adapter = TypeAdapter(EmailStr)


def _check_fields(data: Mapping[str, Any], allowed: Iterable[str]) -> List[FieldError]:
    errors = []
    for key in data:
        if key in READ_ONLY_FIELDS:
            errors.append(FieldError(field=key, message=f"{key} cannot be set directly"))
        elif key not in allowed:
            errors.append(FieldError(field=key, message=f"Unknown field '{key}'"))
    return errors


def _check_required(data: Mapping[str, Any], required: Dict[str, str], partial: bool) -> List[FieldError]:
    # A patch may omit required fields but cannot null them out
    return [
        FieldError(field=field, message=message)
        for field, message in required.items()
        if data.get(field) is None and (not partial or field in data)
    ]


def _check_text(
    data: Mapping[str, Any],
    field: str,
    message: str,
    max_length: Optional[int] = None,
    nullable: bool = False,
) -> Optional[FieldError]:
    """Validate a string field present in ``data``; ``message`` is used for blank values."""
    if field not in data:
        return None
    value = data[field]
    if value is None:
        return None if nullable else FieldError(field=field, message=message)
    if not isinstance(value, str):
        return FieldError(field=field, message=f"{field} must be a string")
    if not value.strip():
        return None if nullable else FieldError(field=field, message=message)
    if max_length is not None and len(value.strip()) > max_length:
        return FieldError(field=field, message=f"{field} can not be more than {max_length} characters")
    return None


def _collect(*results: Optional[FieldError]) -> List[FieldError]:
    return [r for r in results if r is not None]


def validate_event(data: Mapping[str, Any], partial: bool = False) -> List[FieldError]:
    errors = _check_fields(data, EVENT_FIELDS)
    errors += _check_required(data, {
        "name": "Please add a name",
        "description": "Please add a description",
        "date": "Please add a date and time",
        "address": "Please add an address",
    }, partial)
    errors += _collect(
        _check_text(data, "name", "Please add a name", max_length=50),
        _check_text(data, "description", "Please add a description", max_length=500),
        _check_text(data, "address", "Please add an address"),
        _check_text(data, "phone", "", max_length=20, nullable=True),
    )

    if data.get("date") is not None:
        try:
            _datetime_adapter.validate_python(data["date"])
        except PydanticValidationError:
            errors.append(FieldError(field="date", message="Please add a valid date and time"))

    if data.get("email") is not None:
        try:
            _email_adapter.validate_python(data["email"])
        except PydanticValidationError:
            errors.append(FieldError(field="email", message="Please add a valid email"))

    return _dedupe(errors)


def validate_sport(data: Mapping[str, Any], partial: bool = False) -> List[FieldError]:
    errors = _check_fields(data, SPORT_FIELDS)
    errors += _check_required(data, {
        "title": "Please add a sport title",
        "description": "Please add a description",
        "rules": "Please add the rules",
    }, partial)
    errors += _collect(
        _check_text(data, "title", "Please add a sport title"),
        _check_text(data, "description", "Please add a description"),
        _check_text(data, "rules", "Please add the rules"),
    )

    cost = data.get("cost")
    if cost is not None and (isinstance(cost, bool) or not isinstance(cost, Number) or cost < 0):
        errors.append(FieldError(field="cost", message="Cost must be a non-negative number"))

    if "level" in data and data["level"] not in {level.value for level in SportLevel}:
        allowed = ", ".join(level.value for level in SportLevel)
        errors.append(FieldError(field="level", message=f"Level must be one of: {allowed}"))

    return _dedupe(errors)


def validate_review(data: Mapping[str, Any], partial: bool = False) -> List[FieldError]:
    errors = _check_fields(data, REVIEW_FIELDS)
    errors += _check_required(data, {
        "title": "Please add a title for the review",
        "comment": "Please add some text",
        "rating": "Please add a rating between 1 and 10",
    }, partial)
    errors += _collect(
        _check_text(data, "title", "Please add a title for the review", max_length=100),
        _check_text(data, "comment", "Please add some text"),
    )

    rating = data.get("rating")
    if rating is not None and (isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 10):
        errors.append(FieldError(field="rating", message="Please add a rating between 1 and 10"))

    return _dedupe(errors)


def _dedupe(errors: List[FieldError]) -> List[FieldError]:
    seen = set()
    unique = []
    for error in errors:
        key = (error.field, error.message)
        if key not in seen:
            seen.add(key)
            unique.append(error)
    return unique


def ensure_valid(errors: List[FieldError]) -> None:
    if errors:
        raise ValidationError(errors)
