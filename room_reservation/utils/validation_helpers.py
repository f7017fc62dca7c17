from typing import Any, Dict, Mapping, Optional
from room_reservation.errors import ValidationError


def is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return not value


def validate_fields(fields: Mapping[str, Any]) -> Dict[str, bool]:
    """Return a map of field name to `True` when that field is missing."""
    return {name: is_missing(value) for name, value in fields.items()}


def require_fields(
    fields: Mapping[str, Any], message: str, report_fields: bool = False
) -> None:
    """
    Raise ValidationError if any field is missing.

    With `report_fields` the error carries the per-field map.
    """
    missing = validate_fields(fields)
    if any(missing.values()):
        missing_fields: Optional[Dict[str, bool]] = missing if report_fields else None
        raise ValidationError(message, missing_fields=missing_fields)
