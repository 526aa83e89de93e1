"""Validation of optional ISO8601 calendar-date search filters."""

import re
from datetime import date

from models.errors import ValidationError

_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def validate_date_string(date_string: str | None, param_name: str) -> str | None:
    """
    Validate a YYYY-MM-DD date filter.

    Args:
        date_string: Date to validate; None or empty means "not provided"
        param_name: Parameter name used in error messages (e.g. "from_date")

    Returns:
        The unchanged date string, or None when no date was given

    Raises:
        ValidationError: If the format is wrong or the date does not exist
    """
    if not date_string:
        return None

    if not isinstance(date_string, str) or not _DATE_PATTERN.fullmatch(date_string):
        raise ValidationError(f"{param_name} must be in ISO8601 format (YYYY-MM-DD)")

    try:
        parsed = date.fromisoformat(date_string)
    except ValueError:
        raise ValidationError(f"{param_name} is not a valid date") from None

    # Round trip rejects anything the parser normalized away
    if parsed.isoformat() != date_string:
        raise ValidationError(f"{param_name} is not a valid date")

    return date_string


def validate_date_range(
    from_date: str | None, to_date: str | None
) -> tuple[str | None, str | None]:
    """Validate both bounds and require from_date <= to_date when both are set."""
    validated_from = validate_date_string(from_date, "from_date")
    validated_to = validate_date_string(to_date, "to_date")

    if validated_from and validated_to:
        if date.fromisoformat(validated_from) > date.fromisoformat(validated_to):
            raise ValidationError("from_date must be before or equal to to_date")

    return validated_from, validated_to
