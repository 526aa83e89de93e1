import pytest

from models.errors import ValidationError
from orchestrator.date_validator import validate_date_range, validate_date_string


def test_valid_date_is_returned_unchanged():
    assert validate_date_string("2024-02-29", "from_date") == "2024-02-29"


@pytest.mark.parametrize("missing", [None, ""])
def test_missing_date_passes_through_as_none(missing):
    assert validate_date_string(missing, "to_date") is None


@pytest.mark.parametrize("bad", ["2024-1-01", "01-01-2024", "2024/01/01", "2024-01-01T00:00", "yesterday"])
def test_wrong_format_is_rejected(bad):
    with pytest.raises(ValidationError) as exc:
        validate_date_string(bad, "from_date")
    assert str(exc.value) == "from_date must be in ISO8601 format (YYYY-MM-DD)"


@pytest.mark.parametrize("bad", ["2024-02-30", "2024-13-01", "2023-02-29", "2024-04-31", "2024-00-10"])
def test_non_calendar_dates_are_rejected(bad):
    with pytest.raises(ValidationError) as exc:
        validate_date_string(bad, "to_date")
    assert str(exc.value) == "to_date is not a valid date"


def test_range_allows_equal_bounds():
    assert validate_date_range("2024-05-01", "2024-05-01") == ("2024-05-01", "2024-05-01")


def test_range_allows_single_bound():
    assert validate_date_range("2024-05-01", None) == ("2024-05-01", None)
    assert validate_date_range(None, "2024-05-01") == (None, "2024-05-01")


def test_range_rejects_reversed_bounds():
    with pytest.raises(ValidationError) as exc:
        validate_date_range("2024-06-02", "2024-06-01")
    assert "from_date must be before or equal to to_date" in str(exc.value)


def test_trailing_newline_is_a_format_error():
    with pytest.raises(ValidationError) as exc:
        validate_date_string("2024-01-01\n", "from_date")
    assert str(exc.value) == "from_date must be in ISO8601 format (YYYY-MM-DD)"
