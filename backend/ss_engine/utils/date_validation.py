"""Birth date parsing and age arithmetic."""

from datetime import date, datetime
from typing import Optional, Union

from ss_engine.core.exceptions import InvalidBirthDate

MIN_BIRTH_DATE = date(1900, 1, 1)


def parse_birth_date(value: Union[date, datetime, str], today: Optional[date] = None) -> date:
    """Validate a birth date given as a date, datetime or ISO string.

    Raises InvalidBirthDate if:
      - the value is not a date or a YYYY-MM-DD string
      - the date is before 1900-01-01
      - the date is after today
    """
    if today is None:
        today = date.today()

    if isinstance(value, datetime):
        birth_date = value.date()
    elif isinstance(value, date):
        birth_date = value
    elif isinstance(value, str):
        try:
            birth_date = date.fromisoformat(value.strip())
        except ValueError as exc:
            raise InvalidBirthDate(f"Birth date must be YYYY-MM-DD, got {value!r}") from exc
    else:
        raise InvalidBirthDate(f"Unsupported birth date value: {value!r}")

    if birth_date < MIN_BIRTH_DATE:
        raise InvalidBirthDate(f"Birth date cannot be before {MIN_BIRTH_DATE.isoformat()}")

    if birth_date > today:
        raise InvalidBirthDate("Birth date cannot be in the future")

    return birth_date


def calculate_age(birth_date: date, as_of_date: Optional[date] = None) -> int:
    """Calculate age in years as of a given date (defaults to today)."""
    if as_of_date is None:
        as_of_date = date.today()

    age = as_of_date.year - birth_date.year

    # Adjust if birthday hasn't occurred yet this year
    if (as_of_date.month, as_of_date.day) < (birth_date.month, birth_date.day):
        age -= 1

    return age
