"""Full Retirement Age lookup by birth year."""

from typing import List, Tuple

from ss_engine.schemas.social_security import FullRetirementAge

# (last birth year, FRA in months), first match wins
FRA_TABLE: List[Tuple[int, int]] = [
    (1937, 65 * 12),
    (1938, 65 * 12 + 2),
    (1939, 65 * 12 + 4),
    (1940, 65 * 12 + 6),
    (1941, 65 * 12 + 8),
    (1942, 65 * 12 + 10),
    (1954, 66 * 12),  # 1943-1954
    (1955, 66 * 12 + 2),
    (1956, 66 * 12 + 4),
    (1957, 66 * 12 + 6),
    (1958, 66 * 12 + 8),
    (1959, 66 * 12 + 10),
]

FRA_1960_AND_LATER = 67 * 12


def get_fra_months(birth_year: int) -> int:
    """Full Retirement Age in total months for a birth year."""
    for last_birth_year, months in FRA_TABLE:
        if birth_year <= last_birth_year:
            return months
    return FRA_1960_AND_LATER


def get_fra(birth_year: int) -> FullRetirementAge:
    """Get Full Retirement Age for a given birth year.

    Any integer resolves: years before the table use 65, years after use 67.

    Example:
        >>> get_fra(1958)
        FullRetirementAge(years=66, months=8)
    """
    return FullRetirementAge.from_months(get_fra_months(birth_year))
