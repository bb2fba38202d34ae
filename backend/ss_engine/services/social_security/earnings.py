"""Build and merge yearly earnings records."""

import logging
from datetime import date
from typing import Iterable, List, Optional

from ss_engine.core.exceptions import EarningsYearOutOfRange, InvalidEarnings
from ss_engine.schemas.social_security import EarningsRecord
from ss_engine.services.social_security.constants import (
    DEFAULT_SS_CONSTANTS,
    SocialSecurityConstants,
)
from ss_engine.services.social_security.credits import credits_for
from ss_engine.utils.money import CENT, Number, to_decimal

logger = logging.getLogger(__name__)

FIRST_COVERED_YEAR = 1950


def validate_earnings_year(year: int, current_year: Optional[int] = None) -> int:
    """Check a work year falls between 1950 and next year.

    Raises:
        EarningsYearOutOfRange: If the year is outside that window
    """
    if current_year is None:
        current_year = date.today().year

    if year < FIRST_COVERED_YEAR or year > current_year + 1:
        logger.warning("Rejected earnings year %s (current year %s)", year, current_year)
        raise EarningsYearOutOfRange(
            f"Work year {year} must be between {FIRST_COVERED_YEAR} and {current_year + 1}"
        )
    return year


def build_earnings_record(
    year: int,
    earnings: Number,
    constants: SocialSecurityConstants = DEFAULT_SS_CONSTANTS,
    current_year: Optional[int] = None,
) -> EarningsRecord:
    """Turn one year's gross earnings into a taxed earnings record.

    SS earnings are capped at the year's wage base; Medicare earnings are not.
    Employer payroll taxes match the employee's.

    Args:
        year: Work year
        earnings: Gross covered earnings for the year
        constants: Statutory constants to use
        current_year: Override for "today" when validating the year

    Returns:
        EarningsRecord with taxes and credits filled in
    """
    validate_earnings_year(year, current_year)

    earnings = to_decimal(earnings)
    if earnings < 0:
        raise InvalidEarnings(f"Earnings cannot be negative: {earnings}")

    year_constants = constants.for_year(year)
    ss_earnings = min(earnings, year_constants.wage_base)

    ss_tax = (ss_earnings * constants.ss_tax_rate).quantize(CENT)
    medicare_tax = (earnings * constants.medicare_tax_rate).quantize(CENT)

    # Wage base is far above 4 credits' worth, so gross earnings give the same count
    credits = credits_for(earnings, year_constants.credit_amount, constants.max_credits_per_year)

    return EarningsRecord(
        year=year,
        taxed_ss_earnings=ss_earnings,
        taxed_medicare_earnings=earnings,
        ss_tax_paid=ss_tax,
        medicare_tax_paid=medicare_tax,
        employer_ss_paid=ss_tax,
        employer_medicare_paid=medicare_tax,
        credits_earned=credits,
    )


def upsert_earnings_record(
    records: Iterable[EarningsRecord], record: EarningsRecord
) -> List[EarningsRecord]:
    """Replace the record for ``record.year`` (or add it), ordered by year."""
    merged = {existing.year: existing for existing in records}
    merged[record.year] = record
    return [merged[year] for year in sorted(merged)]
