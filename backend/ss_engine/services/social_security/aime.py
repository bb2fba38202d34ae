"""Average Indexed Monthly Earnings (AIME)."""

import logging
from decimal import Decimal
from typing import Iterable, List, Optional

from ss_engine.core.exceptions import InvalidEarnings
from ss_engine.schemas.social_security import EarningsRecord
from ss_engine.services.social_security.constants import (
    DEFAULT_SS_CONSTANTS,
    SocialSecurityConstants,
)
from ss_engine.utils.money import Number, floor_dollars, to_decimal

logger = logging.getLogger(__name__)


def compute_aime(
    ss_earnings_by_year: Iterable[Number],
    constants: SocialSecurityConstants = DEFAULT_SS_CONSTANTS,
) -> Decimal:
    """Calculate AIME from yearly SS-taxed earnings.

    Takes the highest 35 years, pads with zero years when the history is
    shorter, and divides by 420 months. Extra low years are dropped rather
    than averaged in, so working longer never lowers AIME.

    Args:
        ss_earnings_by_year: SS-taxed earnings, one value per work year, any order
        constants: Statutory constants (computation period)

    Returns:
        AIME as a Decimal floored to whole dollars

    Raises:
        InvalidEarnings: If any year's earnings are negative
    """
    earnings = [to_decimal(value) for value in ss_earnings_by_year]
    negative = [value for value in earnings if value < 0]
    if negative:
        logger.warning("Rejected negative earnings in AIME history: %s", negative[0])
        raise InvalidEarnings(f"Earnings cannot be negative: {negative[0]}")

    years = constants.computation_years
    top_years = sorted(earnings, reverse=True)[:years]
    top_years.extend([Decimal(0)] * (years - len(top_years)))

    aime = floor_dollars(sum(top_years, Decimal(0)) / constants.computation_months)
    logger.debug("AIME %s from %d earning years", aime, len(earnings))
    return aime


def compute_aime_from_records(
    records: Iterable[EarningsRecord],
    constants: SocialSecurityConstants = DEFAULT_SS_CONSTANTS,
) -> Decimal:
    """AIME from stored earnings records (their SS-taxed earnings)."""
    return compute_aime((record.taxed_ss_earnings for record in records), constants)


def estimate_earnings_history(
    annual_income: Number,
    work_years: int = 35,
    wage_base: Optional[Number] = None,
) -> List[Decimal]:
    """Flat career history for a manual projection from current income."""
    income = to_decimal(annual_income)
    if income < 0:
        raise InvalidEarnings(f"Income cannot be negative: {income}")
    if wage_base is not None:
        income = min(income, to_decimal(wage_base))
    return [income] * max(0, work_years)
