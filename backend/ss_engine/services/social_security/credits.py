"""Work credits (quarters of coverage) and lifetime contribution totals."""

import logging
from typing import Iterable

from ss_engine.core.exceptions import InvalidEarnings
from ss_engine.schemas.social_security import ContributionTotals, CreditsSummary, EarningsRecord
from ss_engine.services.social_security.constants import (
    DEFAULT_SS_CONSTANTS,
    SocialSecurityConstants,
)
from ss_engine.utils.money import Number, to_decimal

logger = logging.getLogger(__name__)


def credits_for(earnings: Number, credit_amount: Number, max_credits: int = 4) -> int:
    """Credits earned for one year of earnings.

    One credit per ``credit_amount`` of earnings, capped at ``max_credits``.

    Raises:
        InvalidEarnings: If earnings are negative
    """
    earnings = to_decimal(earnings)
    if earnings < 0:
        logger.warning("Rejected negative earnings for credits: %s", earnings)
        raise InvalidEarnings(f"Earnings cannot be negative: {earnings}")

    credit_amount = to_decimal(credit_amount)
    if credit_amount <= 0:
        raise InvalidEarnings(f"Credit amount must be positive: {credit_amount}")

    return min(max_credits, int(earnings // credit_amount))


def aggregate_credits(
    records: Iterable[EarningsRecord],
    constants: SocialSecurityConstants = DEFAULT_SS_CONSTANTS,
) -> CreditsSummary:
    """Sum credits across all earnings records and test Medicare eligibility."""
    total = sum(record.credits_earned for record in records)
    return CreditsSummary(
        total_credits=total,
        medicare_eligible=total >= constants.credits_for_medicare,
    )


def estimate_credits_from_age(
    current_age: int,
    work_start_age: int = 18,
    constants: SocialSecurityConstants = DEFAULT_SS_CONSTANTS,
) -> int:
    """Rough credits for a manual estimate with no earnings history.

    Assumes full credits every year since ``work_start_age``, capped at 40 years.
    """
    work_years = max(0, current_age - work_start_age)
    return min(work_years * constants.max_credits_per_year, 40 * constants.max_credits_per_year)


def summarize_contributions(
    records: Iterable[EarningsRecord],
    constants: SocialSecurityConstants = DEFAULT_SS_CONSTANTS,
) -> ContributionTotals:
    """Fold all earnings records into lifetime tax and credit totals."""
    totals = ContributionTotals()
    for record in records:
        totals.total_ss_paid += record.ss_tax_paid
        totals.total_medicare_paid += record.medicare_tax_paid
        totals.total_employer_ss_paid += record.employer_ss_paid
        totals.total_employer_medicare_paid += record.employer_medicare_paid
        totals.medicare_credits += record.credits_earned

    totals.medicare_eligible = totals.medicare_credits >= constants.credits_for_medicare
    return totals
