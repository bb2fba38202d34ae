"""Monthly benefit at a claiming age: early reduction and delayed credits."""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Mapping, Optional

from ss_engine.core.exceptions import InvalidEarnings, MissingPIAForProjection
from ss_engine.services.social_security.constants import (
    DEFAULT_SS_CONSTANTS,
    SocialSecurityConstants,
)
from ss_engine.utils.money import CENT, Number, floor_cents, to_decimal

logger = logging.getLogger(__name__)


def claiming_adjustment(
    fra_months: int,
    claim_months: int,
    constants: SocialSecurityConstants = DEFAULT_SS_CONSTANTS,
) -> Decimal:
    """Multiplier applied to PIA when claiming at ``claim_months`` of age.

    - Early claiming (before FRA): 5/9 of 1% per month for the first 36
      months early, then 5/12 of 1% per month beyond that, never below 0.
    - Delayed claiming (after FRA): 2/3 of 1% per month, accruing only up
      to age 70.
    """
    months_diff = claim_months - fra_months

    if months_diff == 0:
        return Decimal(1)

    if months_diff < 0:
        months_early = -months_diff
        tier = constants.early_reduction_tier_months
        if months_early <= tier:
            reduction = months_early * constants.early_reduction_per_month
        else:
            reduction = (
                tier * constants.early_reduction_per_month
                + (months_early - tier) * constants.early_reduction_after_36
            )
        return max(Decimal(0), 1 - reduction)

    months_delayed = min(months_diff, constants.max_claim_age * 12 - fra_months)
    return 1 + months_delayed * constants.delayed_credit_per_month


def benefit_at(
    pia: Optional[Number],
    fra_months: int,
    claim_months: int,
    constants: SocialSecurityConstants = DEFAULT_SS_CONSTANTS,
) -> Decimal:
    """Adjust monthly benefit for early or delayed claiming.

    Args:
        pia: Monthly PIA at FRA
        fra_months: Full Retirement Age in months
        claim_months: Claiming age in months
        constants: Claiming factors

    Returns:
        Monthly benefit, rounded down to the cent. Claiming exactly at FRA
        returns the PIA unchanged.
    """
    if pia is None:
        raise MissingPIAForProjection("A PIA is required to project benefits")

    pia = to_decimal(pia)
    if pia < 0:
        raise InvalidEarnings(f"PIA cannot be negative: {pia}")

    if claim_months == fra_months:
        return pia

    return floor_cents(pia * claiming_adjustment(fra_months, claim_months, constants))


def benefits_by_claim_age(
    pia: Optional[Number],
    fra_months: int,
    constants: SocialSecurityConstants = DEFAULT_SS_CONSTANTS,
) -> Dict[int, Decimal]:
    """Monthly benefit for every whole claiming age from 62 to 70."""
    return {age: benefit_at(pia, fra_months, age * 12, constants) for age in constants.claim_ages}


# --- Anchor benefits from an SSA statement ---


def derive_pia_from_anchors(
    anchors: Mapping[int, Optional[Number]],
    fra_months: int,
    constants: SocialSecurityConstants = DEFAULT_SS_CONSTANTS,
) -> Decimal:
    """Recover a PIA from statement benefits keyed by claiming age.

    When FRA is a whole number of years and the statement lists that age,
    the benefit there is the PIA. Otherwise the adjustment is inverted for
    the listed age closest to FRA (the earlier age on a tie).

    Raises:
        MissingPIAForProjection: If no usable anchor benefit is given
    """
    usable = {age: to_decimal(amount) for age, amount in anchors.items() if amount}
    if not usable:
        raise MissingPIAForProjection(
            "No PIA provided and no statement benefits to derive one from"
        )

    if fra_months % 12 == 0 and fra_months // 12 in usable:
        return usable[fra_months // 12]

    age = min(usable, key=lambda a: (abs(a * 12 - fra_months), a))
    factor = claiming_adjustment(fra_months, age * 12, constants)
    pia = (usable[age] / factor).quantize(CENT, rounding=ROUND_HALF_UP)
    logger.debug("Derived PIA %s from age %s benefit %s", pia, age, usable[age])
    return pia


def fill_benefits_by_claim_age(
    pia: Optional[Number],
    fra_months: int,
    anchors: Optional[Mapping[int, Optional[Number]]] = None,
    constants: SocialSecurityConstants = DEFAULT_SS_CONSTANTS,
) -> Dict[int, Decimal]:
    """Benefits for ages 62-70, keeping statement anchors and projecting the rest."""
    anchors = anchors or {}
    if pia is None:
        pia = derive_pia_from_anchors(anchors, fra_months, constants)

    benefits = benefits_by_claim_age(pia, fra_months, constants)
    for age, amount in anchors.items():
        if amount and age in benefits:
            benefits[age] = to_decimal(amount)
    return benefits
