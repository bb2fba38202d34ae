"""Pick the claiming age (62-70) with the highest present value."""

import logging
from decimal import Decimal
from typing import Mapping, Optional

from ss_engine.schemas.social_security import (
    ClaimingAgeAnalysis,
    ClaimingDecision,
    PresentValueAssumptions,
)
from ss_engine.services.social_security.benefit_projector import benefit_at
from ss_engine.services.social_security.constants import (
    DEFAULT_SS_CONSTANTS,
    SocialSecurityConstants,
)
from ss_engine.services.social_security.present_value import (
    present_value,
    total_nominal_benefits,
)
from ss_engine.utils.money import Number, to_decimal

logger = logging.getLogger(__name__)

# PVs closer than this are a tie
TIE_TOLERANCE = Decimal("0.01")


def optimal_claiming_age(
    pia: Optional[Number],
    fra_months: int,
    current_age: float,
    life_expectancy: float = 90,
    discount_rate: float = 0.03,
    cola: float = 0.025,
    constants: SocialSecurityConstants = DEFAULT_SS_CONSTANTS,
    benefits: Optional[Mapping[int, Number]] = None,
) -> ClaimingDecision:
    """Evaluate every whole claiming age and return the one worth the most today.

    Ties within a cent go to the earlier age.

    Args:
        pia: Monthly PIA at FRA
        fra_months: Full Retirement Age in months
        current_age: Current age of client
        life_expectancy: Expected lifespan (default: 90)
        discount_rate: Annual discount rate (default: 0.03)
        cola: Annual COLA adjustment (default: 0.025)
        constants: Claiming factors and age window
        benefits: Monthly benefits keyed by claiming age (e.g. with statement
            anchors filled in); ages not listed are projected from the PIA

    Returns:
        ClaimingDecision with the chosen age and the per-age analysis
    """
    analysis = []
    best: Optional[ClaimingAgeAnalysis] = None

    for age in constants.claim_ages:
        if benefits and benefits.get(age) is not None:
            benefit = to_decimal(benefits[age])
        else:
            benefit = benefit_at(pia, fra_months, age * 12, constants)
        pv = present_value(benefit, age, current_age, life_expectancy, discount_rate, cola)
        item = ClaimingAgeAnalysis(
            claiming_age=age,
            monthly_benefit=benefit,
            present_value=pv,
            total_nominal_benefits=total_nominal_benefits(benefit, age, life_expectancy, cola),
            years_of_benefits=max(0.0, life_expectancy - age),
        )
        analysis.append(item)

        # Ages ascend, so only a strictly larger PV (beyond a cent) replaces the best
        if best is None or item.present_value - best.present_value > TIE_TOLERANCE:
            best = item

    logger.debug(
        "Optimal claiming age %s (PV %s) for current age %s, life expectancy %s",
        best.claiming_age,
        best.present_value,
        current_age,
        life_expectancy,
    )

    return ClaimingDecision(
        age=best.claiming_age,
        benefit=best.monthly_benefit,
        present_value=best.present_value,
        analysis=analysis,
        assumptions=PresentValueAssumptions(
            current_age=current_age,
            life_expectancy=life_expectancy,
            discount_rate=discount_rate,
            cola_rate=cola,
        ),
    )
