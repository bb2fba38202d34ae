"""Primary Insurance Amount (PIA) from AIME using the bend point formula."""

import logging
from decimal import Decimal

from ss_engine.core.exceptions import InvalidEarnings
from ss_engine.services.social_security.constants import (
    DEFAULT_SS_CONSTANTS,
    SocialSecurityConstants,
)
from ss_engine.utils.money import Number, floor_cents, to_decimal

logger = logging.getLogger(__name__)


def compute_pia(
    aime: Number,
    bend_point_1: Number,
    bend_point_2: Number,
    constants: SocialSecurityConstants = DEFAULT_SS_CONSTANTS,
) -> Decimal:
    """Calculate PIA from Average Indexed Monthly Earnings.

    90% of AIME up to the first bend point, 32% between the bend points and
    15% above the second. The result is rounded down to the cent.

    Args:
        aime: Average Indexed Monthly Earnings (monthly)
        bend_point_1: First bend point for the eligibility year
        bend_point_2: Second bend point for the eligibility year
        constants: Replacement rates

    Returns:
        Monthly PIA (Primary Insurance Amount) at FRA
    """
    aime = to_decimal(aime)
    bend_point_1 = to_decimal(bend_point_1)
    bend_point_2 = to_decimal(bend_point_2)
    if aime < 0:
        raise InvalidEarnings(f"AIME cannot be negative: {aime}")

    if aime <= bend_point_1:
        pia = constants.pia_rate_1 * aime
    elif aime <= bend_point_2:
        pia = constants.pia_rate_1 * bend_point_1 + constants.pia_rate_2 * (aime - bend_point_1)
    else:
        pia = (
            constants.pia_rate_1 * bend_point_1
            + constants.pia_rate_2 * (bend_point_2 - bend_point_1)
            + constants.pia_rate_3 * (aime - bend_point_2)
        )

    return floor_cents(pia)


def compute_pia_for_year(
    aime: Number,
    eligibility_year: int,
    constants: SocialSecurityConstants = DEFAULT_SS_CONSTANTS,
) -> Decimal:
    """PIA using the bend points of the year the worker turns 62."""
    year_constants = constants.for_year(eligibility_year)
    pia = compute_pia(aime, year_constants.bend_point_1, year_constants.bend_point_2, constants)
    logger.debug("PIA %s for AIME %s (bend points of %s)", pia, aime, eligibility_year)
    return pia
