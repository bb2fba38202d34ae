"""Present value of a lifetime Social Security benefit stream.

Payments are a monthly growing annuity starting at the claiming age and
ending at life expectancy, growing with COLA and discounted back to the
client's current age:

    r = annual_discount_rate / 12,  g = annual_cola / 12
    n = months from claiming age to life expectancy
    value_at_start = benefit * (1 - ((1 + g) / (1 + r))^n) / (r - g)
    value_at_start = benefit * n                    when r == g
    present_value  = value_at_start * (1 + r)^(-12 * years_until_start)

With COLA at 0 this is the fixed annuity PV = benefit * (1 - (1 + r)^-n) / r,
and as g approaches r the general form tends to benefit * n / (1 + r), within
a fraction of a percent of the r == g branch.
"""

import logging
import math
from decimal import Decimal

from ss_engine.core.exceptions import DegenerateAnnuityInputs
from ss_engine.utils.money import Number, round_cents

logger = logging.getLogger(__name__)

RATE_TOLERANCE = 1e-12


def payment_count(claim_age: float, life_expectancy: float) -> int:
    """Monthly payments between claiming age and life expectancy (half-up)."""
    return int(math.floor((life_expectancy - claim_age) * 12 + 0.5))


def validate_annuity_inputs(
    monthly_benefit: Number,
    claim_age: float,
    current_age: float,
    life_expectancy: float,
    annual_discount_rate: float,
    annual_cola: float,
    require_payments: bool = True,
) -> None:
    """Reject inputs the annuity formula cannot value.

    Raises:
        DegenerateAnnuityInputs: For non-finite values, rates at or below -100%,
            or (with ``require_payments``) a life expectancy at or before the
            claiming age
    """
    values = {
        "monthly_benefit": float(monthly_benefit),
        "claim_age": claim_age,
        "current_age": current_age,
        "life_expectancy": life_expectancy,
        "annual_discount_rate": annual_discount_rate,
        "annual_cola": annual_cola,
    }
    for name, value in values.items():
        if not math.isfinite(value):
            raise DegenerateAnnuityInputs(f"{name} must be finite, got {value}")

    if annual_discount_rate <= -1 or annual_cola <= -1:
        raise DegenerateAnnuityInputs("Discount and COLA rates must be above -100%")

    if require_payments and life_expectancy <= claim_age:
        raise DegenerateAnnuityInputs(
            f"Life expectancy ({life_expectancy}) must be after claiming age ({claim_age})"
        )


def present_value(
    monthly_benefit: Number,
    claim_age: float,
    current_age: float,
    life_expectancy: float = 90,
    annual_discount_rate: float = 0.03,
    annual_cola: float = 0.025,
) -> Decimal:
    """Present value of lifetime benefits claimed at ``claim_age``.

    Args:
        monthly_benefit: Monthly benefit at claiming age
        claim_age: Age when benefits start
        current_age: Current age of the client
        life_expectancy: Age when payments stop (default: 90)
        annual_discount_rate: Annual discount rate (default: 0.03 = 3%)
        annual_cola: Annual COLA adjustment (default: 0.025 = 2.5%)

    Returns:
        Present value rounded to the cent; 0 when no payments fall before
        life expectancy or the benefit is not positive.
    """
    validate_annuity_inputs(
        monthly_benefit,
        claim_age,
        current_age,
        life_expectancy,
        annual_discount_rate,
        annual_cola,
        require_payments=False,
    )

    n = payment_count(claim_age, life_expectancy)
    benefit = float(monthly_benefit)
    if n <= 0 or benefit <= 0:
        return Decimal("0.00")

    years_until_start = max(0.0, claim_age - current_age)
    r = annual_discount_rate / 12
    g = annual_cola / 12

    if abs(r - g) < RATE_TOLERANCE:
        value_at_start = benefit * n
    else:
        value_at_start = benefit * (1 - ((1 + g) / (1 + r)) ** n) / (r - g)

    pv = value_at_start * (1 + r) ** (-12 * years_until_start)
    return round_cents(pv)


def total_nominal_benefits(
    monthly_benefit: Number,
    claim_age: float,
    life_expectancy: float = 90,
    annual_cola: float = 0.025,
) -> Decimal:
    """Undiscounted sum of COLA-grown monthly payments until life expectancy."""
    n = payment_count(claim_age, life_expectancy)
    benefit = float(monthly_benefit)
    if n <= 0 or benefit <= 0:
        return Decimal("0.00")

    g = annual_cola / 12
    if abs(g) < RATE_TOLERANCE:
        return round_cents(benefit * n)
    return round_cents(benefit * ((1 + g) ** n - 1) / g)
