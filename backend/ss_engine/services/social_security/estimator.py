"""Full Social Security benefit estimation for one client.

Ties the pieces together: FRA from birth year, PIA from a manual override,
statement anchor benefits, an earnings history or a current-income
projection, benefits for every claiming age, Medicare credits, and the
present value comparison across claiming ages.
"""

import time
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, List, Mapping, Optional, Tuple, Union

from ss_engine.config import Settings, settings as default_settings
from ss_engine.core.exceptions import MissingPIAForProjection, SocialSecurityError
from ss_engine.core.logging_config import get_logger, log_calculation
from ss_engine.schemas.social_security import (
    ClientSSProfile,
    DataSource,
    EarningsRecord,
    SocialSecurityEstimateResult,
)
from ss_engine.services.social_security.aime import (
    compute_aime,
    compute_aime_from_records,
    estimate_earnings_history,
)
from ss_engine.services.social_security.benefit_projector import (
    derive_pia_from_anchors,
    fill_benefits_by_claim_age,
)
from ss_engine.services.social_security.claiming_optimizer import optimal_claiming_age
from ss_engine.services.social_security.constants import (
    DEFAULT_SS_CONSTANTS,
    SocialSecurityConstants,
)
from ss_engine.services.social_security.credits import (
    aggregate_credits,
    estimate_credits_from_age,
    summarize_contributions,
)
from ss_engine.services.social_security.pia import compute_pia_for_year
from ss_engine.services.social_security.retirement_age import get_fra
from ss_engine.utils.date_validation import calculate_age, parse_birth_date
from ss_engine.utils.money import Number, to_decimal

logger = get_logger(__name__)

ELIGIBILITY_AGE = 62


def estimate_pia_from_income(
    annual_income: Number,
    eligibility_year: int,
    income_year: int,
    work_years: int = 35,
    constants: SocialSecurityConstants = DEFAULT_SS_CONSTANTS,
) -> Tuple[Decimal, Decimal]:
    """Project PIA assuming the current income for a whole career.

    Income is capped at the wage base of ``income_year`` and repeated for
    ``work_years`` years before running the AIME and PIA formulas.

    Returns:
        Tuple of (AIME, PIA)
    """
    wage_base = constants.for_year(income_year).wage_base
    history = estimate_earnings_history(annual_income, work_years, wage_base)
    aime = compute_aime(history, constants)
    return aime, compute_pia_for_year(aime, eligibility_year, constants)


def estimate_social_security(
    birth_date: Union[date, datetime, str],
    earnings_records: Optional[Iterable[EarningsRecord]] = None,
    annual_income: Optional[Number] = None,
    anchor_benefits: Optional[Mapping[int, Optional[Number]]] = None,
    manual_pia_override: Optional[Number] = None,
    planned_claiming_age: Optional[int] = None,
    life_expectancy: Optional[float] = None,
    discount_rate: Optional[float] = None,
    cola_rate: Optional[float] = None,
    work_years: int = 35,
    as_of: Optional[date] = None,
    constants: SocialSecurityConstants = DEFAULT_SS_CONSTANTS,
    config: Optional[Settings] = None,
) -> SocialSecurityEstimateResult:
    """Full Social Security benefit estimation.

    PIA comes from the first available of: ``manual_pia_override``,
    ``anchor_benefits`` (statement amounts keyed by claiming age), the
    earnings history, or ``annual_income`` projected over ``work_years``.

    Args:
        birth_date: Client birth date (date, datetime or YYYY-MM-DD)
        earnings_records: Yearly earnings records, any order
        annual_income: Current annual income for a projection
        anchor_benefits: Statement benefits keyed by claiming age
        manual_pia_override: If set, use this PIA instead of estimating
        planned_claiming_age: Age for the reported present value; defaults to
            the first whole age at or after FRA
        life_expectancy: Override for the configured life expectancy
        discount_rate: Override for the configured annual discount rate
        cola_rate: Override for the configured annual COLA
        work_years: Career length for an income projection
        as_of: "Today" for age and date validation
        constants: Statutory constants
        config: Settings supplying default assumptions

    Returns:
        SocialSecurityEstimateResult

    Raises:
        InvalidBirthDate: If the birth date is unparsable or in the future
        MissingPIAForProjection: If no source for a PIA is supplied
    """
    started = time.perf_counter()
    config = config or default_settings
    as_of = as_of or date.today()
    life_expectancy = config.SS_LIFE_EXPECTANCY if life_expectancy is None else life_expectancy
    discount_rate = config.SS_DISCOUNT_RATE if discount_rate is None else discount_rate
    cola_rate = config.SS_COLA_RATE if cola_rate is None else cola_rate

    birth_date = parse_birth_date(birth_date, today=as_of)
    birth_year = birth_date.year
    current_age = calculate_age(birth_date, as_of)
    fra = get_fra(birth_year)
    fra_months = fra.total_months
    eligibility_year = birth_year + ELIGIBILITY_AGE

    records: List[EarningsRecord] = list(earnings_records or [])
    anchors = {age: amount for age, amount in (anchor_benefits or {}).items() if amount}

    if manual_pia_override is not None and anchors:
        raise SocialSecurityError("Provide either a PIA override or statement benefits, not both")

    aime = None
    if manual_pia_override is not None:
        pia = to_decimal(manual_pia_override)
        data_source = DataSource.MANUAL
    elif anchors:
        pia = derive_pia_from_anchors(anchors, fra_months, constants)
        data_source = DataSource.STATEMENT_PARSE
    elif records:
        aime = compute_aime_from_records(records, constants)
        pia = compute_pia_for_year(aime, eligibility_year, constants)
        data_source = DataSource.MANUAL
    elif annual_income is not None:
        aime, pia = estimate_pia_from_income(
            annual_income, eligibility_year, as_of.year, work_years, constants
        )
        data_source = DataSource.PROJECTION
    else:
        logger.warning("ss_estimate_missing_pia", birth_year=birth_year)
        raise MissingPIAForProjection(
            "Provide a PIA, statement benefits, earnings history or annual income"
        )

    benefits = fill_benefits_by_claim_age(pia, fra_months, anchors, constants)

    if records:
        credits = aggregate_credits(records, constants)
        medicare_credits, medicare_eligible = credits.total_credits, credits.medicare_eligible
    elif data_source == DataSource.PROJECTION:
        medicare_credits = estimate_credits_from_age(current_age, constants=constants)
        medicare_eligible = medicare_credits >= constants.credits_for_medicare
    else:
        medicare_credits, medicare_eligible = 0, False

    if planned_claiming_age is None:
        planned_claiming_age = fra.years + (1 if fra.months else 0)
    if planned_claiming_age not in constants.claim_ages:
        raise SocialSecurityError(
            f"Claiming age must be between {constants.min_claim_age} and {constants.max_claim_age}"
        )

    decision = optimal_claiming_age(
        pia,
        fra_months,
        current_age,
        life_expectancy,
        discount_rate,
        cola_rate,
        constants,
        benefits=benefits,
    )
    planned = next(
        item for item in decision.analysis if item.claiming_age == planned_claiming_age
    )

    log_calculation(
        logger,
        "estimate_social_security",
        duration_ms=round((time.perf_counter() - started) * 1000, 3),
        birth_year=birth_year,
        data_source=data_source.value,
        pia=str(pia),
        optimal_claiming_age=decision.age,
    )

    return SocialSecurityEstimateResult(
        full_retirement_age=fra,
        primary_insurance_amount=pia,
        aime=aime,
        benefits_by_age=benefits,
        disability_benefit=pia,
        survivor_benefit=pia,
        medicare_credits=medicare_credits,
        medicare_eligible=medicare_eligible,
        planned_claiming_age=planned_claiming_age,
        present_value_of_benefits=planned.present_value,
        optimal_claiming_age=decision.age,
        optimal_claiming_present_value=decision.present_value,
        claiming_analysis=decision.analysis,
        data_source=data_source,
    )


def recalculate_profile(
    birth_date: Union[date, datetime, str],
    earnings_records: Optional[Iterable[EarningsRecord]] = None,
    annual_income: Optional[Number] = None,
    anchor_benefits: Optional[Mapping[int, Optional[Number]]] = None,
    statement_date: Optional[date] = None,
    as_of: Optional[date] = None,
    constants: SocialSecurityConstants = DEFAULT_SS_CONSTANTS,
    config: Optional[Settings] = None,
    **estimate_kwargs,
) -> ClientSSProfile:
    """Rebuild a client's stored profile after birth date, income or anchors change.

    Credits and Medicare eligibility are refolded from every earnings record.
    """
    as_of = as_of or date.today()
    records = list(earnings_records or [])
    result = estimate_social_security(
        birth_date,
        earnings_records=records,
        annual_income=annual_income,
        anchor_benefits=anchor_benefits,
        as_of=as_of,
        constants=constants,
        config=config,
        **estimate_kwargs,
    )

    if result.data_source == DataSource.STATEMENT_PARSE and statement_date is None:
        statement_date = as_of

    return ClientSSProfile(
        birth_date=parse_birth_date(birth_date, today=as_of),
        full_retirement_age_months=result.full_retirement_age.total_months,
        primary_insurance_amount=result.primary_insurance_amount,
        benefit_by_claim_age=dict(result.benefits_by_age),
        disability_benefit=result.disability_benefit,
        survivor_benefit=result.survivor_benefit,
        medicare_credits=result.medicare_credits,
        medicare_eligible=result.medicare_eligible,
        data_source=result.data_source,
        statement_date=statement_date if result.data_source == DataSource.STATEMENT_PARSE else None,
        present_value_of_benefits=result.present_value_of_benefits,
        contributions=summarize_contributions(records, constants) if records else None,
    )
