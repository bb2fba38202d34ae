"""Social Security engine schemas."""

import enum
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

MEDICARE_CREDITS_REQUIRED = 40
CLAIM_AGES = range(62, 71)


class DataSource(str, enum.Enum):
    """Where a client's Social Security figures came from."""

    MANUAL = "manual"
    STATEMENT_PARSE = "statement_parse"
    PROJECTION = "projection"


# --- Retirement age ---


class FullRetirementAge(BaseModel):
    """Full Retirement Age as whole years plus months."""

    model_config = ConfigDict(frozen=True)

    years: int = Field(ge=0)
    months: int = Field(ge=0, le=11)

    @property
    def total_months(self) -> int:
        return self.years * 12 + self.months

    @property
    def age(self) -> float:
        """Age as a decimal (e.g., 66.5 for 66 years 6 months)."""
        return self.years + self.months / 12

    @classmethod
    def from_months(cls, total_months: int) -> "FullRetirementAge":
        return cls(years=total_months // 12, months=total_months % 12)

    def __str__(self) -> str:
        return f"{self.years} years, {self.months} months"


# --- Earnings ---


class EarningsRecord(BaseModel):
    """One work year of earnings for a client."""

    year: int
    taxed_ss_earnings: Decimal = Field(ge=0)  # Capped at that year's wage base
    taxed_medicare_earnings: Decimal = Field(ge=0)  # Uncapped
    ss_tax_paid: Decimal = Decimal(0)
    medicare_tax_paid: Decimal = Decimal(0)
    employer_ss_paid: Decimal = Decimal(0)
    employer_medicare_paid: Decimal = Decimal(0)
    credits_earned: int = Field(default=0, ge=0, le=4)


class CreditsSummary(BaseModel):
    """Lifetime credits folded over all earnings records."""

    total_credits: int = Field(ge=0)
    medicare_eligible: bool


class ContributionTotals(BaseModel):
    """Lifetime payroll taxes paid, employee and employer shares."""

    total_ss_paid: Decimal = Decimal(0)
    total_medicare_paid: Decimal = Decimal(0)
    total_employer_ss_paid: Decimal = Decimal(0)
    total_employer_medicare_paid: Decimal = Decimal(0)
    medicare_credits: int = 0
    medicare_eligible: bool = False

    @property
    def total_contributions(self) -> Decimal:
        return (
            self.total_ss_paid
            + self.total_medicare_paid
            + self.total_employer_ss_paid
            + self.total_employer_medicare_paid
        )


# --- Profile ---


class ClientSSProfile(BaseModel):
    """Stored Social Security picture for one client."""

    birth_date: date
    full_retirement_age_months: int = Field(ge=0)
    primary_insurance_amount: Optional[Decimal] = Field(None, ge=0)
    benefit_by_claim_age: Dict[int, Optional[Decimal]] = Field(
        default_factory=lambda: {age: None for age in CLAIM_AGES}
    )
    disability_benefit: Optional[Decimal] = Field(None, ge=0)
    survivor_benefit: Optional[Decimal] = Field(None, ge=0)
    medicare_credits: int = Field(default=0, ge=0)
    medicare_eligible: bool = False
    data_source: DataSource = DataSource.MANUAL
    statement_date: Optional[date] = None
    present_value_of_benefits: Optional[Decimal] = Field(None, ge=0)
    contributions: Optional[ContributionTotals] = None

    @property
    def full_retirement_age(self) -> FullRetirementAge:
        return FullRetirementAge.from_months(self.full_retirement_age_months)

    @model_validator(mode="after")
    def check_invariants(self) -> "ClientSSProfile":
        unknown = set(self.benefit_by_claim_age) - set(CLAIM_AGES)
        if unknown:
            raise ValueError(f"Claim ages must be between 62 and 70, got {sorted(unknown)}")

        from ss_engine.services.social_security.retirement_age import get_fra_months

        expected_fra_months = get_fra_months(self.birth_date.year)
        if self.full_retirement_age_months != expected_fra_months:
            raise ValueError(
                f"full_retirement_age_months must be {expected_fra_months} for birth year "
                f"{self.birth_date.year}, got {self.full_retirement_age_months}"
            )

        if self.medicare_eligible != (self.medicare_credits >= MEDICARE_CREDITS_REQUIRED):
            raise ValueError(
                f"medicare_eligible must reflect {MEDICARE_CREDITS_REQUIRED} credits "
                f"(have {self.medicare_credits})"
            )

        # PIA is the benefit at FRA, which only has a column when FRA is whole years
        fra = self.full_retirement_age
        at_fra = self.benefit_by_claim_age.get(fra.years) if fra.months == 0 else None
        if self.primary_insurance_amount is not None and at_fra is not None:
            if abs(self.primary_insurance_amount - at_fra) > Decimal("0.01"):
                raise ValueError(
                    f"Benefit at FRA ({at_fra}) does not match PIA ({self.primary_insurance_amount})"
                )
        return self


# --- Claiming analysis ---


class PresentValueAssumptions(BaseModel):
    """Assumptions behind a present value comparison."""

    current_age: float
    life_expectancy: float
    discount_rate: float
    cola_rate: float


class ClaimingAgeAnalysis(BaseModel):
    """Lifetime value of claiming at one age."""

    claiming_age: int
    monthly_benefit: Decimal
    present_value: Decimal
    total_nominal_benefits: Decimal
    years_of_benefits: float


class ClaimingDecision(BaseModel):
    """Claiming age with the highest present value, plus the full comparison."""

    age: int
    benefit: Decimal
    present_value: Decimal
    analysis: List[ClaimingAgeAnalysis]
    assumptions: PresentValueAssumptions


# --- Estimate result ---


class SocialSecurityEstimateResult(BaseModel):
    """Everything the engine reports for one client."""

    full_retirement_age: FullRetirementAge
    primary_insurance_amount: Decimal
    aime: Optional[Decimal] = None
    benefits_by_age: Dict[int, Decimal]
    disability_benefit: Decimal
    survivor_benefit: Decimal
    medicare_credits: int
    medicare_eligible: bool
    planned_claiming_age: int
    present_value_of_benefits: Decimal
    optimal_claiming_age: int
    optimal_claiming_present_value: Decimal
    claiming_analysis: List[ClaimingAgeAnalysis]
    data_source: DataSource
