"""Statutory Social Security constants.

Bend points, wage base and the credit amount change every year by law, so
they live in a year-indexed table instead of a single snapshot. The whole
set is an immutable value passed into each calculation; use
``model_copy(update=...)`` to model alternate assumptions.
"""

from decimal import Decimal
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


class TaxYearConstants(BaseModel):
    """Values published by SSA for a single tax year."""

    model_config = ConfigDict(frozen=True)

    bend_point_1: Decimal = Field(gt=0)
    bend_point_2: Decimal = Field(gt=0)
    wage_base: Decimal = Field(gt=0)  # Maximum earnings subject to SS tax
    credit_amount: Decimal = Field(gt=0)  # Earnings needed per credit


# SSA published figures
TAX_YEAR_TABLE: Dict[int, TaxYearConstants] = {
    2017: TaxYearConstants(bend_point_1=885, bend_point_2=5336, wage_base=127200, credit_amount=1300),
    2018: TaxYearConstants(bend_point_1=895, bend_point_2=5397, wage_base=128400, credit_amount=1320),
    2019: TaxYearConstants(bend_point_1=926, bend_point_2=5583, wage_base=132900, credit_amount=1360),
    2020: TaxYearConstants(bend_point_1=960, bend_point_2=5785, wage_base=137700, credit_amount=1410),
    2021: TaxYearConstants(bend_point_1=996, bend_point_2=6002, wage_base=142800, credit_amount=1470),
    2022: TaxYearConstants(bend_point_1=1024, bend_point_2=6172, wage_base=147000, credit_amount=1510),
    2023: TaxYearConstants(bend_point_1=1115, bend_point_2=6721, wage_base=160200, credit_amount=1640),
    2024: TaxYearConstants(bend_point_1=1174, bend_point_2=7078, wage_base=168600, credit_amount=1730),
    2025: TaxYearConstants(bend_point_1=1226, bend_point_2=7391, wage_base=176100, credit_amount=1810),
}


class SocialSecurityConstants(BaseModel):
    """Rates and rules shared by every engine calculation."""

    model_config = ConfigDict(frozen=True)

    # Tax rates (employee share; employer matches)
    ss_tax_rate: Decimal = Decimal("0.062")
    medicare_tax_rate: Decimal = Decimal("0.0145")

    # Credits
    max_credits_per_year: int = 4
    credits_for_medicare: int = 40  # 10 years of work

    # AIME
    computation_years: int = 35

    # PIA replacement rates at each segment
    pia_rate_1: Decimal = Decimal("0.90")
    pia_rate_2: Decimal = Decimal("0.32")
    pia_rate_3: Decimal = Decimal("0.15")

    # Early/delayed retirement factors
    early_reduction_per_month: Decimal = Decimal("0.00556")  # 5/9 of 1% for first 36 months
    early_reduction_after_36: Decimal = Decimal("0.00417")  # 5/12 of 1% after 36 months
    early_reduction_tier_months: int = 36
    delayed_credit_per_month: Decimal = Decimal("0.00667")  # 2/3 of 1% (8% per year)

    # Claiming window
    min_claim_age: int = 62
    max_claim_age: int = 70

    tax_years: Dict[int, TaxYearConstants] = Field(default_factory=lambda: dict(TAX_YEAR_TABLE))

    @property
    def computation_months(self) -> int:
        return self.computation_years * 12

    @property
    def claim_ages(self) -> range:
        return range(self.min_claim_age, self.max_claim_age + 1)

    def for_year(self, year: int) -> TaxYearConstants:
        """Constants for a tax year.

        Years outside the table resolve to the nearest bound; a gap inside
        the table resolves to the latest earlier year.
        """
        if year in self.tax_years:
            return self.tax_years[year]
        known = sorted(self.tax_years)
        if year < known[0]:
            return self.tax_years[known[0]]
        earlier = [y for y in known if y <= year]
        return self.tax_years[earlier[-1]]


DEFAULT_SS_CONSTANTS = SocialSecurityConstants()
