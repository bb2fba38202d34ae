"""Tests for Social Security benefit estimation.

Covers:
- FRA (Full Retirement Age) by birth year
- AIME from the top 35 earning years
- PIA (Primary Insurance Amount) calculation from AIME
- Early/delayed claiming age adjustments
- Anchor benefits from a statement
- Full estimation integration
"""

from datetime import date
from decimal import Decimal

import pytest

from ss_engine.core.exceptions import (
    InvalidBirthDate,
    InvalidEarnings,
    MissingPIAForProjection,
    SocialSecurityError,
)
from ss_engine.schemas.social_security import DataSource, FullRetirementAge
from ss_engine.services.social_security.aime import compute_aime, estimate_earnings_history
from ss_engine.services.social_security.benefit_projector import (
    benefit_at,
    benefits_by_claim_age,
    derive_pia_from_anchors,
    fill_benefits_by_claim_age,
)
from ss_engine.services.social_security.earnings import build_earnings_record
from ss_engine.services.social_security.estimator import (
    estimate_pia_from_income,
    estimate_social_security,
)
from ss_engine.services.social_security.pia import compute_pia, compute_pia_for_year
from ss_engine.services.social_security.retirement_age import get_fra, get_fra_months

BEND_POINT_1 = Decimal("1174")
BEND_POINT_2 = Decimal("7078")
AS_OF = date(2025, 1, 1)


# ── FRA by birth year ─────────────────────────────────────────────────────────


class TestGetFRA:
    def test_born_1937_or_earlier(self):
        assert get_fra(1935) == FullRetirementAge(years=65, months=0)
        assert get_fra(1937) == FullRetirementAge(years=65, months=0)
        assert get_fra_months(1850) == 780

    def test_born_1943_to_1954(self):
        for year in range(1943, 1955):
            assert get_fra_months(year) == 792

    def test_born_1960_or_later(self):
        assert get_fra(1960) == FullRetirementAge(years=67, months=0)
        assert get_fra(1990) == FullRetirementAge(years=67, months=0)
        assert get_fra_months(2100) == 804

    def test_transitional_years(self):
        assert get_fra(1938) == FullRetirementAge(years=65, months=2)
        assert get_fra(1942) == FullRetirementAge(years=65, months=10)
        assert get_fra(1955) == FullRetirementAge(years=66, months=2)
        assert get_fra(1957) == FullRetirementAge(years=66, months=6)
        assert get_fra(1959) == FullRetirementAge(years=66, months=10)

    def test_born_1958_is_800_months(self):
        fra = get_fra(1958)
        assert (fra.years, fra.months) == (66, 8)
        assert fra.total_months == 800
        assert fra.age == pytest.approx(66 + 8 / 12)

    def test_fra_never_decreases_with_birth_year(self):
        previous = 0
        for year in range(1930, 1970):
            months = get_fra_months(year)
            assert months >= previous
            previous = months


# ── AIME from earnings ────────────────────────────────────────────────────────


class TestComputeAIME:
    def test_empty_history(self):
        assert compute_aime([]) == Decimal(0)

    def test_short_history_divides_by_420(self):
        """Ten years of earnings are averaged over 35 years, not 10."""
        assert compute_aime([Decimal("50400")] * 10) == Decimal("1200")
        assert compute_aime([42000]) == Decimal("100")

    def test_floored_to_whole_dollars(self):
        # 1000 / 420 = 2.38
        assert compute_aime([1000]) == Decimal("2")

    def test_only_top_35_years_count(self):
        career = [84000] * 35
        assert compute_aime(career) == Decimal("7000")
        # Extra low years are dropped, not averaged in
        assert compute_aime(career + [10000, 0, 500, 20000, 1]) == Decimal("7000")

    def test_order_does_not_matter(self):
        earnings = [10000, 90000, 45000, 0, 120000]
        assert compute_aime(earnings) == compute_aime(list(reversed(earnings)))

    def test_more_years_never_lower_aime(self):
        earnings = []
        previous = Decimal(0)
        for amount in [30000, 5000, 60000, 1000, 0, 45000] * 8:
            earnings.append(amount)
            aime = compute_aime(earnings)
            assert aime >= previous
            previous = aime

    def test_negative_earnings_rejected(self):
        with pytest.raises(InvalidEarnings):
            compute_aime([50000, -1])


# ── PIA from AIME ─────────────────────────────────────────────────────────────


class TestComputePIA:
    def test_zero_aime(self):
        assert compute_pia(0, BEND_POINT_1, BEND_POINT_2) == Decimal("0.00")

    def test_negative_aime_rejected(self):
        with pytest.raises(InvalidEarnings):
            compute_pia(-100, BEND_POINT_1, BEND_POINT_2)

    def test_below_first_bend_point(self):
        assert compute_pia(1000, BEND_POINT_1, BEND_POINT_2) == Decimal("900.00")

    def test_at_first_bend_point(self):
        assert compute_pia(1174, BEND_POINT_1, BEND_POINT_2) == Decimal("1056.60")

    def test_between_bend_points(self):
        """1174 * 0.9 + (5000 - 1174) * 0.32 = 1056.60 + 1224.32."""
        assert compute_pia(5000, BEND_POINT_1, BEND_POINT_2) == Decimal("2280.92")

    def test_above_second_bend_point(self):
        # 1056.60 + 0.32 * 5904 + 0.15 * 2922 = 1056.60 + 1889.28 + 438.30
        assert compute_pia(10000, BEND_POINT_1, BEND_POINT_2) == Decimal("3384.18")

    def test_rounds_down_to_the_cent(self):
        # 0.9 * 1000.95 = 900.855 -> 900.85, not 900.86
        assert compute_pia(Decimal("1000.95"), BEND_POINT_1, BEND_POINT_2) == Decimal("900.85")
        # 1056.60 + 0.32 * 1826.03 = 1640.9296 -> 1640.92
        assert compute_pia(Decimal("3000.03"), BEND_POINT_1, BEND_POINT_2) == Decimal("1640.92")

    def test_non_decreasing_in_aime(self):
        previous = Decimal(0)
        for aime in range(0, 12001, 50):
            pia = compute_pia(aime, BEND_POINT_1, BEND_POINT_2)
            assert pia >= previous
            previous = pia

    def test_marginal_rate_drops_at_each_bend_point(self):
        def pia(aime):
            return compute_pia(aime, BEND_POINT_1, BEND_POINT_2)

        def marginal(low, high):
            return (pia(high) - pia(low)) / (high - low)

        first = marginal(100, 1100)
        second = marginal(2000, 7000)
        third = marginal(8000, 12000)
        assert first == Decimal("0.9")
        assert second == Decimal("0.32")
        assert third == Decimal("0.15")
        assert first > second > third

    def test_bend_points_of_eligibility_year(self):
        # 2025 bend points: 1226 / 7391
        assert compute_pia_for_year(1000, 2025) == Decimal("900.00")
        assert compute_pia_for_year(8333, 2025) == Decimal("3217.50")
        # Years past the table use the latest published year
        assert compute_pia_for_year(8333, 2042) == Decimal("3217.50")


# ── Claiming age adjustments ──────────────────────────────────────────────────


class TestBenefitAt:
    def test_zero_pia(self):
        assert benefit_at(0, 804, 744) == Decimal("0.00")

    def test_claim_at_fra_returns_pia(self):
        for pia in [Decimal("0"), Decimal("1234.56"), Decimal("2280.92"), Decimal("4018.00")]:
            assert benefit_at(pia, 800, 800) == pia

    def test_early_claiming_at_62_fra_66_and_8(self):
        """56 months early: 36 * 0.00556 + 20 * 0.00417 = 0.28356 reduction."""
        assert benefit_at(Decimal("2280.92"), 800, 744) == Decimal("1634.14")

    def test_delayed_claiming_at_70_fra_66_and_8(self):
        """40 months delayed: 40 * 0.00667 = 0.2668 increase."""
        assert benefit_at(Decimal("2280.92"), 800, 840) == Decimal("2889.46")

    def test_early_within_first_36_months(self):
        # 24 months early: 0.13344 reduction
        assert benefit_at(2000, 804, 780) == Decimal("1733.12")

    def test_fra_67_endpoints(self):
        # 60 months early: 0.20016 + 24 * 0.00417 = 0.30024
        assert benefit_at(2000, 804, 744) == Decimal("1399.52")
        # 36 months delayed: 0.24012
        assert benefit_at(2000, 804, 840) == Decimal("2480.24")

    def test_delayed_credits_stop_at_70(self):
        assert benefit_at(2000, 804, 71 * 12) == benefit_at(2000, 804, 70 * 12)

    def test_strictly_increasing_from_62_to_70(self):
        previous = Decimal(0)
        for months in range(62 * 12, 70 * 12 + 1):
            benefit = benefit_at(Decimal("2280.92"), 800, months)
            assert benefit > previous, f"Benefit at {months} months ({benefit}) not > {previous}"
            previous = benefit

    def test_never_negative_far_below_fra(self):
        assert benefit_at(2000, 804, 0) == Decimal("0.00")
        assert benefit_at(2000, 804, 30 * 12) == Decimal("0.00")

    def test_missing_pia(self):
        with pytest.raises(MissingPIAForProjection):
            benefit_at(None, 804, 744)

    def test_negative_pia_rejected(self):
        with pytest.raises(InvalidEarnings):
            benefit_at(-1, 804, 744)

    def test_benefits_by_claim_age_covers_62_to_70(self):
        benefits = benefits_by_claim_age(2000, 804)
        assert list(benefits) == list(range(62, 71))
        assert benefits[67] == Decimal("2000")
        assert benefits[62] == Decimal("1399.52")


# ── Anchor benefits ───────────────────────────────────────────────────────────


class TestAnchorBenefits:
    def test_pia_is_benefit_at_whole_year_fra(self):
        anchors = {62: 1400, 67: 2000, 70: 2480}
        assert derive_pia_from_anchors(anchors, 804) == Decimal("2000")

    def test_pia_inverted_when_fra_has_months(self):
        pia = derive_pia_from_anchors({70: Decimal("2889.46")}, 800)
        assert pia == pytest.approx(Decimal("2280.92"), abs=Decimal("0.02"))

    def test_nearest_anchor_to_fra_is_used(self):
        # FRA 66y8m: 67 is nearer than 62 or 70
        pia = derive_pia_from_anchors({62: 1, 67: Decimal("2341.77"), 70: 99999}, 800)
        assert pia == pytest.approx(Decimal("2280.92"), abs=Decimal("0.02"))

    def test_no_anchors(self):
        with pytest.raises(MissingPIAForProjection):
            derive_pia_from_anchors({}, 804)
        with pytest.raises(MissingPIAForProjection):
            derive_pia_from_anchors({62: None, 70: 0}, 804)

    def test_fill_keeps_anchors_and_projects_the_rest(self):
        benefits = fill_benefits_by_claim_age(None, 804, {62: 1400, 67: 2000, 70: 2480})
        assert benefits[62] == Decimal("1400")
        assert benefits[70] == Decimal("2480")
        # 48 months early: 0.20016 + 12 * 0.00417 = 0.2502
        assert benefits[63] == Decimal("1499.60")
        assert benefits[67] == Decimal("2000")


# ── Full SS estimation ────────────────────────────────────────────────────────


class TestEstimateSocialSecurity:
    def test_manual_pia_override(self):
        result = estimate_social_security(
            "1958-06-15", manual_pia_override=Decimal("2280.92"), as_of=AS_OF
        )
        assert result.full_retirement_age == FullRetirementAge(years=66, months=8)
        assert result.primary_insurance_amount == Decimal("2280.92")
        assert result.benefits_by_age[62] == Decimal("1634.14")
        assert result.benefits_by_age[70] == Decimal("2889.46")
        assert result.data_source == DataSource.MANUAL
        assert result.planned_claiming_age == 67
        assert result.disability_benefit == result.survivor_benefit == Decimal("2280.92")

    def test_projection_from_income(self):
        """$100K for 35 years: AIME 8333, 2025 bend points."""
        result = estimate_social_security(date(1980, 5, 15), annual_income=100000, as_of=AS_OF)
        assert result.aime == Decimal("8333")
        assert result.primary_insurance_amount == Decimal("3217.50")
        assert result.benefits_by_age[67] == Decimal("3217.50")
        assert result.data_source == DataSource.PROJECTION
        # 26 years since age 18, 4 credits each
        assert result.medicare_credits == 104
        assert result.medicare_eligible is True

    def test_income_capped_at_wage_base(self):
        high = estimate_social_security(date(1980, 5, 15), annual_income=500000, as_of=AS_OF)
        capped = estimate_social_security(date(1980, 5, 15), annual_income=176100, as_of=AS_OF)
        assert high.primary_insurance_amount == capped.primary_insurance_amount

    def test_estimate_pia_from_income_short_career(self):
        aime, pia = estimate_pia_from_income(42000, 2025, 2025, work_years=10)
        assert aime == Decimal("1000")
        assert pia == Decimal("900.00")

    def test_earnings_history(self):
        records = [build_earnings_record(year, 60000, current_year=2025) for year in range(2010, 2020)]
        result = estimate_social_security(date(1970, 3, 1), earnings_records=records, as_of=AS_OF)
        # 600000 / 420 = 1428.57 -> 1428; 1103.40 + 0.32 * 202
        assert result.aime == Decimal("1428")
        assert result.primary_insurance_amount == Decimal("1168.04")
        assert result.medicare_credits == 40
        assert result.medicare_eligible is True

    def test_statement_anchors(self):
        result = estimate_social_security(
            date(1965, 7, 1), anchor_benefits={62: 1400, 67: 2000, 70: 2480}, as_of=AS_OF
        )
        assert result.primary_insurance_amount == Decimal("2000")
        assert result.benefits_by_age[62] == Decimal("1400")
        assert result.data_source == DataSource.STATEMENT_PARSE

    def test_statement_anchor_is_valued_as_given(self):
        """A statement amount at 70 that differs from the projection is what gets valued."""
        result = estimate_social_security(
            date(1965, 7, 1),
            anchor_benefits={62: 1400, 67: 2000, 70: 2600},
            planned_claiming_age=70,
            as_of=AS_OF,
        )
        at_70 = result.claiming_analysis[-1]
        assert result.benefits_by_age[70] == Decimal("2600")
        assert at_70.monthly_benefit == Decimal("2600")
        assert result.present_value_of_benefits == at_70.present_value
        assert result.present_value_of_benefits <= result.optimal_claiming_present_value
        for item in result.claiming_analysis:
            assert item.monthly_benefit == result.benefits_by_age[item.claiming_age]

    def test_optimal_present_value_is_the_maximum(self):
        result = estimate_social_security(date(1970, 1, 1), manual_pia_override=2500, as_of=AS_OF)
        best = max(item.present_value for item in result.claiming_analysis)
        assert result.optimal_claiming_present_value == best
        assert 62 <= result.optimal_claiming_age <= 70
        assert len(result.claiming_analysis) == 9

    def test_planned_age_present_value(self):
        result = estimate_social_security(
            date(1970, 1, 1), manual_pia_override=2500, planned_claiming_age=62, as_of=AS_OF
        )
        at_62 = next(item for item in result.claiming_analysis if item.claiming_age == 62)
        assert result.present_value_of_benefits == at_62.present_value

    def test_planned_age_outside_window(self):
        with pytest.raises(SocialSecurityError):
            estimate_social_security(
                date(1970, 1, 1), manual_pia_override=2500, planned_claiming_age=71, as_of=AS_OF
            )

    def test_no_pia_source(self):
        with pytest.raises(MissingPIAForProjection):
            estimate_social_security(date(1970, 1, 1), as_of=AS_OF)

    def test_override_and_anchors_conflict(self):
        with pytest.raises(SocialSecurityError):
            estimate_social_security(
                date(1970, 1, 1), manual_pia_override=2000, anchor_benefits={67: 2100}, as_of=AS_OF
            )

    def test_future_birth_date(self):
        with pytest.raises(InvalidBirthDate):
            estimate_social_security(date(2030, 1, 1), manual_pia_override=2000, as_of=AS_OF)

    def test_unparsable_birth_date(self):
        with pytest.raises(InvalidBirthDate):
            estimate_social_security("15/05/1970", manual_pia_override=2000, as_of=AS_OF)


def test_earnings_history_helper_caps_income():
    assert estimate_earnings_history(200000, 3, wage_base=168600) == [Decimal("168600")] * 3
    with pytest.raises(InvalidEarnings):
        estimate_earnings_history(-5, 3)
