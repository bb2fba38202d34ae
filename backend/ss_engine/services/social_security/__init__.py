"""
Social Security benefit engine.

Pure, synchronous calculations:
- Full Retirement Age by birth year
- Work credits and Medicare eligibility
- AIME from the top 35 earning years
- PIA from the bend point formula
- Benefits at claiming ages 62-70
- Present value of the lifetime benefit stream
- Claiming age with the highest present value
"""

from .aime import compute_aime, compute_aime_from_records
from .benefit_projector import (
    benefit_at,
    benefits_by_claim_age,
    derive_pia_from_anchors,
    fill_benefits_by_claim_age,
)
from .claiming_optimizer import optimal_claiming_age
from .constants import DEFAULT_SS_CONSTANTS, SocialSecurityConstants, TaxYearConstants
from .credits import aggregate_credits, credits_for, summarize_contributions
from .earnings import build_earnings_record, upsert_earnings_record
from .estimator import estimate_pia_from_income, estimate_social_security, recalculate_profile
from .pia import compute_pia, compute_pia_for_year
from .present_value import present_value
from .retirement_age import get_fra, get_fra_months

__all__ = [
    "DEFAULT_SS_CONSTANTS",
    "SocialSecurityConstants",
    "TaxYearConstants",
    "aggregate_credits",
    "benefit_at",
    "benefits_by_claim_age",
    "build_earnings_record",
    "compute_aime",
    "compute_aime_from_records",
    "compute_pia",
    "compute_pia_for_year",
    "credits_for",
    "derive_pia_from_anchors",
    "estimate_pia_from_income",
    "estimate_social_security",
    "fill_benefits_by_claim_age",
    "get_fra",
    "get_fra_months",
    "optimal_claiming_age",
    "present_value",
    "recalculate_profile",
    "summarize_contributions",
    "upsert_earnings_record",
]
