"""Validation errors raised by the Social Security engine.

All failures are local input problems; none are transient or retryable.
Callers catch ``SocialSecurityError`` and surface ``str(exc)`` to the user.
"""


class SocialSecurityError(ValueError):
    """Base class for engine validation failures."""


class InvalidBirthDate(SocialSecurityError):
    """Raised when a birth date is unparsable or in the future."""


class InvalidEarnings(SocialSecurityError):
    """Raised when an earnings amount is negative."""


class EarningsYearOutOfRange(SocialSecurityError):
    """Raised when a work year is before 1950 or after next year."""


class MissingPIAForProjection(SocialSecurityError):
    """Raised when no PIA is given and none can be derived from anchor benefits."""


class DegenerateAnnuityInputs(SocialSecurityError):
    """Raised for non-finite rates or a payment window that ends before it starts."""
