"""
Validation Module

Boundary checks on carer-entered vitals. Runs before storage; the scoring
engine does not depend on it.
"""
from .vitals_plausibility import (
    VitalsPlausibilityValidator,
    PlausibilityResult,
    PlausibilityViolation,
    ViolationType,
)

__all__ = [
    "VitalsPlausibilityValidator",
    "PlausibilityResult",
    "PlausibilityViolation",
    "ViolationType",
]
