"""
Vitals Plausibility Validation Module

Checks carer-entered vitals against hard physiological limits before a
visit is stored. Catches typos such as 389 for 38.9 °C or a swapped
blood-pressure pair.

This gate runs at the request boundary only. The scoring engine never
calls it and scores whatever it is given.
"""
import math
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional, Tuple
from enum import Enum

from carewatch.core.scoring.base import Vitals
from carewatch.utils import get_logger

logger = get_logger(__name__)


class ViolationType(str, Enum):
    """Types of plausibility violations."""
    IMPOSSIBLE_VALUE = "impossible_value"              # Outside physiological limits
    INTERNAL_CONTRADICTION = "internal_contradiction"  # Contradicts another reading
    INCOMPLETE_PAIR = "incomplete_pair"                # BP half recorded; check skipped


# Violation types that make a reading unusable
_BLOCKING = (ViolationType.IMPOSSIBLE_VALUE, ViolationType.INTERNAL_CONTRADICTION)


@dataclass
class PlausibilityViolation:
    """A single plausibility violation."""
    vital: str
    violation_type: ViolationType
    message: str
    actual_value: Optional[float] = None
    expected_range: Optional[Tuple[float, float]] = None

    @property
    def is_blocking(self) -> bool:
        return self.violation_type in _BLOCKING

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vital": self.vital,
            "type": self.violation_type.value,
            "message": self.message,
            "actual_value": self.actual_value,
            "expected_range": list(self.expected_range) if self.expected_range else None,
        }


@dataclass
class PlausibilityResult:
    """Result of vitals plausibility validation."""
    violations: List[PlausibilityViolation] = field(default_factory=list)
    validated_count: int = 0

    @property
    def is_valid(self) -> bool:
        return not any(v.is_blocking for v in self.violations)

    def messages(self) -> List[str]:
        return [v.message for v in self.violations]


# ── Hard limits ───────────────────────────────────────────────────────────────
# Physical impossibilities for a living adult, not clinical normal ranges.
HARD_LIMITS: Dict[str, Tuple[float, float]] = {
    "temperature":       (25.0, 45.0),
    "pulse":             (20.0, 300.0),
    "systolic_bp":       (50.0, 260.0),
    "diastolic_bp":      (20.0, 200.0),
    "oxygen_saturation": (50.0, 100.0),
    "respiratory_rate":  (2.0, 70.0),
}

VITAL_NAMES = {
    "temperature": "Temperature",
    "pulse": "Pulse",
    "systolic_bp": "Systolic blood pressure",
    "diastolic_bp": "Diastolic blood pressure",
    "oxygen_saturation": "Oxygen saturation",
    "respiratory_rate": "Respiratory rate",
}


class VitalsPlausibilityValidator:
    """
    Validates vitals against hard physiological constraints.

    Uses fixed physiology limits only - no patient context.
    """

    def __init__(self, limits: Optional[Dict[str, Tuple[float, float]]] = None):
        self._limits = dict(limits or HARD_LIMITS)
        self._validation_count = 0

    def validate(self, vitals: Vitals) -> PlausibilityResult:
        self._validation_count += 1
        result = PlausibilityResult()
        recorded = vitals.recorded()

        for name, value in recorded.items():
            result.validated_count += 1
            low, high = self._limits.get(name, (float("-inf"), float("inf")))
            if not math.isfinite(value) or value < low or value > high:
                result.violations.append(PlausibilityViolation(
                    vital=name,
                    violation_type=ViolationType.IMPOSSIBLE_VALUE,
                    message=(
                        f"{VITAL_NAMES.get(name, name)} of {value} is outside the "
                        f"possible range {low:g}–{high:g}"
                    ),
                    actual_value=value,
                    expected_range=(low, high),
                ))

        result.violations.extend(self._check_blood_pressure(vitals))

        if result.violations:
            logger.debug(
                f"VitalsPlausibilityValidator: {len(result.violations)} violation(s) - "
                + ", ".join(f"{v.vital}:{v.violation_type.value}" for v in result.violations)
            )
        return result

    def _check_blood_pressure(self, vitals: Vitals) -> List[PlausibilityViolation]:
        sbp, dbp = vitals.systolic_bp, vitals.diastolic_bp

        if sbp is None and dbp is None:
            return []

        if sbp is None or dbp is None:
            missing = "diastolic_bp" if dbp is None else "systolic_bp"
            return [PlausibilityViolation(
                vital=missing,
                violation_type=ViolationType.INCOMPLETE_PAIR,
                message="Blood pressure needs both systolic and diastolic; check skipped",
                actual_value=sbp if sbp is not None else dbp,
            )]

        if dbp >= sbp:
            return [PlausibilityViolation(
                vital="blood_pressure",
                violation_type=ViolationType.INTERNAL_CONTRADICTION,
                message=f"Diastolic ({dbp}) is not below systolic ({sbp}); readings may be swapped",
                actual_value=dbp,
            )]
        return []

    @property
    def validation_count(self) -> int:
        return self._validation_count
