"""
Risk Scoring - Base Types

Data contracts shared by the catalog, the vitals rules and the engine.
Everything here is immutable once built; a ScoringResult is created fresh
on every scoring call and handed to the caller.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple


class RiskLevel(str, Enum):
    """
    Three-tier severity classification of a visit.

    GREEN – no action required
    AMBER – manager review recommended
    RED   – manager review required promptly
    """
    GREEN = "green"
    AMBER = "amber"
    RED   = "red"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    @property
    def requires_alert(self) -> bool:
        """Amber and red visits raise an alert for manager review."""
        return self is not RiskLevel.GREEN

    def __lt__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.severity < other.severity

    def __le__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.severity <= other.severity

    def __gt__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.severity > other.severity

    def __ge__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.severity >= other.severity


_SEVERITY = {
    RiskLevel.GREEN: 0,
    RiskLevel.AMBER: 1,
    RiskLevel.RED:   2,
}


# camelCase spellings used by the carer app and stored rows
_VITALS_ALIASES = {
    "systolicBp":       "systolic_bp",
    "diastolicBp":      "diastolic_bp",
    "oxygenSaturation": "oxygen_saturation",
    "respiratoryRate":  "respiratory_rate",
}


@dataclass(frozen=True)
class Vitals:
    """
    Optional physiological readings taken during a visit.

    None means "not recorded", never zero.
    """
    temperature: Optional[float] = None        # °C
    pulse: Optional[float] = None              # bpm
    systolic_bp: Optional[float] = None        # mmHg
    diastolic_bp: Optional[float] = None       # mmHg
    oxygen_saturation: Optional[float] = None  # %
    respiratory_rate: Optional[float] = None   # breaths/min

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "Vitals":
        """Build from a snake_case or camelCase mapping; unknown keys are ignored."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            name = _VITALS_ALIASES.get(key, key)
            if name in known and value is not None:
                values[name] = value
        return cls(**values)

    def recorded(self) -> Dict[str, float]:
        """Only the fields that were actually recorded."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    @property
    def has_blood_pressure(self) -> bool:
        return self.systolic_bp is not None and self.diastolic_bp is not None

    def is_empty(self) -> bool:
        return not self.recorded()


@dataclass(frozen=True)
class VitalsFinding:
    """One vitals deviation: the points it adds and its reason line."""
    vital: str
    points: int
    reason: str


@dataclass(frozen=True)
class ScoringResult:
    """Outcome of scoring one observation."""
    score: int
    risk_level: RiskLevel
    reasons: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "risk_level": self.risk_level.value,
            "reasons": list(self.reasons),
        }


def format_reading(value: float) -> str:
    """
    Render a reading the way it was entered.

    Integral floats drop the trailing ".0" so 39.0 prints as "39".
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
