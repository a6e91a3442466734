"""
Vitals Deviation Rules

Each rule looks at one recorded vital (or the blood-pressure pair) and
returns a VitalsFinding when it is out of range, or None.

Readings consumed:
    temperature         (°C)           - flag ≥ 38 (+2) or < 36 (+1)
    pulse               (bpm)          - flag > 100 or < 50 (+1)
    oxygen_saturation   (%)            - flag < 95 (+2)
    respiratory_rate    (breaths/min)  - flag > 20 or < 12 (+1)
    systolic_bp /
    diastolic_bp        (mmHg)         - flag systolic > 140 or < 90 (+1),
                                         only when both are recorded

Rule order is fixed and observable: reasons are emitted in the order of
VITALS_RULES below regardless of which readings were supplied.
"""
from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from .base import Vitals, VitalsFinding, format_reading

# ── Thresholds ────────────────────────────────────────────────────────────────

# Temperature (°C)
TEMP_HIGH           = 38     # inclusive
TEMP_LOW            = 36     # exclusive
TEMP_HIGH_POINTS    = 2
TEMP_LOW_POINTS     = 1

# Pulse (bpm)
PULSE_HIGH          = 100    # exclusive
PULSE_LOW           = 50     # exclusive
PULSE_POINTS        = 1

# Oxygen saturation (%)
SPO2_LOW            = 95     # exclusive
SPO2_POINTS         = 2

# Respiratory rate (breaths/min)
RESP_HIGH           = 20     # exclusive
RESP_LOW            = 12     # exclusive
RESP_POINTS         = 1

# Systolic blood pressure (mmHg); diastolic is reported, never thresholded
SBP_HIGH            = 140    # exclusive
SBP_LOW             = 90     # exclusive
BP_POINTS           = 1


# ── Rules ─────────────────────────────────────────────────────────────────────

def rule_temperature(vitals: Vitals) -> Optional[VitalsFinding]:
    temp = vitals.temperature
    if temp is None:
        return None

    if temp >= TEMP_HIGH:
        return VitalsFinding(
            vital="temperature",
            points=TEMP_HIGH_POINTS,
            reason=f"High temperature ({format_reading(temp)}°C)",
        )
    if temp < TEMP_LOW:
        return VitalsFinding(
            vital="temperature",
            points=TEMP_LOW_POINTS,
            reason=f"Low temperature ({format_reading(temp)}°C)",
        )
    return None


def rule_pulse(vitals: Vitals) -> Optional[VitalsFinding]:
    pulse = vitals.pulse
    if pulse is None:
        return None

    if pulse > PULSE_HIGH or pulse < PULSE_LOW:
        return VitalsFinding(
            vital="pulse",
            points=PULSE_POINTS,
            reason=f"Abnormal pulse ({format_reading(pulse)} bpm)",
        )
    return None


def rule_oxygen_saturation(vitals: Vitals) -> Optional[VitalsFinding]:
    spo2 = vitals.oxygen_saturation
    if spo2 is None:
        return None

    if spo2 < SPO2_LOW:
        return VitalsFinding(
            vital="oxygen_saturation",
            points=SPO2_POINTS,
            reason=f"Low oxygen saturation ({format_reading(spo2)}%)",
        )
    return None


def rule_respiratory_rate(vitals: Vitals) -> Optional[VitalsFinding]:
    rr = vitals.respiratory_rate
    if rr is None:
        return None

    if rr > RESP_HIGH or rr < RESP_LOW:
        return VitalsFinding(
            vital="respiratory_rate",
            points=RESP_POINTS,
            reason=f"Abnormal respiratory rate ({format_reading(rr)}/min)",
        )
    return None


def rule_blood_pressure(vitals: Vitals) -> Optional[VitalsFinding]:
    """
    Systolic drives the check; diastolic is shown for context only.

    A lone systolic or diastolic reading skips the check entirely.
    """
    if not vitals.has_blood_pressure:
        return None

    sbp = vitals.systolic_bp
    dbp = vitals.diastolic_bp
    if sbp > SBP_HIGH or sbp < SBP_LOW:
        return VitalsFinding(
            vital="blood_pressure",
            points=BP_POINTS,
            reason=f"Abnormal blood pressure ({format_reading(sbp)}/{format_reading(dbp)})",
        )
    return None


# ── Registry ──────────────────────────────────────────────────────────────────
VitalsRule = Callable[[Vitals], Optional[VitalsFinding]]

VITALS_RULES: Tuple[VitalsRule, ...] = (
    rule_temperature,
    rule_pulse,
    rule_oxygen_saturation,
    rule_respiratory_rate,
    rule_blood_pressure,
)


def evaluate_vitals(vitals: Vitals) -> List[VitalsFinding]:
    """Run every rule in order and collect the deviations found."""
    findings: List[VitalsFinding] = []
    for rule in VITALS_RULES:
        finding = rule(vitals)
        if finding is not None:
            findings.append(finding)
    return findings
