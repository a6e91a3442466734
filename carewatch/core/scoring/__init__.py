"""
Risk Scoring Layer

Converts carer observations into a score, risk level and reasons.

Usage:
    from carewatch.core.scoring import RiskScoringEngine, Vitals, default_catalog

    engine = RiskScoringEngine(default_catalog())
    result = engine.score(selected_symptom_ids, Vitals(pulse=110))
"""
from .base import RiskLevel, Vitals, VitalsFinding, ScoringResult, format_reading
from .catalog import Symptom, SymptomCategory, SymptomCatalog, load_catalog
from .symptoms import default_catalog
from .engine import RiskScoringEngine, compute_risk, classify_score

__all__ = [
    "RiskLevel",
    "Vitals",
    "VitalsFinding",
    "ScoringResult",
    "format_reading",
    "Symptom",
    "SymptomCategory",
    "SymptomCatalog",
    "load_catalog",
    "default_catalog",
    "RiskScoringEngine",
    "compute_risk",
    "classify_score",
]
