"""
Risk Scoring Engine

Turns a carer's observation (selected symptom ids + optional vitals) into a
score, a green / amber / red risk level and the reasons behind it.

Usage:
    from carewatch.core.scoring import RiskScoringEngine, Vitals, default_catalog

    engine = RiskScoringEngine(default_catalog())
    result = engine.score(["fall", "confusion"], Vitals(temperature=39, pulse=110))
    print(result.score, result.risk_level, result.reasons)

Reasons order: matched symptoms in the order supplied, then vitals
deviations in rule order (temperature, pulse, oxygen, respiratory, blood
pressure).
"""
from __future__ import annotations

from typing import Iterable, List, Optional

from carewatch.utils import get_logger
from .base import RiskLevel, ScoringResult, Vitals
from .catalog import SymptomCatalog
from .rules_vitals import evaluate_vitals

logger = get_logger(__name__)

# ── Classification thresholds (inclusive lower bounds) ────────────────────────
RED_THRESHOLD   = 5
AMBER_THRESHOLD = 3


def classify_score(score: int) -> RiskLevel:
    """0–2 green, 3–4 amber, 5+ red."""
    if score >= RED_THRESHOLD:
        return RiskLevel.RED
    if score >= AMBER_THRESHOLD:
        return RiskLevel.AMBER
    return RiskLevel.GREEN


def compute_risk(
    selected_symptom_ids: Iterable[str],
    vitals: Optional[Vitals],
    catalog: SymptomCatalog,
) -> ScoringResult:
    """
    Score one observation against the given catalog.

    Symptom ids are taken as supplied: a repeated id counts each time, and
    an id missing from the catalog contributes nothing. Never raises for
    well-typed input.
    """
    score = 0
    reasons: List[str] = []

    for symptom_id in selected_symptom_ids:
        symptom = catalog.lookup(symptom_id)
        if symptom is None:
            logger.debug(f"compute_risk: unknown symptom id '{symptom_id}', skipping")
            continue
        score += symptom.points
        reasons.append(symptom.label)

    if vitals is not None:
        for finding in evaluate_vitals(vitals):
            logger.debug(f"compute_risk: {finding.vital} +{finding.points}")
            score += finding.points
            reasons.append(finding.reason)

    return ScoringResult(
        score=score,
        risk_level=classify_score(score),
        reasons=tuple(reasons),
    )


class RiskScoringEngine:
    """
    Scores observations against an injected symptom catalog.

    Stateless apart from the read-only catalog - safe to call from
    multiple threads / concurrent requests.
    """

    def __init__(self, catalog: SymptomCatalog):
        self.catalog = catalog

    def score(
        self,
        selected_symptom_ids: Iterable[str],
        vitals: Optional[Vitals] = None,
    ) -> ScoringResult:
        result = compute_risk(selected_symptom_ids, vitals, self.catalog)
        logger.debug(
            f"RiskScoringEngine: score={result.score} level={result.risk_level.value} "
            f"reasons={len(result.reasons)}"
        )
        return result

    @staticmethod
    def summarise(result: ScoringResult) -> dict:
        """
        Compact summary dict suitable for JSON API responses.

        Example output:
        {
            "score": 8,
            "risk_level": "red",
            "requires_alert": true,
            "reason_count": 4,
            "reasons": ["Had a fall", ...]
        }
        """
        return {
            "score": result.score,
            "risk_level": result.risk_level.value,
            "requires_alert": result.risk_level.requires_alert,
            "reason_count": len(result.reasons),
            "reasons": list(result.reasons),
        }
