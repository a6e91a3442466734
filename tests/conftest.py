"""
Pytest Configuration and Fixtures

Shared fixtures for carewatch tests.
"""
import os
import sys
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Keep generated PDFs out of the working tree; must be set before config import
os.environ.setdefault("REPORTS_DIR", tempfile.mkdtemp(prefix="carewatch-reports-"))

from carewatch.core.scoring import (  # noqa: E402
    RiskScoringEngine, Symptom, SymptomCatalog, SymptomCategory
)
from carewatch.core.visits import VisitService  # noqa: E402


@pytest.fixture
def catalog() -> SymptomCatalog:
    """Small catalog with known labels and points."""
    return SymptomCatalog([
        SymptomCategory(
            id="mobility",
            name="Mobility",
            symptoms=(
                Symptom("fall", "Fall label", 2),
                Symptom("unsteady", "Unsteady label", 1),
            ),
        ),
        SymptomCategory(
            id="mental_state",
            name="Mental State",
            symptoms=(
                Symptom("confusion", "Confusion label", 3),
                Symptom("constipation", "Zero-point label", 0),
            ),
        ),
        SymptomCategory(
            id="severe",
            name="Severe",
            symptoms=(
                Symptom("hundred", "Hundred label", 100),
            ),
        ),
    ])


@pytest.fixture
def engine(catalog) -> RiskScoringEngine:
    return RiskScoringEngine(catalog)


class SteppingClock:
    """Deterministic clock advancing one minute per call."""

    def __init__(self, start: datetime = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(minutes=1)
        return value


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock()


@pytest.fixture
def visit_service(engine, clock) -> VisitService:
    return VisitService(engine=engine, clock=clock)
