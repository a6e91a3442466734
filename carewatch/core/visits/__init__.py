"""
Visits Module

Visit-entry submission, correction notes and manager alerts.
"""
from .models import VisitEntry, CorrectionNote, Alert, AlertActionTaken, AlertFilter
from .store import InMemoryVisitStore
from .service import VisitService, VisitOutcome

__all__ = [
    "VisitEntry",
    "CorrectionNote",
    "Alert",
    "AlertActionTaken",
    "AlertFilter",
    "InMemoryVisitStore",
    "VisitService",
    "VisitOutcome",
]
