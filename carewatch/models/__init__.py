"""
Pydantic models for the HTTP API.
"""
from .schemas import (
    VitalsInput,
    ScoreRequest,
    ScoreResponse,
    VisitEntryRequest,
    VisitEntryResponse,
    VisitCreatedResponse,
    CorrectionNoteRequest,
    CorrectionNoteResponse,
    AlertResponse,
    AlertReviewRequest,
    UnreviewedCountResponse,
    ReportResponse,
    HealthResponse,
    WarningResponse,
)

__all__ = [
    "VitalsInput",
    "ScoreRequest",
    "ScoreResponse",
    "VisitEntryRequest",
    "VisitEntryResponse",
    "VisitCreatedResponse",
    "CorrectionNoteRequest",
    "CorrectionNoteResponse",
    "AlertResponse",
    "AlertReviewRequest",
    "UnreviewedCountResponse",
    "ReportResponse",
    "HealthResponse",
    "WarningResponse",
]
