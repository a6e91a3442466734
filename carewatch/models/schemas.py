"""
API request / response models.
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from carewatch.core.scoring import Vitals
from carewatch.core.visits import AlertActionTaken


class VitalsInput(BaseModel):
    """Optional readings; omit or null a field when it was not taken."""
    model_config = ConfigDict(allow_inf_nan=False)

    temperature: Optional[float] = Field(None, description="°C")
    pulse: Optional[float] = Field(None, description="bpm")
    systolic_bp: Optional[float] = Field(None, description="mmHg")
    diastolic_bp: Optional[float] = Field(None, description="mmHg")
    oxygen_saturation: Optional[float] = Field(None, description="%")
    respiratory_rate: Optional[float] = Field(None, description="breaths/min")

    def to_vitals(self) -> Vitals:
        return Vitals.from_dict(self.model_dump(exclude_none=True))


class ScoreRequest(BaseModel):
    """Score an observation without storing it."""
    selected_symptom_ids: List[str]
    vitals: VitalsInput = Field(default_factory=VitalsInput)


class ScoreResponse(BaseModel):
    score: int
    risk_level: str
    requires_alert: bool
    reasons: List[str]


class VisitEntryRequest(BaseModel):
    client_id: str = Field(..., min_length=1)
    carer_id: str = Field(..., min_length=1)
    agency_id: str = Field(..., min_length=1)
    selected_symptom_ids: List[str]
    vitals: VitalsInput = Field(default_factory=VitalsInput)
    note: str = ""


class CorrectionNoteRequest(BaseModel):
    carer_id: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1)


class CorrectionNoteResponse(BaseModel):
    id: str
    visit_entry_id: str
    carer_id: str
    text: str
    created_at: str


class VisitEntryResponse(BaseModel):
    id: str
    client_id: str
    carer_id: str
    agency_id: str
    selected_symptom_ids: List[str]
    vitals: Dict[str, float]
    note: str
    score: int
    risk_level: str
    reasons: List[str]
    created_at: str
    correction_notes: List[CorrectionNoteResponse] = []


class AlertResponse(BaseModel):
    id: str
    visit_entry_id: str
    client_id: str
    carer_id: str
    agency_id: str
    risk_level: str
    is_reviewed: bool
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[str] = None
    action_taken: Optional[str] = None
    manager_note: Optional[str] = None
    created_at: str


class WarningResponse(BaseModel):
    vital: str
    type: str
    message: str


class VisitCreatedResponse(BaseModel):
    entry: VisitEntryResponse
    alert: Optional[AlertResponse] = None
    warnings: List[WarningResponse] = []


class AlertReviewRequest(BaseModel):
    manager_id: str = Field(..., min_length=1)
    action_taken: AlertActionTaken
    note: Optional[str] = None


class UnreviewedCountResponse(BaseModel):
    agency_id: str
    unreviewed: int


class ReportResponse(BaseModel):
    report_id: str
    visit_entry_id: str
    generated_at: str


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: str
    uptime_seconds: float
    catalog_size: int
