"""
Visit & Alert Records

Domain records for visit entries, their correction notes and the alerts
raised for amber / red visits, plus converters to and from the
snake_case storage rows.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from carewatch.core.scoring.base import RiskLevel, Vitals


class AlertActionTaken(str, Enum):
    """What the manager did after reviewing an alert."""
    MONITOR              = "monitor"
    CALLED_FAMILY        = "called_family"
    INFORMED_GP          = "informed_gp"
    COMMUNITY_NURSE      = "community_nurse"
    EMERGENCY_ESCALATION = "emergency_escalation"


class AlertFilter(str, Enum):
    """Alert dashboard views."""
    UNREVIEWED = "unreviewed"
    REVIEWED   = "reviewed"
    AMBER      = "amber"
    RED        = "red"
    ALL        = "all"


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _parse_dt(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


@dataclass
class CorrectionNote:
    """Carer amendment appended to a visit entry after submission."""
    id: str
    visit_entry_id: str
    carer_id: str
    text: str
    created_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "visit_entry_id": self.visit_entry_id,
            "carer_id": self.carer_id,
            "text": self.text,
            "created_at": _iso(self.created_at),
        }

    to_row = to_dict

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "CorrectionNote":
        return cls(
            id=row["id"],
            visit_entry_id=row["visit_entry_id"],
            carer_id=row["carer_id"],
            text=row["text"],
            created_at=_parse_dt(row["created_at"]),
        )


@dataclass
class VisitEntry:
    """
    One carer-submitted observation for a client visit.

    Score, risk level and reasons are computed once at creation and stored
    alongside the raw inputs; the entry is never rescored.
    """
    id: str
    client_id: str
    carer_id: str
    agency_id: str
    selected_symptom_ids: List[str]
    vitals: Vitals
    note: str
    score: int
    risk_level: RiskLevel
    reasons: List[str]
    created_at: datetime
    correction_notes: List[CorrectionNote] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "client_id": self.client_id,
            "carer_id": self.carer_id,
            "agency_id": self.agency_id,
            "selected_symptom_ids": list(self.selected_symptom_ids),
            "vitals": self.vitals.recorded(),
            "note": self.note,
            "score": self.score,
            "risk_level": self.risk_level.value,
            "reasons": list(self.reasons),
            "created_at": _iso(self.created_at),
            "correction_notes": [n.to_dict() for n in self.correction_notes],
        }

    def to_row(self) -> Dict[str, Any]:
        """Storage row; correction notes live in their own table."""
        row = self.to_dict()
        row.pop("correction_notes")
        return row

    @classmethod
    def from_row(
        cls,
        row: Mapping[str, Any],
        correction_notes: Optional[List[Mapping[str, Any]]] = None,
    ) -> "VisitEntry":
        return cls(
            id=row["id"],
            client_id=row["client_id"],
            carer_id=row["carer_id"],
            agency_id=row["agency_id"],
            selected_symptom_ids=list(row.get("selected_symptom_ids") or []),
            vitals=Vitals.from_dict(row.get("vitals")),
            note=row.get("note") or "",
            score=int(row["score"]),
            risk_level=RiskLevel(row["risk_level"]),
            reasons=list(row.get("reasons") or []),
            created_at=_parse_dt(row["created_at"]),
            correction_notes=[CorrectionNote.from_row(n) for n in (correction_notes or [])],
        )


@dataclass
class Alert:
    """Manager-review item raised for an amber or red visit entry."""
    id: str
    visit_entry_id: str
    client_id: str
    carer_id: str
    agency_id: str
    risk_level: RiskLevel
    created_at: datetime
    is_reviewed: bool = False
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    action_taken: Optional[AlertActionTaken] = None
    manager_note: Optional[str] = None

    def matches(self, alert_filter: AlertFilter) -> bool:
        if alert_filter is AlertFilter.UNREVIEWED:
            return not self.is_reviewed
        if alert_filter is AlertFilter.REVIEWED:
            return self.is_reviewed
        if alert_filter is AlertFilter.AMBER:
            return self.risk_level is RiskLevel.AMBER
        if alert_filter is AlertFilter.RED:
            return self.risk_level is RiskLevel.RED
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "visit_entry_id": self.visit_entry_id,
            "client_id": self.client_id,
            "carer_id": self.carer_id,
            "agency_id": self.agency_id,
            "risk_level": self.risk_level.value,
            "is_reviewed": self.is_reviewed,
            "reviewed_by": self.reviewed_by,
            "reviewed_at": _iso(self.reviewed_at),
            "action_taken": self.action_taken.value if self.action_taken else None,
            "manager_note": self.manager_note,
            "created_at": _iso(self.created_at),
        }

    to_row = to_dict

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Alert":
        action = row.get("action_taken")
        return cls(
            id=row["id"],
            visit_entry_id=row["visit_entry_id"],
            client_id=row["client_id"],
            carer_id=row["carer_id"],
            agency_id=row["agency_id"],
            risk_level=RiskLevel(row["risk_level"]),
            created_at=_parse_dt(row["created_at"]),
            is_reviewed=bool(row.get("is_reviewed", False)),
            reviewed_by=row.get("reviewed_by"),
            reviewed_at=_parse_dt(row.get("reviewed_at")),
            action_taken=AlertActionTaken(action) if action else None,
            manager_note=row.get("manager_note"),
        )
