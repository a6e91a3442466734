"""
Visit Service

Coordinates the visit-entry workflow around the scoring engine:

    carer submits observation
        → plausibility gate (boundary validation)
        → RiskScoringEngine.score()
        → store visit entry (inputs + score + risk level + reasons)
        → amber / red: raise one Alert for manager review

Also covers correction notes and the manager alert dashboard.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional, Union

from carewatch.core.scoring import RiskScoringEngine, Vitals
from carewatch.core.validation import VitalsPlausibilityValidator, PlausibilityViolation
from carewatch.utils import get_logger
from carewatch.utils.exceptions import InvalidInputError, InvalidVitalsError, NotFoundError
from .models import Alert, AlertActionTaken, AlertFilter, CorrectionNote, VisitEntry
from .store import InMemoryVisitStore

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class VisitOutcome:
    """Result of submitting one visit entry."""
    entry: VisitEntry
    alert: Optional[Alert] = None
    warnings: List[PlausibilityViolation] = field(default_factory=list)


def _require(value: Optional[str], name: str) -> str:
    if value is None or not str(value).strip():
        raise InvalidInputError(f"{name} is required", field=name)
    return str(value).strip()


def _dedupe(ids: Iterable[str]) -> List[str]:
    """Drop repeated ids, keeping first-seen order (the carer form submits a set)."""
    seen = set()
    ordered = []
    for symptom_id in ids:
        if symptom_id not in seen:
            seen.add(symptom_id)
            ordered.append(symptom_id)
    return ordered


def _newest_first(items, key):
    # Reverse first so equal timestamps still list the later insert first
    return sorted(reversed(list(items)), key=key, reverse=True)


class VisitService:
    """
    Visit entry, correction note and alert operations over a store.

    Args:
        engine: Scoring engine holding the active symptom catalog.
        store: Row store; defaults to a fresh in-memory store.
        validator: Vitals plausibility gate.
        reject_implausible_vitals: Raise InvalidVitalsError instead of
            returning warnings when the gate fails.
        clock: Timestamp source, UTC.
    """

    def __init__(
        self,
        engine: RiskScoringEngine,
        store: Optional[InMemoryVisitStore] = None,
        validator: Optional[VitalsPlausibilityValidator] = None,
        reject_implausible_vitals: bool = False,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.engine = engine
        self.store = store or InMemoryVisitStore()
        self.validator = validator or VitalsPlausibilityValidator()
        self.reject_implausible_vitals = reject_implausible_vitals
        self._clock = clock

    # ── Visit entries ─────────────────────────────────────────────────────

    def create_visit_entry(
        self,
        client_id: str,
        carer_id: str,
        agency_id: str,
        selected_symptom_ids: Iterable[str],
        vitals: Optional[Union[Vitals, dict]] = None,
        note: str = "",
    ) -> VisitOutcome:
        client_id = _require(client_id, "client_id")
        carer_id = _require(carer_id, "carer_id")
        agency_id = _require(agency_id, "agency_id")
        if selected_symptom_ids is None:
            raise InvalidInputError("selected_symptom_ids must be a list", field="selected_symptom_ids")

        if not isinstance(vitals, Vitals):
            vitals = Vitals.from_dict(vitals)
        symptom_ids = _dedupe(selected_symptom_ids)

        plausibility = self.validator.validate(vitals)
        if not plausibility.is_valid and self.reject_implausible_vitals:
            logger.warning(
                f"Visit rejected for client {client_id}: implausible vitals - "
                + "; ".join(plausibility.messages())
            )
            raise InvalidVitalsError(
                "Vitals failed plausibility checks",
                violations=[v.to_dict() for v in plausibility.violations if v.is_blocking],
            )
        for violation in plausibility.violations:
            logger.warning(f"Visit for client {client_id}: {violation.message}")

        result = self.engine.score(symptom_ids, vitals)

        entry = self.store.insert_visit_entry(VisitEntry(
            id=_new_id(),
            client_id=client_id,
            carer_id=carer_id,
            agency_id=agency_id,
            selected_symptom_ids=symptom_ids,
            vitals=vitals,
            note=note or "",
            score=result.score,
            risk_level=result.risk_level,
            reasons=list(result.reasons),
            created_at=self._clock(),
        ))
        logger.info(
            f"Visit entry {entry.id} created for client {client_id}: "
            f"score={entry.score} risk={entry.risk_level.value}"
        )

        alert = None
        if entry.risk_level.requires_alert:
            alert = self._raise_alert(entry)

        return VisitOutcome(entry=entry, alert=alert, warnings=plausibility.violations)

    def get_visit_entry(self, entry_id: str) -> VisitEntry:
        entry = self.store.get_visit_entry(entry_id)
        if entry is None:
            raise NotFoundError("Visit entry", entry_id)
        return entry

    def get_visit_entries_for_client(self, client_id: str) -> List[VisitEntry]:
        """Client history, newest first."""
        return _newest_first(self.store.list_visit_entries(client_id), key=lambda e: e.created_at)

    def add_correction_note(self, visit_entry_id: str, carer_id: str, text: str) -> CorrectionNote:
        """Append an amendment; the original entry and its score are left as submitted."""
        self.get_visit_entry(visit_entry_id)
        carer_id = _require(carer_id, "carer_id")
        if text is None or not text.strip():
            raise InvalidInputError("Correction note text cannot be empty", field="text")

        note = self.store.insert_correction_note(CorrectionNote(
            id=_new_id(),
            visit_entry_id=visit_entry_id,
            carer_id=carer_id,
            text=text.strip(),
            created_at=self._clock(),
        ))
        logger.info(f"Correction note {note.id} added to visit entry {visit_entry_id}")
        return note

    # ── Alerts ────────────────────────────────────────────────────────────

    def _raise_alert(self, entry: VisitEntry) -> Alert:
        existing = self.store.get_alert_for_visit(entry.id)
        if existing is not None:
            return existing

        alert = self.store.insert_alert(Alert(
            id=_new_id(),
            visit_entry_id=entry.id,
            client_id=entry.client_id,
            carer_id=entry.carer_id,
            agency_id=entry.agency_id,
            risk_level=entry.risk_level,
            created_at=entry.created_at,
        ))
        logger.info(
            f"Alert {alert.id} raised ({alert.risk_level.value}) for visit entry {entry.id}"
        )
        return alert

    def get_alerts(
        self,
        agency_id: str,
        alert_filter: Union[AlertFilter, str] = AlertFilter.ALL,
    ) -> List[Alert]:
        """Agency alerts, newest first, narrowed by the dashboard filter."""
        try:
            alert_filter = AlertFilter(alert_filter)
        except ValueError as exc:
            raise InvalidInputError(
                f"Unknown alert filter '{alert_filter}'",
                field="filter",
                details={"allowed": [f.value for f in AlertFilter]},
            ) from exc
        alerts = [a for a in self.store.list_alerts(agency_id) if a.matches(alert_filter)]
        return _newest_first(alerts, key=lambda a: a.created_at)

    def get_alert(self, alert_id: str) -> Alert:
        alert = self.store.get_alert(alert_id)
        if alert is None:
            raise NotFoundError("Alert", alert_id)
        return alert

    def review_alert(
        self,
        alert_id: str,
        manager_id: str,
        action_taken: Union[AlertActionTaken, str],
        note: Optional[str] = None,
    ) -> Alert:
        self.get_alert(alert_id)
        manager_id = _require(manager_id, "manager_id")
        try:
            action = AlertActionTaken(action_taken)
        except ValueError as exc:
            raise InvalidInputError(
                f"Unknown action '{action_taken}'",
                field="action_taken",
                details={"allowed": [a.value for a in AlertActionTaken]},
            ) from exc

        alert = self.store.update_alert(alert_id, {
            "is_reviewed": True,
            "reviewed_by": manager_id,
            "reviewed_at": self._clock().isoformat(),
            "action_taken": action.value,
            "manager_note": note or None,
        })
        logger.info(f"Alert {alert_id} reviewed by {manager_id}: {action.value}")
        return alert

    def unreviewed_count(self, agency_id: str) -> int:
        return sum(1 for a in self.store.list_alerts(agency_id) if not a.is_reviewed)
