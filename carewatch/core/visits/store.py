"""
In-memory Visit Store

Row-level create / read / update over plain dicts, shaped like the hosted
relational tables (visit_entries, correction_notes, alerts).
Replace with database access in production.
"""
from typing import Any, Dict, List, Optional

from .models import Alert, CorrectionNote, VisitEntry


class InMemoryVisitStore:
    """Holds rows keyed by id; returns fresh record objects on every read."""

    def __init__(self):
        self._visit_entries: Dict[str, Dict[str, Any]] = {}
        self._correction_notes: Dict[str, Dict[str, Any]] = {}
        self._alerts: Dict[str, Dict[str, Any]] = {}

    # ── Visit entries ─────────────────────────────────────────────────────

    def insert_visit_entry(self, entry: VisitEntry) -> VisitEntry:
        self._visit_entries[entry.id] = entry.to_row()
        return self.get_visit_entry(entry.id)

    def get_visit_entry(self, entry_id: str) -> Optional[VisitEntry]:
        row = self._visit_entries.get(entry_id)
        if row is None:
            return None
        notes = [
            n for n in self._correction_notes.values()
            if n["visit_entry_id"] == entry_id
        ]
        notes.sort(key=lambda n: n["created_at"])
        return VisitEntry.from_row(row, notes)

    def list_visit_entries(self, client_id: Optional[str] = None) -> List[VisitEntry]:
        ids = [
            row["id"] for row in self._visit_entries.values()
            if client_id is None or row["client_id"] == client_id
        ]
        return [self.get_visit_entry(i) for i in ids]

    # ── Correction notes ──────────────────────────────────────────────────

    def insert_correction_note(self, note: CorrectionNote) -> CorrectionNote:
        self._correction_notes[note.id] = note.to_row()
        return CorrectionNote.from_row(self._correction_notes[note.id])

    # ── Alerts ────────────────────────────────────────────────────────────

    def insert_alert(self, alert: Alert) -> Alert:
        self._alerts[alert.id] = alert.to_row()
        return Alert.from_row(self._alerts[alert.id])

    def get_alert(self, alert_id: str) -> Optional[Alert]:
        row = self._alerts.get(alert_id)
        return Alert.from_row(row) if row else None

    def get_alert_for_visit(self, visit_entry_id: str) -> Optional[Alert]:
        for row in self._alerts.values():
            if row["visit_entry_id"] == visit_entry_id:
                return Alert.from_row(row)
        return None

    def update_alert(self, alert_id: str, changes: Dict[str, Any]) -> Optional[Alert]:
        row = self._alerts.get(alert_id)
        if row is None:
            return None
        row.update(changes)
        return Alert.from_row(row)

    def list_alerts(self, agency_id: Optional[str] = None) -> List[Alert]:
        return [
            Alert.from_row(row) for row in self._alerts.values()
            if agency_id is None or row["agency_id"] == agency_id
        ]

    def clear(self) -> None:
        self._visit_entries.clear()
        self._correction_notes.clear()
        self._alerts.clear()
