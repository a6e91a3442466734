"""
Custom Exception Hierarchy

Error types raised at the edges of the risk engine: catalog loading,
request validation, record lookup and report generation. The scoring
engine itself raises none of these.
"""
from typing import Optional, Dict, Any


class CareWatchError(Exception):
    """Base exception for all carewatch errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class CatalogError(CareWatchError):
    """Malformed symptom catalog table."""

    def __init__(
        self,
        message: str,
        symptom_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="CATALOG_ERROR",
            details={"symptom_id": symptom_id, **(details or {})}
        )
        self.symptom_id = symptom_id


class NotFoundError(CareWatchError):
    """Requested record does not exist."""

    def __init__(
        self,
        entity: str,
        entity_id: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=f"{entity} {entity_id} not found",
            code="NOT_FOUND",
            details={"entity": entity, "id": entity_id, **(details or {})}
        )
        self.entity = entity
        self.entity_id = entity_id


class InvalidInputError(CareWatchError):
    """Request data rejected at the service boundary."""

    def __init__(
        self,
        message: str,
        field: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="INVALID_INPUT",
            details={"field": field, **(details or {})}
        )
        self.field = field


class InvalidVitalsError(InvalidInputError):
    """Vitals failed the plausibility gate."""

    def __init__(
        self,
        message: str,
        violations: Optional[list] = None,
    ):
        super().__init__(
            message=message,
            field="vitals",
            details={"violations": violations or []}
        )
        self.code = "INVALID_VITALS"
        self.violations = violations or []


class ReportGenerationError(CareWatchError):
    """Errors during report generation."""

    def __init__(
        self,
        message: str,
        report_type: str = "visit",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="REPORT_ERROR",
            details={"report_type": report_type, **(details or {})}
        )
        self.report_type = report_type
