"""
Report Generation Module

Generates downloadable PDF visit summaries.
"""
from .visit_report import VisitReportGenerator, VisitReport

__all__ = [
    "VisitReportGenerator",
    "VisitReport",
]
