"""
Utilities Package - Logging and Exception Handling
"""
from .logging import get_logger, setup_logging
from .exceptions import (
    CareWatchError,
    CatalogError,
    NotFoundError,
    InvalidInputError,
    InvalidVitalsError,
    ReportGenerationError,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "CareWatchError",
    "CatalogError",
    "NotFoundError",
    "InvalidInputError",
    "InvalidVitalsError",
    "ReportGenerationError",
]
