"""
CareWatch - Configuration
=========================
Centralised settings for logging, the symptom catalog source, report
output and the vitals plausibility gate. Loads overrides from the
project-level .env file.
"""

import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

# ── Paths ───────────────────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parent.parent

# ── Load .env ───────────────────────────────────────────────────────────
load_dotenv(PROJECT_ROOT / ".env")


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# ── Logging ─────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE: Optional[str] = os.getenv("LOG_FILE", "") or None

# ── Symptom catalog ─────────────────────────────────────────────────────
# JSON table; the bundled catalog is used when unset
SYMPTOM_CATALOG_PATH: Optional[str] = os.getenv("SYMPTOM_CATALOG_PATH", "") or None

# ── Reports ─────────────────────────────────────────────────────────────
REPORTS_DIR: str = os.getenv("REPORTS_DIR", "reports")
# Oldest generated PDFs are deleted once more than this many are kept
REPORTS_MAX_KEPT: int = int(os.getenv("REPORTS_MAX_KEPT", "500"))

# ── Vitals plausibility gate ────────────────────────────────────────────
# When off, implausible readings are still scored and returned as warnings
REJECT_IMPLAUSIBLE_VITALS: bool = _env_flag("REJECT_IMPLAUSIBLE_VITALS", False)

API_VERSION = "1.0.0"
