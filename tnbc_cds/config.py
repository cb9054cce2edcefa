"""
TNBC CDS Service - Configuration
==============================
Runtime settings and the CDS Hooks service identity.
Loads overrides from the project-level .env file.
"""

import os
from pathlib import Path
from typing import List
from dotenv import load_dotenv

# ── Paths ───────────────────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parent.parent

# ── Load .env ───────────────────────────────────────────────────────────
load_dotenv(PROJECT_ROOT / ".env")


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


# ── Server ──────────────────────────────────────────────────────────────
CDS_HOST: str = os.getenv("CDS_HOST", "0.0.0.0")
CDS_PORT: int = int(os.getenv("CDS_PORT", "4040"))
CORS_ALLOW_ORIGINS: List[str] = _split_csv(os.getenv("CORS_ALLOW_ORIGINS", "*"))

# ── Logging ─────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE: str = os.getenv("LOG_FILE", "")

# ── Clinical guidance ───────────────────────────────────────────────────
# NCCN Breast Cancer guideline; cited by every card and linked from the
# complete-response card.
GUIDELINE_URL: str = os.getenv(
    "GUIDELINE_URL",
    "https://www.nccn.org/guidelines/guidelines-detail?category=1&id=1419",
)

# ── Service identity (CDS Hooks discovery) ──────────────────────────────
SERVICE_ID = "pgx-on-order"
SERVICE_HOOK = "order-select"
SERVICE_TITLE = "TNBC Alert"
SERVICE_DESCRIPTION = (
    "Triggers a card when patient has undergone genetic testing for "
    "BRCA1/BRCA2 and has a specific neoadjuvant status."
)
SERVICE_PREFETCH = {
    "patient": "Patient/{{context.patientId}}",
    "geneticReport": "DocumentReference?patient={{context.patientId}}",
}

# Prefetch key holding the clinical documents inspected by the rules
GENETIC_REPORT_PREFETCH_KEY = "geneticReport"

# Substituted for context.patientId when the request omits it
UNKNOWN_PATIENT_ID = "unknown"

VERSION = "1.0.0"
