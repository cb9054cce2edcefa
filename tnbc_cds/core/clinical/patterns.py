"""
Report Text Patterns

Every clinical fact the engine knows about is declared here as data: a fact
name paired with a matcher over a report's description. Matching is literal
and case-sensitive; report text is not normalized in any way.

Adding a fact:
    1. Add a boolean field to ClinicalFacts (base.py).
    2. Append a FactPattern to FACT_PATTERNS below.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Tuple

# ── BRCA germline result phrases ─────────────────────────────────────────────
BRCA_BOTH_PHRASE    = "was detected in both the BRCA1 gene and the BRCA2 gene"
BRCA1_PHRASE        = "was detected in the BRCA1 gene"
BRCA2_PHRASE        = "was detected in the BRCA2 gene"
BRCA_NEITHER_PHRASE = "was not detected in neither the BRCA1 gene nor the BRCA2 gene"

# ── Neoadjuvant pembrolizumab history phrases ────────────────────────────────
PEMBRO_NOT_GIVEN_PHRASE = "pembrolizumab-containing regimen was not given preoperatively"
PEMBRO_GIVEN_PHRASE     = "pembrolizumab-containing regimen was given preoperatively"

# ── Complete-response marker ─────────────────────────────────────────────────
PCR_PHRASE = "pCR"

# ── Post-neoadjuvant (yp) staging ────────────────────────────────────────────
# Any yp staging token, ypT0N0 included.
POST_NEO_STAGING_RE: re.Pattern[str] = re.compile(r"ypT[0-4]N[0-3]|ypT0N[1-3]")

# Residual disease: T1-T4 with any node, or T0 with positive nodes.
# ypT0N0 never matches; it is a complete response.
RESIDUAL_STAGING_RE: re.Pattern[str] = re.compile(r"ypT[1-4]N[0-3]|ypT0N[1-3]")

COMPLETE_RESPONSE_RE: re.Pattern[str] = re.compile(r"ypT0N0")


@dataclass(frozen=True)
class FactPattern:
    """A (fact, matcher) pair. Exactly one of ``phrase`` / ``regex`` is set."""
    fact: str
    phrase: Optional[str] = None
    regex: Optional[re.Pattern[str]] = None

    def search(self, text: str) -> Optional[str]:
        """Return the matched text, or None if the pattern does not occur."""
        if self.phrase is not None:
            return self.phrase if self.phrase in text else None
        match = self.regex.search(text)
        return match.group(0) if match else None

    def matches(self, text: str) -> bool:
        return self.search(text) is not None


# Evaluated in this order against every report; each hit sets one fact.
FACT_PATTERNS: Tuple[FactPattern, ...] = (
    FactPattern("brca_both_detected", phrase=BRCA_BOTH_PHRASE),
    FactPattern("brca1_detected", phrase=BRCA1_PHRASE),
    FactPattern("brca2_detected", phrase=BRCA2_PHRASE),
    FactPattern("brca_neither_detected", phrase=BRCA_NEITHER_PHRASE),
    FactPattern("post_neo_status_detected", regex=POST_NEO_STAGING_RE),
    FactPattern("pathologic_complete_response", regex=COMPLETE_RESPONSE_RE),
    FactPattern("pathologic_complete_response", phrase=PCR_PHRASE),
)

# Facts whose presence means a BRCA test result exists in the record
BRCA_RESULT_FACTS: Tuple[str, ...] = (
    "brca_both_detected",
    "brca1_detected",
    "brca2_detected",
    "brca_neither_detected",
)

