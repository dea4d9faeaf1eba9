"""
Keyword Gate — decide whether a job description is admissible before any LLM cost.

Plain substring matching on the lower-cased text. Precedence:
  1. hybrid keyword                        → HYBRID
  2. onsite keyword and no remote keyword  → ONSITE
  3. junior xor intern keyword             → ENTRY_LEVEL
  4. otherwise                             → REMOTE
"""

from __future__ import annotations

import logging

from resumegen.errors import PolicyRejection
from resumegen.models.generation_models import LocationVerdict

logger = logging.getLogger(__name__)


# ── Keyword Lists ────────────────────────────────────────────────────────────

HYBRID_KEYWORDS = (
    "hybrid", "hybrid work", "hybrid model", "hybrid schedule",
    "days in office", "days per week in office", "in-office days",
    "office presence", "some days in office",
)

ONSITE_KEYWORDS = (
    "on-site", "onsite", "on site", "in-office", "in office",
    "office based", "office-based", "must be located in",
    "must be based in", "must relocate", "relocation required",
    "physical presence required", "in person", "local candidates",
    "candidates must be in", "candidates must reside",
)

REMOTE_KEYWORDS = (
    "remote", "work from home", "fully remote", "100% remote",
    "remote-first", "distributed team",
)

JUNIOR_KEYWORDS = ("junior role", "entry level", "entry-level")

# " intern " is space-padded so "internal" / "international" do not match
INTERN_KEYWORDS = (" intern ", "internship")

REJECTION_MESSAGES = {
    LocationVerdict.HYBRID: (
        "This position is HYBRID (requires some office days). This tool is designed for "
        "REMOTE-ONLY positions. Please provide a fully remote job description."
    ),
    LocationVerdict.ONSITE: (
        "This position is ONSITE/IN-PERSON. This tool is designed for REMOTE-ONLY positions. "
        "Please provide a fully remote job description."
    ),
    LocationVerdict.ENTRY_LEVEL: (
        "This position is ENTRY LEVEL. This tool is designed for MID-LEVEL and SENIOR positions. "
        "Please provide a more senior job description."
    ),
}


# ── Public API ───────────────────────────────────────────────────────────────


def evaluate(job_description: str) -> LocationVerdict:
    """Classify a job description. Pure function, no I/O."""
    text = (job_description or "").lower()

    if _contains_any(text, HYBRID_KEYWORDS):
        return LocationVerdict.HYBRID

    has_remote = _contains_any(text, REMOTE_KEYWORDS)
    if _contains_any(text, ONSITE_KEYWORDS) and not has_remote:
        return LocationVerdict.ONSITE

    has_junior = _contains_any(text, JUNIOR_KEYWORDS)
    has_intern = _contains_any(text, INTERN_KEYWORDS)
    if has_junior != has_intern:
        return LocationVerdict.ENTRY_LEVEL

    return LocationVerdict.REMOTE


def ensure_admissible(job_description: str) -> LocationVerdict:
    """Evaluate and raise PolicyRejection for anything but REMOTE."""
    verdict = evaluate(job_description)
    if verdict is not LocationVerdict.REMOTE:
        logger.info(f"Job rejected by keyword gate: {verdict.value}")
        raise PolicyRejection(REJECTION_MESSAGES[verdict], location_type=verdict.value)
    logger.info("Job appears to be REMOTE - proceeding")
    return verdict


# ── Helpers ──────────────────────────────────────────────────────────────────


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in text for keyword in keywords)
