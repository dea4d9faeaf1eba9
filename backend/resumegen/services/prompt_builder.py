"""
Prompt Builder — turn a profile + job description into the generation prompt.

Responsibilities:
  • Load {{placeholder}} prompt templates from data/prompts (cached, default.txt fallback)
  • Compute years of experience from free-text start dates
  • Render work history / education lines
  • Substitute variables; unknown placeholders stay as-is
"""

from __future__ import annotations

import logging
import math
import re
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, MutableMapping

from resumegen.errors import PromptTemplateMissing
from resumegen.models.generation_models import GenerationRequest
from resumegen.models.profile_models import EducationEntry, ExperienceEntry, ProfileRecord
from resumegen.prompts.resume_generator import FULL, SYSTEM_PROMPT, PromptPreset
from resumegen.services.role_detector import detect_role

logger = logging.getLogger(__name__)

DEFAULT_PROMPT = "default"
AUTO_PROMPT = "auto"

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")
_PROMPT_NAME = re.compile(r"^[A-Za-z0-9_-]+$")
_SECONDS_PER_YEAR = 365 * 24 * 60 * 60


# ── Prompt Store ─────────────────────────────────────────────────────────────


class PromptStore:
    """Reads prompt templates by name; falls back to default.txt when a name has no file."""

    def __init__(self, prompts_dir: Path, cache: MutableMapping[str, str] | None = None):
        self.prompts_dir = Path(prompts_dir)
        self.cache: MutableMapping[str, str] = {} if cache is None else cache

    def load(self, name: str) -> str:
        cached = self.cache.get(name)
        if cached is not None:
            return cached

        path = self.prompts_dir / f"{name}.txt"
        if not _PROMPT_NAME.match(name) or not path.exists():
            default_path = self.prompts_dir / f"{DEFAULT_PROMPT}.txt"
            if not default_path.exists():
                raise PromptTemplateMissing(
                    f"Prompt file not found: {name}.txt and {DEFAULT_PROMPT}.txt not found"
                )
            logger.info(f"Using default prompt ({name}.txt not found)")
            path = default_path

        template = path.read_text(encoding="utf-8")
        self.cache[name] = template
        return template


def fill_template(template: str, variables: dict[str, object]) -> str:
    """Replace every {{key}} with its value. Placeholders without a variable are left literally."""

    def _sub(match: re.Match[str]) -> str:
        key = match.group(1)
        if key not in variables:
            return match.group(0)
        value = variables[key]
        return "" if value is None else str(value)

    return _PLACEHOLDER.sub(_sub, template)


# ── Prompt Builder ───────────────────────────────────────────────────────────


class PromptBuilder:
    def __init__(self, store: PromptStore, clock: Callable[[], datetime] = datetime.now):
        self.store = store
        self.clock = clock

    def select_prompt_name(self, profile: ProfileRecord, request: GenerationRequest) -> str:
        """The profile's mapped prompt, or the role detector's pick when mapped to "auto"."""
        if profile.prompt == AUTO_PROMPT:
            return detect_role(request.job_description, request.role_name)
        return profile.prompt or DEFAULT_PROMPT

    def build_variables(
        self,
        profile: ProfileRecord,
        request: GenerationRequest,
        preset: PromptPreset = FULL,
    ) -> dict[str, str]:
        years = calculate_years_of_experience(profile.experience, now=self.clock())
        return {
            "name": profile.name or "Unknown",
            "email": profile.email or "",
            "location": profile.location or "",
            "yearsOfExperience": str(years),
            "workHistory": format_work_history(profile.experience),
            "education": format_education(profile.education),
            "jobDescription": request.job_description,
            "experienceCount": str(len(profile.experience)),
            **preset.as_variables(),
        }

    def build(
        self,
        profile: ProfileRecord,
        request: GenerationRequest,
        preset: PromptPreset = FULL,
        prompt_name: str | None = None,
    ) -> str:
        """Fully substituted prompt text."""
        name = prompt_name or self.select_prompt_name(profile, request)
        template = self.store.load(name)
        return fill_template(template, self.build_variables(profile, request, preset))

    def build_messages(
        self,
        profile: ProfileRecord,
        request: GenerationRequest,
        preset: PromptPreset = FULL,
        prompt_name: str | None = None,
    ) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": self.build(profile, request, preset, prompt_name)},
        ]


# ── Work History / Education ─────────────────────────────────────────────────


def format_work_history(experience: Iterable[ExperienceEntry]) -> str:
    lines = []
    for idx, job in enumerate(experience):
        parts = [f"{idx + 1}. {job.company or 'Unknown Company'}"]
        if job.title:
            parts.append(job.title)
        if job.location:
            parts.append(job.location)
        parts.append(f"{job.start_date or 'N/A'} - {job.end_date or 'N/A'}")
        lines.append(" | ".join(parts))
    return "\n".join(lines)


def format_education(education: Iterable[EducationEntry]) -> str:
    lines = []
    for edu in education:
        line = (
            f"- {edu.degree or 'N/A'}, {edu.school or 'N/A'} "
            f"({edu.start_year or ''}-{edu.end_year or ''})"
        )
        if edu.grade:
            line += f" | GPA: {edu.grade}"
        lines.append(line)
    return "\n".join(lines)


# ── Years of Experience ──────────────────────────────────────────────────────

_MONTH_MAP: dict[str, int] = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}


def calculate_years_of_experience(experience: Iterable[ExperienceEntry], *, now: datetime) -> int:
    """
    Whole years between the earliest parseable start date and now.

    Entries whose start date cannot be parsed are skipped. Half years round up;
    the result never goes below 0.
    """
    dates = [d for d in (parse_start_date(job.start_date, now=now) for job in experience) if d]
    if not dates:
        logger.warning("No valid dates found in experience")
        return 0

    years = (now - min(dates)).total_seconds() / _SECONDS_PER_YEAR
    return max(0, math.floor(years + 0.5))


def parse_start_date(raw: str | None, *, now: datetime) -> datetime | None:
    """Parse "Present", "MM/YYYY" or a generic date string. Returns None (and warns) when it can't."""
    if not raw:
        return None
    token = str(raw).strip()
    if not token:
        return None

    if token.lower() == "present":
        return now

    m = re.match(r"^(\d{1,2})/(\d{4})\s*$", token)
    if m and 1 <= int(m.group(1)) <= 12:
        return datetime(int(m.group(2)), int(m.group(1)), 1)

    parsed = _parse_generic_date(token)
    if parsed is None:
        logger.warning(f'Failed to parse date: "{raw}"')
    return parsed


def _parse_generic_date(token: str) -> datetime | None:
    """ISO dates, "YYYY-MM", "MM/DD/YYYY", "Mon YYYY" / "Month YYYY", and bare "YYYY"."""
    try:
        return datetime.fromisoformat(token).replace(tzinfo=None)
    except ValueError:
        pass

    lower = token.lower()

    m = re.match(r"^(\d{4})-(\d{1,2})$", lower)
    if m and 1 <= int(m.group(2)) <= 12:
        return datetime(int(m.group(1)), int(m.group(2)), 1)

    m = re.match(r"^(\d{1,2})/(\d{1,2})/(\d{4})$", lower)
    if m:
        try:
            return datetime(int(m.group(3)), int(m.group(1)), int(m.group(2)))
        except ValueError:
            return None

    m = re.match(r"^([a-z]+)\.?\s+(?:(\d{1,2}),?\s+)?(\d{4})$", lower)
    if m:
        month = _MONTH_MAP.get(m.group(1)[:3])
        if month:
            return datetime(int(m.group(3)), month, int(m.group(2) or 1))

    m = re.match(r"^(\d{4})$", lower)
    if m:
        return datetime(int(m.group(1)), 1, 1)

    return None
