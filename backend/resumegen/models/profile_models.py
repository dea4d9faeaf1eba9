from pydantic import BaseModel, ConfigDict, field_validator
from typing import Any, Optional


def _to_text(value: Any) -> Any:
    """Profile files store years and dates as strings or bare numbers."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


# ── Sub-Models ──────────────────────────────────────────────────────────────


class ExperienceEntry(BaseModel):
    """A single job in the candidate's work history. Dates are free text."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    title: Optional[str] = None
    company: str = ""
    location: Optional[str] = None
    start_date: str = ""
    end_date: str = ""

    @field_validator("company", "start_date", "end_date", mode="before")
    @classmethod
    def coerce_required_text(cls, value: Any) -> Any:
        return "" if value is None else _to_text(value)


class EducationEntry(BaseModel):
    """A single education entry."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    degree: str = ""
    school: str = ""
    start_year: Optional[str] = None
    end_year: Optional[str] = None
    grade: Optional[str] = None

    @field_validator("degree", "school", mode="before")
    @classmethod
    def coerce_required_text(cls, value: Any) -> Any:
        return "" if value is None else _to_text(value)

    @field_validator("start_year", "end_year", "grade", mode="before")
    @classmethod
    def coerce_years(cls, value: Any) -> Any:
        return _to_text(value)


# ── Main Profile Model ─────────────────────────────────────────────────────


class ProfileRecord(BaseModel):
    """A stored candidate profile plus its mapping entry (resume name, template, prompt)."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    resume_name: str
    name: str = "Unknown"
    email: str = ""
    phone: Optional[str] = None
    location: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None
    website: Optional[str] = None
    experience: list[ExperienceEntry] = []
    education: list[EducationEntry] = []
    template: Optional[str] = None
    prompt: str = "default"

    @field_validator("name", "email", mode="before")
    @classmethod
    def coerce_null_text(cls, value: Any) -> Any:
        # null falls back to the defaults downstream ("Unknown" name, no email)
        return "" if value is None else value


class ProfileSummary(BaseModel):
    """Public listing entry for a mapped profile."""

    id: str
    resume: str
    template: Optional[str] = None
    prompt: str
