from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from resumegen.models.llm_models import TokenUsage
from resumegen.models.profile_models import EducationEntry


class LocationVerdict(str, Enum):
    """Outcome of the job-description gate. Only REMOTE lets a request through."""

    REMOTE = "remote"
    HYBRID = "hybrid"
    ONSITE = "onsite"
    ENTRY_LEVEL = "entry-level"


class Stage(str, Enum):
    """Pipeline stages, in execution order."""

    VALIDATING = "validating"
    GATING = "gating"
    LOADING = "loading"
    PROMPTING = "prompting"
    CALLING = "calling"
    TRUNCATION_CHECK = "truncation-check"
    RETRY_CALLING = "retry-calling"
    EXTRACTING = "extracting"
    RECOVERING = "recovering"
    VALIDATING_CONTENT = "validating-content"
    ASSEMBLING = "assembling"
    RENDERING = "rendering"
    NAMING = "naming"
    DONE = "done"


# ── Request Models ──────────────────────────────────────────────────────────


class GenerateRequest(BaseModel):
    """Body of POST /api/generate. Fields are optional here so missing ones become a 400, not a 422."""

    model_config = ConfigDict(populate_by_name=True)

    profile: Optional[str] = None
    jd: Optional[str] = None
    role_name: Optional[str] = Field(default=None, alias="roleName")
    company_name: Optional[str] = Field(default=None, alias="companyName")
    provider: Optional[str] = None
    model: Optional[str] = None
    template: Optional[str] = None


class GenerationRequest(BaseModel):
    """A validated generation request."""

    profile_id: str
    job_description: str
    role_name: str
    company_name: Optional[str] = None
    provider: str = "claude"
    model: Optional[str] = None
    template_id: Optional[str] = None


# ── AI Content ──────────────────────────────────────────────────────────────


class ResumeContent(BaseModel):
    """
    AI-generated resume content.

    Only the presence of the four top-level fields is checked; the inner shape
    of skills ({category: [skill]}) and experience ([{title?, details}]) is
    taken as the model returned it.
    """

    title: str
    summary: str
    skills: Any
    experience: Any


# ── Render Input ────────────────────────────────────────────────────────────


class DocumentExperience(BaseModel):
    title: str
    company: str
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    details: list[str] = []


class ResumeDocument(BaseModel):
    """Everything a template needs to draw the PDF."""

    name: str
    title: str
    email: str = ""
    phone: Optional[str] = None
    location: str = ""
    linkedin: Optional[str] = None
    website: Optional[str] = None
    summary: str = ""
    skills: Any = {}
    experience: list[DocumentExperience] = []
    education: list[EducationEntry] = []


# ── Result ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class GeneratedResume:
    filename: str
    pdf: bytes
    template_id: str
    content: ResumeContent
    usage: TokenUsage
    retried: bool = False

    media_type = "application/pdf"
