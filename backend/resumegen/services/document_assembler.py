"""
Document Assembler — merge the stored profile with the generated content.

Structure (companies, dates, locations, education) always comes from the
profile; the model only contributes the title, summary, skills and the bullet
details, matched to the profile's jobs by position.
"""

from __future__ import annotations

import logging
from typing import Any

from resumegen.config import settings
from resumegen.models.generation_models import DocumentExperience, ResumeContent, ResumeDocument
from resumegen.models.profile_models import ProfileRecord

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Senior Software Engineer"
DEFAULT_JOB_TITLE = "Engineer"


def assemble(
    profile: ProfileRecord,
    content: ResumeContent,
    *,
    show_private_contact: bool | None = None,
) -> ResumeDocument:
    if show_private_contact is None:
        show_private_contact = settings.show_private_contact

    generated = content.experience if isinstance(content.experience, list) else []
    if len(generated) != len(profile.experience):
        logger.warning(
            f"Generated {len(generated)} experience entries for {len(profile.experience)} jobs"
        )

    experience = []
    for idx, job in enumerate(profile.experience):
        entry = generated[idx] if idx < len(generated) and isinstance(generated[idx], dict) else {}
        experience.append(
            DocumentExperience(
                title=job.title or entry.get("title") or DEFAULT_JOB_TITLE,
                company=job.company or "Unknown Company",
                location=job.location or "",
                start_date=job.start_date or "",
                end_date=job.end_date or "",
                details=_details(entry.get("details")),
            )
        )

    return ResumeDocument(
        name=profile.name or "Unknown",
        title=content.title or DEFAULT_TITLE,
        email=profile.email or "",
        phone=profile.phone if show_private_contact else None,
        location=profile.location or "",
        linkedin=profile.linkedin if show_private_contact else None,
        website=(profile.website or profile.github) if show_private_contact else None,
        summary=content.summary or "",
        skills=content.skills if isinstance(content.skills, (dict, list)) else {},
        experience=experience,
        education=list(profile.education),
    )


def _details(raw: Any) -> list[str]:
    if not raw:
        return []
    if isinstance(raw, str):
        return [raw]
    if isinstance(raw, list):
        return [str(item) for item in raw if item]
    return []
