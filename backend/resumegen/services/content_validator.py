"""
Content Validator — shallow contract check on the recovered JSON.
"""

from __future__ import annotations

import logging
from typing import Any

from resumegen.errors import MissingField
from resumegen.models.generation_models import ResumeContent

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "summary", "skills", "experience")


def _is_missing(value: Any) -> bool:
    # Absent, null, empty string, 0 and false all count as missing; [] and {} do not
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (int, float)):
        return value == 0
    return False


def validate(obj: dict[str, Any]) -> ResumeContent:
    """Raise MissingField for the first missing required field, in REQUIRED_FIELDS order."""
    for field in REQUIRED_FIELDS:
        if _is_missing(obj.get(field)):
            logger.error(f"Missing required fields in AI response: {list(obj)}")
            raise MissingField(field)

    content = ResumeContent(
        title=str(obj["title"]),
        summary=str(obj["summary"]),
        skills=obj["skills"],
        experience=obj["experience"],
    )
    _log_content_stats(content)
    return content


def _log_content_stats(content: ResumeContent) -> None:
    if isinstance(content.skills, dict):
        logger.info(f"Skills categories: {len(content.skills)}")
    if not isinstance(content.experience, list):
        return
    logger.info(f"Experience entries: {len(content.experience)}")
    for idx, exp in enumerate(content.experience):
        details = exp.get("details") if isinstance(exp, dict) else None
        if not details:
            logger.warning(f"Experience entry {idx + 1} has NO DETAILS")
