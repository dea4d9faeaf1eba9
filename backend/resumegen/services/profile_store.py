"""
Profile Store — read-only lookup of candidate profiles.

A profile id maps (config.PROFILES) to a resume name, template and prompt; the
resume name points at data/profiles/<resume name>.json. Parsed records are kept
in the cache passed to the constructor for the life of the process.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, MutableMapping

from pydantic import ValidationError

from resumegen.errors import GenerationError, NotFoundError
from resumegen.models.profile_models import ProfileRecord, ProfileSummary

logger = logging.getLogger(__name__)


class ProfileStore:
    def __init__(
        self,
        profiles_dir: Path,
        mapping: dict[str, dict[str, Any]],
        cache: MutableMapping[str, ProfileRecord] | None = None,
    ):
        self.profiles_dir = Path(profiles_dir)
        self.mapping = mapping
        self.cache: MutableMapping[str, ProfileRecord] = {} if cache is None else cache

    # ── Public API ───────────────────────────────────────────────────────────

    def load(self, profile_id: str) -> ProfileRecord:
        """Return the profile for an id, raising NotFoundError for unknown ids or missing files."""
        cached = self.cache.get(profile_id)
        if cached is not None:
            return cached

        config = self.mapping.get(profile_id)
        if not config:
            raise NotFoundError(f'Profile with slug "{profile_id}" not found')

        resume_name = config["resume"]
        path = self.profiles_dir / f"{resume_name}.json"
        if not path.exists():
            raise NotFoundError(f'Profile file "{resume_name}.json" not found')

        logger.info(f"Loading profile: {resume_name} (slug: {profile_id})")
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise GenerationError(f'Profile file "{resume_name}.json" is not valid JSON: {e}')

        try:
            record = ProfileRecord(
                **{
                    **data,
                    "id": profile_id,
                    "resume_name": resume_name,
                    "template": config.get("template"),
                    "prompt": config.get("prompt") or "default",
                }
            )
        except ValidationError as e:
            raise GenerationError(f'Profile file "{resume_name}.json" has an invalid shape: {e}')

        self.cache[profile_id] = record
        return record

    def list_profiles(self) -> list[ProfileSummary]:
        return [
            ProfileSummary(
                id=profile_id,
                resume=config["resume"],
                template=config.get("template"),
                prompt=config.get("prompt") or "default",
            )
            for profile_id, config in self.mapping.items()
        ]
