"""
Request-scoped helpers — API key headers and the wiring of the generation pipeline.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header

from resumegen.config import PROFILES, settings
from resumegen.services.generation_service import GenerationService
from resumegen.services.llm_service import LLMGateway
from resumegen.services.pdf_templates import TemplateRegistry
from resumegen.services.profile_store import ProfileStore
from resumegen.services.prompt_builder import PromptBuilder, PromptStore


class APIKeys:
    """Per-request API keys from headers; server keys from settings fill the gaps."""

    def __init__(
        self,
        anthropic: str | None = None,
        openai: str | None = None,
    ):
        self.anthropic = anthropic
        self.openai = openai

    def get_key(self, provider: str) -> str | None:
        if provider == "claude":
            return self.anthropic or settings.anthropic_api_key
        if provider == "openai":
            return self.openai or settings.openai_api_key
        return None

    def as_provider_map(self) -> dict[str, Optional[str]]:
        return {provider: self.get_key(provider) for provider in ("claude", "openai")}


async def get_api_keys(
    x_anthropic_key: Optional[str] = Header(None, alias="X-Anthropic-Key"),
    x_openai_key: Optional[str] = Header(None, alias="X-OpenAI-Key"),
) -> APIKeys:
    """FastAPI dependency that extracts API keys from request headers."""
    return APIKeys(
        anthropic=x_anthropic_key or None,
        openai=x_openai_key or None,
    )


# ── Process-lifetime stores (caches live inside them) ───────────────────────


@lru_cache
def get_profile_store() -> ProfileStore:
    return ProfileStore(settings.resolved_profiles_dir, PROFILES, cache={})


@lru_cache
def get_prompt_builder() -> PromptBuilder:
    return PromptBuilder(PromptStore(settings.resolved_prompts_dir, cache={}))


@lru_cache
def get_template_registry() -> TemplateRegistry:
    return TemplateRegistry()


def get_generation_service(keys: APIKeys = Depends(get_api_keys)) -> GenerationService:
    return GenerationService(
        profiles=get_profile_store(),
        prompts=get_prompt_builder(),
        gateway=LLMGateway(keys.as_provider_map()),
        templates=get_template_registry(),
    )
