"""
Generation Service — orchestrate one tailored-resume request end to end.

Pipeline stages (strict order):
  validating → gating → loading → prompting → calling
    → (truncation-check → retry-calling) → extracting → recovering
    → validating-content → assembling → rendering → naming → done

Gating runs before anything that costs money. Template resolution happens while
loading, so an unknown template fails before the LLM call. Any failure after
gating carries the name of the stage it happened in.
"""

from __future__ import annotations

import logging
from typing import Optional

from resumegen.config import settings
from resumegen.errors import GenerationError, InvalidRequest, UnsupportedProvider
from resumegen.models.generation_models import (
    GeneratedResume,
    GenerateRequest,
    GenerationRequest,
    Stage,
)
from resumegen.models.llm_models import NormalizedLLMResponse
from resumegen.models.profile_models import ProfileRecord
from resumegen.prompts.resume_generator import CONCISE, FULL
from resumegen.services import content_validator, json_recovery, keyword_gate, response_extractor
from resumegen.services.document_assembler import assemble
from resumegen.services.llm_service import PROVIDER_CLASSES, LLMGateway
from resumegen.services.pdf_templates import DEFAULT_TEMPLATE, TemplateRegistry
from resumegen.services.profile_store import ProfileStore
from resumegen.services.prompt_builder import PromptBuilder
from resumegen.utils.text_cleanup import sanitize_segment

logger = logging.getLogger(__name__)


# ── Request Validation ───────────────────────────────────────────────────────


def validate_request(body: GenerateRequest) -> GenerationRequest:
    """Check required fields before any side effect."""
    if not body.profile:
        raise InvalidRequest("Profile slug required", stage=Stage.VALIDATING.value)
    if not body.jd:
        raise InvalidRequest("Job description required", stage=Stage.VALIDATING.value)
    if not body.role_name or not body.role_name.strip():
        raise InvalidRequest("Role name is required", stage=Stage.VALIDATING.value)

    provider = body.provider or settings.default_provider
    if provider not in PROVIDER_CLASSES:
        raise UnsupportedProvider(
            f"Unsupported provider: {provider}. Supported: {', '.join(PROVIDER_CLASSES)}",
            stage=Stage.VALIDATING.value,
        )

    return GenerationRequest(
        profile_id=body.profile,
        job_description=body.jd,
        role_name=body.role_name.strip(),
        company_name=(body.company_name or "").strip() or None,
        provider=provider,
        model=body.model or None,
        template_id=body.template or None,
    )


# ── Filename ─────────────────────────────────────────────────────────────────


def build_filename(resume_name: str, role_name: str, company_name: Optional[str] = None) -> str:
    """{first}_{last}_{role}[_{company}].pdf, every segment sanitized."""
    parts = (resume_name or "").split()
    if not parts:
        base = "resume"
    elif len(parts) == 1:
        base = parts[0]
    else:
        base = f"{parts[0]}_{parts[-1]}"

    segments = [sanitize_segment(base), sanitize_segment(role_name.strip())]
    if company_name and company_name.strip():
        segments.append(sanitize_segment(company_name.strip()))
    return "_".join(segments) + ".pdf"


# ── Orchestrator ─────────────────────────────────────────────────────────────


class _Progress:
    """Current stage of one request."""

    def __init__(self) -> None:
        self.stage = Stage.VALIDATING

    def enter(self, stage: Stage) -> None:
        self.stage = stage
        logger.debug(f"Stage: {stage.value}")


class GenerationService:
    def __init__(
        self,
        *,
        profiles: ProfileStore,
        prompts: PromptBuilder,
        gateway: LLMGateway,
        templates: TemplateRegistry,
        max_tokens: int = settings.llm_max_tokens,
        retries: int = settings.llm_retries,
        timeout_s: float = settings.llm_timeout_s,
        show_private_contact: Optional[bool] = None,
    ):
        self.profiles = profiles
        self.prompts = prompts
        self.gateway = gateway
        self.templates = templates
        self.max_tokens = max_tokens
        self.retries = retries
        self.timeout_s = timeout_s
        self.show_private_contact = show_private_contact

    async def generate(self, request: GenerationRequest) -> GeneratedResume:
        """Run the pipeline for an already-validated request."""
        progress = _Progress()
        progress.enter(Stage.GATING)
        keyword_gate.ensure_admissible(request.job_description)

        try:
            return await self._run(request, progress)
        except GenerationError as e:
            if e.stage is None:
                e.stage = progress.stage.value
            logger.error(f"Generation failed at {e.stage}: {e.message}")
            raise
        except Exception as e:
            logger.exception(f"Unexpected error at {progress.stage.value}")
            raise GenerationError(
                f"PDF generation failed: {e}", stage=progress.stage.value
            ) from e

    async def _run(self, request: GenerationRequest, progress: _Progress) -> GeneratedResume:
        # ── Loading ──────────────────────────────────────────────────────
        progress.enter(Stage.LOADING)
        profile = self.profiles.load(request.profile_id)
        template_id = request.template_id or profile.template or DEFAULT_TEMPLATE
        self.templates.get(template_id)

        # ── Prompting ────────────────────────────────────────────────────
        progress.enter(Stage.PROMPTING)
        prompt_name = self.prompts.select_prompt_name(profile, request)
        logger.info(f"Using prompt '{prompt_name}' for profile '{profile.id}'")
        messages = self.prompts.build_messages(profile, request, FULL, prompt_name)

        # ── Calling ──────────────────────────────────────────────────────
        progress.enter(Stage.CALLING)
        response = await self._call(messages, request)
        obj, response, retried = await self._handle_truncation(
            response, profile, request, prompt_name, progress
        )

        # ── Extracting → Recovering → Validating Content ─────────────────
        if obj is None:
            progress.enter(Stage.EXTRACTING)
            text = response_extractor.extract(response)
            progress.enter(Stage.RECOVERING)
            obj = json_recovery.recover(text)

        progress.enter(Stage.VALIDATING_CONTENT)
        content = content_validator.validate(obj)
        logger.info("AI content generated successfully")

        # ── Assembling → Rendering → Naming ──────────────────────────────
        progress.enter(Stage.ASSEMBLING)
        document = assemble(profile, content, show_private_contact=self.show_private_contact)

        progress.enter(Stage.RENDERING)
        pdf = self.templates.render(template_id, document)

        progress.enter(Stage.NAMING)
        filename = build_filename(profile.resume_name, request.role_name, request.company_name)

        progress.enter(Stage.DONE)
        logger.info(f"Resume generated: {filename} ({len(pdf)} bytes)")
        return GeneratedResume(
            filename=filename,
            pdf=pdf,
            template_id=template_id,
            content=content,
            usage=response.usage,
            retried=retried,
        )

    async def _handle_truncation(
        self,
        response: NormalizedLLMResponse,
        profile: ProfileRecord,
        request: GenerationRequest,
        prompt_name: str,
        progress: _Progress,
    ) -> tuple[Optional[dict], NormalizedLLMResponse, bool]:
        """
        Returns (salvaged object or None, response to use, retried).

        A truncated answer that still parses with all required keys is kept.
        Otherwise the request is re-sent once with the CONCISE preset and that
        answer is used whatever its stop reason.
        """
        if not response.truncated:
            return None, response, False

        progress.enter(Stage.TRUNCATION_CHECK)
        logger.warning(f"{request.provider.upper()} hit max_tokens limit! Response was truncated.")
        salvaged = _salvage(response)
        if salvaged is not None:
            logger.info("Truncated response still contains all required fields; using it")
            return salvaged, response, False

        progress.enter(Stage.RETRY_CALLING)
        logger.info("Retrying with reduced requirements to fit in token limit...")
        messages = self.prompts.build_messages(profile, request, CONCISE, prompt_name)
        retry = await self._call(messages, request)
        logger.info(
            f"Retry response: stop_reason={retry.stop_reason} "
            f"output_tokens={retry.usage.output_tokens}"
        )
        return None, retry, True

    async def _call(
        self, messages: list[dict[str, str]], request: GenerationRequest
    ) -> NormalizedLLMResponse:
        return await self.gateway.call(
            messages,
            provider=request.provider,
            model=request.model,
            max_tokens=self.max_tokens,
            retries=self.retries,
            timeout_s=self.timeout_s,
        )


def _salvage(response: NormalizedLLMResponse) -> Optional[dict]:
    """Parse a truncated response; None unless every required key is present."""
    try:
        obj = json_recovery.recover(response_extractor.extract(response))
    except GenerationError as e:
        logger.info(f"Truncated response could not be salvaged: {e.message}")
        return None
    if all(key in obj for key in content_validator.REQUIRED_FIELDS):
        return obj
    return None
