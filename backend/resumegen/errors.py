"""
Error taxonomy for the generation pipeline.

Every stage either recovers on its own (retries, JSON repair) or raises one of
these. Each error knows the HTTP status it maps to and, once it has travelled
through the orchestrator, the stage it was raised in.
"""

from __future__ import annotations

from typing import Any


class GenerationError(RuntimeError):
    status_code = 500
    kind = "generation_error"

    def __init__(self, message: str, *, stage: str | None = None):
        super().__init__(message)
        self.message = message
        self.stage = stage

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message, "kind": self.kind}
        if self.stage:
            payload["stage"] = self.stage
        return payload


# ── 4xx ──────────────────────────────────────────────────────────────────────


class InvalidRequest(GenerationError):
    status_code = 400
    kind = "request_validation"


class UnsupportedProvider(InvalidRequest):
    kind = "unsupported_provider"


class PolicyRejection(GenerationError):
    """The job description failed the remote/seniority gate."""

    status_code = 400
    kind = "policy_rejection"

    def __init__(self, message: str, *, location_type: str, stage: str | None = None):
        super().__init__(message, stage=stage)
        self.location_type = location_type

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.message, "locationType": self.location_type}


class NotFoundError(GenerationError):
    status_code = 404
    kind = "not_found"


# ── Upstream (LLM provider) ──────────────────────────────────────────────────


class ProviderUnavailable(GenerationError):
    kind = "upstream_unavailable"


class UpstreamError(GenerationError):
    kind = "upstream_error"


class UpstreamTimeout(UpstreamError):
    kind = "upstream_timeout"


# ── Model output ─────────────────────────────────────────────────────────────


class EmptyResponse(GenerationError):
    kind = "empty_response"


class ModelRefused(GenerationError):
    kind = "model_refused"


class MalformedOutput(GenerationError):
    kind = "malformed_output"


class NoJSONFound(MalformedOutput):
    pass


class UnrecoverableJSON(MalformedOutput):
    pass


class MissingField(GenerationError):
    kind = "schema_invalid"

    def __init__(self, field: str, *, stage: str | None = None):
        super().__init__(
            f"AI response missing required field '{field}' "
            "(title, summary, skills, and experience are required)",
            stage=stage,
        )
        self.field = field


# ── Configuration ────────────────────────────────────────────────────────────


class PromptTemplateMissing(GenerationError):
    kind = "prompt_missing"
