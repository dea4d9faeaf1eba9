"""
LLM Service — provider-agnostic completion gateway via LiteLLM.

Responsibilities:
  • Route a prompt (or role-tagged message list) to Claude or OpenAI
  • Claude gets the system message in its dedicated `system` slot; OpenAI gets it prepended
  • Race every attempt against a timeout; retry immediately up to the attempt count
  • Normalize both providers' payloads into one NormalizedLLMResponse
  • Classify upstream failures (401 / 403 / 404 / 429) into readable errors
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Union

import litellm
from litellm import acompletion

from resumegen.config import MODELS, PROVIDERS, settings
from resumegen.errors import (
    GenerationError,
    ProviderUnavailable,
    UnsupportedProvider,
    UpstreamError,
    UpstreamTimeout,
)
from resumegen.models.llm_models import NormalizedLLMResponse, StopReason, TokenUsage

logger = logging.getLogger(__name__)

# Silence verbose LiteLLM logs
litellm.suppress_debug_info = True
# Drop params a model rejects (gpt-5 family only accepts temperature=1)
litellm.drop_params = True

Transport = Callable[..., Awaitable[Any]]
PromptOrMessages = Union[str, list[dict[str, Any]]]

# Timed-out attempts that are still running
_ABANDONED: set[asyncio.Task[NormalizedLLMResponse]] = set()


# ── Helpers ──────────────────────────────────────────────────────────────────


def _get(obj: Any, key: str, default: Any = None) -> Any:
    """Read a field from either a dict payload or an SDK object."""
    if obj is None:
        return default
    if isinstance(obj, dict):
        return obj.get(key, default)
    return getattr(obj, key, default)


def _stop_reason(raw_reason: Any) -> StopReason:
    return "max_tokens" if raw_reason in ("max_tokens", "length") else "stop"


def split_system(prompt_or_messages: PromptOrMessages) -> tuple[Optional[str], list[dict[str, Any]]]:
    """
    Separate the system message from the conversation.

    A bare string becomes a single user message. From a message list, the first
    system message is returned separately and every system message is dropped
    from the conversation.
    """
    if isinstance(prompt_or_messages, str):
        return None, [{"role": "user", "content": prompt_or_messages}]
    if not isinstance(prompt_or_messages, list):
        return None, [{"role": "user", "content": str(prompt_or_messages)}]

    system = next(
        (m.get("content") for m in prompt_or_messages if m.get("role") == "system"),
        None,
    )
    messages = [
        {"role": m.get("role"), "content": m.get("content")}
        for m in prompt_or_messages
        if m.get("role") != "system"
    ]
    return system, messages


def default_model(provider: str) -> str:
    """First model listed for a provider in the MODELS registry."""
    models = MODELS.get(provider) or {}
    model_id = next(iter(models), None)
    if not model_id:
        raise GenerationError(
            f"No default model available for provider: {provider}. Please specify a model."
        )
    return model_id


def classify_upstream_error(provider: str, error: Exception) -> UpstreamError:
    """Turn a raw SDK / HTTP exception into an UpstreamError with a readable message."""
    raw_error = str(error).lower()
    status = getattr(error, "status_code", None)
    display = PROVIDERS.get(provider, {}).get("name", provider)

    if status == 401 or "401" in raw_error or "invalid_api_key" in raw_error or "invalid api key" in raw_error or "authentication" in raw_error:
        message = f"{display}: invalid API key"
    elif status == 403 or "403" in raw_error or "forbidden" in raw_error:
        message = (
            f"{display}: API access denied (403 Forbidden). Check your API key configuration."
        )
    elif status == 429 or "429" in raw_error or "rate_limit" in raw_error or "rate limit" in raw_error or "too many requests" in raw_error:
        message = f"{display}: rate limited. Try again later."
    elif status == 404 or "404" in raw_error or "model_not_found" in raw_error or "model not found" in raw_error or "does not exist" in raw_error:
        message = f"{display}: model not available. Try a different model."
    else:
        message = f"{display} request failed: {error}"

    return UpstreamError(message)


# ── Response Variants ────────────────────────────────────────────────────────


@dataclass
class ClaudeResponse:
    """Anthropic Messages payload: content blocks, input/output token usage, stop_reason."""

    raw: Any
    requested_model: str = ""

    def normalize(self) -> NormalizedLLMResponse:
        usage = _get(self.raw, "usage")
        return NormalizedLLMResponse(
            provider="claude",
            model=_get(self.raw, "model") or self.requested_model,
            content=list(_get(self.raw, "content") or []),
            usage=TokenUsage(
                input_tokens=_get(usage, "input_tokens") or 0,
                output_tokens=_get(usage, "output_tokens") or 0,
            ),
            stop_reason=_stop_reason(_get(self.raw, "stop_reason")),
        )


@dataclass
class OpenAIResponse:
    """Chat Completions payload: one choice whose message text becomes a single content block."""

    raw: Any
    requested_model: str = ""

    def normalize(self) -> NormalizedLLMResponse:
        choices = _get(self.raw, "choices") or []
        choice = choices[0] if choices else None
        text = _get(_get(choice, "message"), "content")
        usage = _get(self.raw, "usage")
        return NormalizedLLMResponse(
            provider="openai",
            model=_get(self.raw, "model") or self.requested_model,
            content=[{"text": text}] if text is not None else [],
            usage=TokenUsage(
                input_tokens=_get(usage, "prompt_tokens") or 0,
                output_tokens=_get(usage, "completion_tokens") or 0,
            ),
            stop_reason=_stop_reason(_get(choice, "finish_reason")),
        )


# ── Providers ────────────────────────────────────────────────────────────────


async def _anthropic_messages(**kwargs: Any) -> Any:
    return await litellm.anthropic.messages.acreate(**kwargs)


class ClaudeProvider:
    name = "claude"

    def __init__(self, api_key: str, transport: Transport | None = None):
        self.api_key = api_key
        self.transport = transport or _anthropic_messages

    async def send(
        self,
        *,
        model: str,
        system: Optional[str],
        messages: list[dict[str, Any]],
        max_tokens: int,
        temperature: float,
    ) -> NormalizedLLMResponse:
        kwargs: dict[str, Any] = {
            "model": f"{PROVIDERS['claude']['litellm_prefix']}/{model}",
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "api_key": self.api_key,
        }
        if system:
            kwargs["system"] = system
        raw = await self.transport(**kwargs)
        return ClaudeResponse(raw, requested_model=model).normalize()


class OpenAIProvider:
    name = "openai"

    def __init__(self, api_key: str, transport: Transport | None = None):
        self.api_key = api_key
        self.transport = transport or acompletion

    async def send(
        self,
        *,
        model: str,
        system: Optional[str],
        messages: list[dict[str, Any]],
        max_tokens: int,
        temperature: float,
    ) -> NormalizedLLMResponse:
        if system:
            messages = [{"role": "system", "content": system}, *messages]
        raw = await self.transport(
            model=f"{PROVIDERS['openai']['litellm_prefix']}/{model}",
            messages=messages,
            max_tokens=max_tokens,
            temperature=temperature,
            api_key=self.api_key,
        )
        return OpenAIResponse(raw, requested_model=model).normalize()


PROVIDER_CLASSES = {
    "claude": ClaudeProvider,
    "openai": OpenAIProvider,
}


def _abandon(task: asyncio.Task[NormalizedLLMResponse]) -> None:
    """Let a timed-out attempt finish in the background and collect its outcome."""
    _ABANDONED.add(task)
    task.add_done_callback(_collect_abandoned)


def _collect_abandoned(task: asyncio.Task[NormalizedLLMResponse]) -> None:
    _ABANDONED.discard(task)
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.debug(f"Abandoned LLM attempt failed after timeout: {error}")


# ── Gateway ──────────────────────────────────────────────────────────────────


class LLMGateway:
    """
    Single entry point for model calls.

    Args:
        api_keys:   provider → API key (None / "" means not configured)
        transports: provider → async callable replacing the LiteLLM call (tests)
        temperature: sampling temperature for every call
    """

    def __init__(
        self,
        api_keys: dict[str, Optional[str]],
        *,
        transports: dict[str, Transport] | None = None,
        temperature: float = settings.llm_temperature,
    ):
        self.api_keys = api_keys
        self.transports = transports or {}
        self.temperature = temperature

    def resolve_model(self, provider: str, model: Optional[str]) -> str:
        if not model:
            return default_model(provider)
        if model not in MODELS.get(provider, {}):
            logger.warning(f"Model {model} not in allowed list, but attempting to use it anyway.")
        return model

    async def call(
        self,
        prompt_or_messages: PromptOrMessages,
        provider: str = "claude",
        model: Optional[str] = None,
        max_tokens: int = settings.llm_max_tokens,
        retries: int = settings.llm_retries,
        timeout_s: float = settings.llm_timeout_s,
    ) -> NormalizedLLMResponse:
        """
        Send one completion request.

        `retries` is the total number of attempts. A timed-out attempt is
        abandoned (left running, never awaited again) and the next one starts
        immediately.
        """
        if provider not in PROVIDER_CLASSES:
            raise UnsupportedProvider(
                f"Unsupported provider: {provider}. Supported: {', '.join(PROVIDER_CLASSES)}"
            )

        model_id = self.resolve_model(provider, model)
        api_key = self.api_keys.get(provider)
        if not api_key:
            raise ProviderUnavailable(f"{PROVIDERS[provider]['name']} API key not configured")

        client = PROVIDER_CLASSES[provider](api_key, self.transports.get(provider))
        system, messages = split_system(prompt_or_messages)
        attempts = max(1, retries)

        logger.info(
            f"LLM call: provider={provider} model={model_id} max_tokens={max_tokens} "
            f"attempts={attempts} timeout={timeout_s}s"
        )

        for attempt in range(1, attempts + 1):
            task = asyncio.ensure_future(
                client.send(
                    model=model_id,
                    system=system,
                    messages=messages,
                    max_tokens=max_tokens,
                    temperature=self.temperature,
                )
            )
            try:
                response = await asyncio.wait_for(asyncio.shield(task), timeout=timeout_s)
            except asyncio.TimeoutError:
                _abandon(task)
                error: UpstreamError = UpstreamTimeout("AI request timed out")
            except GenerationError:
                raise
            except Exception as e:
                logger.error(f"LLM error ({provider}/{model_id}): {e}")
                error = classify_upstream_error(provider, e)
            else:
                logger.info(
                    f"LLM response: model={response.model} stop_reason={response.stop_reason} "
                    f"input_tokens={response.usage.input_tokens} "
                    f"output_tokens={response.usage.output_tokens}"
                )
                return response

            if attempt == attempts:
                raise error
            logger.info(f"Retrying {provider}... ({attempts - attempt} attempts left)")


# ── Provider Info ────────────────────────────────────────────────────────────


def get_providers_info(api_keys: dict[str, Optional[str]] | None = None) -> list[dict[str, Any]]:
    """
    Providers, their models and defaults for the frontend.
    No secrets are exposed, only whether a key is configured.
    """
    api_keys = api_keys or {}
    providers = []
    for provider_key, models in MODELS.items():
        meta = PROVIDERS[provider_key]
        providers.append({
            "id": provider_key,
            "name": meta["name"],
            "default_model": next(iter(models), None),
            "models": [{"id": model_id, "name": info["name"]} for model_id, info in models.items()],
            "key_env_var": meta["key_env_var"],
            "key_url": meta["key_url"],
            "configured": bool(api_keys.get(provider_key)),
        })
    return providers
