from pathlib import Path

from pydantic_settings import BaseSettings
from typing import Optional

_ROOT_DIR = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "Tailored Resume Generator"
    debug: bool = True
    log_level: str = "INFO"

    # CORS
    frontend_url: str = "http://localhost:3000"

    # LLM API Keys (server defaults; a request may override them via headers)
    anthropic_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    default_provider: str = "claude"

    # LLM call policy
    llm_max_tokens: int = 8000
    llm_retries: int = 2
    llm_timeout_s: float = 120.0
    llm_temperature: float = 0.7

    # Data
    data_dir: Path = _ROOT_DIR / "data"
    profiles_dir: Optional[Path] = None
    prompts_dir: Optional[Path] = None

    # Rendering: phone, LinkedIn and website are left off the PDF unless enabled
    show_private_contact: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def resolved_profiles_dir(self) -> Path:
        return self.profiles_dir or self.data_dir / "profiles"

    @property
    def resolved_prompts_dir(self) -> Path:
        return self.prompts_dir or self.data_dir / "prompts"


settings = Settings()


# ── Provider Registry ───────────────────────────────────────────────────────

PROVIDERS = {
    "claude": {
        "name": "Anthropic Claude",
        "litellm_prefix": "anthropic",
        "key_env_var": "ANTHROPIC_API_KEY",
        "key_url": "https://console.anthropic.com/settings/keys",
    },
    "openai": {
        "name": "OpenAI",
        "litellm_prefix": "openai",
        "key_env_var": "OPENAI_API_KEY",
        "key_url": "https://platform.openai.com/api-keys",
    },
}


# ── Model Registry ──────────────────────────────────────────────────────────
# The first model listed for a provider is its default.

MODELS = {
    "claude": {
        "claude-haiku-4-5-20251001": {"name": "Claude Haiku 4.5"},
        "claude-sonnet-4-5-20250929": {"name": "Claude Sonnet 4.5"},
    },
    "openai": {
        "gpt-5.2-chat-latest": {"name": "GPT-5.2 Instant (chat-latest)"},
        "gpt-5.2": {"name": "GPT-5.2 (Thinking)"},
        "gpt-5": {"name": "GPT-5"},
        "gpt-5-mini": {"name": "GPT-5 Mini"},
        "gpt-4.1": {"name": "GPT-4.1"},
        "gpt-4.1-mini": {"name": "GPT-4.1 Mini"},
        "gpt-4o": {"name": "GPT-4o"},
        "gpt-4o-mini": {"name": "GPT-4o Mini"},
        "gpt-4-turbo": {"name": "GPT-4 Turbo"},
    },
}


# ── Profile Mapping ─────────────────────────────────────────────────────────
# profile id → resume file name (without .json), template, prompt.
# prompt "auto" picks a prompt from the job description via the role detector.

PROFILES = {
    "jd": {
        "resume": "Jane Doe",
        "template": "Resume-Tech-Teal",
        "prompt": "default",
    },
    "ar": {
        "resume": "Alex_Rivera",
        "template": "Resume-Modern-Green",
        "prompt": "auto",
    },
}
