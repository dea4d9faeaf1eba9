import json
from datetime import datetime

import pytest

from resumegen.models.llm_models import NormalizedLLMResponse, TokenUsage
from resumegen.models.profile_models import ProfileRecord
from resumegen.services.generation_service import GenerationService
from resumegen.services.pdf_templates import TemplateRegistry
from resumegen.services.profile_store import ProfileStore
from resumegen.services.prompt_builder import PromptBuilder, PromptStore

FIXED_NOW = datetime(2024, 1, 1)

REMOTE_JD = (
    "Senior Backend Engineer (fully remote). We build Python microservices on AWS "
    "with PostgreSQL and Kafka. 6+ years of experience required."
)

PROFILE_DATA = {
    "name": "Jane Q Doe",
    "email": "jane@example.com",
    "phone": "+1 555 0100",
    "location": "Austin, TX",
    "linkedin": "linkedin.com/in/jane",
    "experience": [
        {"title": "Senior Engineer", "company": "Northwind", "location": "Remote",
         "start_date": "03/2021", "end_date": "Present"},
        {"title": "Engineer", "company": "Contoso", "start_date": "06/2018", "end_date": "02/2021"},
        {"company": "Fabrikam", "start_date": "01/2015", "end_date": "05/2018"},
    ],
    "education": [
        {"degree": "B.S. Computer Science", "school": "UT Austin", "start_year": 2011,
         "end_year": 2015, "grade": "3.7"},
    ],
}

PROFILE_MAPPING = {
    "jd": {"resume": "Jane Q Doe", "template": "Resume-Tech-Teal", "prompt": "default"},
    "ghost": {"resume": "Nobody Here", "template": None, "prompt": "default"},
}

DEFAULT_PROMPT = (
    "Candidate {{name}} ({{yearsOfExperience}} years, {{experienceCount}} jobs)\n"
    "{{workHistory}}\n{{education}}\n"
    "Skills: {{totalSkills}} total, {{skillsPerCategory}} per category\n"
    "Bullets: {{recentJobBullets}} recent, {{bulletsPerJob}} others\n"
    "JD: {{jobDescription}}\n"
)

VALID_CONTENT = {
    "title": "Senior Backend Engineer",
    "summary": "Engineer with <strong>Python</strong> depth.",
    "skills": {"Languages": ["Python", "Go"], "Cloud": ["AWS"]},
    "experience": [
        {"title": "Staff Engineer", "details": ["Built <strong>Kafka</strong> pipelines"]},
        {"details": ["Cut latency by 40%"]},
        {"title": "Developer", "details": ["Shipped **billing** service"]},
    ],
}


def make_response(text=None, *, stop_reason="stop", content=None, provider="claude"):
    if content is None:
        content = [{"type": "text", "text": text}] if text is not None else []
    return NormalizedLLMResponse(
        provider=provider,
        model="test-model",
        content=content,
        usage=TokenUsage(input_tokens=100, output_tokens=200),
        stop_reason=stop_reason,
    )


class FakeGateway:
    """Returns queued responses and records every call."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    async def call(self, prompt_or_messages, provider="claude", model=None, **kwargs):
        self.calls.append({"messages": prompt_or_messages, "provider": provider, "model": model, **kwargs})
        if not self.responses:
            raise AssertionError("unexpected LLM call")
        return self.responses.pop(0)


@pytest.fixture
def data_dir(tmp_path):
    profiles = tmp_path / "profiles"
    prompts = tmp_path / "prompts"
    profiles.mkdir()
    prompts.mkdir()
    (profiles / "Jane Q Doe.json").write_text(json.dumps(PROFILE_DATA), encoding="utf-8")
    (prompts / "default.txt").write_text(DEFAULT_PROMPT, encoding="utf-8")
    return tmp_path


@pytest.fixture
def profile_store(data_dir):
    return ProfileStore(data_dir / "profiles", PROFILE_MAPPING, cache={})


@pytest.fixture
def prompt_builder(data_dir):
    return PromptBuilder(PromptStore(data_dir / "prompts", cache={}), clock=lambda: FIXED_NOW)


@pytest.fixture
def jane(profile_store) -> ProfileRecord:
    return profile_store.load("jd")


@pytest.fixture
def make_service(profile_store, prompt_builder):
    def _make(gateway, **kwargs):
        return GenerationService(
            profiles=profile_store,
            prompts=prompt_builder,
            gateway=gateway,
            templates=TemplateRegistry(),
            **kwargs,
        )

    return _make
