from datetime import datetime

import pytest

from conftest import FIXED_NOW, REMOTE_JD
from resumegen.errors import PromptTemplateMissing
from resumegen.models.generation_models import GenerationRequest
from resumegen.models.profile_models import EducationEntry, ExperienceEntry
from resumegen.prompts.resume_generator import CONCISE, SYSTEM_PROMPT
from resumegen.services.prompt_builder import (
    PromptStore,
    calculate_years_of_experience,
    fill_template,
    format_education,
    format_work_history,
    parse_start_date,
)


def _request(jd=REMOTE_JD, role="Backend Engineer"):
    return GenerationRequest(profile_id="jd", job_description=jd, role_name=role)


# ── Years of experience ──────────────────────────────────────────────────────


def test_years_from_earliest_start_date():
    jobs = [ExperienceEntry(start_date="01/2015"), ExperienceEntry(start_date="06/2018")]
    assert calculate_years_of_experience(jobs, now=FIXED_NOW) == 9


def test_years_rounds_half_years_up():
    jobs = [ExperienceEntry(start_date="06/2020")]
    # 3.59 years
    assert calculate_years_of_experience(jobs, now=FIXED_NOW) == 4


def test_years_present_only_is_zero():
    assert calculate_years_of_experience([ExperienceEntry(start_date="Present")], now=FIXED_NOW) == 0


def test_years_skips_unparseable_dates():
    jobs = [ExperienceEntry(start_date="sometime"), ExperienceEntry(start_date="03/2021")]
    assert calculate_years_of_experience(jobs, now=FIXED_NOW) == 3


def test_years_without_any_dates_is_zero():
    assert calculate_years_of_experience([], now=FIXED_NOW) == 0
    assert calculate_years_of_experience([ExperienceEntry(start_date="n/a")], now=FIXED_NOW) == 0


def test_years_never_negative():
    assert calculate_years_of_experience([ExperienceEntry(start_date="01/2030")], now=FIXED_NOW) == 0


@pytest.mark.parametrize("raw, expected", [
    ("03/2021", datetime(2021, 3, 1)),
    ("Jan 2015", datetime(2015, 1, 1)),
    ("September 2019", datetime(2019, 9, 1)),
    ("Sept 5, 2019", datetime(2019, 9, 5)),
    ("2022-04", datetime(2022, 4, 1)),
    ("2014", datetime(2014, 1, 1)),
    ("2020-07-15", datetime(2020, 7, 15)),
    ("07/15/2020", datetime(2020, 7, 15)),
])
def test_parse_start_date_formats(raw, expected):
    assert parse_start_date(raw, now=FIXED_NOW) == expected


def test_parse_start_date_present_is_now():
    assert parse_start_date("present", now=FIXED_NOW) == FIXED_NOW


@pytest.mark.parametrize("raw", ["", None, "13/2020", "soon", "Smarch 2019"])
def test_parse_start_date_rejects(raw):
    assert parse_start_date(raw, now=FIXED_NOW) is None


# ── Formatting ───────────────────────────────────────────────────────────────


def test_work_history_lines(jane):
    lines = format_work_history(jane.experience).split("\n")

    assert lines[0] == "1. Northwind | Senior Engineer | Remote | 03/2021 - Present"
    assert lines[1] == "2. Contoso | Engineer | 06/2018 - 02/2021"
    assert lines[2] == "3. Fabrikam | 01/2015 - 05/2018"


def test_work_history_missing_fields():
    assert format_work_history([ExperienceEntry()]) == "1. Unknown Company | N/A - N/A"


def test_education_lines():
    education = [
        EducationEntry(degree="B.S. Computer Science", school="UT Austin", start_year=2011, end_year=2015, grade=3.7),
        EducationEntry(degree="M.S. Statistics", school="Rice"),
    ]
    assert format_education(education) == (
        "- B.S. Computer Science, UT Austin (2011-2015) | GPA: 3.7\n"
        "- M.S. Statistics, Rice (-)"
    )


# ── Template filling ─────────────────────────────────────────────────────────


def test_fill_template_leaves_unknown_placeholders():
    out = fill_template("Hi {{name}}, {{unknown}} {{empty}}", {"name": "Jane", "empty": None})
    assert out == "Hi Jane, {{unknown}} "


def test_build_fills_every_placeholder(prompt_builder, jane):
    prompt = prompt_builder.build(jane, _request())

    assert "{{" not in prompt
    assert "Candidate Jane Q Doe (9 years, 3 jobs)" in prompt
    assert "Skills: 60-80 total, 8-12 per category" in prompt
    assert "Bullets: 6 recent, 5-6 others" in prompt
    assert f"JD: {REMOTE_JD}" in prompt
    assert "GPA: 3.7" in prompt


def test_build_with_concise_preset(prompt_builder, jane):
    prompt = prompt_builder.build(jane, _request(), CONCISE)

    assert "Skills: 50-60 total, 6-10 per category" in prompt
    assert "Bullets: 5 recent, 4-5 others" in prompt


def test_build_messages_puts_system_first(prompt_builder, jane):
    messages = prompt_builder.build_messages(jane, _request())

    assert [m["role"] for m in messages] == ["system", "user"]
    assert messages[0]["content"] == SYSTEM_PROMPT
    assert messages[1]["content"].startswith("Candidate Jane Q Doe")


# ── Prompt selection ─────────────────────────────────────────────────────────


def test_mapped_prompt_name_is_used(prompt_builder, jane):
    assert prompt_builder.select_prompt_name(jane, _request()) == "default"


def test_auto_prompt_uses_role_detector(prompt_builder, jane):
    auto = jane.model_copy(update={"prompt": "auto"})
    jd = "Remote SRE: Kubernetes, Terraform, Docker, CI/CD, Prometheus, Grafana."

    assert prompt_builder.select_prompt_name(auto, _request(jd, "Platform Engineer")) == "devops"


# ── Prompt store ─────────────────────────────────────────────────────────────


def test_store_loads_named_prompt(tmp_path):
    (tmp_path / "default.txt").write_text("default", encoding="utf-8")
    (tmp_path / "backend.txt").write_text("backend", encoding="utf-8")
    store = PromptStore(tmp_path)

    assert store.load("backend") == "backend"


def test_store_falls_back_to_default(tmp_path):
    (tmp_path / "default.txt").write_text("default", encoding="utf-8")
    store = PromptStore(tmp_path)

    assert store.load("mobile") == "default"
    assert store.load("../secrets") == "default"


def test_store_caches_templates(tmp_path):
    path = tmp_path / "default.txt"
    path.write_text("first", encoding="utf-8")
    store = PromptStore(tmp_path, cache={})

    assert store.load("default") == "first"
    path.write_text("second", encoding="utf-8")
    assert store.load("default") == "first"


def test_store_without_default_raises(tmp_path):
    with pytest.raises(PromptTemplateMissing) as exc_info:
        PromptStore(tmp_path).load("backend")
    assert "backend.txt" in exc_info.value.message
