"""
Prompt — Tailored Resume Generator

System message sent ahead of the profile prompt (data/prompts/<name>.txt), plus
the size presets substituted into that prompt.
Temperature: 0.7 | Max tokens: 8000
"""

from dataclasses import dataclass

SYSTEM_PROMPT = """\
You are an expert resume writer who tailors resumes for Applicant Tracking Systems.

Rules:
- Respond with ONE JSON object and nothing else — no markdown, no commentary
- Required top-level keys: "title", "summary", "skills", "experience"
- "skills" maps a category name to a list of skills
- "experience" has one object per job in the work history, in the same order,
  each with an optional "title" and a "details" list of bullet strings
- Use <strong>...</strong> to highlight key technologies inside bullets
- Never invent employers, dates, or degrees
"""


@dataclass(frozen=True)
class PromptPreset:
    """Size targets substituted into the prompt template."""

    name: str
    total_skills: str
    skills_per_category: str
    bullets_per_job: str
    recent_job_bullets: str

    def as_variables(self) -> dict[str, str]:
        return {
            "totalSkills": self.total_skills,
            "skillsPerCategory": self.skills_per_category,
            "bulletsPerJob": self.bullets_per_job,
            "recentJobBullets": self.recent_job_bullets,
        }


FULL = PromptPreset(
    name="full",
    total_skills="60-80",
    skills_per_category="8-12",
    bullets_per_job="5-6",
    recent_job_bullets="6",
)

# Used for the single retry after a truncated (max_tokens) response
CONCISE = PromptPreset(
    name="concise",
    total_skills="50-60",
    skills_per_category="6-10",
    bullets_per_job="4-5",
    recent_job_bullets="5",
)
