"""
PDF Templates — style tables for the resume layouts and the registry that renders them.

A template is data only (colours, fonts, section titles, header layout and
section-title decoration); every template is drawn by the same renderer in
pdf_renderer.py.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal, Optional

from resumegen.errors import NotFoundError
from resumegen.models.generation_models import ResumeDocument
from resumegen.services.pdf_renderer import render_pdf

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = "Resume"


@dataclass(frozen=True)
class TemplateStyle:
    id: str

    # Colours
    primary: str = "#2563eb"
    primary_dark: str = "#1e40af"
    text_dark: str = "#1e293b"
    text_medium: str = "#475569"
    text_light: str = "#64748b"
    header_bg: Optional[str] = None
    section_bg: Optional[str] = None
    section_title_color: Optional[str] = None
    name_color: Optional[str] = None
    title_color: Optional[str] = None
    contact_color: Optional[str] = None
    summary_bg: Optional[str] = None
    summary_border_left: bool = False
    name_uppercase: bool = False

    # Fonts (standard PDF families only: Helvetica, Times-Roman)
    body_font: str = "Helvetica"
    base_size: float = 11
    name_size: float = 26
    title_size: float = 12
    contact_size: float = 9.5
    section_size: float = 11

    section_titles: dict[str, str] = field(default_factory=dict)
    header_layout: Literal["center", "split"] = "center"
    section_title_style: Literal["bar", "box", "line", "minimal"] = "bar"

    def section_title(self, section: str) -> str:
        return self.section_titles.get(section) or section.title()


# ── Registry ─────────────────────────────────────────────────────────────────

_TEMPLATE_LIST = [
    TemplateStyle(
        id="Resume",
        section_bg="#eff6ff",
        section_titles={
            "summary": "Professional Summary",
            "skills": "Technical Skills",
            "experience": "Professional Experience",
            "education": "Education",
        },
    ),
    TemplateStyle(
        id="Resume-Tech-Teal",
        primary="#0d9488", primary_dark="#0f766e",
        text_dark="#134e4a", text_medium="#0f766e", text_light="#64748b",
        section_bg="#f0fdfa", section_title_color="#0d9488",
        summary_bg="#f0fdfa", summary_border_left=True,
        base_size=10.5, name_size=24, section_size=10,
        section_titles={
            "summary": "Summary",
            "skills": "Technical Skills",
            "experience": "Professional Experience",
            "education": "Education",
        },
        header_layout="split",
        section_title_style="box",
    ),
    TemplateStyle(
        id="Resume-Modern-Green",
        primary="#16a34a", primary_dark="#15803d",
        text_dark="#14532d", text_medium="#166534", text_light="#6b7280",
        section_title_color="#15803d", name_color="#15803d",
        base_size=10.5, name_size=22, contact_size=9, title_size=11, section_size=10,
        section_titles={
            "summary": "Summary",
            "skills": "Key Skills",
            "experience": "Experience",
            "education": "Education",
        },
        header_layout="split",
        section_title_style="line",
    ),
    TemplateStyle(
        id="Resume-Creative-Burgundy",
        primary="#7c2d12", primary_dark="#431407",
        text_dark="#1c1917", text_medium="#44403c", text_light="#78716c",
        section_bg="#fef2f2", section_title_color="#431407", name_color="#1c1917",
        name_uppercase=True,
        name_size=26, title_size=12, contact_size=9, section_size=10,
        section_titles={
            "summary": "Professional Summary",
            "skills": "Core Competencies",
            "experience": "Professional Experience",
            "education": "Education",
        },
    ),
    TemplateStyle(
        id="Resume-Bold-Emerald",
        primary="#059669", primary_dark="#047857",
        text_dark="#064e3b", text_medium="#065f46", text_light="#6b7280",
        header_bg="#f0fdf4", section_bg="#ecfdf5", section_title_color="#047857",
        summary_bg="#f0fdf4", summary_border_left=True,
        name_uppercase=True,
        name_size=25, contact_size=9, section_size=10,
        section_titles={
            "summary": "Summary",
            "skills": "Key Skills",
            "experience": "Professional Experience",
            "education": "Education",
        },
    ),
    TemplateStyle(
        id="Resume-Corporate-Slate",
        primary="#475569", primary_dark="#334155",
        text_dark="#0f172a", text_medium="#334155", text_light="#64748b",
        section_bg="#f1f5f9", section_title_color="#334155", name_color="#334155",
        name_size=24, contact_size=9, section_size=10,
        section_titles={
            "summary": "Professional Summary",
            "skills": "Core Competencies",
            "experience": "Professional Experience",
            "education": "Education",
        },
        header_layout="split",
    ),
    TemplateStyle(
        id="Resume-Executive-Navy",
        primary="#1e3a8a", primary_dark="#1e40af",
        text_dark="#0f172a", text_medium="#1e3a8a", text_light="#64748b",
        header_bg="#eff6ff", section_bg="#eff6ff", section_title_color="#1e3a8a",
        name_color="#1e3a8a", name_uppercase=True,
        body_font="Times-Roman", base_size=10.5, name_size=26, contact_size=9, section_size=10,
        section_titles={
            "summary": "Executive Summary",
            "skills": "Core Competencies",
            "experience": "Professional Experience",
            "education": "Education",
        },
        section_title_style="box",
    ),
    TemplateStyle(
        id="Resume-Classic-Charcoal",
        primary="#1f2937", primary_dark="#111827",
        text_dark="#1f2937", text_medium="#374151", text_light="#6b7280",
        header_bg="#f9fafb", section_title_color="#6b7280", name_color="#111827",
        body_font="Times-Roman", name_size=24, contact_size=9, section_size=9,
        section_titles={
            "summary": "Summary",
            "skills": "Expertise",
            "experience": "Experience",
            "education": "Education",
        },
        section_title_style="minimal",
    ),
    TemplateStyle(
        id="Resume-Consultant-Steel",
        primary="#64748b", primary_dark="#475569",
        text_dark="#0f172a", text_medium="#475569", text_light="#64748b",
        section_title_color="#475569", name_color="#334155",
        summary_bg="#f8fafc", summary_border_left=True,
        base_size=10.5, name_size=23, contact_size=9, section_size=10,
        section_titles={
            "summary": "Executive Summary",
            "skills": "Core Competencies",
            "experience": "Professional Experience",
            "education": "Education",
        },
        section_title_style="line",
    ),
    TemplateStyle(
        id="Resume-Academic-Purple",
        primary="#6b46c1", primary_dark="#5b21b6",
        text_dark="#1e1b4b", text_medium="#4c1d95", text_light="#6b7280",
        header_bg="#faf5ff", section_bg="#f5f3ff", section_title_color="#5b21b6",
        name_color="#5b21b6",
        name_size=24, contact_size=9, section_size=10,
        section_titles={
            "summary": "Professional Summary",
            "skills": "Areas of Expertise",
            "experience": "Professional Experience",
            "education": "Education & Credentials",
        },
    ),
]

TEMPLATES: dict[str, TemplateStyle] = {t.id: t for t in _TEMPLATE_LIST}


class TemplateRegistry:
    def __init__(self, templates: dict[str, TemplateStyle] | None = None):
        self.templates = TEMPLATES if templates is None else templates

    def get(self, template_id: str) -> TemplateStyle:
        style = self.templates.get(template_id)
        if style is None:
            raise NotFoundError(f'Template "{template_id}" not found')
        return style

    def render(self, template_id: str, document: ResumeDocument) -> bytes:
        style = self.get(template_id)
        logger.info(f"Using template: {template_id}")
        return render_pdf(style, document)

    def list_templates(self) -> list[dict]:
        return [
            {
                "id": style.id,
                "header_layout": style.header_layout,
                "section_title_style": style.section_title_style,
                "section_titles": {
                    section: style.section_title(section)
                    for section in ("summary", "skills", "experience", "education")
                },
            }
            for style in self.templates.values()
        ]
