"""
PDF Renderer — draw a ResumeDocument with a TemplateStyle using reportlab platypus.

Layout (single column, A4, 15mm margins):
  - Header: name, title, contact line (centered) or name/title left + contact right (split)
  - Summary
  - Skills: "Category: a, b, c" rows
  - Experience: title + dates row, company/location, bullets
  - Education: degree + years row, school / GPA
<strong> and **bold** markup in generated text is drawn bold; all other text is escaped.
"""

from __future__ import annotations

import io
import logging
import re
from typing import TYPE_CHECKING, Any
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import KeepTogether, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from resumegen.models.generation_models import DocumentExperience, ResumeDocument
from resumegen.models.profile_models import EducationEntry

if TYPE_CHECKING:
    from resumegen.services.pdf_templates import TemplateStyle

logger = logging.getLogger(__name__)

_MARGIN = 15 * mm

_FONT_VARIANTS = {
    "Helvetica": ("Helvetica-Bold", "Helvetica-Oblique"),
    "Times-Roman": ("Times-Bold", "Times-Italic"),
}

_STRONG = re.compile(r"&lt;strong&gt;(.*?)&lt;/strong&gt;", re.IGNORECASE | re.DOTALL)
_MARKDOWN_BOLD = re.compile(r"\*\*(.+?)\*\*", re.DOTALL)
_YEAR = re.compile(r"\b(?:19|20)\d{2}\b")


# ── Text Helpers ─────────────────────────────────────────────────────────────


def to_markup(text: Any) -> str:
    """Escape text for a reportlab Paragraph, turning <strong>/**bold** into <b>."""
    if text is None:
        return ""
    safe = escape(str(text))
    safe = _STRONG.sub(r"<b>\1</b>", safe)
    return _MARKDOWN_BOLD.sub(r"<b>\1</b>", safe)


def extract_year(value: Any) -> str:
    if value is None or value == "":
        return ""
    text = str(value)
    match = _YEAR.search(text)
    return match.group(0) if match else text


# ── Rendering ────────────────────────────────────────────────────────────────


def render_pdf(style: "TemplateStyle", document: ResumeDocument) -> bytes:
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=_MARGIN,
        rightMargin=_MARGIN,
        topMargin=_MARGIN,
        bottomMargin=_MARGIN,
        title=f"{document.name} - {document.title}",
        author=document.name,
    )
    builder = _ResumeBuilder(style, doc.width)

    story: list[Any] = []
    story.extend(builder.header(document))

    if document.summary:
        story.extend(builder.summary(document.summary))
    if document.skills:
        story.extend(builder.skills(document.skills))
    if document.experience:
        story.extend(builder.experience(document.experience))
    if document.education:
        story.extend(builder.education(document.education))

    doc.build(story)
    pdf = buffer.getvalue()
    logger.info(f"PDF generated: {len(pdf)} bytes ({style.id})")
    return pdf


class _ResumeBuilder:
    """Paragraph styles and flowable factories for one template."""

    def __init__(self, style: "TemplateStyle", width: float):
        self.style = style
        self.width = width
        self.bold_font, self.italic_font = _FONT_VARIANTS.get(
            style.body_font, _FONT_VARIANTS["Helvetica"]
        )
        self.styles = self._make_styles()

    def _make_styles(self) -> dict[str, ParagraphStyle]:
        s = self.style
        body = s.body_font
        align = TA_CENTER if s.header_layout == "center" else TA_LEFT

        def ps(name: str, **kwargs: Any) -> ParagraphStyle:
            kwargs.setdefault("fontName", body)
            kwargs.setdefault("fontSize", s.base_size)
            kwargs.setdefault("leading", kwargs["fontSize"] * 1.35)
            kwargs.setdefault("textColor", colors.HexColor(s.text_dark))
            return ParagraphStyle(name=name, **kwargs)

        return {
            "name": ps(
                "Name",
                fontName=self.bold_font,
                fontSize=s.name_size,
                leading=s.name_size * 1.2,
                alignment=align,
                textColor=colors.HexColor(s.name_color or s.primary),
                spaceAfter=3,
            ),
            "title": ps(
                "Title",
                fontSize=s.title_size,
                alignment=align,
                textColor=colors.HexColor(s.title_color or s.text_medium),
                spaceAfter=4,
            ),
            "contact": ps(
                "Contact",
                fontSize=s.contact_size,
                alignment=TA_RIGHT if s.header_layout == "split" else TA_CENTER,
                textColor=colors.HexColor(s.contact_color or s.text_light),
            ),
            "section": ps(
                "SectionTitle",
                fontName=self.bold_font,
                fontSize=s.section_size,
                textColor=colors.HexColor(s.section_title_color or s.primary_dark),
            ),
            "summary": ps("Summary", fontSize=s.base_size - 0.5, leading=(s.base_size - 0.5) * 1.6),
            "skills": ps(
                "Skills",
                fontSize=s.base_size - 1,
                textColor=colors.HexColor(s.text_medium),
                spaceAfter=3,
            ),
            "exp_title": ps(
                "ExpTitle",
                fontName=self.bold_font,
                fontSize=s.base_size - 0.5,
                textColor=colors.HexColor(s.primary_dark),
            ),
            "dates": ps(
                "Dates",
                fontName=self.bold_font,
                fontSize=s.base_size - 1.5,
                alignment=TA_RIGHT,
                textColor=colors.HexColor(s.primary),
            ),
            "company": ps(
                "Company",
                fontName=self.italic_font,
                fontSize=s.base_size - 1,
                textColor=colors.HexColor(s.text_medium),
                spaceAfter=3,
            ),
            "bullet": ps(
                "Bullet",
                fontSize=s.base_size - 1,
                leftIndent=16,
                bulletIndent=6,
                spaceAfter=2,
            ),
            "school": ps(
                "School",
                fontName=self.italic_font,
                fontSize=s.base_size - 1,
                textColor=colors.HexColor(s.text_light),
            ),
        }

    # ── Header ───────────────────────────────────────────────────────────────

    def header(self, document: ResumeDocument) -> list[Any]:
        s = self.style
        name = document.name.upper() if s.name_uppercase else document.name
        contact_items = [
            item
            for item in (
                document.email,
                document.phone,
                document.location,
                document.linkedin,
                document.website,
            )
            if item
        ]

        left: list[Any] = [Paragraph(to_markup(name), self.styles["name"])]
        if document.title:
            left.append(Paragraph(to_markup(document.title), self.styles["title"]))

        if s.header_layout == "split":
            right = [Paragraph(escape(item), self.styles["contact"]) for item in contact_items]
            table = Table([[left, right or ""]], colWidths=[self.width * 0.6, self.width * 0.4])
        else:
            if contact_items:
                left.append(
                    Paragraph(" • ".join(escape(i) for i in contact_items), self.styles["contact"])
                )
            table = Table([[left]], colWidths=[self.width])

        commands: list[tuple] = [
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("LINEBELOW", (0, 0), (-1, -1), 2, colors.HexColor(s.primary)),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
        ]
        if s.header_bg:
            commands += [
                ("BACKGROUND", (0, 0), (-1, -1), colors.HexColor(s.header_bg)),
                ("TOPPADDING", (0, 0), (-1, -1), 10),
                ("LEFTPADDING", (0, 0), (-1, -1), 12),
                ("RIGHTPADDING", (0, 0), (-1, -1), 12),
            ]
        else:
            commands += [
                ("LEFTPADDING", (0, 0), (-1, -1), 0),
                ("RIGHTPADDING", (0, 0), (-1, -1), 0),
            ]
        table.setStyle(TableStyle(commands))
        return [table, Spacer(1, 10)]

    # ── Section Titles ───────────────────────────────────────────────────────

    def section_title(self, section: str) -> Table:
        s = self.style
        text = escape(s.section_title(section).upper())
        table = Table([[Paragraph(text, self.styles["section"])]], colWidths=[self.width])

        commands: list[tuple] = [("BOTTOMPADDING", (0, 0), (-1, -1), 5)]
        bg = colors.HexColor(s.section_bg) if s.section_bg else None
        if s.section_title_style == "bar":
            commands += [("LINEBEFORE", (0, 0), (0, -1), 3, colors.HexColor(s.primary))]
            if bg:
                commands += [("BACKGROUND", (0, 0), (-1, -1), bg)]
        elif s.section_title_style == "box":
            commands += [("BOX", (0, 0), (-1, -1), 0.75, colors.HexColor(s.primary))]
            if bg:
                commands += [("BACKGROUND", (0, 0), (-1, -1), bg)]
        elif s.section_title_style == "line":
            commands += [
                ("LINEBELOW", (0, 0), (-1, -1), 2, colors.HexColor(s.primary_dark)),
                ("LEFTPADDING", (0, 0), (-1, -1), 0),
            ]
        else:
            commands += [
                ("LINEBELOW", (0, 0), (-1, -1), 0.5, colors.HexColor(s.text_light)),
                ("LEFTPADDING", (0, 0), (-1, -1), 0),
            ]
        table.setStyle(TableStyle(commands))
        return table

    # ── Sections ─────────────────────────────────────────────────────────────

    def summary(self, summary: str) -> list[Any]:
        s = self.style
        para = Paragraph(to_markup(summary), self.styles["summary"])
        body: Any = para
        if s.summary_bg:
            body = Table([[para]], colWidths=[self.width])
            commands: list[tuple] = [
                ("BACKGROUND", (0, 0), (-1, -1), colors.HexColor(s.summary_bg)),
                ("TOPPADDING", (0, 0), (-1, -1), 8),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
                ("LEFTPADDING", (0, 0), (-1, -1), 12),
            ]
            if s.summary_border_left:
                commands.append(("LINEBEFORE", (0, 0), (0, -1), 2, colors.HexColor(s.primary)))
            body.setStyle(TableStyle(commands))
        return [self.section_title("summary"), Spacer(1, 6), body, Spacer(1, 10)]

    def skills(self, skills: Any) -> list[Any]:
        label_color = self.style.section_title_color or self.style.primary_dark
        rows: list[Any] = []
        if isinstance(skills, dict):
            for category, skill_list in skills.items():
                listed = ", ".join(str(x) for x in skill_list) if isinstance(skill_list, list) else skill_list
                rows.append(
                    Paragraph(
                        f'<font name="{self.bold_font}" color="{label_color}">{escape(str(category))}:</font> '
                        f"{to_markup(listed)}",
                        self.styles["skills"],
                    )
                )
        elif isinstance(skills, list):
            rows.append(Paragraph(to_markup(", ".join(str(x) for x in skills)), self.styles["skills"]))
        if not rows:
            return []
        return [self.section_title("skills"), Spacer(1, 6), *rows, Spacer(1, 8)]

    def experience(self, experience: list[DocumentExperience]) -> list[Any]:
        flowables: list[Any] = [self.section_title("experience"), Spacer(1, 6)]
        for exp in experience:
            dates = " – ".join(p for p in (exp.start_date, exp.end_date) if p)
            company = exp.company + (f", {exp.location}" if exp.location else "")
            head = [
                self._two_column(
                    Paragraph(to_markup(exp.title), self.styles["exp_title"]),
                    Paragraph(escape(dates), self.styles["dates"]),
                ),
                Paragraph(escape(company), self.styles["company"]),
            ]
            bullets = [
                Paragraph(to_markup(detail), self.styles["bullet"], bulletText="•")
                for detail in exp.details
            ]
            # Keep the job header with its first bullet
            flowables.append(KeepTogether(head + bullets[:1]))
            flowables.extend(bullets[1:])
            flowables.append(Spacer(1, 8))
        return flowables

    def education(self, education: list[EducationEntry]) -> list[Any]:
        flowables: list[Any] = [self.section_title("education"), Spacer(1, 6)]
        for edu in education:
            years = extract_year(edu.start_year)
            if edu.end_year:
                years = f"{years} – {extract_year(edu.end_year)}" if years else extract_year(edu.end_year)
            school = edu.school + (f" • GPA: {edu.grade}" if edu.grade else "")
            flowables.append(
                KeepTogether([
                    self._two_column(
                        Paragraph(escape(edu.degree), self.styles["exp_title"]),
                        Paragraph(escape(years), self.styles["dates"]),
                    ),
                    Paragraph(escape(school), self.styles["school"]),
                    Spacer(1, 6),
                ])
            )
        return flowables

    def _two_column(self, left: Paragraph, right: Paragraph) -> Table:
        table = Table([[left, right]], colWidths=[self.width * 0.7, self.width * 0.3])
        table.setStyle(TableStyle([
            ("VALIGN", (0, 0), (-1, -1), "BOTTOM"),
            ("LEFTPADDING", (0, 0), (-1, -1), 0),
            ("RIGHTPADDING", (0, 0), (-1, -1), 0),
            ("TOPPADDING", (0, 0), (-1, -1), 0),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 1),
        ]))
        return table
