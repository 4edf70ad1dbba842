"""Printable plan document and export options."""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field

from app.config import settings
from app.documents.markdown import render_markdown
from app.documents.sections import parse_plan

HEADER_TITLE = "MENTOR STEM+"
HEADER_SUBTITLE = (
    "UN PROYECTO DE LA UNIVERSIDAD DE CÓRDOBA EN EL MARCO DEL PROYECTO DE EXTENSIÓN: "
    "ESTRATEGIAS METODOLÓGICAS CON ENFOQUE STEM+ CON BASE EN LINEAMIENTOS CURRICULARES "
    "Y EXPERIENCIAS INVESTIGATIVAS PREVIAS PARA EL DESARROLLO DE COMPETENCIAS DEL SIGLO XXI "
    "EN INSTITUCIONES EDUCATIVAS RURALES DE CÓRDOBA"
)

TEACHER_FIELD_LABEL = "Docente(s) Responsable(s)"
SCHOOL_FIELD_LABEL = "Institución Educativa"


def safe_filename(proposal_name: str) -> str:
    """``"Huerta Solar 2.0!"`` -> ``"huerta-solar-20-plan-proyecto.pdf"``."""
    slug = re.sub(r"[^a-z0-9\s-]", "", proposal_name, flags=re.IGNORECASE)
    slug = re.sub(r"\s+", "-", slug).lower()
    return f"{slug}-plan-proyecto.pdf"


@dataclass
class PrintableSection:
    title: str
    html: str


@dataclass
class PrintableDocument:
    """Everything that goes on paper: header with crest, proposal title, sections, footer."""

    proposal_name: str
    sections: list[PrintableSection] = field(default_factory=list)
    header_title: str = HEADER_TITLE
    header_subtitle: str = HEADER_SUBTITLE
    header_logo_src: str | None = None
    footer_image_src: str | None = None

    @classmethod
    def from_plan(cls, plan_markdown: str, proposal_name: str) -> "PrintableDocument":
        plan = parse_plan(plan_markdown)
        sections = [
            PrintableSection(title=section.title, html=render_markdown(section.body))
            for section in plan.sections
        ]
        if plan.preamble:
            # Text before the first numbered heading prints as an untitled block.
            sections.insert(0, PrintableSection(title="", html=render_markdown(plan.preamble)))
        return cls(
            proposal_name=proposal_name,
            sections=sections,
            header_logo_src=settings.export_header_logo_url,
            footer_image_src=settings.export_footer_image_url,
        )


@dataclass
class ExportOptions:
    """Page margins in inches (top, right, bottom, left), file name, footer
    JPEG quality (0-1) and page-break mode (``avoid-all`` keeps each section
    on one page when it fits, ``auto`` lets sections flow)."""

    margins: tuple[float, float, float, float] = (0.25, 0.5, 0.75, 0.5)
    filename: str = "plan-proyecto.pdf"
    image_quality: float = 0.98
    page_break_mode: str = "avoid-all"

    @classmethod
    def for_proposal(cls, proposal_name: str, **overrides) -> "ExportOptions":
        return cls(filename=safe_filename(proposal_name), **overrides)


def substitute_field(fragment: str, label: str, value: str) -> str:
    """Replace the content of the line whose bold label contains ``label``.

    The label itself is normalised to ``<strong>label:</strong>`` and the
    rest of the line, up to the end of its list item or line break, becomes
    the escaped ``value``.
    """
    pattern = re.compile(
        r"<strong>[^<]*" + re.escape(label) + r"[^<]*</strong>.*?(?=</li>|<br>|<ul>|<ol>|\n|$)"
    )
    replacement = f"<strong>{label}:</strong> {html.escape(value)}"
    return pattern.sub(lambda _m: replacement, fragment)
