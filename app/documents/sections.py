"""Split a numbered plan document into titled sections and back."""

from __future__ import annotations

from typing import Iterable

from app.schemas.project import PlanDocument, Section
from app.utils.constants import FENCED_BLOCK_RE, SECTION_SPLIT_RE, SECTION_TITLE_RE


def unwrap_plan_fence(document: str) -> str:
    """Return the plan text without the code fence a model may wrap it in.

    Only a fenced block whose content starts with ``"1."`` is unwrapped;
    anything else is returned trimmed and otherwise untouched.
    """
    cleaned = (document or "").strip()
    match = FENCED_BLOCK_RE.search(cleaned)
    if match and match.group(2) and match.group(2).strip().startswith("1."):
        return match.group(2).strip()
    return cleaned


def parse_plan(document: str) -> PlanDocument:
    """Split a plan into numbered sections, keeping any leading text apart.

    Parameters
    ----------
    document : str
        Plan markdown as produced by the model or stored in history.

    Returns
    -------
    PlanDocument
        Sections in document order. When no numbered heading is found the
        whole text becomes a single section with an empty title.
    """
    cleaned = unwrap_plan_fence(document)
    sections: list[Section] = []
    preamble = ""
    for chunk in SECTION_SPLIT_RE.split(cleaned):
        if not chunk.strip():
            continue
        title, _, body = chunk.partition("\n")
        if not SECTION_TITLE_RE.match(title.strip()):
            # Only the first chunk can miss the heading pattern.
            preamble = chunk.strip()
            continue
        sections.append(Section(title=title.strip(), body=body))
    if not sections:
        return PlanDocument(sections=[Section(title="", body=cleaned)])
    return PlanDocument(sections=sections, preamble=preamble)


def split_sections(document: str) -> list[Section]:
    return list(parse_plan(document).sections)


def serialize_sections(sections: Iterable[Section]) -> str:
    """Canonical serialization: title line, newline, body; sections joined by newline."""
    parts = []
    for section in sections:
        parts.append(f"{section.title}\n{section.body}" if section.title else section.body)
    return "\n".join(parts)


def serialize_plan(plan: PlanDocument) -> str:
    body = serialize_sections(plan.sections)
    if plan.preamble:
        return f"{plan.preamble}\n{body}"
    return body


def changed_section_titles(old_document: str, new_document: str) -> list[str]:
    """List titles whose section text differs between two plan versions.

    Sections are matched by title; titles present in only one version count
    as changed.
    """
    old_sections = {s.title: s.body.strip() for s in split_sections(old_document)}
    new_sections = {s.title: s.body.strip() for s in split_sections(new_document)}
    changed = [
        title for title, body in new_sections.items() if old_sections.get(title) != body
    ]
    changed.extend(title for title in old_sections if title not in new_sections)
    return changed
