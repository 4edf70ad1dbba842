"""Section-level viewing and editing of a plan document."""

from __future__ import annotations

from typing import Sequence

from pydantic import BaseModel

from app.documents.markdown import render_markdown
from app.documents.sections import parse_plan


class EditableSection(BaseModel):
    title: str
    text: str


class RenderedSection(BaseModel):
    title: str
    html: str | None = None
    text: str | None = None
    expanded: bool = False


def reassemble(titles: Sequence[str], bodies: Sequence[str]) -> str:
    """Rebuild a plan document from fixed titles and edited bodies.

    Each section serializes as ``title + "\\n" + body.strip()``; sections are
    joined with a single newline in their original order. A section without
    a title contributes only its body.

    Raises
    ------
    ValueError
        If the number of bodies does not match the number of titles.
    """
    if len(titles) != len(bodies):
        raise ValueError(f"Expected {len(titles)} section bodies, got {len(bodies)}.")
    parts = []
    for title, body in zip(titles, bodies):
        trimmed = (body or "").strip()
        parts.append(f"{title}\n{trimmed}" if title else trimmed)
    return "\n".join(parts)


class DocumentEditor:
    """Holds the sections currently on screen and their collapse state."""

    def __init__(self, markdown: str, editable: bool = False) -> None:
        self.plan = parse_plan(markdown)
        self.editable = editable
        # Only the first section starts expanded.
        self._expanded = [index == 0 for index in range(len(self.plan.sections))]

    @property
    def titles(self) -> list[str]:
        return self.plan.titles

    def toggle(self, index: int) -> bool:
        self._expanded[index] = not self._expanded[index]
        return self._expanded[index]

    def is_expanded(self, index: int) -> bool:
        return self._expanded[index]

    def render_editable(self) -> list[EditableSection]:
        return [
            EditableSection(title=section.title, text=section.body.strip())
            for section in self.plan.sections
        ]

    def render(self) -> list[RenderedSection]:
        rendered = []
        for index, section in enumerate(self.plan.sections):
            if self.editable:
                item = RenderedSection(title=section.title, text=section.body.strip())
            else:
                item = RenderedSection(title=section.title, html=render_markdown(section.body))
            item.expanded = self.is_expanded(index)
            rendered.append(item)
        return rendered

    def reassemble(self, bodies: Sequence[str]) -> str:
        """Rebuild the document from edited bodies; any preamble is kept as is."""
        document = reassemble(self.titles, bodies)
        if self.plan.preamble:
            return f"{self.plan.preamble}\n{document}"
        return document
