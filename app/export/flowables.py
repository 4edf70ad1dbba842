"""Convert rendered plan HTML into reportlab flowables."""

from __future__ import annotations

import html

from bs4 import BeautifulSoup, NavigableString, Tag
from reportlab.lib import colors
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import Paragraph, Preformatted

# Inline tags produced by the markdown renderer and their reportlab markup.
_INLINE_TAGS = {
    "strong": ("<b>", "</b>"),
    "em": ("<i>", "</i>"),
    "del": ("<strike>", "</strike>"),
    "code": ('<font face="Courier">', "</font>"),
}
_HEADINGS = {"h1", "h2", "h3", "h4", "h5", "h6"}
_BLOCK_TAGS = _HEADINGS | {"ul", "ol", "pre"}


def build_styles() -> dict[str, ParagraphStyle]:
    styles = getSampleStyleSheet()
    brand = colors.HexColor("#1e40af")
    return {
        "title": ParagraphStyle(
            "Plan_title",
            parent=styles["Title"],
            fontName="Helvetica-Bold",
            fontSize=16,
            leading=20,
            textColor=brand,
            spaceAfter=4,
        ),
        "subtitle": ParagraphStyle(
            "Plan_subtitle",
            parent=styles["Normal"],
            alignment=1,
            fontSize=7.5,
            leading=9.5,
            textColor=colors.HexColor("#374151"),
            spaceAfter=10,
        ),
        "proposal": ParagraphStyle(
            "Plan_proposal",
            parent=styles["Heading1"],
            alignment=1,
            fontName="Helvetica-Bold",
            fontSize=14,
            leading=18,
            spaceAfter=10,
        ),
        "section": ParagraphStyle(
            "Plan_section",
            parent=styles["Heading2"],
            fontName="Helvetica-Bold",
            fontSize=12,
            leading=16,
            textColor=brand,
            spaceBefore=12,
            spaceAfter=6,
        ),
        "heading": ParagraphStyle(
            "Plan_heading",
            parent=styles["Heading3"],
            fontName="Helvetica-Bold",
            fontSize=11,
            leading=14,
            spaceBefore=8,
            spaceAfter=4,
        ),
        "normal": ParagraphStyle(
            "Plan_normal",
            parent=styles["Normal"],
            fontSize=10,
            leading=13,
            spaceAfter=6,
        ),
        "code": ParagraphStyle(
            "Plan_code",
            parent=styles["Code"],
            fontSize=8.5,
            leading=10.5,
            backColor=colors.HexColor("#f3f4f6"),
            spaceAfter=6,
        ),
    }


def _item_style(base: ParagraphStyle, level: int) -> ParagraphStyle:
    indent = 18 * level
    return ParagraphStyle(
        f"Plan_item_{level}",
        parent=base,
        leftIndent=indent,
        bulletIndent=indent - 12,
        spaceAfter=2,
    )


def _inline_markup(node) -> str:
    if isinstance(node, NavigableString):
        return html.escape(str(node), quote=False)
    if node.name == "br":
        return "<br/>"
    inner = "".join(_inline_markup(child) for child in node.children)
    if node.name in _INLINE_TAGS:
        start, end = _INLINE_TAGS[node.name]
        return f"{start}{inner}{end}"
    return inner


def _trim_breaks(text: str) -> str:
    text = text.strip()
    while text.startswith("<br/>"):
        text = text[5:].lstrip()
    while text.endswith("<br/>"):
        text = text[:-5].rstrip()
    return text


class _FlowableBuilder:
    """Walks a parsed section fragment and collects flowables in order."""

    def __init__(self, styles: dict[str, ParagraphStyle]) -> None:
        self.styles = styles
        self.flowables: list = []

    def _text_style(self, level: int) -> ParagraphStyle:
        if level == 0:
            return self.styles["normal"]
        return _item_style(self.styles["normal"], level)

    def _paragraph(self, parts: list[str], style: ParagraphStyle, bullet: str | None = None) -> bool:
        text = _trim_breaks("".join(parts))
        if not text:
            return False
        self.flowables.append(Paragraph(text, style, bulletText=bullet))
        return True

    def blocks(self, nodes, level: int = 0, bullet: str | None = None) -> None:
        # Inline runs between block elements become one paragraph each; the
        # bullet goes on the first paragraph of a list item.
        parts: list[str] = []
        for node in nodes:
            if isinstance(node, Tag) and node.name in _BLOCK_TAGS:
                if self._paragraph(parts, self._text_style(level), bullet):
                    bullet = None
                parts = []
                self._block(node, level)
            else:
                parts.append(_inline_markup(node))
        self._paragraph(parts, self._text_style(level), bullet)

    def _block(self, node: Tag, level: int) -> None:
        if node.name in _HEADINGS:
            self._paragraph([_inline_markup(node)], self.styles["heading"])
        elif node.name == "pre":
            self.flowables.append(Preformatted(node.get_text().strip("\n"), self.styles["code"]))
        else:
            ordered = node.name == "ol"
            number = int(node.get("start", 1))
            for item in node.find_all("li", recursive=False):
                self.blocks(item.children, level + 1, f"{number}." if ordered else "•")
                number += 1


def html_to_flowables(fragment: str, styles: dict[str, ParagraphStyle] | None = None) -> list:
    """Turn a rendered section body into paragraphs, list items and code blocks."""
    soup = BeautifulSoup(fragment or "", "html.parser")
    builder = _FlowableBuilder(styles or build_styles())
    builder.blocks(soup.children)
    return builder.flowables
