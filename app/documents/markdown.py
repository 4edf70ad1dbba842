"""Restricted markdown to HTML rendering for plan sections and chat replies."""

from __future__ import annotations

import html
import re

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

# Raw HTML, links, images, quotes, rules, setext headings and indented code
# are not part of the plan dialect; their markers stay literal text.
_DISABLED_RULES = [
    "blockquote",
    "code",
    "hr",
    "html_block",
    "lheading",
    "reference",
    "autolink",
    "entity",
    "html_inline",
    "image",
    "link",
]

md = (
    MarkdownIt("commonmark", {"html": False, "breaks": True})
    .enable("strikethrough")
    .disable(_DISABLED_RULES)
)

_INLINE_TAGS = {"strong": "strong", "em": "em", "s": "del"}
_BREAKS_RE = re.compile(r"(?:<br>\s*){3,}")


def parse_markdown(markdown_text: str) -> SyntaxTreeNode:
    """Parse plan markdown into a markdown-it syntax tree."""
    return SyntaxTreeNode(md.parse(str(markdown_text or "")))


def render_markdown(markdown_text: str) -> str:
    """Render the plan markdown dialect to an HTML fragment.

    Supports headings, bold, italic, strikethrough, fenced and inline code,
    bullet and numbered lists. Anything it does not recognise is returned as
    escaped literal text.

    Parameters
    ----------
    markdown_text : str
        Model-generated markdown.

    Returns
    -------
    str
        HTML fragment without paragraph wrappers: text lines are joined with
        ``<br>``, paragraphs with ``<br><br>`` and block elements stand on
        their own line.
    """
    if not markdown_text:
        return ""
    rendered = _render_blocks(parse_markdown(markdown_text).children)
    return _BREAKS_RE.sub("<br><br>", rendered)


def _render_blocks(nodes) -> str:
    out: list[str] = []
    previous: str | None = None
    for node in nodes:
        kind = "text" if node.type == "paragraph" else "block"
        if previous is not None:
            out.append("<br><br>" if previous == kind == "text" else "\n")
        out.append(_render_block(node))
        previous = kind
    return "".join(out)


def _render_block(node: SyntaxTreeNode) -> str:
    if node.type == "paragraph":
        return "".join(_render_inline(child) for child in node.children)
    if node.type == "heading":
        inner = "".join(_render_inline(child) for child in node.children)
        return f"<{node.tag}>{inner}</{node.tag}>"
    if node.type == "fence":
        lang = node.info.strip().split(" ")[0] if node.info else ""
        code = html.escape(node.content.rstrip("\n"))
        css = f' class="language-{html.escape(lang)}"' if lang else ""
        return f"<pre><code{css}>{code}</code></pre>"
    if node.type in ("bullet_list", "ordered_list"):
        tag = "ol" if node.type == "ordered_list" else "ul"
        start = node.attrs.get("start")
        opening = f'<ol start="{start}">' if tag == "ol" and start not in (None, 1) else f"<{tag}>"
        items = "\n".join(f"<li>{_render_blocks(item.children)}</li>" for item in node.children)
        return f"{opening}\n{items}\n</{tag}>"
    return html.escape(node.content or "", quote=False)


def _render_inline(node: SyntaxTreeNode) -> str:
    if node.type == "text":
        return html.escape(node.content, quote=False)
    if node.type in ("softbreak", "hardbreak"):
        return "<br>"
    if node.type == "code_inline":
        return f"<code>{html.escape(node.content)}</code>"
    inner = "".join(_render_inline(child) for child in node.children)
    tag = _INLINE_TAGS.get(node.type)
    return f"<{tag}>{inner}</{tag}>" if tag else inner
