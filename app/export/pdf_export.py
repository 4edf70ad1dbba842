"""PDF export of a printable plan document with reportlab."""

from __future__ import annotations

import html
import io
import logging
from typing import Callable
from urllib.parse import quote

import requests
from PIL import Image as PILImage
from reportlab.lib.pagesizes import letter
from reportlab.lib.units import inch
from reportlab.lib.utils import ImageReader
from reportlab.platypus import (
    Image,
    KeepTogether,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from app.config import settings
from app.export.flowables import build_styles, html_to_flowables
from app.export.printable import (
    SCHOOL_FIELD_LABEL,
    TEACHER_FIELD_LABEL,
    ExportOptions,
    PrintableDocument,
    substitute_field,
)

logger = logging.getLogger("uvicorn.error")

LOGO_WIDTH = 0.9 * inch


def fetch_image_via_proxy(url: str, timeout: int | None = None) -> bytes:
    """Download an image through the configured CORS-style proxy.

    Raises
    ------
    requests.RequestException
        On network failure or a non-2xx proxy response.
    """
    proxy_url = settings.export_image_proxy_url.format(url=quote(url, safe=""))
    response = requests.get(proxy_url, timeout=timeout or settings.export_image_timeout_seconds)
    response.raise_for_status()
    return response.content


def _encode_footer(data: bytes, quality: float) -> io.BytesIO:
    image = PILImage.open(io.BytesIO(data)).convert("RGB")
    out = io.BytesIO()
    image.save(out, format="JPEG", quality=max(1, min(95, int(quality * 100))))
    out.seek(0)
    return out


def _footer_flowable(data: bytes, options: ExportOptions, max_width: float) -> Image:
    encoded = _encode_footer(data, options.image_quality)
    width, height = ImageReader(encoded).getSize()
    encoded.seek(0)
    scale = min(1.0, max_width / width) if width else 1.0
    return Image(encoded, width=width * scale, height=height * scale)


def _logo_flowable(data: bytes) -> Image:
    reader = ImageReader(io.BytesIO(data))
    width, height = reader.getSize()
    scale = LOGO_WIDTH / width if width else 1.0
    return Image(io.BytesIO(data), width=width * scale, height=height * scale)


def _header(document: PrintableDocument, styles: dict, page_width: float, logo: bytes | None) -> list:
    title = Paragraph(document.header_title, styles["title"])
    subtitle = Paragraph(document.header_subtitle, styles["subtitle"])
    if logo:
        try:
            crest = _logo_flowable(logo)
        except OSError as exc:
            logger.error("Header logo is not a readable image, skipping it: %s", exc)
        else:
            table = Table([[crest, [title, subtitle]]], colWidths=[LOGO_WIDTH + 12, page_width - LOGO_WIDTH - 12])
            table.setStyle(TableStyle([
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ("LEFTPADDING", (0, 0), (-1, -1), 0),
                ("RIGHTPADDING", (0, 0), (-1, -1), 6),
            ]))
            return [table]
    return [title, subtitle]


def build_pdf(
    document: PrintableDocument,
    options: ExportOptions,
    footer_image: bytes | None = None,
    header_logo: bytes | None = None,
) -> bytes:
    """Lay out the document on letter pages and return the PDF bytes.

    Images that cannot be decoded are logged and left out.
    """
    top, right, bottom, left = options.margins
    buffer = io.BytesIO()
    pdf = SimpleDocTemplate(
        buffer,
        pagesize=letter,
        topMargin=top * inch,
        rightMargin=right * inch,
        bottomMargin=bottom * inch,
        leftMargin=left * inch,
        title=f"{document.proposal_name} - Plan de Proyecto",
    )
    styles = build_styles()

    story = _header(document, styles, pdf.width, header_logo)
    story += [
        Spacer(1, 6),
        Paragraph(html.escape(document.proposal_name, quote=False), styles["proposal"]),
    ]
    for section in document.sections:
        flowables = []
        if section.title:
            flowables.append(Paragraph(html.escape(section.title, quote=False), styles["section"]))
        flowables.extend(html_to_flowables(section.html, styles))
        if not flowables:
            continue
        if options.page_break_mode == "avoid-all":
            story.append(KeepTogether(flowables))
        else:
            story.extend(flowables)

    if footer_image:
        try:
            footer = _footer_flowable(footer_image, options, pdf.width)
        except OSError as exc:
            logger.error("Footer image is not a readable image, skipping it: %s", exc)
        else:
            story.extend([Spacer(1, 12), footer])

    pdf.build(story)
    return buffer.getvalue()


def _fetch_optional(fetch_image: Callable[[str], bytes], src: str | None, what: str) -> bytes | None:
    if not src:
        return None
    try:
        return fetch_image(src)
    except requests.RequestException as exc:
        logger.error("Could not fetch %s for PDF generation: %s", what, exc)
        return None


def export_pdf(
    document: PrintableDocument,
    options: ExportOptions,
    teacher_name: str,
    school_name: str,
    fetch_image: Callable[[str], bytes] = fetch_image_via_proxy,
) -> bytes:
    """Fill in teacher and school, render the PDF, then put the fields back.

    The two labelled fields are restored on every exit path, including a
    failing build. A footer image that cannot be fetched is logged and left
    out of the PDF, and so is an unreachable header crest; the document keeps
    its original image references.

    Parameters
    ----------
    document : PrintableDocument
        Document shown on screen; mutated only for the duration of the call.
    options : ExportOptions
        Margins, file name, footer quality and page-break mode.
    teacher_name, school_name : str
        Values for the ``Docente(s) Responsable(s)`` and
        ``Institución Educativa`` lines.
    fetch_image : callable, optional
        Image downloader, defaults to the proxy fetch.

    Returns
    -------
    bytes
        The PDF file.
    """
    original_html = [section.html for section in document.sections]
    try:
        for section in document.sections:
            section.html = substitute_field(section.html, TEACHER_FIELD_LABEL, teacher_name)
            section.html = substitute_field(section.html, SCHOOL_FIELD_LABEL, school_name)

        logo = _fetch_optional(fetch_image, document.header_logo_src, "header logo")
        footer = _fetch_optional(fetch_image, document.footer_image_src, "footer image")

        logger.info("PDF export started (%s)", options.filename)
        pdf_bytes = build_pdf(document, options, footer, header_logo=logo)
        logger.info("PDF export finished (%d bytes)", len(pdf_bytes))
        return pdf_bytes
    finally:
        for section, original in zip(document.sections, original_html):
            section.html = original
