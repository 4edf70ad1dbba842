"""Tests for printable documents, field substitution and PDF export."""

import io
from types import SimpleNamespace

import pytest
import requests
from PIL import Image as PILImage
from reportlab.platypus import Paragraph, Preformatted

from app.documents.markdown import render_markdown
from app.export import pdf_export
from app.export.flowables import html_to_flowables
from app.export.printable import ExportOptions, PrintableDocument, safe_filename, substitute_field

PLAN = (
    "1. IDENTIFICACIÓN DEL PROYECTO STEM+\n"
    "- **Docente(s) Responsable(s):** A completar por el docente\n"
    "- **Institución Educativa:** A completar por el docente\n"
    "2. FASES\n"
    "Texto **clave** del plan."
)


def _offline_fetch(_url):
    raise requests.ConnectionError("offline")


def test_safe_filename():
    assert safe_filename("Huerta Solar 2.0!") == "huerta-solar-20-plan-proyecto.pdf"
    assert ExportOptions.for_proposal("Puente  de Palitos").filename == "puente-de-palitos-plan-proyecto.pdf"


def test_substitute_field_replaces_line_content_and_escapes():
    fragment = "<ul>\n<li><strong>Docente(s) Responsable(s):</strong> A completar por el docente</li>\n</ul>"
    result = substitute_field(fragment, "Docente(s) Responsable(s)", "Ana <Pérez>")
    assert "<li><strong>Docente(s) Responsable(s):</strong> Ana &lt;Pérez&gt;</li>" in result
    assert "A completar" not in result


def test_printable_document_from_plan():
    document = PrintableDocument.from_plan(PLAN, "Huerta Solar")
    assert [s.title for s in document.sections] == ["1. IDENTIFICACIÓN DEL PROYECTO STEM+", "2. FASES"]
    assert document.sections[1].html == "Texto <strong>clave</strong> del plan."
    assert document.footer_image_src


def test_html_to_flowables_maps_blocks():
    fragment = render_markdown("Texto **b**\n- uno\n- dos\n```\ncode\n```")
    flowables = html_to_flowables(fragment)
    assert [type(f) for f in flowables] == [Paragraph, Paragraph, Paragraph, Preformatted]


def test_export_pdf_without_footer_image_still_builds_and_restores():
    document = PrintableDocument.from_plan(PLAN, "Huerta Solar")
    original = [s.html for s in document.sections]

    pdf = pdf_export.export_pdf(document, ExportOptions(), "Ana", "IE Rural", fetch_image=_offline_fetch)

    assert pdf.startswith(b"%PDF")
    assert [s.html for s in document.sections] == original
    assert document.footer_image_src


def test_export_pdf_restores_fields_when_build_fails(monkeypatch):
    document = PrintableDocument.from_plan(PLAN, "Huerta Solar")
    original = [s.html for s in document.sections]
    seen = {}

    def _failing_build(doc, _options, _footer, header_logo=None):
        seen["html"] = doc.sections[0].html
        raise RuntimeError("layout error")

    monkeypatch.setattr(pdf_export, "build_pdf", _failing_build)

    with pytest.raises(RuntimeError):
        pdf_export.export_pdf(document, ExportOptions(), "Ana", "IE Rural", fetch_image=_offline_fetch)

    assert "Ana" in seen["html"] and "IE Rural" in seen["html"]
    assert [s.html for s in document.sections] == original


def test_build_pdf_with_flowing_sections():
    document = PrintableDocument.from_plan(PLAN, "Huerta Solar")
    pdf = pdf_export.build_pdf(document, ExportOptions(page_break_mode="auto"))
    assert pdf.startswith(b"%PDF")


def test_fetch_image_via_proxy_encodes_url(monkeypatch):
    captured = {}

    def _fake_get(url, timeout):
        captured["url"] = url
        return SimpleNamespace(content=b"img", raise_for_status=lambda: None)

    monkeypatch.setattr(pdf_export.requests, "get", _fake_get)
    assert pdf_export.fetch_image_via_proxy("https://example.com/a.png") == b"img"
    assert captured["url"] == "https://api.allorigins.win/raw?url=https%3A%2F%2Fexample.com%2Fa.png"


def test_html_to_flowables_numbers_ordered_items_from_start():
    flowables = html_to_flowables(render_markdown("3. uno\n4. dos\n   - sub"))
    assert [f.bulletText for f in flowables] == ["3.", "4.", "•"]


def test_printable_document_keeps_text_before_first_section():
    document = PrintableDocument.from_plan(f"Plan generado para 5°:\n{PLAN}", "Huerta Solar")
    assert document.sections[0].title == ""
    assert document.sections[0].html == "Plan generado para 5°:"
    assert len(document.sections) == 3


def _png_bytes():
    buffer = io.BytesIO()
    PILImage.new("RGB", (40, 20), "blue").save(buffer, format="PNG")
    return buffer.getvalue()


def test_export_fetches_header_crest_and_footer():
    document = PrintableDocument.from_plan(PLAN, "Huerta Solar")
    fetched = []

    def _fetch(url):
        fetched.append(url)
        return _png_bytes()

    pdf = pdf_export.export_pdf(document, ExportOptions(), "Ana", "IE Rural", fetch_image=_fetch)

    assert pdf.startswith(b"%PDF")
    assert fetched == [document.header_logo_src, document.footer_image_src]
    assert "Escudo_Universidad" in document.header_logo_src


def test_unreadable_header_crest_is_skipped():
    document = PrintableDocument.from_plan(PLAN, "Huerta Solar")
    pdf = pdf_export.build_pdf(document, ExportOptions(), header_logo=b"not an image")
    assert pdf.startswith(b"%PDF")
