"""Tests for refinement reconciliation (explanation vs. full replacement)."""

from app.documents.refinement import EXPLAIN, REPLACE, extract_plan_block, reconcile_refinement
from app.utils.constants import REFINEMENT_APPLIED_MESSAGE

CURRENT = "1. A\nx\n2. B\ny"


def test_explanation_leaves_document_untouched():
    outcome = reconcile_refinement("La fase 2 busca que los estudiantes **prueben**.", CURRENT)
    assert outcome.kind == EXPLAIN
    assert outcome.document == CURRENT
    assert outcome.reply.startswith("La fase 2")
    assert outcome.changed_sections == []


def test_markdown_fence_replaces_document():
    response = "Aquí está el plan actualizado:\n```markdown\n1. A\nx\n2. B\nnuevo\n```\n"
    outcome = reconcile_refinement(response, CURRENT)
    assert outcome.kind == REPLACE
    assert outcome.document == "1. A\nx\n2. B\nnuevo"
    assert outcome.reply == REFINEMENT_APPLIED_MESSAGE
    assert outcome.changed_sections == ["2. B"]


def test_empty_or_other_fences_are_explanations():
    assert reconcile_refinement("```markdown\n\n```", CURRENT).kind == EXPLAIN
    assert reconcile_refinement("```md\n1. A\nz\n```", CURRENT).kind == EXPLAIN


def test_extract_plan_block_returns_none_without_fence():
    assert extract_plan_block("sin bloque") is None
    assert extract_plan_block("```markdown\n 1. A \n```") == "1. A"
