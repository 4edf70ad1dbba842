"""Tests for stage routing and post-refinement routing."""

import pytest

from app.graph.routing import route_after_refine, route_by_stage


@pytest.mark.parametrize(
    "stage, node",
    [
        ("PROPOSALS", "proposals"),
        ("PLAN", "plan"),
        ("REFINE_CONTEXT", "refine_context"),
        ("refine", "refine"),
    ],
)
def test_route_by_stage(stage, node):
    assert route_by_stage({"stage": stage}) == node


def test_route_by_stage_rejects_unknown_stage():
    with pytest.raises(ValueError, match="Unknown generation stage"):
        route_by_stage({"stage": "QUIZ"})


def test_route_after_refine_replacement_goes_to_apply_plan():
    assert route_after_refine({"refinement_kind": "REPLACE"}) == "apply_plan"


def test_route_after_refine_explanation_goes_to_format_response():
    assert route_after_refine({"refinement_kind": "EXPLAIN"}) == "format_response"
