"""Integration-style tests for graph builder routing flow."""

from langchain_core.messages import AIMessage, HumanMessage

from app.graph import builder


def _base_state(stage):
    return {
        "messages": [],
        "stage": stage,
        "form": {},
        "proposal_name": "",
        "user_input": "",
        "plan_markdown": "1. A\nx",
        "user_response": "",
        "final_response": "",
    }


def test_build_graph_proposals_path_reaches_format_response(monkeypatch):
    monkeypatch.setattr(
        builder,
        "proposals_node",
        lambda _state: {
            "messages": [HumanMessage(content="datos"), AIMessage(content="PROPUESTA 1: ...")],
            "proposals": [{"name": "Huerta", "summary": "s", "resource_level": "B"}],
            "user_response": "",
            "raw_response": "PROPUESTA 1: ...",
        },
    )

    graph = builder.build_graph()
    result = graph.invoke(_base_state("PROPOSALS"))
    assert result["proposals"][0]["name"] == "Huerta"
    assert len(result["messages"]) == 2
    assert result["final_response"] == "PROPUESTA 1: ..."


def test_build_graph_plan_path(monkeypatch):
    monkeypatch.setattr(builder, "plan_node", lambda _state: {"plan_markdown": "1. A\ny", "user_response": "1. A\ny"})

    graph = builder.build_graph()
    result = graph.invoke(_base_state("PLAN"))
    assert result["plan_markdown"] == "1. A\ny"
    assert result["final_response"] == "1. A\ny"


def test_build_graph_refine_replacement_applies_plan(monkeypatch):
    monkeypatch.setattr(
        builder,
        "refine_node",
        lambda _state: {
            "refinement_kind": "REPLACE",
            "candidate_plan": "1. A\nnuevo\n2. B\nz",
            "user_response": "listo",
        },
    )

    graph = builder.build_graph()
    result = graph.invoke(_base_state("REFINE"))
    assert result["plan_markdown"] == "1. A\nnuevo\n2. B\nz"
    assert [s["title"] for s in result["sections"]] == ["1. A", "2. B"]
    assert result["final_response"] == "listo"


def test_build_graph_refine_explanation_keeps_plan(monkeypatch):
    monkeypatch.setattr(
        builder,
        "refine_node",
        lambda _state: {"refinement_kind": "EXPLAIN", "candidate_plan": "1. A\nx", "user_response": "explicación"},
    )
    monkeypatch.setattr(builder, "apply_plan_node", lambda _state: {"plan_markdown": "should not run"})

    graph = builder.build_graph()
    result = graph.invoke(_base_state("REFINE"))
    assert result["plan_markdown"] == "1. A\nx"
    assert result["final_response"] == "explicación"
