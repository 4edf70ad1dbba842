"""Tests for the proposal, plan and refinement graph nodes."""

from types import SimpleNamespace

from app.agents import generation_agent, refinement_agent
from app.utils.constants import EMPTY_PROPOSALS_MESSAGE, REFINEMENT_APPLIED_MESSAGE, REFINEMENT_GREETING


class _DummyLLM:
    def __init__(self, text):
        self.text = text
        self.received = None

    def stream(self, messages):
        self.received = messages
        for part in (self.text[: len(self.text) // 2], self.text[len(self.text) // 2:]):
            yield SimpleNamespace(content=part)


FORM = {"grade": "5°", "topic": "Agua", "resources": "B", "time": "4 semanas"}


def test_proposals_node_extracts_proposals(monkeypatch):
    llm = _DummyLLM("PROPUESTA 1:\nNombre: Filtro de Agua\nResumen Clave: Filtrar.\nNivel de Recursos: B\n---")
    monkeypatch.setattr(generation_agent, "get_chat_model", lambda: llm)

    result = generation_agent.proposals_node({"messages": [], "form": FORM})

    assert result["proposals"] == [{"name": "Filtro de Agua", "summary": "Filtrar.", "resource_level": "B"}]
    assert result["diagnostic"] is None
    assert len(result["messages"]) == 2
    sent = llm.received[-1].content
    assert "Agua" in sent and "Materiales Reciclables" in sent


def test_proposals_node_reports_diagnostic_when_empty(monkeypatch):
    monkeypatch.setattr(generation_agent, "get_chat_model", lambda: _DummyLLM(""))

    result = generation_agent.proposals_node({"messages": [], "form": FORM})

    assert result["proposals"] == []
    assert result["diagnostic"] == EMPTY_PROPOSALS_MESSAGE
    assert result["user_response"] == EMPTY_PROPOSALS_MESSAGE


def test_plan_node_trims_and_splits(monkeypatch):
    llm = _DummyLLM("\n1. IDENTIFICACIÓN\nGrado: 5\n2. OBJETIVOS\n- a\n")
    monkeypatch.setattr(generation_agent, "get_chat_model", lambda: llm)

    result = generation_agent.plan_node({"messages": [], "proposal_name": "Filtro de Agua"})

    assert result["plan_markdown"] == "1. IDENTIFICACIÓN\nGrado: 5\n2. OBJETIVOS\n- a"
    assert [s["title"] for s in result["sections"]] == ["1. IDENTIFICACIÓN", "2. OBJETIVOS"]
    assert 'Elijo la propuesta: "Filtro de Agua"' in llm.received[-1].content


def test_refine_context_node_returns_greeting(monkeypatch):
    llm = _DummyLLM("Entendido.")
    monkeypatch.setattr(refinement_agent, "get_chat_model", lambda: llm)

    result = refinement_agent.refine_context_node({"messages": [], "plan_markdown": "1. A\nx"})

    assert result["user_response"] == REFINEMENT_GREETING
    assert "1. A\nx" in llm.received[-1].content


def test_refine_node_classifies_replacement(monkeypatch):
    llm = _DummyLLM("```markdown\n1. A\nnuevo\n```")
    monkeypatch.setattr(refinement_agent, "get_chat_model", lambda: llm)

    result = refinement_agent.refine_node(
        {"messages": [], "user_input": "cambia la sección 1", "plan_markdown": "1. A\nx"}
    )

    assert result["refinement_kind"] == "REPLACE"
    assert result["candidate_plan"] == "1. A\nnuevo"
    assert result["changed_sections"] == ["1. A"]
    assert result["user_response"] == REFINEMENT_APPLIED_MESSAGE


def test_proposals_node_reports_short_unparseable_reply(monkeypatch):
    monkeypatch.setattr(generation_agent, "get_chat_model", lambda: _DummyLLM("No puedo ayudar con eso."))

    result = generation_agent.proposals_node({"messages": [], "form": FORM})

    assert result["proposals"] == []
    assert result["diagnostic"].startswith("No se pudieron extraer propuestas.")
    assert "No puedo ayudar con eso." in result["diagnostic"]
