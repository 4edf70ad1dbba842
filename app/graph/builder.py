"""LangGraph graph builder: assembles the generation and refinement flow."""

from langgraph.graph import StateGraph, START, END

from app.models.state import GraphState
from app.agents.generation_agent import proposals_node, plan_node
from app.agents.refinement_agent import refine_context_node, refine_node, apply_plan_node
from app.tools.format_response import format_response_node
from app.graph.routing import route_by_stage, route_after_refine


def build_graph():
    """Construct and compile the generation graph.

    Graph topology::

        START → (stage) → proposals ─────────────────────┐
                        → plan ──────────────────────────┤
                        → refine_context ────────────────┤
                        → refine → (kind) → apply_plan ──┤
                                          └──────────────┴→ format_response → END

    Returns
    -------
    langgraph.graph.CompiledGraph
        The compiled, ready-to-invoke graph.
    """
    graph = StateGraph(GraphState)

    # --- Add nodes ---
    graph.add_node("proposals", proposals_node)
    graph.add_node("plan", plan_node)
    graph.add_node("refine_context", refine_context_node)
    graph.add_node("refine", refine_node)
    graph.add_node("apply_plan", apply_plan_node)
    graph.add_node("format_response", format_response_node)

    # --- Entry point chosen by stage ---
    graph.add_conditional_edges(
        START,
        route_by_stage,
        {
            "proposals": "proposals",
            "plan": "plan",
            "refine_context": "refine_context",
            "refine": "refine",
        },
    )

    graph.add_conditional_edges("refine", route_after_refine, {
                                "apply_plan": "apply_plan",
                                "format_response": "format_response",
                                })

    graph.add_edge("proposals", "format_response")
    graph.add_edge("plan", "format_response")
    graph.add_edge("refine_context", "format_response")
    graph.add_edge("apply_plan", "format_response")

    graph.add_edge("format_response", END)

    return graph.compile()
