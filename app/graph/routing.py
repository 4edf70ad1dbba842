"""Conditional edge functions for the generation graph."""

import logging

from app.documents.refinement import REPLACE
from app.models.state import GraphState

logger = logging.getLogger("uvicorn.error")

_STAGE_NODES = {
    "PROPOSALS": "proposals",
    "PLAN": "plan",
    "REFINE_CONTEXT": "refine_context",
    "REFINE": "refine",
}


def route_by_stage(state: GraphState) -> str:
    """Pick the entry node for this run from ``stage``.

    Returns one of: 'proposals', 'plan', 'refine_context', 'refine'.

    Raises
    ------
    ValueError
        If the stage is unknown.
    """
    stage = (state.get("stage") or "").upper()
    node = _STAGE_NODES.get(stage)
    if node is None:
        raise ValueError(f"Unknown generation stage: {stage!r}")
    return node


def route_after_refine(state: GraphState) -> str:
    """After a refinement turn: apply a replacement plan, or just answer."""
    if state.get("refinement_kind") == REPLACE:
        logger.info("route_after_refine -> apply_plan")
        return "apply_plan"
    return "format_response"
