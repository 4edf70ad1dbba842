"""Refinement-session nodes: prime the session, run a turn, apply replacements."""

import logging

from app.documents.refinement import reconcile_refinement
from app.documents.sections import split_sections
from app.llm.ollama_client import get_chat_model
from app.models.state import GraphState
from app.prompts.refinement import REFINEMENT_CONTEXT_PROMPT, REFINEMENT_SYSTEM_PROMPT
from app.utils.constants import REFINEMENT_GREETING
from app.utils.llm_helpers import stream_reply

logger = logging.getLogger("uvicorn.error")


def refine_context_node(state: GraphState) -> dict:
    """Send the current plan to a fresh refinement session.

    The model's acknowledgement is kept in the history but not shown; the
    teacher sees the fixed greeting instead.
    """
    message = REFINEMENT_CONTEXT_PROMPT.format(plan_markdown=state.get("plan_markdown", ""))
    logger.info("Refinement context LLM call started")
    _ack, new_messages = stream_reply(
        REFINEMENT_SYSTEM_PROMPT, state.get("messages") or [], message, llm=get_chat_model()
    )
    logger.info("Refinement context LLM call finished")
    return {"messages": new_messages, "user_response": REFINEMENT_GREETING}


def refine_node(state: GraphState) -> dict:
    """Run one refinement turn and classify the reply.

    Populates: messages, raw_response, refinement_kind, candidate_plan,
    changed_sections, user_response.
    """
    logger.info("Refinement LLM call started")
    raw, new_messages = stream_reply(
        REFINEMENT_SYSTEM_PROMPT,
        state.get("messages") or [],
        state.get("user_input", ""),
        llm=get_chat_model(),
    )
    logger.info("Refinement LLM call finished (%d chars)", len(raw))

    outcome = reconcile_refinement(raw, state.get("plan_markdown", ""))
    return {
        "messages": new_messages,
        "raw_response": raw,
        "refinement_kind": outcome.kind,
        "candidate_plan": outcome.document,
        "changed_sections": outcome.changed_sections,
        "user_response": outcome.reply,
    }


def apply_plan_node(state: GraphState) -> dict:
    """Make the candidate plan canonical and re-split it for display."""
    new_plan = state.get("candidate_plan", "")
    return {
        "plan_markdown": new_plan,
        "sections": [section.model_dump() for section in split_sections(new_plan)],
    }
