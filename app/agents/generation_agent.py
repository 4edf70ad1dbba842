"""Main-session nodes: project proposals, then the detailed plan."""

import logging

from app.config import settings
from app.documents.proposals import extract_proposals, proposal_diagnostic
from app.documents.sections import split_sections
from app.llm.ollama_client import get_chat_model
from app.models.state import GraphState
from app.prompts.generation import (
    GENERATION_SYSTEM_PROMPT,
    PLAN_USER_PROMPT,
    PROPOSALS_USER_PROMPT,
)
from app.utils.constants import RESOURCE_TIERS
from app.utils.llm_helpers import stream_reply

logger = logging.getLogger("uvicorn.error")


def proposals_node(state: GraphState) -> dict:
    """Ask the main session for three proposals and parse them.

    Populates: messages, raw_response, proposals, diagnostic, user_response.

    Parameters
    ----------
    state : GraphState

    Returns
    -------
    dict
        Partial state update.
    """
    form = state.get("form") or {}
    resources = form.get("resources", "")
    message = PROPOSALS_USER_PROMPT.format(
        grade=form.get("grade", ""),
        topic=form.get("topic", ""),
        resources=resources,
        resource_label=RESOURCE_TIERS.get(resources, "No especificado"),
        time=form.get("time", ""),
    )
    logger.info("Proposals LLM call started")
    raw, new_messages = stream_reply(
        GENERATION_SYSTEM_PROMPT, state.get("messages") or [], message, llm=get_chat_model()
    )
    logger.info("Proposals LLM call finished (%d chars)", len(raw))

    proposals = extract_proposals(raw)
    diagnostic = None
    if not proposals:
        diagnostic = proposal_diagnostic(raw, settings.proposal_long_response_threshold)
        logger.warning("No proposals extracted: %s", diagnostic)
    return {
        "messages": new_messages,
        "raw_response": raw,
        "proposals": [proposal.model_dump() for proposal in proposals],
        "diagnostic": diagnostic,
        "user_response": diagnostic or "",
    }


def plan_node(state: GraphState) -> dict:
    """Ask the main session for the full plan of the selected proposal.

    Populates: messages, raw_response, plan_markdown, sections, user_response.
    """
    proposal_name = state.get("proposal_name", "")
    message = PLAN_USER_PROMPT.format(proposal_name=proposal_name)
    logger.info("Plan LLM call started for %r", proposal_name)
    raw, new_messages = stream_reply(
        GENERATION_SYSTEM_PROMPT, state.get("messages") or [], message, llm=get_chat_model()
    )
    logger.info("Plan LLM call finished (%d chars)", len(raw))

    plan_markdown = raw.strip()
    return {
        "messages": new_messages,
        "raw_response": raw,
        "plan_markdown": plan_markdown,
        "sections": [section.model_dump() for section in split_sections(plan_markdown)],
        "user_response": plan_markdown,
    }
