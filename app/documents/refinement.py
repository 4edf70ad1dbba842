"""Classify a refinement turn and apply full-document replacements."""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import BaseModel, Field

from app.documents.sections import changed_section_titles
from app.utils.constants import PLAN_FENCE_RE, REFINEMENT_APPLIED_MESSAGE

logger = logging.getLogger("uvicorn.error")

EXPLAIN = "EXPLAIN"
REPLACE = "REPLACE"


class RefinementOutcome(BaseModel):
    kind: Literal["EXPLAIN", "REPLACE"]
    document: str
    reply: str
    changed_sections: list[str] = Field(default_factory=list)


def extract_plan_block(response: str) -> str | None:
    """Return the trimmed content of a ```markdown fence, or None."""
    match = PLAN_FENCE_RE.search(response or "")
    if not match:
        return None
    content = match.group(1).strip()
    return content or None


def reconcile_refinement(response: str, current_document: str) -> RefinementOutcome:
    """Decide whether a refinement reply explains or replaces the plan.

    A reply containing a non-empty ```markdown fence replaces the canonical
    document wholesale (ACTION B). Anything else is an explanation shown as
    chat text and leaves the document untouched (ACTION A).

    The model is asked to reproduce unchanged sections verbatim. That is an
    assumption on the model, not something checked here: the sections that
    differ are reported and logged, never rejected.

    Parameters
    ----------
    response : str
        Full accumulated text of the streamed refinement reply.
    current_document : str
        Canonical plan before this turn.

    Returns
    -------
    RefinementOutcome
    """
    new_document = extract_plan_block(response)
    if new_document is None:
        return RefinementOutcome(kind=EXPLAIN, document=current_document, reply=response or "")

    changed = changed_section_titles(current_document, new_document)
    logger.info("Refinement replaced plan; sections changed: %s", changed)
    if len(changed) > 1:
        logger.warning("Refinement touched %d sections", len(changed))
    return RefinementOutcome(
        kind=REPLACE,
        document=new_document,
        reply=REFINEMENT_APPLIED_MESSAGE,
        changed_sections=changed,
    )
