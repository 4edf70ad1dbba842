"""Extract project proposals from the model's stage-one answer."""

from __future__ import annotations

import logging

from app.schemas.project import Proposal
from app.utils.constants import (
    EMPTY_PROPOSALS_MESSAGE,
    LONG_UNPARSEABLE_MESSAGE,
    MISSING_RESOURCE_LEVEL,
    MISSING_SUMMARY,
    PROPOSAL_BLOCK_RE,
    PROPOSAL_NAME_RE,
    PROPOSAL_RESOURCES_RE,
    PROPOSAL_SUMMARY_RE,
    SHORT_UNPARSEABLE_MESSAGE,
)

logger = logging.getLogger("uvicorn.error")


def extract_proposals(raw_text: str) -> list[Proposal]:
    """Parse ``PROPUESTA`` blocks separated by ``---`` into proposals.

    A block without a non-empty ``Nombre:`` line is dropped; missing summary
    or resource level fall back to placeholder text. Order is preserved.
    """
    text = (raw_text or "").strip()
    proposals: list[Proposal] = []
    for match in PROPOSAL_BLOCK_RE.finditer(text):
        block = match.group(1).strip()
        name = _first_field(PROPOSAL_NAME_RE, block)
        if not name:
            logger.info("Dropping proposal block without a name")
            continue
        proposals.append(
            Proposal(
                name=name,
                summary=_first_field(PROPOSAL_SUMMARY_RE, block) or MISSING_SUMMARY,
                resource_level=_first_field(PROPOSAL_RESOURCES_RE, block) or MISSING_RESOURCE_LEVEL,
            )
        )
    return proposals


def _first_field(pattern, block: str) -> str:
    match = pattern.search(block)
    if not match:
        return ""
    return match.group(1).strip().strip("*").strip()


def proposal_diagnostic(raw_text: str, long_threshold: int = 500) -> str:
    """Explain an extraction that produced no proposals.

    Three tiers: empty response, long unparseable response (over
    ``long_threshold`` characters) and short unparseable response, which
    quotes the first 100 characters.
    """
    text = (raw_text or "").strip()
    if len(text) > long_threshold:
        return LONG_UNPARSEABLE_MESSAGE
    if not text:
        return EMPTY_PROPOSALS_MESSAGE
    return SHORT_UNPARSEABLE_MESSAGE.format(preview=text[:100])
