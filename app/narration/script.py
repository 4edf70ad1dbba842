"""Podcast script generation and sentence splitting."""

from __future__ import annotations

import logging

from app.prompts.podcast import PODCAST_SCRIPT_PROMPT
from app.utils.constants import SENTENCE_RE
from app.utils.llm_helpers import invoke_llm

logger = logging.getLogger("uvicorn.error")


def strip_emphasis(text: str) -> str:
    """Remove every ``*`` so the speech engine never reads markers aloud."""
    return text.replace("*", "")


def split_sentences(script: str) -> list[str]:
    """Split a script into narration units.

    A unit is a run of text ending in ``.``, ``!`` or ``?``; trailing text
    without terminal punctuation is kept as the last unit. When nothing
    matches the whole script is a single unit.
    """
    sentences = [match.group(0) for match in SENTENCE_RE.finditer(script) if match.group(0).strip()]
    return sentences or [script]


def generate_podcast_script(plan_markdown: str, llm=None) -> str:
    """Turn a plan into a short spoken-style script.

    One-shot completion, not part of any chat session. Emphasis markers are
    stripped once here, so the narrated text and the downloadable script
    are the same.

    Parameters
    ----------
    plan_markdown : str
        Canonical plan document.
    llm : optional
        Chat model override, mainly for tests.

    Returns
    -------
    str
        Script ready for the narration player.
    """
    logger.info("Podcast script LLM call started")
    raw = invoke_llm(PODCAST_SCRIPT_PROMPT.format(plan_markdown=plan_markdown), llm=llm)
    logger.info("Podcast script LLM call finished (%d chars)", len(raw))
    return strip_emphasis(raw)
