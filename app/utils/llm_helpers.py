"""Shared LLM invocation helpers."""

from __future__ import annotations

from typing import Callable, Iterable, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from app.llm.ollama_client import get_chat_model


def invoke_llm(prompt: str, llm=None) -> str:
    """Invoke the chat model and return the stripped response content string."""
    if llm is None:
        llm = get_chat_model()
    response = llm.invoke(prompt)
    return getattr(response, "content", str(response)).strip()


def collect_stream(
    fragments: Iterable[object],
    on_fragment: Callable[[str], None] | None = None,
) -> str:
    """Concatenate streamed fragments in arrival order.

    Exhausting the iterator is the end-of-stream signal. Fragments may be
    plain strings or message chunks with a ``content`` attribute; nothing is
    dropped. ``on_fragment`` receives the accumulated text after each chunk.
    """
    accumulated = ""
    for fragment in fragments:
        text = fragment if isinstance(fragment, str) else getattr(fragment, "content", "")
        accumulated += text or ""
        if on_fragment is not None:
            on_fragment(accumulated)
    return accumulated


def stream_reply(
    system_prompt: str,
    history: Sequence[BaseMessage],
    message: str,
    llm=None,
    on_fragment: Callable[[str], None] | None = None,
) -> tuple[str, list[BaseMessage]]:
    """Send one turn on a chat session and stream the reply.

    Returns
    -------
    tuple[str, list[BaseMessage]]
        The full reply and the two messages to append to the session
        history (the user turn and the assistant turn).
    """
    if llm is None:
        llm = get_chat_model()
    user_message = HumanMessage(content=message)
    conversation = [SystemMessage(content=system_prompt), *history, user_message]
    reply = collect_stream(llm.stream(conversation), on_fragment)
    return reply, [user_message, AIMessage(content=reply)]
