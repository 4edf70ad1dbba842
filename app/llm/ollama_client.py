"""Factory for the Ollama-backed chat model."""

from langchain_ollama import ChatOllama

from app.config import settings


def get_chat_model():
    """Return a ChatOllama instance configured from settings.

    Returns
    -------
    langchain_ollama.ChatOllama
        A chat model connected to the local Ollama server. Both the main
        generation session and the refinement session use it; each keeps
        its own message history.
    """
    return ChatOllama(
        base_url=settings.ollama_base_url,
        model=settings.ollama_model,
        request_timeout=settings.ollama_timeout_seconds,
    )
