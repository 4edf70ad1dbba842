"""Sentence-by-sentence narration player and voice selection."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Literal, Protocol, Sequence

from app.config import settings
from app.narration.script import split_sentences

logger = logging.getLogger("uvicorn.error")

NarrationState = Literal["idle", "playing", "paused"]


@dataclass(frozen=True)
class Voice:
    name: str
    lang: str
    default: bool = False
    # Engine-specific handle, e.g. the gTTS top-level domain for an accent.
    identifier: str = ""


class NarrationEngine(Protocol):
    def list_voices(self) -> list[Voice]: ...

    def speak(self, text: str, *, voice: Voice | None, lang: str, index: int) -> str | None:
        """Narrate one sentence, blocking until done; raise on failure."""
        ...


def voice_rank(voice: Voice) -> int:
    name = voice.name.lower()
    if voice.lang == "es-US" and "google" in name:
        return 5
    if "google" in name:
        return 4
    if voice.default:
        return 3
    if voice.lang == "es-ES":
        return 2
    if voice.lang == "es-CO":
        return 1
    return 0


def select_voice(voices: Sequence[Voice]) -> Voice | None:
    """Pick the best Spanish voice, or None when there is none.

    Ties keep the engine's listing order.
    """
    spanish = [voice for voice in voices if voice.lang.startswith("es-")]
    if not spanish:
        return None
    return sorted(spanish, key=voice_rank, reverse=True)[0]


class NarrationPlayer:
    """Plays a script one sentence at a time on a narration engine.

    Only one utterance is in flight; the cursor advances when the engine
    returns. ``pause`` takes effect at the next sentence boundary and keeps
    the cursor. ``stop``, reaching the end, or an engine error reset the
    cursor to zero and leave the player idle.

    Must be driven from a running event loop; synthesis runs in a worker
    thread.
    """

    def __init__(
        self,
        script: str,
        engine: NarrationEngine,
        voice: Voice | None = None,
        *,
        fallback_lang: str | None = None,
        pause_seconds: float | None = None,
    ) -> None:
        self.script = script
        self.sentences = split_sentences(script)
        self.engine = engine
        self.voice = voice
        self.lang = voice.lang if voice else (fallback_lang or settings.narration_fallback_lang)
        self.pause_seconds = settings.narration_pause_seconds if pause_seconds is None else pause_seconds
        self.index = 0
        self.state: NarrationState = "idle"
        self.current_sentence = ""
        self.clips: dict[int, str] = {}
        self.last_error: str | None = None
        self._resume = asyncio.Event()
        self._task: asyncio.Task | None = None
        self._run_id = 0
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def progress(self) -> float:
        if not self.sentences:
            return 0.0
        return self.index / len(self.sentences) * 100

    def status(self) -> dict:
        return {
            "state": self.state,
            "index": self.index,
            "total": len(self.sentences),
            "progress": round(self.progress, 2),
            "current_sentence": self.current_sentence,
            "voice": self.voice.name if self.voice else None,
            "lang": self.lang,
            "last_error": self.last_error,
        }

    def play(self) -> None:
        if self.state == "playing":
            return
        if self.state == "paused":
            self.resume()
            return
        self._run_id += 1
        self.state = "playing"
        self.last_error = None
        self._resume.set()
        self._loop = asyncio.get_running_loop()
        self._task = self._loop.create_task(self._run(self._run_id))

    def pause(self) -> None:
        if self.state != "playing":
            return
        self.state = "paused"
        self._resume.clear()

    def resume(self) -> None:
        if self.state != "paused":
            return
        self.state = "playing"
        self._wake()

    def stop(self) -> None:
        self._reset()

    def _reset(self) -> None:
        # Invalidates any loop still running; it exits at its next check.
        self._run_id += 1
        self.index = 0
        self.state = "idle"
        self.current_sentence = ""
        self._wake()

    def _wake(self) -> None:
        # Controls may arrive from a request worker thread, not the loop thread.
        loop = self._loop
        if loop is not None and loop.is_running():
            try:
                on_loop = asyncio.get_running_loop() is loop
            except RuntimeError:
                on_loop = False
            if not on_loop:
                loop.call_soon_threadsafe(self._resume.set)
                return
        self._resume.set()

    async def wait(self) -> None:
        """Wait for the current playback task, if any, to exit."""
        if self._task is not None:
            await self._task

    async def _run(self, run_id: int) -> None:
        while self.index < len(self.sentences):
            await self._resume.wait()
            if run_id != self._run_id:
                return

            index = self.index
            sentence = self.sentences[index].strip()
            if not sentence:
                self.index += 1
                continue

            self.current_sentence = sentence
            try:
                clip = await asyncio.to_thread(
                    self.engine.speak, sentence, voice=self.voice, lang=self.lang, index=index
                )
            except Exception as exc:
                logger.error("Narration failed at sentence %d: %s", index, exc)
                if run_id == self._run_id:
                    self.last_error = str(exc)
                    self._reset()
                return

            if run_id != self._run_id:
                return
            if clip:
                self.clips[index] = clip
            self.index += 1
            if self.pause_seconds:
                await asyncio.sleep(self.pause_seconds)

        if run_id == self._run_id:
            self._reset()
