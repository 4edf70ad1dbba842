"""gTTS-backed narration engine: one MP3 clip per sentence."""

from __future__ import annotations

import logging
from pathlib import Path

from gtts import gTTS

from app.config import settings
from app.narration.player import Voice

logger = logging.getLogger(__name__)

# gTTS speaks Spanish with a regional accent chosen by the Google domain.
GTTS_VOICES: list[Voice] = [
    Voice(name="Google español de Estados Unidos", lang="es-US", identifier="us"),
    Voice(name="Google español de España", lang="es-ES", identifier="es"),
    Voice(name="Google español de México", lang="es-MX", identifier="com.mx"),
    Voice(name="Google español de Colombia", lang="es-CO", identifier="com.co"),
]

_FALLBACK_TLDS = {"es-ES": "es", "es-US": "us", "es-MX": "com.mx", "es-CO": "com.co"}


class GTTSEngine:
    def __init__(self, output_dir: str | Path | None = None) -> None:
        self.output_dir = Path(output_dir or settings.narration_output_dir)

    def list_voices(self) -> list[Voice]:
        return list(GTTS_VOICES)

    def clip_path(self, index: int) -> Path:
        return self.output_dir / f"{index:03d}.mp3"

    def speak(self, text: str, *, voice: Voice | None, lang: str, index: int) -> str:
        """Synthesize ``text`` to ``NNN.mp3`` and return the clip path.

        Raises
        ------
        gtts.tts.gTTSError
            When the Google endpoint rejects or cannot be reached.
        """
        tld = voice.identifier if voice else _FALLBACK_TLDS.get(lang, "com")
        tts = gTTS(text=text, lang=lang.split("-")[0], tld=tld)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.clip_path(index)
        with path.open("wb") as fh:
            tts.write_to_fp(fh)
        logger.info("Narration clip %s written (%d chars)", path.name, len(text))
        return str(path)
