"""Tests for podcast script handling, voice selection and the narration player."""

import asyncio
from types import SimpleNamespace

from app.narration import gtts_engine
from app.narration.player import NarrationPlayer, Voice, select_voice
from app.narration.script import generate_podcast_script, split_sentences, strip_emphasis


class _FakeEngine:
    def __init__(self, fail_at=None):
        self.spoken = []
        self.fail_at = fail_at

    def list_voices(self):
        return []

    def speak(self, text, *, voice, lang, index):
        if index == self.fail_at:
            raise RuntimeError("boom")
        self.spoken.append(text)
        return f"/tmp/{index:03d}.mp3"


SCRIPT = "Hola. ¿Listos para empezar? Fin del resumen"


def test_strip_emphasis_removes_asterisks():
    assert strip_emphasis("**Hola** *equipo*") == "Hola equipo"


def test_split_sentences_keeps_trailing_text():
    assert split_sentences(SCRIPT) == ["Hola.", " ¿Listos para empezar?", " Fin del resumen"]
    assert split_sentences("...") == ["..."]


def test_generate_podcast_script_strips_emphasis():
    captured = {}

    def _invoke(prompt):
        captured["prompt"] = prompt
        return SimpleNamespace(content="**Hola** equipo. Fin.")

    script = generate_podcast_script("1. A\nplan", llm=SimpleNamespace(invoke=_invoke))
    assert script == "Hola equipo. Fin."
    assert "1. A\nplan" in captured["prompt"]


def test_select_voice_prefers_google_us_spanish():
    voices = [
        Voice(name="Microsoft Sabina", lang="es-MX", default=True),
        Voice(name="Google español", lang="es-ES"),
        Voice(name="Google español de Estados Unidos", lang="es-US"),
        Voice(name="Google US English", lang="en-US"),
    ]
    assert select_voice(voices).lang == "es-US"


def test_select_voice_ranks_without_google():
    voices = [Voice(name="Paulina", lang="es-CO"), Voice(name="Jorge", lang="es-ES")]
    assert select_voice(voices).name == "Jorge"
    assert select_voice([Voice(name="Alex", lang="en-US")]) is None


def test_player_plays_all_sentences_then_resets():
    engine = _FakeEngine()

    async def scenario():
        player = NarrationPlayer(SCRIPT, engine, pause_seconds=0)
        player.play()
        assert player.state == "playing"
        await player.wait()
        return player

    player = asyncio.run(scenario())
    assert engine.spoken == ["Hola.", "¿Listos para empezar?", "Fin del resumen"]
    assert player.state == "idle"
    assert player.index == 0
    assert player.progress == 0
    assert set(player.clips) == {0, 1, 2}


def test_pause_holds_position_and_resume_continues():
    engine = _FakeEngine()

    async def scenario():
        player = NarrationPlayer(SCRIPT, engine, pause_seconds=0.05)
        player.play()
        for _ in range(100):
            if engine.spoken:
                break
            await asyncio.sleep(0.01)
        player.pause()
        await asyncio.sleep(0.2)
        paused = (player.state, player.index, list(engine.spoken))
        player.resume()
        await player.wait()
        return paused

    state, index, spoken = asyncio.run(scenario())
    assert state == "paused"
    assert index == 1
    assert spoken == ["Hola."]
    assert len(engine.spoken) == 3


def test_stop_resets_cursor():
    engine = _FakeEngine()

    async def scenario():
        player = NarrationPlayer(SCRIPT, engine, pause_seconds=0)
        player.play()
        player.pause()
        await asyncio.sleep(0.01)
        player.stop()
        await player.wait()
        return player

    player = asyncio.run(scenario())
    assert player.state == "idle"
    assert player.index == 0
    assert engine.spoken == []


def test_engine_error_resets_to_idle():
    engine = _FakeEngine(fail_at=1)

    async def scenario():
        player = NarrationPlayer(SCRIPT, engine, pause_seconds=0)
        player.play()
        await player.wait()
        return player

    player = asyncio.run(scenario())
    assert engine.spoken == ["Hola."]
    assert player.state == "idle"
    assert player.index == 0
    assert player.last_error == "boom"


def test_fallback_language_without_voice():
    player = NarrationPlayer("Hola.", _FakeEngine(), None, fallback_lang="es-CO")
    assert player.lang == "es-CO"
    assert player.status()["voice"] is None


def test_gtts_engine_writes_clip(monkeypatch, tmp_path):
    calls = []

    class _FakeGTTS:
        def __init__(self, text, lang, tld):
            calls.append((text, lang, tld))

        def write_to_fp(self, fp):
            fp.write(b"mp3")

    monkeypatch.setattr(gtts_engine, "gTTS", _FakeGTTS)
    engine = gtts_engine.GTTSEngine(output_dir=tmp_path)
    voice = select_voice(engine.list_voices())

    path = engine.speak("Hola.", voice=voice, lang=voice.lang, index=4)
    fallback = engine.speak("Adiós.", voice=None, lang="es-CO", index=5)

    assert path.endswith("004.mp3")
    assert (tmp_path / "004.mp3").read_bytes() == b"mp3"
    assert fallback.endswith("005.mp3")
    assert calls == [("Hola.", "es", "us"), ("Adiós.", "es", "com.co")]
