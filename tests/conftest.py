#!/usr/bin/env python3
"""
Pytest Configuration and Shared Fixtures

Provides shared fixtures and configuration for all tests.
"""

import pytest
import tempfile
import sys
import os
from pathlib import Path
from typing import Callable, List, Optional

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from backend.speech_providers import (
    SpeechEngine,
    Utterance,
    VoiceDescriptor,
    AudioPlayer,
    PlaybackError,
    SpeechProviderRegistry,
)
from backend.settings_store import SettingsStore
from backend.speech_service import SpeechService
from backend.speech_controller import SpeechController


# ============================================================================
# ASYNCIO CONFIGURATION
# ============================================================================
# Note: pytest-asyncio is configured with asyncio_mode = "auto" in pyproject.toml
# The event loop is automatically managed per-function by default


# ============================================================================
# FAKES
# ============================================================================

class FakeSpeechEngine(SpeechEngine):
    """
    In-memory synthesizer.

    Records every utterance. With ``auto_finish`` the utterance ends as soon
    as it is spoken; otherwise the test finishes it with ``finish()`` or
    ``fail()``.
    """

    def __init__(self, available: bool = True, voices: Optional[List[VoiceDescriptor]] = None,
                 auto_finish: bool = True):
        self.available = available
        self.auto_finish = auto_finish
        self.voices = list(voices) if voices is not None else []
        self.spoken: List[Utterance] = []
        self.pending: List[Utterance] = []
        self.calls: List[str] = []
        self.listeners: List[Callable[[], None]] = []

    def is_available(self) -> bool:
        return self.available

    def speak(self, utterance: Utterance) -> None:
        self.spoken.append(utterance)
        if self.auto_finish:
            utterance.on_end()
        else:
            self.pending.append(utterance)

    def finish(self) -> None:
        while self.pending:
            self.pending.pop(0).on_end()

    def fail(self, message: str = "synthesis-failed") -> None:
        while self.pending:
            self.pending.pop(0).on_error(message)

    def cancel(self) -> None:
        self.calls.append("cancel")
        self.finish()

    def pause(self) -> None:
        self.calls.append("pause")

    def resume(self) -> None:
        self.calls.append("resume")

    def get_voices(self) -> List[VoiceDescriptor]:
        return list(self.voices)

    def announce_voices(self, voices: List[VoiceDescriptor]) -> None:
        self.voices = list(voices)
        for callback in list(self.listeners):
            callback()

    def add_voices_listener(self, callback: Callable[[], None]) -> None:
        self.listeners.append(callback)

    def remove_voices_listener(self, callback: Callable[[], None]) -> None:
        if callback in self.listeners:
            self.listeners.remove(callback)


class FakeAudioPlayer(AudioPlayer):
    """Records clips instead of playing them"""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.played: List[bytes] = []

    async def play(self, audio: bytes, content_type: str = "audio/mpeg") -> None:
        if self.fail:
            raise PlaybackError("Failed to play audio")
        self.played.append(audio)


# ============================================================================
# TEMPORARY DIRECTORIES
# ============================================================================

@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ============================================================================
# SPEECH FIXTURES
# ============================================================================

@pytest.fixture
def sample_voices():
    return [
        VoiceDescriptor(id="voice-en", name="English Voice", language="en-US"),
        VoiceDescriptor(id="voice-fr", name="French Voice", language="fr-FR"),
    ]


@pytest.fixture
def fake_engine(sample_voices):
    return FakeSpeechEngine(voices=sample_voices)


@pytest.fixture
def fake_player():
    return FakeAudioPlayer()


@pytest.fixture
def settings_store(temp_dir):
    return SettingsStore(temp_dir / "speech_settings.json")


@pytest.fixture
def registry(fake_engine, fake_player):
    return SpeechProviderRegistry(
        engine=fake_engine,
        player=fake_player,
        proxy_url="http://proxy.test/api/v1/speech",
    )


@pytest.fixture
def speech_service(registry, settings_store):
    return SpeechService(registry=registry, store=settings_store)


@pytest.fixture
def controller(speech_service, settings_store):
    return SpeechController(speech_service, settings_store, single_flight=False)
