#!/usr/bin/env python3
"""
Speech Controller Tests

Session state transitions, error surfacing and capability gating.
"""

import pytest
import asyncio
import os
import sys
from unittest.mock import AsyncMock, patch

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from backend.speech_controller import (
    SpeechController,
    SpeechSessionState,
    ENABLED_KEY,
    TEST_SENTENCE,
)


@pytest.fixture
def held_engine(fake_engine):
    """Engine that keeps utterances pending until finish() is called"""
    fake_engine.auto_finish = False
    return fake_engine


class TestEnableToggle:
    """Tests for enable / disable"""

    def test_starts_disabled(self, controller):
        assert controller.state.enabled is False
        assert controller.session_state == SpeechSessionState.DISABLED

    def test_toggle_persists(self, controller, settings_store):
        assert controller.toggle_enabled() is True
        assert settings_store.get(ENABLED_KEY) is True
        assert controller.session_state == SpeechSessionState.READY

        assert controller.toggle_enabled() is False
        assert settings_store.get(ENABLED_KEY) is False

    async def test_initialize_restores_enabled(self, speech_service, settings_store, sample_voices):
        settings_store.set(ENABLED_KEY, True)
        controller = SpeechController(speech_service, settings_store)

        await controller.initialize()

        assert controller.state.enabled is True
        assert controller.voices == sample_voices
        assert [p.id for p in controller.available_providers] == ["local", "elevenlabs", "google", "azure"]

    async def test_disable_while_speaking_stops(self, controller, held_engine):
        controller.toggle_enabled()
        task = asyncio.create_task(controller.speak("Long answer"))
        await asyncio.sleep(0)
        assert controller.state.speaking is True

        controller.toggle_enabled()

        assert "cancel" in held_engine.calls
        assert controller.state.speaking is False
        await asyncio.wait_for(task, timeout=1)


class TestSpeak:
    """Tests for controller speak"""

    async def test_local_speak_state_transitions(self, controller, held_engine):
        """Ready -> Speaking -> Ready with sanitized text"""
        controller.toggle_enabled()
        assert controller.session_state == SpeechSessionState.READY

        task = asyncio.create_task(controller.speak("**Hello** world!"))
        await asyncio.sleep(0)

        assert controller.session_state == SpeechSessionState.SPEAKING
        assert controller.state.loading is True

        held_engine.finish()
        await asyncio.wait_for(task, timeout=1)

        assert controller.session_state == SpeechSessionState.READY
        assert controller.state.last_error is None
        assert held_engine.spoken[0].text == "Hello world!"

    async def test_missing_api_key_sets_error(self, controller):
        controller.toggle_enabled()
        await controller.update_config(provider="elevenlabs")

        await controller.speak("Hello")

        assert controller.state.last_error == "ElevenLabs API key required"
        assert controller.state.loading is False
        assert controller.state.speaking is False
        assert controller.session_state == SpeechSessionState.ERROR

    async def test_disabled_speak_is_noop(self, controller, fake_engine):
        await controller.speak("Hello")
        assert fake_engine.spoken == []

    async def test_blank_speak_is_noop(self, controller, fake_engine):
        controller.toggle_enabled()
        await controller.speak("   ")
        assert fake_engine.spoken == []

    async def test_new_speak_clears_previous_error(self, controller, fake_engine):
        controller.toggle_enabled()
        controller.state.last_error = "old failure"

        await controller.speak("Hello")

        assert controller.state.last_error is None

    async def test_unexpected_failure_has_generic_message(self, controller):
        controller.toggle_enabled()
        with patch.object(controller.service, "speak", new=AsyncMock(side_effect=RuntimeError("boom"))):
            await controller.speak("Hello")
        assert controller.state.last_error == "Speech synthesis failed"
        assert controller.state.speaking is False

    async def test_overlapping_speaks_both_reach_engine(self, controller, held_engine):
        """No serialization: both calls reach the synthesizer, neither crashes"""
        controller.toggle_enabled()

        first = asyncio.create_task(controller.speak("first"))
        second = asyncio.create_task(controller.speak("second"))
        await asyncio.sleep(0)

        held_engine.finish()
        await asyncio.wait_for(asyncio.gather(first, second), timeout=1)

        assert sorted(u.text for u in held_engine.spoken) == ["first", "second"]
        assert controller.state.last_error is None
        assert controller.state.speaking is False

    async def test_single_flight_rejects_overlap(self, speech_service, settings_store, held_engine):
        controller = SpeechController(speech_service, settings_store, single_flight=True)
        controller.toggle_enabled()

        first = asyncio.create_task(controller.speak("first"))
        await asyncio.sleep(0)
        await controller.speak("second")

        assert controller.state.last_error == "Speech is already in progress"
        assert [u.text for u in held_engine.spoken] == ["first"]

        held_engine.finish()
        await asyncio.wait_for(first, timeout=1)

        held_engine.auto_finish = True
        await controller.speak("third")
        assert [u.text for u in held_engine.spoken] == ["first", "third"]

    async def test_test_speech(self, controller, fake_engine):
        controller.toggle_enabled()
        await controller.test_speech()
        assert fake_engine.spoken[0].text == TEST_SENTENCE


class TestPlaybackControls:
    """Tests for stop / pause / resume gating"""

    def test_local_controls_delegate(self, controller, fake_engine):
        controller.pause_speaking()
        controller.resume_speaking()
        controller.stop_speaking()
        assert fake_engine.calls == ["pause", "resume", "cancel"]

    def test_pause_and_resume_flags(self, controller):
        controller.state.speaking = True
        controller.pause_speaking()
        assert controller.state.speaking is False
        controller.resume_speaking()
        assert controller.state.speaking is True

    async def test_remote_controls_are_noops(self, controller, fake_engine):
        await controller.update_config(provider="google")
        controller.state.speaking = True

        controller.pause_speaking()
        assert controller.state.speaking is True
        controller.resume_speaking()

        controller.state.loading = True
        controller.stop_speaking()

        assert fake_engine.calls == []
        assert controller.state.speaking is False
        assert controller.state.loading is False

    def test_controls_with_unknown_provider(self, controller, settings_store, fake_engine):
        settings_store.set("speechConfig", {"provider": "browser"})
        controller.pause_speaking()
        controller.stop_speaking()
        assert fake_engine.calls == []


class TestConfigAndVoices:
    """Tests for update_config, load_voices and errors"""

    async def test_provider_change_reloads_voices(self, controller, sample_voices):
        await controller.load_voices()
        assert controller.voices == sample_voices

        await controller.update_config(provider="azure", apiKey="k", region="eastus")

        assert controller.voices[0].id == "en-US-AriaNeural"
        assert controller.config.region == "eastus"

    async def test_same_provider_keeps_voices(self, controller):
        with patch.object(controller, "load_voices", new=AsyncMock()) as mock_load:
            await controller.update_config(rate=1.5)
        mock_load.assert_not_called()
        assert controller.config.rate == 1.5

    async def test_invalid_update_sets_error(self, controller):
        result = await controller.update_config(provider="browser")
        assert result is None
        assert controller.state.last_error == "Unknown speech provider: browser"
        assert controller.config.provider == "local"

    async def test_voice_load_failure(self, controller):
        with patch.object(controller.service, "get_voices", new=AsyncMock(side_effect=RuntimeError("engine down"))):
            await controller.load_voices()
        assert controller.state.last_error == "Failed to load voices"

    def test_clear_error(self, controller):
        controller.toggle_enabled()
        controller.state.last_error = "oops"
        assert controller.session_state == SpeechSessionState.ERROR
        controller.clear_error()
        assert controller.session_state == SpeechSessionState.READY
