#!/usr/bin/env python3
"""
Speech Service Tests

Configuration persistence, provider resolution and dispatch.
"""

import pytest
import os
import sys
from unittest.mock import AsyncMock, patch

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from backend.speech_providers import (
    SpeechConfiguration,
    SpeechError,
    MissingCredentialError,
    UnknownProviderError,
    UnsupportedProviderError,
    SpeechProviderRegistry,
)
from backend.speech_service import SpeechService, CONFIG_KEY
from tests.conftest import FakeSpeechEngine, FakeAudioPlayer


class TestSpeechServiceConfig:
    """Tests for get_config / set_config"""

    def test_defaults_without_storage(self, speech_service):
        config = speech_service.get_config()
        assert config == SpeechConfiguration()

    def test_loads_persisted_config(self, registry, settings_store):
        settings_store.set(CONFIG_KEY, {"provider": "google", "apiKey": "g-key", "rate": 1.5})

        service = SpeechService(registry=registry, store=settings_store)
        config = service.get_config()

        assert config.provider == "google"
        assert config.api_key == "g-key"
        assert config.rate == 1.5
        assert config.volume == 1.0

    def test_set_config_is_shallow_merge(self, speech_service):
        speech_service.set_config({"provider": "azure", "apiKey": "k", "region": "eastus"})
        speech_service.set_config(rate=1.25)

        config = speech_service.get_config()
        assert config.provider == "azure"
        assert config.api_key == "k"
        assert config.region == "eastus"
        assert config.rate == 1.25

    def test_set_then_get_round_trip(self, speech_service):
        before = speech_service.get_config()
        speech_service.set_config({"voiceId": "voice-fr", "pitch": 0.5})
        after = speech_service.get_config()

        assert after.voice_id == "voice-fr"
        assert after.pitch == 0.5
        assert after.model_copy(update={"voice_id": None, "pitch": 1.0}) == before

    def test_set_config_persists_full_result(self, speech_service, settings_store):
        speech_service.set_config(provider="elevenlabs", api_key="el")
        stored = settings_store.get(CONFIG_KEY)
        assert stored == {
            "provider": "elevenlabs",
            "apiKey": "el",
            "region": None,
            "voiceId": None,
            "rate": 1.0,
            "pitch": 1.0,
            "volume": 1.0,
        }

    def test_set_config_clamps(self, speech_service):
        config = speech_service.set_config(rate=10, volume=-3)
        assert config.rate == 2.0
        assert config.volume == 0.0

    def test_unknown_provider_rejected_eagerly(self, speech_service, settings_store):
        with pytest.raises(UnknownProviderError):
            speech_service.set_config(provider="browser")
        assert speech_service.get_config().provider == "local"
        assert settings_store.get(CONFIG_KEY) is None

    def test_invalid_field_rejected(self, speech_service):
        with pytest.raises(SpeechError):
            speech_service.set_config(rate="fast")

    def test_external_write_visible(self, speech_service, settings_store):
        speech_service.set_config(provider="google")
        stored = settings_store.get(CONFIG_KEY)
        stored["voiceId"] = "en-GB-Wavenet-A"
        settings_store.set(CONFIG_KEY, stored)

        assert speech_service.get_config().voice_id == "en-GB-Wavenet-A"

    def test_malformed_storage_falls_back(self, registry, settings_store):
        settings_store.set(CONFIG_KEY, "not-an-object")
        service = SpeechService(registry=registry, store=settings_store)
        assert service.get_config() == SpeechConfiguration()


class TestSpeechServiceSpeak:
    """Tests for speak dispatch"""

    async def test_local_speak_sanitizes(self, speech_service, fake_engine):
        await speech_service.speak("**Hello** world!")
        assert fake_engine.spoken[0].text == "Hello world!"

    async def test_missing_api_key(self, speech_service, fake_player):
        speech_service.set_config(provider="elevenlabs")

        with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
            with pytest.raises(MissingCredentialError):
                await speech_service.speak("Hello")
            mock_post.assert_not_called()
        assert fake_player.played == []

    async def test_unsupported_local_makes_no_proxy_call(self, settings_store):
        engine = FakeSpeechEngine(available=False)
        registry = SpeechProviderRegistry(engine=engine, player=FakeAudioPlayer())
        service = SpeechService(registry=registry, store=settings_store)

        with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
            with pytest.raises(UnsupportedProviderError):
                await service.speak("Hello")
            mock_post.assert_not_called()
        assert engine.spoken == []

    async def test_unknown_persisted_provider(self, speech_service, settings_store):
        settings_store.set(CONFIG_KEY, {"provider": "browser"})

        with pytest.raises(UnknownProviderError):
            await speech_service.speak("Hello")

    async def test_speak_passes_config(self, speech_service, fake_engine):
        speech_service.set_config(voice_id="voice-en", rate=0.75)
        await speech_service.speak("Hi")

        utterance = fake_engine.spoken[0]
        assert utterance.voice_id == "voice-en"
        assert utterance.rate == 0.75


class TestSpeechServiceDiscovery:
    """Tests for voices and provider listing"""

    async def test_voices_for_configured_provider(self, speech_service, sample_voices):
        assert await speech_service.get_voices() == sample_voices

        speech_service.set_config(provider="google")
        voices = await speech_service.get_voices()
        assert voices[0].id == "en-US-Wavenet-A"

    async def test_voices_for_unknown_provider_is_empty(self, speech_service, settings_store):
        settings_store.set(CONFIG_KEY, {"provider": "browser"})
        assert await speech_service.get_voices() == []

    def test_four_providers_in_stable_order(self, speech_service):
        providers = speech_service.get_available_providers()
        assert [p.id for p in providers] == ["local", "elevenlabs", "google", "azure"]
        assert all(isinstance(p.is_supported, bool) for p in providers)
        assert providers == speech_service.get_available_providers()

    def test_get_provider_defaults_to_configured(self, speech_service):
        speech_service.set_config(provider="azure")
        assert speech_service.get_provider().provider_type.value == "azure"
        assert speech_service.get_provider("local").provider_type.value == "local"
