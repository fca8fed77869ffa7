"""
Speech Controller

Session-level speech state for a single user: enabled flag, speaking /
loading flags, the last error message, and the voice and provider lists.
This is the only layer that turns speech errors into user-facing
messages; everything below it raises.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from config import settings
from backend.speech_providers import (
    SpeechConfiguration,
    ProviderDescriptor,
    VoiceDescriptor,
    SpeechError,
    SpeechBusyError,
)
from backend.settings_store import SettingsStore
from backend.speech_service import SpeechService

from utils.logger import logger


ENABLED_KEY = "speechEnabled"
TEST_SENTENCE = "Hello! This is a test of the text-to-speech system. How does it sound?"


class SpeechSessionState(str, Enum):
    DISABLED = "disabled"
    READY = "ready"
    SPEAKING = "speaking"
    ERROR = "error"


@dataclass
class PlaybackState:
    """Transient playback flags; only ``enabled`` is persisted"""
    enabled: bool = False
    speaking: bool = False
    loading: bool = False
    last_error: Optional[str] = None


class SpeechController:
    """
    Enable/disable, speak, stop/pause/resume and config updates on top of
    a SpeechService.

    Overlapping ``speak`` calls are allowed unless ``single_flight`` is on,
    in which case a call made while another is active fails with
    SpeechBusyError (reported through ``state.last_error``).
    """

    def __init__(
        self,
        service: SpeechService,
        store: Optional[SettingsStore] = None,
        single_flight: Optional[bool] = None,
    ):
        self.service = service
        self.store = store or service.store
        self.single_flight = settings.SPEECH_SINGLE_FLIGHT if single_flight is None else single_flight
        self.state = PlaybackState()
        self.voices: List[VoiceDescriptor] = []
        self.available_providers: List[ProviderDescriptor] = []
        self._active = 0

    @property
    def config(self) -> SpeechConfiguration:
        return self.service.get_config()

    @property
    def session_state(self) -> SpeechSessionState:
        if not self.state.enabled:
            return SpeechSessionState.DISABLED
        if self.state.speaking:
            return SpeechSessionState.SPEAKING
        if self.state.last_error:
            return SpeechSessionState.ERROR
        return SpeechSessionState.READY

    async def initialize(self) -> None:
        """Load providers, voices for the configured provider and the enabled flag"""
        self.available_providers = self.service.get_available_providers()
        await self.load_voices()
        self.state.enabled = bool(self.store.get(ENABLED_KEY, False))
        logger.debug(f"Speech controller ready (enabled={self.state.enabled})")

    async def load_voices(self) -> List[VoiceDescriptor]:
        try:
            self.voices = await self.service.get_voices()
        except Exception as e:
            logger.error(f"Error loading voices: {e}")
            self.state.last_error = "Failed to load voices"
        return self.voices

    def toggle_enabled(self) -> bool:
        """Flip and persist the enabled flag; disabling stops current speech"""
        enabled = not self.state.enabled
        self.state.enabled = enabled
        self.store.set(ENABLED_KEY, enabled)

        if not enabled and self.state.speaking:
            self.stop_speaking()

        logger.info(f"Speech {'enabled' if enabled else 'disabled'}")
        return enabled

    async def speak(self, text: str) -> None:
        """Speak ``text``; no-op when disabled or blank. Never raises SpeechError."""
        if not self.state.enabled or not text or not text.strip():
            return

        if self.single_flight and self._active:
            error = SpeechBusyError("Speech is already in progress")
            logger.warning(str(error))
            self.state.last_error = str(error)
            return

        self.state.loading = True
        self.state.speaking = True
        self.state.last_error = None
        self._active += 1

        try:
            await self.service.speak(text)
        except SpeechError as e:
            logger.error(f"Speech error: {e}")
            self.state.last_error = str(e) or "Speech synthesis failed"
        except Exception as e:
            logger.error(f"Unexpected speech failure: {e}")
            self.state.last_error = "Speech synthesis failed"
        finally:
            self._active -= 1
            self.state.loading = False
            self.state.speaking = False

    def _capabilities(self):
        try:
            return self.service.get_provider().capabilities
        except SpeechError as e:
            logger.debug(f"No active provider: {e}")
            return None

    def stop_speaking(self) -> None:
        caps = self._capabilities()
        if caps is not None and caps.supports_stop:
            self.service.get_provider().stop()
        # Remote clips cannot be stopped mid-stream; flags are reset anyway
        self.state.speaking = False
        self.state.loading = False

    def pause_speaking(self) -> None:
        caps = self._capabilities()
        if caps is not None and caps.supports_pause:
            self.service.get_provider().pause()
            self.state.speaking = False

    def resume_speaking(self) -> None:
        caps = self._capabilities()
        if caps is not None and caps.supports_resume:
            self.service.get_provider().resume()
            self.state.speaking = True

    async def update_config(self, **partial) -> Optional[SpeechConfiguration]:
        """
        Apply a partial configuration update.

        Reloads the voice list when the provider changes. Invalid updates
        leave the configuration untouched and set ``state.last_error``.
        """
        previous = self.service.get_config().provider
        try:
            updated = self.service.set_config(partial)
        except SpeechError as e:
            logger.warning(f"Rejected speech configuration update: {e}")
            self.state.last_error = str(e)
            return None

        if updated.provider != previous:
            await self.load_voices()
        return updated

    async def test_speech(self) -> None:
        await self.speak(TEST_SENTENCE)

    def clear_error(self) -> None:
        self.state.last_error = None
