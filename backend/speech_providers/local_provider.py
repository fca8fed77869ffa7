"""
Local Speech Provider

On-device speech synthesis. Nothing leaves the machine and no credentials
are needed. The synthesizer is reached through the SpeechEngine interface;
the default engine drives pyttsx3 on a single worker thread.

Features:
- Native pause / resume / cancel
- Voice list announced asynchronously once the engine has started
"""

import asyncio
import threading
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .base import (
    SpeechProvider,
    SpeechProviderType,
    SpeechCapabilities,
    SpeechConfiguration,
    SetupGuide,
    VoiceDescriptor,
    PlaybackError,
    UnsupportedProviderError,
)

from config import settings
from utils.logger import logger


@dataclass
class Utterance:
    """One piece of text handed to a speech engine, with completion callbacks"""
    text: str
    voice_id: Optional[str] = None
    rate: float = 1.0
    pitch: float = 1.0
    volume: float = 1.0
    on_end: Callable[[], None] = field(default=lambda: None, repr=False)
    on_error: Callable[[str], None] = field(default=lambda error: None, repr=False)


class SpeechEngine(ABC):
    """
    On-device synthesizer.

    ``speak`` must not block: it schedules the utterance and reports the
    outcome through ``on_end`` / ``on_error``, which may be called from any
    thread.
    """

    @abstractmethod
    def is_available(self) -> bool:
        """True if the engine can be started in this environment"""
        pass

    @abstractmethod
    def speak(self, utterance: Utterance) -> None:
        """Start speaking; a new utterance preempts the current one"""
        pass

    @abstractmethod
    def cancel(self) -> None:
        """Stop the current utterance immediately"""
        pass

    @abstractmethod
    def pause(self) -> None:
        pass

    @abstractmethod
    def resume(self) -> None:
        pass

    @abstractmethod
    def get_voices(self) -> List[VoiceDescriptor]:
        """Voices known so far (empty until the engine has announced them)"""
        pass

    @abstractmethod
    def add_voices_listener(self, callback: Callable[[], None]) -> None:
        """Register a callback fired once voices are available"""
        pass

    @abstractmethod
    def remove_voices_listener(self, callback: Callable[[], None]) -> None:
        pass


@dataclass
class _Playback:
    """Book-keeping for the utterance currently owned by the pyttsx3 engine"""
    utterance: Utterance
    base_offset: int = 0
    position: int = 0
    pause_requested: bool = False
    cancel_requested: bool = False
    paused: bool = False
    finished: bool = False


class Pyttsx3Engine(SpeechEngine):
    """
    SpeechEngine backed by pyttsx3.

    pyttsx3 is not thread-safe and ``runAndWait`` blocks, so every engine
    call runs on one dedicated worker thread. pyttsx3 has no pause: pausing
    stops at the next word boundary and remembers the character offset,
    resuming speaks the remainder.

    pyttsx3 exposes no portable pitch property, so ``Utterance.pitch`` is
    not applied; only rate, volume and voice reach the driver.
    """

    def __init__(self, base_wpm: Optional[int] = None):
        self.base_wpm = base_wpm or settings.LOCAL_BASE_WPM
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="pyttsx3")
        self._lock = threading.Lock()
        self._engine = None
        self._voices: List[VoiceDescriptor] = []
        self._voices_loaded = False
        self._warming = False
        self._listeners: List[Callable[[], None]] = []
        self._current: Optional[_Playback] = None
        self._running: Optional[_Playback] = None
        self._available: Optional[bool] = None

    def is_available(self) -> bool:
        """
        True once the engine has started successfully.

        The first call starts pyttsx3 on the worker thread; the outcome is
        cached, so a host without a speech driver is reported unavailable
        without retrying on every call.
        """
        if self._available is None:
            self._available = self._executor.submit(self._probe).result()
        return self._available

    def _probe(self) -> bool:
        try:
            self._ensure_engine()
        except Exception as e:
            logger.warning(f"Local speech engine unavailable: {e}")
            return False
        return True

    # ------------------------------------------------------------------
    # Worker-thread side
    # ------------------------------------------------------------------

    def _ensure_engine(self) -> None:
        if self._engine is not None:
            return

        import pyttsx3

        self._engine = pyttsx3.init()
        self._engine.connect("started-word", self._on_word)
        self._load_voices()

    def _load_voices(self) -> None:
        voices = []
        for voice in self._engine.getProperty("voices") or []:
            voices.append(VoiceDescriptor(
                id=voice.id,
                name=voice.name or voice.id,
                language=self._voice_language(voice),
            ))

        with self._lock:
            self._voices = voices
            self._voices_loaded = True
            listeners = list(self._listeners)

        logger.debug(f"Local engine announced {len(voices)} voices")
        for callback in listeners:
            callback()

    @staticmethod
    def _voice_language(voice) -> str:
        languages = getattr(voice, "languages", None) or []
        if not languages:
            return ""
        lang = languages[0]
        if isinstance(lang, bytes):
            # espeak prefixes the language with a priority byte
            lang = lang.decode("utf-8", errors="ignore")
        return "".join(ch for ch in lang if ch.isprintable()).strip()

    def _apply_properties(self, utterance: Utterance) -> None:
        # No pitch here: pyttsx3 drivers do not share a pitch property
        self._engine.setProperty("rate", int(self.base_wpm * utterance.rate))
        self._engine.setProperty("volume", max(0.0, min(1.0, utterance.volume)))

        if utterance.voice_id:
            match = next(
                (v for v in self._voices if utterance.voice_id in (v.id, v.name)),
                None,
            )
            if match:
                self._engine.setProperty("voice", match.id)
            else:
                logger.debug(f"Local voice not found, using default: {utterance.voice_id}")

    def _on_word(self, name, location, length) -> None:
        with self._lock:
            playback = self._running
            if playback is None:
                return
            playback.position = playback.base_offset + location
            interrupt = playback.pause_requested or playback.cancel_requested
        if interrupt:
            self._engine.stop()

    def _run(self, playback: _Playback, text: str) -> None:
        try:
            self._ensure_engine()
            if playback.cancel_requested:
                self._finish(playback)
                return
            self._apply_properties(playback.utterance)
            with self._lock:
                self._running = playback
            try:
                self._engine.say(text)
                self._engine.runAndWait()
            finally:
                with self._lock:
                    self._running = None
        except Exception as e:
            logger.error(f"Local speech synthesis failed: {e}")
            with self._lock:
                playback.finished = True
                if self._current is playback:
                    self._current = None
            playback.utterance.on_error(str(e))
            return

        with self._lock:
            if playback.pause_requested and not playback.cancel_requested:
                playback.pause_requested = False
                playback.paused = True
                return
        self._finish(playback)

    def _finish(self, playback: _Playback) -> None:
        with self._lock:
            if playback.finished:
                return
            playback.finished = True
            if self._current is playback:
                self._current = None
        playback.utterance.on_end()

    # ------------------------------------------------------------------
    # Caller side
    # ------------------------------------------------------------------

    def speak(self, utterance: Utterance) -> None:
        playback = _Playback(utterance=utterance)
        with self._lock:
            previous = self._current
            self._current = playback

        if previous is not None:
            self._interrupt(previous)

        self._executor.submit(self._run, playback, utterance.text)

    def _interrupt(self, playback: _Playback) -> None:
        with self._lock:
            playback.cancel_requested = True
            was_paused = playback.paused
        if was_paused:
            self._finish(playback)

    def cancel(self) -> None:
        with self._lock:
            playback = self._current
        if playback is not None:
            self._interrupt(playback)

    def pause(self) -> None:
        with self._lock:
            if self._current is not None and not self._current.paused:
                self._current.pause_requested = True

    def resume(self) -> None:
        with self._lock:
            playback = self._current
            if playback is None or not playback.paused:
                return
            playback.paused = False
            playback.base_offset = playback.position
            remaining = playback.utterance.text[playback.position:]

        if remaining.strip():
            self._executor.submit(self._run, playback, remaining)
        else:
            self._finish(playback)

    def get_voices(self) -> List[VoiceDescriptor]:
        with self._lock:
            return list(self._voices)

    def add_voices_listener(self, callback: Callable[[], None]) -> None:
        with self._lock:
            self._listeners.append(callback)
            loaded = self._voices_loaded
            start = not loaded and not self._warming
            if start:
                self._warming = True

        if loaded:
            callback()
        elif start:
            self._executor.submit(self._warm_up)

    def _warm_up(self) -> None:
        try:
            self._ensure_engine()
        except Exception as e:
            logger.warning(f"Local speech engine failed to start: {e}")
            with self._lock:
                self._warming = False
                listeners = list(self._listeners)
            # Wake waiters; they see an empty voice list
            for callback in listeners:
                callback()

    def remove_voices_listener(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback in self._listeners:
                self._listeners.remove(callback)

    def shutdown(self) -> None:
        """Release the worker thread"""
        self.cancel()
        self._executor.shutdown(wait=False)


class LocalSpeechProvider(SpeechProvider):
    """
    On-device speech provider.

    Works offline, needs no setup, and is the only provider with native
    pause, resume and cancel.
    """

    def __init__(self, engine: Optional[SpeechEngine] = None, voices_timeout: Optional[float] = None):
        self._engine = engine if engine is not None else Pyttsx3Engine()
        self.voices_timeout = voices_timeout if voices_timeout is not None else settings.LOCAL_VOICES_TIMEOUT

    @property
    def engine(self) -> SpeechEngine:
        return self._engine

    @property
    def provider_type(self) -> SpeechProviderType:
        return SpeechProviderType.LOCAL

    @property
    def display_name(self) -> str:
        return "Local Speech"

    @property
    def description(self) -> str:
        return "Built-in system voices (free)"

    @property
    def capabilities(self) -> SpeechCapabilities:
        return SpeechCapabilities(
            supports_pause=True,
            supports_resume=True,
            supports_stop=True,
            is_local=True,
            requires_api_key=False,
            requires_region=False,
        )

    @property
    def setup_guide(self) -> Optional[SetupGuide]:
        return SetupGuide(
            pros=["No setup required", "Works offline", "Free"],
            cons=["Limited voice quality", "System dependent"],
        )

    def is_supported(self) -> bool:
        return self._engine.is_available()

    async def speak(self, text: str, config: SpeechConfiguration) -> None:
        if not self.is_supported():
            raise UnsupportedProviderError("Local speech synthesis not supported")

        loop = asyncio.get_running_loop()
        done = loop.create_future()

        def settle(error: Optional[Exception] = None) -> None:
            if done.done():
                return
            if error is not None:
                done.set_exception(error)
            else:
                done.set_result(None)

        utterance = Utterance(
            text=text,
            voice_id=config.voice_id,
            rate=config.rate,
            pitch=config.pitch,
            volume=config.volume,
            on_end=lambda: loop.call_soon_threadsafe(settle),
            on_error=lambda error: loop.call_soon_threadsafe(
                settle, PlaybackError(f"Speech error: {error}")
            ),
        )

        try:
            self._engine.speak(utterance)
        except Exception as e:
            raise PlaybackError(f"Speech error: {e}") from e

        await done

    async def get_voices(self) -> List[VoiceDescriptor]:
        if not self.is_supported():
            return []

        voices = self._engine.get_voices()
        if voices:
            return voices

        loop = asyncio.get_running_loop()
        ready = asyncio.Event()

        def on_voices_changed() -> None:
            loop.call_soon_threadsafe(ready.set)

        self._engine.add_voices_listener(on_voices_changed)
        try:
            await asyncio.wait_for(ready.wait(), timeout=self.voices_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"Local voices not announced within {self.voices_timeout}s"
            )
            return []
        finally:
            self._engine.remove_voices_listener(on_voices_changed)

        return self._engine.get_voices()

    def stop(self) -> None:
        self._engine.cancel()

    def pause(self) -> None:
        self._engine.pause()

    def resume(self) -> None:
        self._engine.resume()
