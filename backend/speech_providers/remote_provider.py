"""
Remote Speech Provider Base

Shared behaviour of the cloud vendors: credential check, one POST to the
speech proxy, then playback of the returned clip. Remote clips cannot be
paused and a vendor-side synthesis job cannot be cancelled.
"""

from abc import abstractmethod
from typing import Optional, List, Dict, Any

import httpx

from .base import (
    SpeechProvider,
    SpeechCapabilities,
    SpeechConfiguration,
    VoiceDescriptor,
    MissingCredentialError,
    NetworkError,
    PlaybackError,
    VendorError,
)
from .playback import AudioPlayer, FFplayAudioPlayer

from config import settings
from utils.logger import logger


class RemoteSpeechProvider(SpeechProvider):
    """Base class for vendors reached through the speech proxy"""

    # Proxy route name under SPEECH_PROXY_URL
    ROUTE: str = ""
    # Curated voice list (vendors are not queried for voices)
    VOICES: List[VoiceDescriptor] = []

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        player: Optional[AudioPlayer] = None,
        proxy_url: Optional[str] = None,
    ):
        self._client = client
        self.player = player or FFplayAudioPlayer()
        self.proxy_url = (proxy_url or settings.SPEECH_PROXY_URL).rstrip("/")

    @property
    def capabilities(self) -> SpeechCapabilities:
        return SpeechCapabilities(
            supports_pause=False,
            supports_resume=False,
            supports_stop=False,
            is_local=False,
            requires_api_key=True,
            requires_region=False,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.proxy_url}/{self.ROUTE}"

    def is_supported(self) -> bool:
        # Support is a server concern, discovered at call time
        return True

    def check_credentials(self, config: SpeechConfiguration) -> None:
        """Raise MissingCredentialError before any network call"""
        if not config.api_key:
            raise MissingCredentialError(f"{self.display_name} API key required")

    @abstractmethod
    def build_payload(self, text: str, config: SpeechConfiguration) -> Dict[str, Any]:
        """Request body sent to the proxy route"""
        pass

    async def synthesize(self, text: str, config: SpeechConfiguration) -> bytes:
        """
        Ask the proxy for audio.

        Returns:
            Raw audio bytes

        Raises:
            MissingCredentialError, VendorError, NetworkError
        """
        self.check_credentials(config)
        payload = self.build_payload(text, config)

        try:
            if self._client is not None:
                response = await self._client.post(self.endpoint, json=payload)
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.post(self.endpoint, json=payload)
        except httpx.RequestError as e:
            logger.error(f"{self.display_name} proxy unreachable: {e}")
            raise NetworkError(f"{self.display_name} TTS error: {e}") from e

        if response.is_error:
            message = self._error_message(response)
            logger.warning(
                f"{self.display_name} synthesis failed with {response.status_code}: {message}"
            )
            raise VendorError(
                f"{self.display_name} TTS error: {message}",
                status_code=response.status_code,
            )

        return response.content

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return "Failed to synthesize speech"
        if isinstance(body, dict):
            return body.get("error") or body.get("message") or "Failed to synthesize speech"
        return "Failed to synthesize speech"

    async def speak(self, text: str, config: SpeechConfiguration) -> None:
        audio = await self.synthesize(text, config)
        try:
            await self.player.play(audio, "audio/mpeg")
        except PlaybackError:
            raise
        except Exception as e:
            raise PlaybackError(f"Failed to play audio: {e}") from e

    async def get_voices(self) -> List[VoiceDescriptor]:
        return list(self.VOICES)
