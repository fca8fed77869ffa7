"""
Speech Provider Registry

Fixed, enum-indexed set of speech providers. Providers are stateless with
respect to configuration; the registry only wires shared dependencies
(HTTP client, audio player, local engine) into them.
"""

from typing import Optional, Dict, List

import httpx

from .base import (
    SpeechProvider,
    SpeechProviderType,
    ProviderDescriptor,
    UnknownProviderError,
)
from .local_provider import LocalSpeechProvider, SpeechEngine
from .elevenlabs_provider import ElevenLabsProvider
from .google_provider import GoogleSpeechProvider
from .azure_provider import AzureSpeechProvider
from .playback import AudioPlayer, FFplayAudioPlayer

from utils.logger import logger


class SpeechProviderRegistry:
    """
    Registry for speech providers.

    The set of providers is closed: one instance per SpeechProviderType,
    created up front. Lookups by an id outside that set raise
    UnknownProviderError.
    """

    def __init__(
        self,
        engine: Optional[SpeechEngine] = None,
        client: Optional[httpx.AsyncClient] = None,
        player: Optional[AudioPlayer] = None,
        proxy_url: Optional[str] = None,
    ):
        self._player = player or FFplayAudioPlayer()
        self._providers: Dict[SpeechProviderType, SpeechProvider] = {}

        self._register(LocalSpeechProvider(engine=engine))
        for provider_class in (ElevenLabsProvider, GoogleSpeechProvider, AzureSpeechProvider):
            self._register(provider_class(client=client, player=self._player, proxy_url=proxy_url))

    def _register(self, provider: SpeechProvider) -> None:
        self._providers[provider.provider_type] = provider
        logger.debug(f"Registered speech provider: {provider.provider_type.value}")

    @property
    def player(self) -> AudioPlayer:
        return self._player

    def get(self, provider_id) -> SpeechProvider:
        """
        Get a provider instance.

        Args:
            provider_id: SpeechProviderType or its string id

        Raises:
            UnknownProviderError: If the id is not a registered provider
        """
        try:
            provider_type = SpeechProviderType(provider_id)
        except ValueError:
            raise UnknownProviderError(f"Unknown speech provider: {provider_id}")

        return self._providers[provider_type]

    def all(self) -> List[SpeechProvider]:
        """All providers in declaration order"""
        return [self._providers[t] for t in SpeechProviderType]

    def describe_all(self) -> List[ProviderDescriptor]:
        return [provider.describe() for provider in self.all()]
