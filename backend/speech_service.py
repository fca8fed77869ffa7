"""
Speech Service

Owns the current speech configuration, resolves the configured provider
and dispatches speak / voice requests to it. Constructed once at startup
and passed to whoever needs it.
"""

from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from backend.speech_providers import (
    SpeechProvider,
    SpeechProviderType,
    SpeechConfiguration,
    SpeechConfigUpdate,
    SpeechProviderRegistry,
    ProviderDescriptor,
    VoiceDescriptor,
    SpeechError,
    UnknownProviderError,
    UnsupportedProviderError,
)
from backend.settings_store import SettingsStore
from backend.text_utils import sanitize_text

from utils.logger import logger


CONFIG_KEY = "speechConfig"


class SpeechService:
    """Configuration, provider resolution and dispatch"""

    def __init__(
        self,
        registry: Optional[SpeechProviderRegistry] = None,
        store: Optional[SettingsStore] = None,
    ):
        self.registry = registry or SpeechProviderRegistry()
        self.store = store or SettingsStore()
        self._config = SpeechConfiguration()
        self._load_config()

    def _load_config(self) -> None:
        """Merge the persisted configuration over the in-memory one"""
        stored = self.store.get(CONFIG_KEY)
        if not stored:
            return
        if not isinstance(stored, dict):
            logger.warning("Ignoring malformed persisted speech configuration")
            return

        merged = {**self._config.to_storage(), **stored}
        try:
            self._config = SpeechConfiguration.model_validate(merged)
        except ValidationError as e:
            logger.warning(f"Failed to load speech configuration, keeping current: {e}")

    def get_config(self) -> SpeechConfiguration:
        """Current configuration, re-read from storage"""
        self._load_config()
        return self._config.model_copy()

    def set_config(self, partial: Optional[Dict[str, Any]] = None, **fields) -> SpeechConfiguration:
        """
        Shallow-merge a partial update and persist the full result.

        Accepts field names or their camelCase aliases. Numeric fields are
        clamped to range.

        Raises:
            UnknownProviderError: If ``provider`` is not a registered id
            SpeechError: If the update has fields of the wrong type
        """
        values = {**(partial or {}), **fields}
        try:
            update = SpeechConfigUpdate.model_validate(values)
        except ValidationError as e:
            raise SpeechError(f"Invalid speech configuration: {e}") from e

        changes = update.changes()
        if "provider" in changes:
            try:
                SpeechProviderType(changes["provider"])
            except ValueError:
                raise UnknownProviderError(f"Unknown speech provider: {changes['provider']}")

        self._load_config()
        self._config = self._config.model_copy(update=changes)
        self.store.set(CONFIG_KEY, self._config.to_storage())

        logger.info(f"Speech configuration updated: {sorted(changes)}")
        return self._config.model_copy()

    def get_provider(self, provider_id=None) -> SpeechProvider:
        """
        Provider for ``provider_id``, or the configured one.

        Raises:
            UnknownProviderError: If the id is not registered
        """
        if provider_id is None:
            provider_id = self.get_config().provider
        return self.registry.get(provider_id)

    async def speak(self, text: str) -> None:
        """
        Sanitize ``text`` and speak it with the configured provider.

        Raises:
            UnknownProviderError, UnsupportedProviderError, and whatever the
            provider raises (MissingCredentialError, VendorError, ...)
        """
        config = self.get_config()
        provider = self.registry.get(config.provider)

        if not provider.is_supported():
            raise UnsupportedProviderError(f"{provider.display_name} is not supported")

        clean = sanitize_text(text)
        logger.debug(f"Speaking {len(clean)} chars with {provider.provider_type.value}")
        await provider.speak(clean, config)

    async def get_voices(self) -> List[VoiceDescriptor]:
        config = self.get_config()
        try:
            provider = self.registry.get(config.provider)
        except UnknownProviderError:
            logger.warning(f"No voices: unknown speech provider {config.provider}")
            return []
        return await provider.get_voices()

    def get_available_providers(self) -> List[ProviderDescriptor]:
        """Descriptors for every provider, in a stable order"""
        return self.registry.describe_all()
