"""
Speech Provider Base Classes

Abstract base class, configuration model and data structures shared by
all speech providers. Every provider must implement this interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SpeechProviderType(str, Enum):
    """Supported speech providers (closed set)"""
    LOCAL = "local"             # On-device synthesizer
    ELEVENLABS = "elevenlabs"   # ElevenLabs (cloud, API key)
    GOOGLE = "google"           # Google Cloud TTS (cloud, API key)
    AZURE = "azure"             # Azure Cognitive Services (cloud, API key + region)


# ============================================================================
# Errors
# ============================================================================

class SpeechError(Exception):
    """Base class for every speech failure"""
    kind = "SpeechError"


class MissingParameterError(SpeechError):
    """Raised by the proxy when a required request field is absent"""
    kind = "MissingParameter"


class InvalidParameterError(SpeechError):
    """Raised by the proxy when a request field has an unusable value"""
    kind = "InvalidParameter"


class MissingCredentialError(SpeechError):
    """Raised client-side when a remote provider has no API key (or region)"""
    kind = "MissingCredential"


class VendorError(SpeechError):
    """Raised when a vendor (or the proxy in front of it) answers non-2xx"""
    kind = "VendorError"

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NetworkError(SpeechError):
    """Raised when the proxy or vendor cannot be reached"""
    kind = "NetworkError"


class UnsupportedProviderError(SpeechError):
    """Raised when a provider reports it is not supported in this environment"""
    kind = "UnsupportedProvider"


class UnknownProviderError(SpeechError):
    """Raised when the configuration references an unregistered provider id"""
    kind = "UnknownProvider"


class PlaybackError(SpeechError):
    """Raised when the synthesizer or audio player fails mid-playback"""
    kind = "PlaybackError"


class SpeechBusyError(SpeechError):
    """Raised by the single-flight guard while another speak is active"""
    kind = "SpeechBusy"


# ============================================================================
# Configuration
# ============================================================================

RATE_RANGE = (0.5, 2.0)
PITCH_RANGE = (0.0, 2.0)
VOLUME_RANGE = (0.0, 1.0)


def _clamp(value: float, bounds: tuple) -> float:
    low, high = bounds
    return max(low, min(high, float(value)))


class SpeechConfiguration(BaseModel):
    """
    Process-wide speech configuration.

    Numeric fields are clamped to their declared ranges. ``provider`` is
    kept as a plain id so that a value written by another process that is
    not registered still surfaces as UnknownProviderError at speak time.
    """
    model_config = ConfigDict(populate_by_name=True)

    provider: str = SpeechProviderType.LOCAL.value
    api_key: Optional[str] = Field(default=None, alias="apiKey")
    region: Optional[str] = None
    voice_id: Optional[str] = Field(default=None, alias="voiceId")
    rate: float = 1.0
    pitch: float = 1.0
    volume: float = 1.0

    @field_validator("provider", mode="before")
    @classmethod
    def provider_to_id(cls, v):
        if isinstance(v, SpeechProviderType):
            return v.value
        return v

    @field_validator("rate")
    @classmethod
    def clamp_rate(cls, v: float) -> float:
        return _clamp(v, RATE_RANGE)

    @field_validator("pitch")
    @classmethod
    def clamp_pitch(cls, v: float) -> float:
        return _clamp(v, PITCH_RANGE)

    @field_validator("volume")
    @classmethod
    def clamp_volume(cls, v: float) -> float:
        return _clamp(v, VOLUME_RANGE)

    def to_storage(self) -> Dict[str, Any]:
        """Serialize with the camelCase keys used in storage"""
        return self.model_dump(by_alias=True)


class SpeechConfigUpdate(BaseModel):
    """
    Partial update to SpeechConfiguration.

    Only the fields that were set get merged. Numeric values are clamped
    the same way as in the full configuration.
    """
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    provider: Optional[str] = None
    api_key: Optional[str] = Field(default=None, alias="apiKey")
    region: Optional[str] = None
    voice_id: Optional[str] = Field(default=None, alias="voiceId")
    rate: Optional[float] = None
    pitch: Optional[float] = None
    volume: Optional[float] = None

    @field_validator("provider", mode="before")
    @classmethod
    def provider_to_id(cls, v):
        if isinstance(v, SpeechProviderType):
            return v.value
        return v

    @field_validator("rate")
    @classmethod
    def clamp_rate(cls, v: Optional[float]) -> Optional[float]:
        return None if v is None else _clamp(v, RATE_RANGE)

    @field_validator("pitch")
    @classmethod
    def clamp_pitch(cls, v: Optional[float]) -> Optional[float]:
        return None if v is None else _clamp(v, PITCH_RANGE)

    @field_validator("volume")
    @classmethod
    def clamp_volume(cls, v: Optional[float]) -> Optional[float]:
        return None if v is None else _clamp(v, VOLUME_RANGE)

    def changes(self) -> Dict[str, Any]:
        """Fields explicitly set by the caller, keyed by field name"""
        return self.model_dump(exclude_unset=True)


# ============================================================================
# Descriptors
# ============================================================================

@dataclass(frozen=True)
class VoiceDescriptor:
    """Voice information"""
    id: str
    name: str
    language: str


@dataclass
class SpeechCapabilities:
    """Provider capabilities"""
    supports_pause: bool = False
    supports_resume: bool = False
    supports_stop: bool = False
    is_local: bool = False
    requires_api_key: bool = True
    requires_region: bool = False


@dataclass
class SetupGuide:
    """How to get a provider working, shown to users choosing a provider"""
    pros: List[str] = field(default_factory=list)
    cons: List[str] = field(default_factory=list)
    steps: List[str] = field(default_factory=list)
    link: Optional[str] = None
    free_tier: Optional[str] = None


@dataclass
class ProviderDescriptor:
    """Static provider description plus live support flag"""
    id: str
    display_name: str
    is_supported: bool
    description: str = ""
    requires_api_key: bool = False
    requires_region: bool = False
    setup_guide: Optional[SetupGuide] = None


# ============================================================================
# Provider contract
# ============================================================================

class SpeechProvider(ABC):
    """
    Abstract base class for speech providers.

    The contract is the lowest common denominator across vendors:
    is_supported / speak / get_voices. Pause, resume and stop are only
    offered where ``capabilities`` says so; callers must check first.
    """

    @property
    @abstractmethod
    def provider_type(self) -> SpeechProviderType:
        """Return the provider type"""
        pass

    @property
    @abstractmethod
    def display_name(self) -> str:
        """Human-readable provider name"""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Brief description of the provider"""
        pass

    @property
    @abstractmethod
    def capabilities(self) -> SpeechCapabilities:
        """Return provider capabilities"""
        pass

    @property
    def setup_guide(self) -> Optional[SetupGuide]:
        """Setup instructions, if the provider needs any"""
        return None

    @abstractmethod
    def is_supported(self) -> bool:
        """
        Capability check, no network I/O. The local provider starts its
        engine once to find out and caches the answer.

        Returns:
            True if the provider can be used in this environment
        """
        pass

    @abstractmethod
    async def speak(self, text: str, config: SpeechConfiguration) -> None:
        """
        Synthesize and play ``text``.

        Resolves when playback has finished and raises a SpeechError
        subclass on any failure. Callers must not pipeline calls.

        Args:
            text: Already sanitized text
            config: Current speech configuration
        """
        pass

    @abstractmethod
    async def get_voices(self) -> List[VoiceDescriptor]:
        """
        Get available voices.

        Returns:
            List of voices (may be empty)
        """
        pass

    def stop(self) -> None:
        """Stop playback immediately"""
        raise NotImplementedError(f"{self.display_name} does not support stop")

    def pause(self) -> None:
        """Pause playback"""
        raise NotImplementedError(f"{self.display_name} does not support pause")

    def resume(self) -> None:
        """Resume paused playback"""
        raise NotImplementedError(f"{self.display_name} does not support resume")

    def describe(self) -> ProviderDescriptor:
        """Provider descriptor with the live support flag"""
        caps = self.capabilities
        return ProviderDescriptor(
            id=self.provider_type.value,
            display_name=self.display_name,
            is_supported=self.is_supported(),
            description=self.description,
            requires_api_key=caps.requires_api_key,
            requires_region=caps.requires_region,
            setup_guide=self.setup_guide,
        )

    def get_status(self) -> Dict[str, Any]:
        """Get provider status for health checks"""
        caps = self.capabilities
        return {
            "provider": self.provider_type.value,
            "name": self.display_name,
            "supported": self.is_supported(),
            "capabilities": {
                "pause": caps.supports_pause,
                "resume": caps.supports_resume,
                "stop": caps.supports_stop,
                "is_local": caps.is_local,
                "requires_api_key": caps.requires_api_key,
                "requires_region": caps.requires_region,
            }
        }
