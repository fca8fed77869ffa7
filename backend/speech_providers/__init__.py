"""
Speech Providers Package

Multi-provider speech synthesis behind one contract:
- Local (on-device, pyttsx3) - free, offline, pause/resume/stop
- ElevenLabs (cloud) - API key
- Google Cloud TTS (cloud) - API key
- Azure Cognitive Services (cloud) - API key + region

Cloud providers never talk to vendors directly; they go through the
speech proxy routes, which hold the vendor-specific request shapes.
"""

from .base import (
    SpeechProvider,
    SpeechProviderType,
    SpeechConfiguration,
    SpeechConfigUpdate,
    SpeechCapabilities,
    VoiceDescriptor,
    ProviderDescriptor,
    SetupGuide,
    SpeechError,
    MissingParameterError,
    InvalidParameterError,
    MissingCredentialError,
    VendorError,
    NetworkError,
    UnsupportedProviderError,
    UnknownProviderError,
    PlaybackError,
    SpeechBusyError,
)
from .local_provider import LocalSpeechProvider, SpeechEngine, Pyttsx3Engine, Utterance
from .remote_provider import RemoteSpeechProvider
from .elevenlabs_provider import ElevenLabsProvider
from .google_provider import GoogleSpeechProvider
from .azure_provider import AzureSpeechProvider
from .playback import AudioPlayer, FFplayAudioPlayer
from .registry import SpeechProviderRegistry

__all__ = [
    # Base classes
    "SpeechProvider",
    "SpeechProviderType",
    "SpeechConfiguration",
    "SpeechConfigUpdate",
    "SpeechCapabilities",
    "VoiceDescriptor",
    "ProviderDescriptor",
    "SetupGuide",
    # Errors
    "SpeechError",
    "MissingParameterError",
    "InvalidParameterError",
    "MissingCredentialError",
    "VendorError",
    "NetworkError",
    "UnsupportedProviderError",
    "UnknownProviderError",
    "PlaybackError",
    "SpeechBusyError",
    # Providers
    "LocalSpeechProvider",
    "SpeechEngine",
    "Pyttsx3Engine",
    "Utterance",
    "RemoteSpeechProvider",
    "ElevenLabsProvider",
    "GoogleSpeechProvider",
    "AzureSpeechProvider",
    # Playback
    "AudioPlayer",
    "FFplayAudioPlayer",
    # Registry
    "SpeechProviderRegistry",
]
