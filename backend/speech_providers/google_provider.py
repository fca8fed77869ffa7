"""
Google Cloud Speech Provider

Google Cloud Text-to-Speech (Wavenet voices). Needs a Google Cloud API key
with the Text-to-Speech API enabled.
"""

from typing import Optional, Dict, Any

from .base import (
    SpeechProviderType,
    SpeechConfiguration,
    SetupGuide,
    VoiceDescriptor,
)
from .remote_provider import RemoteSpeechProvider


class GoogleSpeechProvider(RemoteSpeechProvider):
    """Google Cloud text-to-speech"""

    ROUTE = "google"
    DEFAULT_VOICE = "en-US-Wavenet-D"

    VOICES = [
        VoiceDescriptor("en-US-Wavenet-A", "Google US English (Male)", "en-US"),
        VoiceDescriptor("en-US-Wavenet-B", "Google US English (Male)", "en-US"),
        VoiceDescriptor("en-US-Wavenet-C", "Google US English (Female)", "en-US"),
        VoiceDescriptor("en-US-Wavenet-D", "Google US English (Male)", "en-US"),
        VoiceDescriptor("en-US-Wavenet-E", "Google US English (Female)", "en-US"),
        VoiceDescriptor("en-US-Wavenet-F", "Google US English (Female)", "en-US"),
        VoiceDescriptor("en-GB-Wavenet-A", "Google UK English (Male)", "en-GB"),
        VoiceDescriptor("en-GB-Wavenet-B", "Google UK English (Male)", "en-GB"),
        VoiceDescriptor("en-GB-Wavenet-C", "Google UK English (Female)", "en-GB"),
        VoiceDescriptor("en-GB-Wavenet-D", "Google UK English (Male)", "en-GB"),
    ]

    @property
    def provider_type(self) -> SpeechProviderType:
        return SpeechProviderType.GOOGLE

    @property
    def display_name(self) -> str:
        return "Google Cloud TTS"

    @property
    def description(self) -> str:
        return "Professional Google voices"

    @property
    def setup_guide(self) -> Optional[SetupGuide]:
        return SetupGuide(
            pros=["High quality", "Reliable", "Multiple voices"],
            cons=["Requires Google Cloud setup", "Pay per use"],
            steps=[
                "Go to Google Cloud Console",
                "Create a new project or select existing",
                "Enable Text-to-Speech API",
                "Create credentials (API key)",
                "Copy the API key to speech settings",
            ],
            link="https://console.cloud.google.com",
            free_tier="$300 credit for new users",
        )

    def build_payload(self, text: str, config: SpeechConfiguration) -> Dict[str, Any]:
        return {
            "text": text,
            "apiKey": config.api_key,
            "voice": config.voice_id or self.DEFAULT_VOICE,
            "rate": config.rate,
            "pitch": config.pitch,
            "volume": config.volume,
        }
