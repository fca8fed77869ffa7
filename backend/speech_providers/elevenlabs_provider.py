"""
ElevenLabs Speech Provider

AI-generated natural voices from ElevenLabs. Needs a user API key, which
is forwarded per request through the speech proxy.
"""

from typing import Optional, Dict, Any

from .base import (
    SpeechProviderType,
    SpeechConfiguration,
    SetupGuide,
    VoiceDescriptor,
)
from .remote_provider import RemoteSpeechProvider


class ElevenLabsProvider(RemoteSpeechProvider):
    """ElevenLabs text-to-speech"""

    ROUTE = "elevenlabs"
    DEFAULT_VOICE = "21m00Tcm4TlvDq8ikWAM"
    STABILITY = 0.5
    SIMILARITY_BOOST = 0.5

    VOICES = [
        VoiceDescriptor("21m00Tcm4TlvDq8ikWAM", "Rachel", "en-US"),
        VoiceDescriptor("AZnzlk1XvdvUeBnXmlld", "Domi", "en-US"),
        VoiceDescriptor("EXAVITQu4vr4xnSDxMaL", "Bella", "en-US"),
        VoiceDescriptor("ErXwobaYiN019PkySvjV", "Antoni", "en-US"),
        VoiceDescriptor("MF3mGyEYCl7XYWbV9V6O", "Elli", "en-US"),
        VoiceDescriptor("TxGEqnHWrfWFTfGW9XjX", "Josh", "en-US"),
        VoiceDescriptor("VR6AewLTigWG4xSOukaG", "Arnold", "en-US"),
        VoiceDescriptor("pNInz6obpgDQGcFmaJgB", "Adam", "en-US"),
        VoiceDescriptor("yoZ06aMxZJJ28mfd3POQ", "Sam", "en-US"),
    ]

    @property
    def provider_type(self) -> SpeechProviderType:
        return SpeechProviderType.ELEVENLABS

    @property
    def display_name(self) -> str:
        return "ElevenLabs"

    @property
    def description(self) -> str:
        return "AI-powered natural voices"

    @property
    def setup_guide(self) -> Optional[SetupGuide]:
        return SetupGuide(
            pros=["High-quality AI voices", "Natural speech", "Multiple languages"],
            cons=["Requires API key", "Usage limits"],
            steps=[
                "Go to elevenlabs.io",
                "Sign up for a free account",
                "Navigate to Profile -> API Keys",
                "Copy your API key",
                "Paste it in the speech settings",
            ],
            link="https://elevenlabs.io",
            free_tier="10,000 characters/month",
        )

    def build_payload(self, text: str, config: SpeechConfiguration) -> Dict[str, Any]:
        return {
            "text": text,
            "apiKey": config.api_key,
            "voiceId": config.voice_id or self.DEFAULT_VOICE,
            "stability": self.STABILITY,
            "similarityBoost": self.SIMILARITY_BOOST,
        }
