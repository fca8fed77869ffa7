"""
Azure Speech Provider

Microsoft neural voices through Azure Cognitive Services. Needs both a
Speech resource key and the resource region.
"""

from typing import Optional, Dict, Any

from .base import (
    SpeechProviderType,
    SpeechCapabilities,
    SpeechConfiguration,
    SetupGuide,
    VoiceDescriptor,
    MissingCredentialError,
)
from .remote_provider import RemoteSpeechProvider


class AzureSpeechProvider(RemoteSpeechProvider):
    """Azure Cognitive Services text-to-speech"""

    ROUTE = "azure"
    DEFAULT_VOICE = "en-US-AriaNeural"

    VOICES = [
        VoiceDescriptor("en-US-AriaNeural", "Aria (Neural)", "en-US"),
        VoiceDescriptor("en-US-JennyNeural", "Jenny (Neural)", "en-US"),
        VoiceDescriptor("en-US-GuyNeural", "Guy (Neural)", "en-US"),
        VoiceDescriptor("en-US-DavisNeural", "Davis (Neural)", "en-US"),
        VoiceDescriptor("en-US-AmberNeural", "Amber (Neural)", "en-US"),
        VoiceDescriptor("en-US-AnaNeural", "Ana (Neural)", "en-US"),
        VoiceDescriptor("en-US-BrandonNeural", "Brandon (Neural)", "en-US"),
        VoiceDescriptor("en-US-ChristopherNeural", "Christopher (Neural)", "en-US"),
        VoiceDescriptor("en-US-CoraNeural", "Cora (Neural)", "en-US"),
        VoiceDescriptor("en-US-ElizabethNeural", "Elizabeth (Neural)", "en-US"),
    ]

    @property
    def provider_type(self) -> SpeechProviderType:
        return SpeechProviderType.AZURE

    @property
    def display_name(self) -> str:
        return "Azure Cognitive Services"

    @property
    def description(self) -> str:
        return "Microsoft neural voices"

    @property
    def capabilities(self) -> SpeechCapabilities:
        caps = super().capabilities
        caps.requires_region = True
        return caps

    @property
    def setup_guide(self) -> Optional[SetupGuide]:
        return SetupGuide(
            pros=["Neural voices", "High quality", "Good pricing"],
            cons=["Requires Azure account", "More complex setup"],
            steps=[
                "Go to Azure Portal",
                "Create a Speech resource",
                "Copy the API key and region",
                "Enter both in speech settings",
            ],
            link="https://portal.azure.com",
            free_tier="5 hours/month free",
        )

    def check_credentials(self, config: SpeechConfiguration) -> None:
        if not config.api_key or not config.region:
            raise MissingCredentialError("Azure API key and region required")

    def build_payload(self, text: str, config: SpeechConfiguration) -> Dict[str, Any]:
        return {
            "text": text,
            "apiKey": config.api_key,
            "region": config.region,
            "voice": config.voice_id or self.DEFAULT_VOICE,
            "rate": config.rate,
            "pitch": config.pitch,
            "volume": config.volume,
        }
