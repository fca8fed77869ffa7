"""Speech proxy API schemas

Request bodies mirror what the remote speech providers send. Every field
is optional at the schema level so that missing values produce the
route's own 400 message instead of a validation error.
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class AzureSpeechRequest(BaseModel):
    """Azure synthesis request"""
    model_config = ConfigDict(populate_by_name=True)

    text: Optional[str] = None
    api_key: Optional[str] = Field(default=None, alias="apiKey")
    region: Optional[str] = None
    voice: str = "en-US-AriaNeural"
    rate: float = 1.0
    pitch: float = 1.0
    volume: float = 1.0


class ElevenLabsSpeechRequest(BaseModel):
    """ElevenLabs synthesis request"""
    model_config = ConfigDict(populate_by_name=True)

    text: Optional[str] = None
    api_key: Optional[str] = Field(default=None, alias="apiKey")
    voice_id: str = Field(default="21m00Tcm4TlvDq8ikWAM", alias="voiceId")
    stability: float = 0.5
    similarity_boost: float = Field(default=0.5, alias="similarityBoost")


class GoogleSpeechRequest(BaseModel):
    """Google Cloud synthesis request"""
    model_config = ConfigDict(populate_by_name=True)

    text: Optional[str] = None
    api_key: Optional[str] = Field(default=None, alias="apiKey")
    voice: str = "en-US-Wavenet-D"
    rate: float = 1.0
    pitch: float = 1.0
    volume: float = 1.0


class SetupGuideInfo(BaseModel):
    pros: List[str] = []
    cons: List[str] = []
    steps: List[str] = []
    link: Optional[str] = None
    free_tier: Optional[str] = None


class SpeechProviderInfo(BaseModel):
    """Speech provider description"""
    id: str
    display_name: str
    description: str
    is_supported: bool
    requires_api_key: bool
    requires_region: bool
    setup_guide: Optional[SetupGuideInfo] = None


class SpeechProviderListResponse(BaseModel):
    providers: List[SpeechProviderInfo]
    total: int
