"""
Speech vendor calls used by the proxy routes.

Each function turns a proxy request into one vendor request (two for
Azure: token exchange, then synthesis) and returns MP3 bytes. Vendor
failures raise VendorError carrying the vendor's status code; missing
request fields raise MissingParameterError. No retries, no caching, and
no server-side credentials: the caller's key is forwarded as-is.
"""

import base64
import re
from xml.sax.saxutils import escape, quoteattr

import httpx

from backend.speech_providers import (
    MissingParameterError,
    InvalidParameterError,
    NetworkError,
    VendorError,
)
from web_ui.api.schemas.speech_schemas import (
    AzureSpeechRequest,
    ElevenLabsSpeechRequest,
    GoogleSpeechRequest,
)
from config import settings
from utils.logger import logger


# Azure regions are short lowercase identifiers such as "eastus" or "westeurope"
AZURE_REGION_PATTERN = re.compile(r"[a-z0-9]+")


def _json_or_empty(response: httpx.Response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def build_azure_ssml(text: str, voice: str, rate: float, pitch: float, volume: float) -> str:
    """
    SSML document for one utterance.

    ``rate`` is a speed multiplier, ``pitch`` is relative to 1.0 and
    ``volume`` is 0..1; they are mapped onto the prosody units Azure accepts.
    """
    pitch_percent = round((pitch - 1.0) * 100)
    return (
        '<speak version="1.0" xmlns="http://www.w3.org/2001/10/synthesis" xml:lang="en-US">'
        f'<voice name={quoteattr(voice)}>'
        f'<prosody rate="{rate:g}" pitch="{pitch_percent:+d}%" volume="{round(volume * 100)}">'
        f'{escape(text)}'
        '</prosody></voice></speak>'
    )


async def synthesize_azure(client: httpx.AsyncClient, request: AzureSpeechRequest) -> bytes:
    if not request.text or not request.api_key or not request.region:
        raise MissingParameterError("Text, API key, and region are required")
    if not AZURE_REGION_PATTERN.fullmatch(request.region):
        raise InvalidParameterError("Invalid Azure region")

    try:
        token_response = await client.post(
            settings.AZURE_TOKEN_URL.format(region=request.region),
            headers={
                "Ocp-Apim-Subscription-Key": request.api_key,
                "Content-Type": "application/x-www-form-urlencoded",
            },
        )
        if token_response.is_error:
            logger.warning(f"Azure token exchange failed with {token_response.status_code}")
            raise VendorError("Failed to get Azure access token", status_code=token_response.status_code)

        ssml = build_azure_ssml(request.text, request.voice, request.rate, request.pitch, request.volume)
        response = await client.post(
            settings.AZURE_TTS_URL.format(region=request.region),
            headers={
                "Authorization": f"Bearer {token_response.text}",
                "Content-Type": "application/ssml+xml",
                "X-Microsoft-OutputFormat": settings.AZURE_OUTPUT_FORMAT,
                "User-Agent": settings.VENDOR_USER_AGENT,
            },
            content=ssml.encode("utf-8"),
        )
    except httpx.RequestError as e:
        raise NetworkError(f"Azure TTS request failed: {e}") from e

    if response.is_error:
        logger.warning(f"Azure TTS failed with {response.status_code}")
        raise VendorError(f"Azure TTS API error: {response.reason_phrase}", status_code=response.status_code)

    return response.content


async def synthesize_elevenlabs(client: httpx.AsyncClient, request: ElevenLabsSpeechRequest) -> bytes:
    if not request.text or not request.api_key:
        raise MissingParameterError("Text and API key are required")

    try:
        response = await client.post(
            f"{settings.ELEVENLABS_TTS_URL}/{request.voice_id}",
            headers={
                "Accept": "audio/mpeg",
                "Content-Type": "application/json",
                "xi-api-key": request.api_key,
            },
            json={
                "text": request.text,
                "model_id": settings.ELEVENLABS_MODEL_ID,
                "voice_settings": {
                    "stability": request.stability,
                    "similarity_boost": request.similarity_boost,
                },
            },
        )
    except httpx.RequestError as e:
        raise NetworkError(f"ElevenLabs request failed: {e}") from e

    if response.is_error:
        detail = _json_or_empty(response).get("detail")
        message = detail.get("message") if isinstance(detail, dict) else None
        logger.warning(f"ElevenLabs TTS failed with {response.status_code}")
        raise VendorError(
            f"ElevenLabs API error: {message or 'Unknown error'}",
            status_code=response.status_code,
        )

    return response.content


async def synthesize_google(client: httpx.AsyncClient, request: GoogleSpeechRequest) -> bytes:
    if not request.text or not request.api_key:
        raise MissingParameterError("Text and API key are required")

    try:
        response = await client.post(
            settings.GOOGLE_TTS_URL,
            params={"key": request.api_key},
            json={
                "input": {"text": request.text},
                "voice": {
                    "languageCode": "en-US",
                    "name": request.voice,
                    "ssmlGender": "NEUTRAL",
                },
                "audioConfig": {
                    "audioEncoding": "MP3",
                    "speakingRate": request.rate,
                    "pitch": request.pitch,
                    # 0..1 volume onto -16..0 dB gain
                    "volumeGainDb": (request.volume - 1) * 16,
                },
            },
        )
    except httpx.RequestError as e:
        raise NetworkError(f"Google TTS request failed: {e}") from e

    if response.is_error:
        error = _json_or_empty(response).get("error")
        message = error.get("message") if isinstance(error, dict) else None
        logger.warning(f"Google TTS failed with {response.status_code}")
        raise VendorError(
            f"Google TTS API error: {message or 'Unknown error'}",
            status_code=response.status_code,
        )

    audio_content = _json_or_empty(response).get("audioContent")
    if not audio_content:
        raise VendorError("Google TTS API error: response has no audio content")
    return base64.b64decode(audio_content)
