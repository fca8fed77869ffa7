"""Speech proxy API routes

Server-side forwarding for the cloud speech vendors:
- Azure Cognitive Services (API key + region)
- ElevenLabs (API key)
- Google Cloud TTS (API key)

Every route answers either raw audio (audio/mpeg) or a JSON body of the
form {"error": "..."} with the vendor's status code.
"""

from typing import AsyncIterator, Awaitable, Callable, Type, TypeVar

import httpx
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from backend.speech_providers import (
    SpeechProviderRegistry,
    SpeechError,
    MissingParameterError,
    InvalidParameterError,
    VendorError,
)
from web_ui.api.schemas.speech_schemas import (
    AzureSpeechRequest,
    ElevenLabsSpeechRequest,
    GoogleSpeechRequest,
    SetupGuideInfo,
    SpeechProviderInfo,
    SpeechProviderListResponse,
)
from web_ui.api.services import speech_vendors
from utils.logger import logger

router = APIRouter()

RequestModel = TypeVar("RequestModel", bound=BaseModel)


async def get_vendor_client() -> AsyncIterator[httpx.AsyncClient]:
    """HTTP client used to reach the vendors, one per request"""
    async with httpx.AsyncClient() as client:
        yield client


def get_speech_registry(request: Request) -> SpeechProviderRegistry:
    registry = getattr(request.app.state, "speech_registry", None)
    if registry is None:
        registry = SpeechProviderRegistry()
        request.app.state.speech_registry = registry
    return registry


def _audio_response(audio: bytes) -> Response:
    return Response(
        content=audio,
        media_type="audio/mpeg",
        headers={"Content-Length": str(len(audio))},
    )


def _body_schema(model: Type[BaseModel]) -> dict:
    """OpenAPI request body for routes that parse their own JSON"""
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": model.model_json_schema(by_alias=True)}},
        }
    }


async def _parse_body(request: Request, model: Type[RequestModel]) -> RequestModel:
    """
    Parse the JSON body into ``model``.

    Raises:
        InvalidParameterError: If the body is not JSON or a field has the wrong type
    """
    try:
        body = await request.json()
    except ValueError:
        raise InvalidParameterError("Request body must be valid JSON")

    try:
        return model.model_validate(body)
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error.get("loc", ())) or "body"
        raise InvalidParameterError(f"Invalid request field '{field}': {error.get('msg', 'invalid value')}")


async def _proxy(vendor: str, call: Callable[[], Awaitable[bytes]]) -> Response:
    try:
        audio = await call()
    except (MissingParameterError, InvalidParameterError) as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    except VendorError as e:
        return JSONResponse({"error": e.message}, status_code=e.status_code)
    except SpeechError as e:
        logger.error(f"{vendor} TTS error: {e}")
        return JSONResponse({"error": str(e)}, status_code=500)
    except Exception as e:
        logger.error(f"{vendor} TTS error: {e}")
        return JSONResponse({"error": str(e) or "Unknown error"}, status_code=500)

    logger.debug(f"{vendor} TTS returned {len(audio)} bytes")
    return _audio_response(audio)


@router.post("/azure", openapi_extra=_body_schema(AzureSpeechRequest))
async def azure_speech(
    request: Request,
    client: httpx.AsyncClient = Depends(get_vendor_client),
):
    """Synthesize speech with Azure Cognitive Services"""
    async def call() -> bytes:
        body = await _parse_body(request, AzureSpeechRequest)
        return await speech_vendors.synthesize_azure(client, body)

    return await _proxy("Azure", call)


@router.post("/elevenlabs", openapi_extra=_body_schema(ElevenLabsSpeechRequest))
async def elevenlabs_speech(
    request: Request,
    client: httpx.AsyncClient = Depends(get_vendor_client),
):
    """Synthesize speech with ElevenLabs"""
    async def call() -> bytes:
        body = await _parse_body(request, ElevenLabsSpeechRequest)
        return await speech_vendors.synthesize_elevenlabs(client, body)

    return await _proxy("ElevenLabs", call)


@router.post("/google", openapi_extra=_body_schema(GoogleSpeechRequest))
async def google_speech(
    request: Request,
    client: httpx.AsyncClient = Depends(get_vendor_client),
):
    """Synthesize speech with Google Cloud TTS"""
    async def call() -> bytes:
        body = await _parse_body(request, GoogleSpeechRequest)
        return await speech_vendors.synthesize_google(client, body)

    return await _proxy("Google", call)


@router.get("/providers", response_model=SpeechProviderListResponse)
async def list_providers(registry: SpeechProviderRegistry = Depends(get_speech_registry)):
    """List every speech provider with its setup guide"""
    providers = []
    for descriptor in registry.describe_all():
        guide = descriptor.setup_guide
        providers.append(SpeechProviderInfo(
            id=descriptor.id,
            display_name=descriptor.display_name,
            description=descriptor.description,
            is_supported=descriptor.is_supported,
            requires_api_key=descriptor.requires_api_key,
            requires_region=descriptor.requires_region,
            setup_guide=SetupGuideInfo(
                pros=guide.pros,
                cons=guide.cons,
                steps=guide.steps,
                link=guide.link,
                free_tier=guide.free_tier,
            ) if guide else None,
        ))
    return SpeechProviderListResponse(providers=providers, total=len(providers))
