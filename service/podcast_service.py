"""Podcast generation orchestration: source text -> script -> narration audio"""
import base64
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Union

import httpx
import requests
from pydantic import ValidationError as SchemaValidationError

from collection.errors import ExtractionError, ValidationError
from collection.extractors.html import HtmlExtractor
from collection.extractors.transcript import TranscriptExtractor
from collection.normalizer import SourceNormalizer
from collection.schemas import GenerationRequest, SourceDocument
from core.config import PodcastSettings
from core.errors import (
    BadRequestError,
    GenerationFailedError,
    InternalError,
    PipelineError,
    SpeechSynthesisError,
    UnprocessableSourceError,
)
from generation.clients.model_client import (
    ProviderError,
    ScriptGenerationClient,
    SpeechSynthesisClient,
    StubScriptClient,
    StubSpeechClient,
)
from generation.clients.openai_client import OpenAIScriptClient, OpenAISpeechClient
from generation.guardrails.rules import fit_for_speech, looks_like_mp3, validate_script
from service.dto import GenerationResponseDTO

logger = logging.getLogger(__name__)

GENERIC_INTERNAL_MESSAGE = "Unexpected server error. Please try again later."
NETWORK_FAULTS = (httpx.TransportError, requests.ConnectionError, OSError)


@dataclass(frozen=True)
class AudioArtifact:
    """MP3 narration handed to the caller; never stored server-side"""
    data: bytes
    content_type: str = "audio/mpeg"

    @property
    def base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")


@dataclass(frozen=True)
class PodcastResult:
    """All-or-nothing output of one pipeline run"""
    script: str
    audio: AudioArtifact
    source: SourceDocument

    def to_response(self) -> GenerationResponseDTO:
        return GenerationResponseDTO(script=self.script, audio_base64=self.audio.base64)


def first_issue_message(exc: SchemaValidationError) -> str:
    """One actionable message for the first violated constraint"""
    errors = exc.errors()
    if not errors:
        return "Invalid request payload."

    issue = errors[0]
    if issue.get("type") == "value_error":
        cause = (issue.get("ctx") or {}).get("error")
        if cause:
            return str(cause)

    field = ".".join(str(part) for part in issue.get("loc", ()))
    return f"{field}: {issue['msg']}" if field else issue["msg"]


def parse_request(raw_payload: Union[bytes, str, Any]) -> GenerationRequest:
    """
    Parse and schema-validate a raw request body.

    Raises:
        BadRequestError: Body is not JSON or violates the request schema
    """
    payload = raw_payload
    if isinstance(raw_payload, (bytes, bytearray, str)):
        try:
            payload = json.loads(raw_payload)
        except ValueError:
            raise BadRequestError("Request body must be valid JSON.", code="INVALID_JSON")

    try:
        return GenerationRequest.model_validate(payload)
    except SchemaValidationError as e:
        raise BadRequestError(first_issue_message(e), code="VALIDATION_FAILED")


def classify_unexpected(exc: Exception) -> PipelineError:
    """Configuration and network faults are internal; anything else is attributed to the request"""
    if isinstance(exc, ProviderError) and exc.is_configuration_fault:
        return InternalError(GENERIC_INTERNAL_MESSAGE, code="CONFIGURATION_FAULT")
    if isinstance(exc, NETWORK_FAULTS):
        return InternalError(GENERIC_INTERNAL_MESSAGE, code="NETWORK_UNREACHABLE")
    return BadRequestError(str(exc).strip() or GENERIC_INTERNAL_MESSAGE)


class PodcastPipeline:
    """
    Request handler core: validates a payload, then runs normalization,
    script generation, and speech synthesis in strict sequence.

    Every failure leaves as exactly one PipelineError subclass. The
    pipeline holds only immutable collaborators, so concurrent requests
    share no per-request state.
    """

    def __init__(
        self,
        normalizer: SourceNormalizer,
        script_client: ScriptGenerationClient,
        speech_client: SpeechSynthesisClient,
    ):
        self.normalizer = normalizer
        self.script_client = script_client
        self.speech_client = speech_client

    @property
    def provider(self) -> str:
        return self.script_client.name

    async def generate(self, raw_payload: Any, *, trace_id: str) -> PodcastResult:
        """
        Run the full pipeline for one request.

        Args:
            raw_payload: JSON body (bytes/str) or an already-decoded mapping
            trace_id: Request tracing ID

        Returns:
            PodcastResult: Script and audio for the caller

        Raises:
            PipelineError: BadRequestError (400), UnprocessableSourceError (422),
                GenerationFailedError (502) or InternalError (500)
        """
        start_time = time.time()
        mode = None

        try:
            request = parse_request(raw_payload)
            mode = request.mode.value
            source = await self._normalize(request, trace_id)
            script = await self._generate_script(request, source, trace_id)
            audio = await self._synthesize(script, request.voice, trace_id)

        except PipelineError as e:
            log = logger.error if e.http_status >= 500 else logger.warning
            log(f"Podcast generation failed: {e.message}", extra={
                "trace_id": trace_id,
                "mode": mode,
                "status": e.http_status,
                "error_type": type(e).__name__,
            })
            raise

        except Exception as e:
            error = classify_unexpected(e)
            logger.exception("Unexpected pipeline failure", extra={
                "trace_id": trace_id,
                "mode": mode,
                "status": error.http_status,
                "error_type": type(e).__name__,
            })
            raise error from e

        logger.info("Podcast generation completed", extra={
            "trace_id": trace_id,
            "mode": mode,
            "status": 200,
            "latency_ms": int((time.time() - start_time) * 1000),
        })
        return PodcastResult(script=script, audio=audio, source=source)

    async def _normalize(self, request: GenerationRequest, trace_id: str) -> SourceDocument:
        try:
            source = await self.normalizer.normalize(request)
        except ValidationError as e:
            raise BadRequestError(str(e), code="VALIDATION_FAILED") from e
        except ExtractionError as e:
            raise UnprocessableSourceError(str(e), code=type(e).__name__) from e

        logger.info("Source ready", extra={
            "trace_id": trace_id,
            "stage": "normalize",
            "mode": request.mode.value,
            "chars": len(source.text),
        })
        return source

    async def _generate_script(self, request: GenerationRequest, source: SourceDocument, trace_id: str) -> str:
        try:
            script = await self.script_client.generate(source.text, request.mode.value, source.origin)
        except ProviderError as e:
            if e.is_configuration_fault:
                raise InternalError(
                    "The script generation service rejected the configured credentials.",
                    code="CONFIGURATION_FAULT",
                ) from e
            raise GenerationFailedError(f"Script generation failed: {e}") from e

        violations = validate_script(script)
        if violations:
            logger.warning(f"Generated script rejected: {violations}", extra={
                "trace_id": trace_id,
                "stage": "script",
            })
            raise GenerationFailedError(
                "Failed to generate a script. Try again with different source material."
            )

        narrated = fit_for_speech(script)
        logger.info("Script ready", extra={
            "trace_id": trace_id,
            "stage": "script",
            "chars": len(narrated),
        })
        return narrated

    async def _synthesize(self, script: str, voice: str, trace_id: str) -> AudioArtifact:
        try:
            audio = await self.speech_client.synthesize(script, voice)
        except ProviderError as e:
            if e.is_configuration_fault:
                raise InternalError(
                    "The speech synthesis service rejected the configured credentials.",
                    code="CONFIGURATION_FAULT",
                ) from e
            raise SpeechSynthesisError(f"Speech synthesis failed: {e}") from e

        if not looks_like_mp3(audio):
            raise SpeechSynthesisError("Speech synthesis returned no playable MP3 audio.")

        logger.info("Audio ready", extra={
            "trace_id": trace_id,
            "stage": "synthesize",
            "chars": len(audio),
        })
        return AudioArtifact(data=audio)


def build_pipeline(settings: PodcastSettings) -> PodcastPipeline:
    """
    Assemble the pipeline from settings once at startup.

    Raises:
        InternalError: Credentials missing or provider unknown
    """
    normalizer = SourceNormalizer(
        HtmlExtractor(timeout=settings.fetch_timeout, max_chars=settings.max_source_chars),
        TranscriptExtractor(languages=settings.transcript_languages, max_chars=settings.max_source_chars),
    )

    provider = settings.generation_provider.strip().lower()
    if provider == "stub":
        return PodcastPipeline(normalizer, StubScriptClient(), StubSpeechClient())

    if provider == "openai":
        api_key = (settings.openai_api_key or "").strip()
        if not api_key:
            raise InternalError(
                "OPENAI_API_KEY is not configured; set it in the environment or .env file.",
                code="MISSING_CREDENTIALS",
            )
        shared = {"base_url": settings.openai_base_url, "timeout": settings.provider_timeout}
        script_client = OpenAIScriptClient(
            api_key,
            model=settings.script_model,
            temperature=settings.script_temperature,
            max_output_tokens=settings.script_max_output_tokens,
            **shared,
        )
        speech_client = OpenAISpeechClient(api_key, model=settings.speech_model, **shared)
        return PodcastPipeline(normalizer, script_client, speech_client)

    raise InternalError(
        f"Unknown generation provider '{settings.generation_provider}'; use 'openai' or 'stub'.",
        code="BAD_CONFIGURATION",
    )
