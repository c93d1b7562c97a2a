"""Source normalization: one dispatch from request mode to plain source text"""
import logging
from typing import Awaitable, Callable, Dict

from collection.errors import MissingFieldError, TooShortError
from collection.extractors.html import HtmlExtractor
from collection.extractors.transcript import TranscriptExtractor
from collection.schemas import GenerationRequest, SourceDocument, SourceMode
from collection.text import MIN_SOURCE_CHARS

logger = logging.getLogger(__name__)


class SourceNormalizer:
    """Turns a validated request into a SourceDocument using the extractor for its mode"""

    def __init__(self, html_extractor: HtmlExtractor, transcript_extractor: TranscriptExtractor):
        self.html_extractor = html_extractor
        self.transcript_extractor = transcript_extractor

        # Single dispatch site; every SourceMode must have a handler
        self._handlers: Dict[SourceMode, Callable[[GenerationRequest], Awaitable[SourceDocument]]] = {
            SourceMode.TEXT: self._from_text,
            SourceMode.URL: self._from_url,
            SourceMode.VIDEO: self._from_video,
        }
        unhandled = set(SourceMode) - set(self._handlers)
        if unhandled:
            raise TypeError(f"No source handler for modes: {sorted(m.value for m in unhandled)}")

    async def normalize(self, request: GenerationRequest) -> SourceDocument:
        """
        Derive source text for the request.

        Required fields are checked before any extractor is called.

        Raises:
            MissingFieldError: The mode's required field is absent
            TooShortError: Direct text is below the minimum length
            ExtractionError: The extractor could not produce usable text
        """
        document = await self._handlers[request.mode](request)
        logger.info("Source normalized", extra={
            "mode": request.mode.value,
            "chars": len(document.text),
        })
        return document

    async def _from_text(self, request: GenerationRequest) -> SourceDocument:
        if request.content is None:
            raise MissingFieldError("content", "Missing required field 'content' for text mode.")
        text = request.content.strip()
        if len(text) < MIN_SOURCE_CHARS:
            raise TooShortError(f"Please provide at least {MIN_SOURCE_CHARS} characters of text.")
        return SourceDocument(text=text)

    async def _from_url(self, request: GenerationRequest) -> SourceDocument:
        if request.url is None:
            raise MissingFieldError("url", "Missing required field 'url' for webpage mode.")
        return await self.html_extractor.extract_from_url(request.url)

    async def _from_video(self, request: GenerationRequest) -> SourceDocument:
        if request.video_url is None:
            raise MissingFieldError("videoUrl", "Missing required field 'videoUrl' for YouTube mode.")
        return await self.transcript_extractor.extract_from_youtube(request.video_url)
