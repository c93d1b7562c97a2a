"""YouTube caption extraction"""
import asyncio
import logging
import re
from typing import Any, Callable, Dict, List, Optional, Sequence
from urllib.parse import parse_qs, urlparse

import requests
from youtube_transcript_api import (
    CouldNotRetrieveTranscript,
    NoTranscriptFound,
    RequestBlocked,
    YouTubeTranscriptApi,
)

from collection.errors import (
    EmptyContentError,
    FetchError,
    InvalidVideoUrlError,
    TranscriptUnavailableError,
)
from collection.schemas import SourceDocument
from collection.text import MIN_SOURCE_CHARS, collapse_whitespace, truncate_at_whitespace

logger = logging.getLogger(__name__)

Segment = Dict[str, Any]
SegmentFetcher = Callable[[str, Sequence[str]], List[Segment]]

YOUTUBE_HOSTS = {
    "youtube.com",
    "m.youtube.com",
    "music.youtube.com",
    "youtube-nocookie.com",
}
SHORT_HOSTS = {"youtu.be"}
# Path prefixes that carry the id as the next segment
ID_PATH_PREFIXES = ("embed", "shorts", "live", "v", "e")

VIDEO_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")


def parse_video_id(video_url: str) -> Optional[str]:
    """
    Recover the video id from watch, short, embed, shorts and live URLs.

    Returns:
        The id, or None when the URL is not a recognizable YouTube video URL
    """
    parsed = urlparse(video_url.strip())
    host = (parsed.hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    segments = [part for part in parsed.path.split("/") if part]

    candidate = None
    if host in SHORT_HOSTS:
        candidate = segments[0] if segments else None
    elif host in YOUTUBE_HOSTS:
        if segments[:1] == ["watch"]:
            candidate = (parse_qs(parsed.query).get("v") or [None])[0]
        elif len(segments) >= 2 and segments[0] in ID_PATH_PREFIXES:
            candidate = segments[1]

    if candidate and VIDEO_ID_RE.fullmatch(candidate):
        return candidate
    return None


def flatten_segments(segments: Sequence[Segment]) -> str:
    """Join caption segments in chronological order into one whitespace-normalized stream"""
    ordered = sorted(segments, key=lambda segment: float(segment.get("start") or 0.0))
    texts = (collapse_whitespace(str(segment.get("text") or "")) for segment in ordered)
    return collapse_whitespace(" ".join(text for text in texts if text))


def fetch_public_segments(video_id: str, languages: Sequence[str]) -> List[Segment]:
    """Fetch a public caption track, preferring the given languages over any other track"""
    transcript_list = YouTubeTranscriptApi().list(video_id)
    try:
        transcript = transcript_list.find_transcript(list(languages))
    except NoTranscriptFound:
        available = list(transcript_list)
        if not available:
            raise
        transcript = available[0]
        logger.info(f"No caption track in {list(languages)}; using {transcript.language_code}")
    return transcript.fetch().to_raw_data()


class TranscriptExtractor:
    """Turns a YouTube video URL into plain transcript text"""

    def __init__(
        self,
        languages: Sequence[str] = ("en",),
        max_chars: int = 24000,
        fetcher: Optional[SegmentFetcher] = None,
    ):
        self.languages = tuple(languages)
        self.max_chars = max_chars
        self.fetcher = fetcher or fetch_public_segments

    async def extract_from_youtube(self, video_url: str) -> SourceDocument:
        """
        Fetch and flatten the public captions of a video.

        Raises:
            InvalidVideoUrlError: No video id in the URL
            TranscriptUnavailableError: No public captions, the video is private/restricted,
                or YouTube blocked the request
            FetchError: Caption service unreachable
            EmptyContentError: Transcript text below the minimum length
        """
        video_id = parse_video_id(video_url)
        if not video_id:
            raise InvalidVideoUrlError(
                "Could not find a YouTube video id in the URL. Use a watch, youtu.be, embed or shorts link."
            )

        try:
            segments = await asyncio.to_thread(self.fetcher, video_id, self.languages)
        except RequestBlocked as e:
            logger.warning(f"YouTube blocked the transcript request for {video_id}: {type(e).__name__}")
            raise TranscriptUnavailableError(
                "Transcript unavailable: YouTube blocked the transcript request from this server. Try again later."
            ) from e
        except CouldNotRetrieveTranscript as e:
            logger.warning(f"Transcript unavailable for {video_id}: {type(e).__name__}")
            raise TranscriptUnavailableError(
                "Transcript unavailable: this video has no public captions or is private/restricted."
            ) from e
        except requests.RequestException as e:
            logger.warning(f"Transcript request failed for {video_id}: {e}")
            raise FetchError(
                "Could not reach YouTube to retrieve the transcript.",
                reason=type(e).__name__,
            ) from e

        text, truncated = truncate_at_whitespace(flatten_segments(segments), self.max_chars)
        if len(text) < MIN_SOURCE_CHARS:
            raise EmptyContentError(
                f"The video transcript is too short to build a podcast "
                f"(at least {MIN_SOURCE_CHARS} characters are required)."
            )

        logger.info("Transcript extracted", extra={"chars": len(text)})
        return SourceDocument(text=text, origin=video_url, truncated=truncated)
