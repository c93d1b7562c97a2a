"""Unit tests for YouTube id parsing and transcript flattening"""
import asyncio

import pytest
import requests
from youtube_transcript_api import IpBlocked, RequestBlocked, TranscriptsDisabled, VideoUnavailable

from collection.errors import (
    EmptyContentError,
    FetchError,
    InvalidVideoUrlError,
    TranscriptUnavailableError,
)
from collection.extractors.transcript import TranscriptExtractor, flatten_segments, parse_video_id


class TestVideoIdParsing:
    """Test recovery of video ids from accepted URL shapes"""

    @pytest.mark.parametrize("url", [
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "https://youtube.com/watch?v=dQw4w9WgXcQ&t=42s",
        "https://m.youtube.com/watch?list=PL123&v=dQw4w9WgXcQ",
        "https://youtu.be/dQw4w9WgXcQ",
        "https://youtu.be/dQw4w9WgXcQ?si=abc",
        "https://www.youtube.com/embed/dQw4w9WgXcQ",
        "https://www.youtube-nocookie.com/embed/dQw4w9WgXcQ?start=10",
        "https://www.youtube.com/shorts/dQw4w9WgXcQ",
        "https://www.youtube.com/live/dQw4w9WgXcQ",
        "  https://WWW.YOUTUBE.COM/watch?v=dQw4w9WgXcQ  ",
    ])
    def test_accepted_url_shapes(self, url):
        assert parse_video_id(url) == "dQw4w9WgXcQ"

    @pytest.mark.parametrize("url", [
        "https://vimeo.com/123456",
        "https://www.youtube.com/",
        "https://www.youtube.com/watch?list=PL123",
        "https://www.youtube.com/channel/UC1234567890",
        "https://youtu.be/",
        "https://www.youtube.com/watch?v=bad%20id",
        "not a url",
    ])
    def test_rejected_urls(self, url):
        assert parse_video_id(url) is None


class TestSegmentFlattening:
    """Test chronological joining of caption segments"""

    def test_segments_joined_in_time_order(self, caption_segments):
        text = flatten_segments(caption_segments)

        assert text == (
            "Welcome back to the channel. Today we look at how glaciers shaped the valley "
            "and that is why the river changed course over ten thousand years."
        )

    def test_timing_metadata_discarded(self, caption_segments):
        text = flatten_segments(caption_segments)
        assert "4.2" not in text
        assert "start" not in text

    def test_empty_track(self):
        assert flatten_segments([]) == ""


class TestTranscriptExtractor:
    """Test transcript extraction and failure mapping with injected fetchers"""

    def test_extract_success(self, caption_segments):
        calls = []

        def fetcher(video_id, languages):
            calls.append((video_id, languages))
            return caption_segments

        extractor = TranscriptExtractor(languages=["en", "de"], fetcher=fetcher)
        document = asyncio.run(extractor.extract_from_youtube("https://youtu.be/dQw4w9WgXcQ"))

        assert calls == [("dQw4w9WgXcQ", ("en", "de"))]
        assert document.origin == "https://youtu.be/dQw4w9WgXcQ"
        assert document.text.startswith("Welcome back to the channel.")
        assert document.truncated is False

    def test_invalid_url_fails_before_fetch(self):
        calls = []
        extractor = TranscriptExtractor(fetcher=lambda video_id, languages: calls.append(video_id) or [])

        with pytest.raises(InvalidVideoUrlError):
            asyncio.run(extractor.extract_from_youtube("https://vimeo.com/123456"))

        assert calls == []

    @pytest.mark.parametrize("error_type", [TranscriptsDisabled, VideoUnavailable])
    def test_missing_captions_are_unavailable(self, error_type):
        def fetcher(video_id, languages):
            raise error_type(video_id)

        extractor = TranscriptExtractor(fetcher=fetcher)

        with pytest.raises(TranscriptUnavailableError) as exc_info:
            asyncio.run(extractor.extract_from_youtube("https://youtube.com/watch?v=PRIVATE_ID"))

        assert "Transcript unavailable" in str(exc_info.value)

    @pytest.mark.parametrize("error_type", [RequestBlocked, IpBlocked])
    def test_blocked_request_names_the_block(self, error_type):
        def fetcher(video_id, languages):
            raise error_type(video_id)

        extractor = TranscriptExtractor(fetcher=fetcher)

        with pytest.raises(TranscriptUnavailableError) as exc_info:
            asyncio.run(extractor.extract_from_youtube("https://youtu.be/dQw4w9WgXcQ"))

        assert "blocked" in str(exc_info.value)
        assert "no public captions" not in str(exc_info.value)

    def test_network_failure_is_fetch_error(self):
        def fetcher(video_id, languages):
            raise requests.ConnectionError("connection refused")

        extractor = TranscriptExtractor(fetcher=fetcher)

        with pytest.raises(FetchError):
            asyncio.run(extractor.extract_from_youtube("https://youtu.be/dQw4w9WgXcQ"))

    def test_short_transcript_is_empty_content(self):
        extractor = TranscriptExtractor(fetcher=lambda video_id, languages: [{"text": "Hi!", "start": 0.0}])

        with pytest.raises(EmptyContentError):
            asyncio.run(extractor.extract_from_youtube("https://youtu.be/dQw4w9WgXcQ"))

    def test_long_transcript_truncated(self):
        segments = [{"text": f"segment number {i}", "start": float(i)} for i in range(500)]
        extractor = TranscriptExtractor(max_chars=1000, fetcher=lambda video_id, languages: segments)

        document = asyncio.run(extractor.extract_from_youtube("https://youtu.be/dQw4w9WgXcQ"))

        assert document.truncated is True
        assert len(document.text) <= 1000
        full = flatten_segments(segments)
        assert full.startswith(document.text)
        assert full[len(document.text)] == " "


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
