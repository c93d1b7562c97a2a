"""Common test fixtures for all test modules"""
import httpx
import pytest

from collection.extractors.html import HtmlExtractor
from collection.extractors.transcript import TranscriptExtractor
from collection.normalizer import SourceNormalizer
from generation.clients.model_client import StubScriptClient, StubSpeechClient
from service.podcast_service import PodcastPipeline


ARTICLE_PARAGRAPHS = [
    "Community gardens have spread across dozens of cities over the past decade, "
    "turning vacant lots into productive green space for neighbors.",
    "Researchers tracking these projects found that participants eat more vegetables, "
    "spend more time outdoors, and report stronger ties with the people living nearby.",
    "City planners now treat gardens as infrastructure, budgeting for water access, "
    "soil testing, and tool libraries alongside parks and playgrounds.",
]


@pytest.fixture
def article_html():
    """Article page wrapped in navigation, sidebar, footer and script noise"""
    paragraphs = "\n".join(f"<p>{text}</p>" for text in ARTICLE_PARAGRAPHS)
    return f"""<!DOCTYPE html>
<html>
<head>
  <title>Urban Gardening</title>
  <style>.hero {{ color: red; }}</style>
  <script>window.analytics = {{ track: function() {{}} }};</script>
</head>
<body>
  <header><div class="brand">Daily Planet</div>
    <nav><a href="/">Home</a> <a href="/world">World</a> <a href="/sports">Sports</a></nav>
  </header>
  <div class="layout">
    <aside><p>Trending: <a href="/a">Celebrity gossip roundup</a> <a href="/b">Ten best phones</a></p></aside>
    <article>
      <h1>The Quiet Revolution in Urban Gardening</h1>
      {paragraphs}
      <svg width="10" height="10"><text>vector-label</text></svg>
    </article>
  </div>
  <footer><p>Copyright 2024 Daily Planet Media. All rights reserved.</p></footer>
</body>
</html>"""


@pytest.fixture
def article_paragraphs():
    return list(ARTICLE_PARAGRAPHS)


@pytest.fixture
def long_source_text():
    """About 600 characters of article text"""
    return " ".join(ARTICLE_PARAGRAPHS * 2)


@pytest.fixture
def caption_segments():
    """Caption track segments as returned by the transcript service, out of order"""
    return [
        {"text": "and that is why the river\nchanged course", "start": 4.2, "duration": 3.1},
        {"text": "Welcome back to the channel.", "start": 0.0, "duration": 2.0},
        {"text": "Today we look at how glaciers shaped the valley", "start": 2.0, "duration": 2.2},
        {"text": "   ", "start": 7.3, "duration": 0.5},
        {"text": "over ten thousand years.", "start": 7.8, "duration": 1.9},
    ]


def _html_transport(html="", status_code=200, content_type="text/html; charset=utf-8"):
    """MockTransport answering every request with the given page"""
    def handler(request):
        return httpx.Response(
            status_code,
            content=html.encode("utf-8"),
            headers={"content-type": content_type},
        )
    return httpx.MockTransport(handler)


def _failing_transport(exc_type=httpx.ConnectError, message="Name or service not known"):
    """MockTransport that fails every request at the network layer"""
    def handler(request):
        raise exc_type(message, request=request)
    return httpx.MockTransport(handler)


@pytest.fixture
def make_pipeline():
    """Build a pipeline with offline collaborators"""
    def _make(transport=None, fetcher=None, script_client=None, speech_client=None, max_chars=24000):
        normalizer = SourceNormalizer(
            HtmlExtractor(max_chars=max_chars, transport=transport or _html_transport()),
            TranscriptExtractor(max_chars=max_chars, fetcher=fetcher or (lambda video_id, languages: [])),
        )
        return PodcastPipeline(
            normalizer,
            script_client or StubScriptClient(),
            speech_client or StubSpeechClient(),
        )
    return _make


@pytest.fixture
def html_transport():
    """Factory for transports serving a fixed page"""
    return _html_transport


@pytest.fixture
def failing_transport():
    """Factory for transports that fail at the network layer"""
    return _failing_transport
