"""Web article extraction: fetch a page and reduce it to its most relevant text block"""
import logging
from typing import List, Optional, Tuple

import httpx
from bs4 import BeautifulSoup, Tag

from collection.errors import EmptyContentError, FetchError, UnsupportedContentError
from collection.schemas import SourceDocument
from collection.text import MIN_SOURCE_CHARS, normalize_lines, truncate_at_whitespace

logger = logging.getLogger(__name__)

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

# Pages larger than this are cut before parsing
MAX_RESPONSE_BYTES = 5 * 1024 * 1024

# Elements that never carry article content
CHROME_TAGS = [
    "script", "style", "noscript", "template", "svg", "iframe",
    "nav", "aside", "button", "input", "select", "textarea",
]
# Site banners and footers; the same tags inside an article hold its title and byline
PAGE_FRAME_TAGS = ["header", "footer"]
CHROME_SELECTORS = '[role="navigation"], [role="banner"], [role="contentinfo"], [aria-hidden="true"]'

CONTENT_CONTAINER_TAGS = {"article", "main"}

# Direct children that make up a paragraph cluster's text
CLUSTER_PART_TAGS = ["p", "h1", "h2", "h3", "h4", "h5", "h6", "blockquote", "pre", "ul", "ol"]

BLOCK_TAGS = [
    "p", "div", "section", "article", "main", "li", "ul", "ol", "blockquote", "pre",
    "h1", "h2", "h3", "h4", "h5", "h6", "tr", "table", "figcaption", "dd", "dt",
    "header", "footer",
]

MIN_BLOCK_CHARS = 200
LINK_TAG_PENALTY = 5


def is_content_region(tag: Tag) -> bool:
    """article/main elements and elements marked as the main content"""
    return (
        tag.name in CONTENT_CONTAINER_TAGS
        or tag.get("role") == "main"
        or tag.get("itemprop") == "articleBody"
    )


def is_innermost_region(tag: Tag) -> bool:
    return is_content_region(tag) and tag.find(is_content_region) is None


def strip_chrome(soup: BeautifulSoup) -> None:
    """Remove scripts, styles, navigation and other non-content elements in place"""
    frames = [tag for tag in soup.find_all(PAGE_FRAME_TAGS) if tag.find_parent(is_content_region) is None]
    for tag in soup.find_all(CHROME_TAGS) + soup.select(CHROME_SELECTORS) + frames:
        if not tag.decomposed:
            tag.decompose()


def mark_block_boundaries(soup: BeautifulSoup) -> None:
    """Make block-level elements and line breaks end with a newline so text keeps paragraph breaks"""
    for br in soup.find_all("br"):
        br.replace_with("\n")
    for tag in soup.find_all(BLOCK_TAGS):
        tag.append("\n")


def block_text(node: Tag) -> str:
    """Visible text of a node with whitespace collapsed and empty lines removed"""
    return normalize_lines(node.get_text().splitlines())


def block_parts(node: Tag) -> List[Tag]:
    """
    Elements whose text belongs to a candidate block.

    An innermost content region counts as a whole. Any other candidate
    counts only its direct paragraph-level children, so a wrapper does
    not absorb the text of the blocks nested inside it.
    """
    if is_innermost_region(node):
        return [node]
    return node.find_all(CLUSTER_PART_TAGS, recursive=False)


def candidate_text(node: Tag) -> str:
    return normalize_lines(
        line for part in block_parts(node) for line in part.get_text().splitlines()
    )


def score_block(node: Tag) -> int:
    """
    Relevance score of a content block.

    Visible text length minus the text held in links, minus a fixed
    penalty per link. Link-heavy blocks (menus, related-article lists)
    score low even when long.
    """
    links = [a for part in block_parts(node) for a in part.find_all("a")]
    link_chars = sum(len(" ".join(a.get_text().split())) for a in links)
    return len(candidate_text(node)) - link_chars - LINK_TAG_PENALTY * len(links)


def candidate_blocks(soup: BeautifulSoup) -> List[Tag]:
    """
    Enumerate content containers in document order.

    Candidates are the innermost content regions (article/main) and
    paragraph clusters (any element with at least one direct <p> child).
    """
    candidates = []
    for tag in soup.find_all(True):
        if is_innermost_region(tag) or tag.find("p", recursive=False) is not None:
            candidates.append(tag)
    return candidates


def select_relevant_block(soup: BeautifulSoup) -> Optional[Tag]:
    """Highest scoring candidate above the length floor; first one wins ties"""
    best: Optional[Tag] = None
    best_score = MIN_BLOCK_CHARS - 1
    for candidate in candidate_blocks(soup):
        score = score_block(candidate)
        if score > best_score:
            best, best_score = candidate, score
    return best


def extract_text_from_html(html: str, max_chars: int) -> Tuple[str, bool]:
    """
    Reduce an HTML document to clean, bounded plain text.

    Returns:
        Tuple of (text, truncated flag)
    """
    soup = BeautifulSoup(html, "html.parser")
    strip_chrome(soup)
    mark_block_boundaries(soup)

    block = select_relevant_block(soup)
    if block is None:
        logger.info("No content block above floor; using whole document text")
        text = block_text(soup.body or soup)
    else:
        text = candidate_text(block)

    return truncate_at_whitespace(text, max_chars)


class HtmlExtractor:
    """Fetches web pages and extracts their article text"""

    def __init__(
        self,
        timeout: float = 15.0,
        max_chars: int = 24000,
        max_bytes: int = MAX_RESPONSE_BYTES,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.max_chars = max_chars
        self.max_bytes = max_bytes
        self.transport = transport

    async def extract_from_url(self, url: str) -> SourceDocument:
        """
        Fetch a URL and return its most relevant text block.

        Raises:
            FetchError: Network failure or non-2xx response
            UnsupportedContentError: Response is not an HTML/text document
            EmptyContentError: Extracted text is below the minimum length
        """
        html, capped = await self._fetch(url)
        text, truncated = extract_text_from_html(html, self.max_chars)
        truncated = truncated or capped

        if len(text) < MIN_SOURCE_CHARS:
            raise EmptyContentError(
                f"The page at {url} did not contain enough readable text "
                f"(at least {MIN_SOURCE_CHARS} characters are required)."
            )

        if truncated:
            logger.info("Web text truncated to budget", extra={"chars": len(text)})

        return SourceDocument(text=text, origin=url, truncated=truncated)

    async def _fetch(self, url: str) -> Tuple[str, bool]:
        """
        GET the page with a browser-like identity, reading at most max_bytes.

        Returns:
            Tuple of (decoded body, whether the body was cut at the byte limit)
        """
        headers = {
            "User-Agent": BROWSER_USER_AGENT,
            "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.8",
        }
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers=headers,
                transport=self.transport,
            ) as client:
                async with client.stream("GET", url) as response:
                    self._check_response(url, response)
                    body, capped = await self._read_capped(response)
                    encoding = response.encoding or "utf-8"
        except httpx.TimeoutException as e:
            logger.warning(f"Timed out fetching {url}: {e}")
            raise FetchError(
                f"Could not retrieve the source URL: request timed out after {self.timeout:g}s.",
                reason="timeout",
            ) from e
        except httpx.RequestError as e:
            logger.warning(f"Request error fetching {url}: {e}")
            detail = str(e) or type(e).__name__
            raise FetchError(
                f"Could not retrieve the source URL: {detail}.",
                reason=type(e).__name__,
            ) from e

        if capped:
            logger.info(f"Response from {url} cut at {self.max_bytes} bytes")
        return body.decode(encoding, errors="replace"), capped

    def _check_response(self, url: str, response: httpx.Response) -> None:
        if not response.is_success:
            logger.warning(f"HTTP {response.status_code} fetching {url}")
            status = " ".join(filter(None, [str(response.status_code), response.reason_phrase]))
            raise FetchError(
                f"Could not retrieve the source URL: HTTP {status}.",
                status_code=response.status_code,
                reason=response.reason_phrase,
            )

        content_type = response.headers.get("content-type", "").lower()
        if content_type and not any(kind in content_type for kind in ("html", "xml", "text/plain")):
            raise UnsupportedContentError(
                f"The URL returned unsupported content ({content_type.split(';')[0]}); a web page is required."
            )

    async def _read_capped(self, response: httpx.Response) -> Tuple[bytes, bool]:
        chunks = []
        size = 0
        async for chunk in response.aiter_bytes():
            chunks.append(chunk)
            size += len(chunk)
            if size > self.max_bytes:
                return b"".join(chunks)[:self.max_bytes], True
        return b"".join(chunks), False
