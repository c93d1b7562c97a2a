"""Text normalization helpers shared by the extractors"""
import re
from typing import Iterable, Tuple

MIN_SOURCE_CHARS = 50

_WHITESPACE_RE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    """Collapse every whitespace run to a single space"""
    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize_lines(lines: Iterable[str]) -> str:
    """Collapse whitespace within each line and drop empty lines"""
    cleaned = (collapse_whitespace(line) for line in lines)
    return "\n".join(line for line in cleaned if line)


def truncate_at_whitespace(text: str, max_chars: int) -> Tuple[str, bool]:
    """
    Bound text to max_chars without splitting a word.

    Returns:
        Tuple of (possibly shortened text, whether truncation happened)
    """
    if len(text) <= max_chars:
        return text, False

    # The character right after the budget decides whether the cut lands on a boundary
    if text[max_chars].isspace():
        return text[:max_chars].rstrip(), True

    head = text[:max_chars]
    boundary = max(head.rfind(" "), head.rfind("\n"), head.rfind("\t"))
    if boundary <= 0:
        # A single token longer than the budget
        return head, True
    return head[:boundary].rstrip(), True
