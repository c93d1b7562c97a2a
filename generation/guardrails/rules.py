"""Guardrails for generated scripts and synthesized audio"""
import re
from typing import List

# Speech endpoints reject longer inputs
MAX_SPEECH_INPUT_CHARS = 4096

_LETTER_RE = re.compile(r"[^\W\d_]")


def validate_script(script: str) -> List[str]:
    """Validate a generated script before it is sent to speech synthesis"""
    violations = []

    text = (script or "").strip()
    if not text:
        violations.append("Script is empty")
        return violations

    if not _LETTER_RE.search(text):
        violations.append("Script contains no readable words")

    return violations


def fit_for_speech(script: str, max_chars: int = MAX_SPEECH_INPUT_CHARS) -> str:
    """Trim a script to the speech input limit, ending on a sentence when one fits"""
    text = script.strip()
    if len(text) <= max_chars:
        return text

    head = text[:max_chars]
    sentence_end = max(head.rfind(". "), head.rfind("! "), head.rfind("? "), head.rfind("\n"))
    if sentence_end > max_chars // 2:
        return head[:sentence_end + 1].strip()

    space = head.rfind(" ")
    return head[:space].strip() if space > 0 else head


def looks_like_mp3(audio: bytes) -> bool:
    """True if the payload starts with an ID3 tag or an MPEG audio frame sync"""
    if not audio or len(audio) < 4:
        return False
    if audio[:3] == b"ID3":
        return True
    return audio[0] == 0xFF and (audio[1] & 0xE0) == 0xE0
