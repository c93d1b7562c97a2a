"""Abstract capability interfaces for script generation and speech synthesis"""
import re
from abc import ABC, abstractmethod
from typing import Optional


class ProviderError(RuntimeError):
    """Raised when an upstream generation provider fails or returns unusable output"""

    def __init__(
        self,
        message: str,
        *,
        failure_kind: str = "unknown",
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.failure_kind = failure_kind
        self.status_code = status_code

    @property
    def is_configuration_fault(self) -> bool:
        return self.failure_kind == "invalid_api_key"


class ScriptGenerationClient(ABC):
    """Turns source text into a narration script"""

    name = "abstract"

    @abstractmethod
    async def generate(self, source_text: str, mode: str, origin: Optional[str]) -> str:
        """Generate a podcast script from normalized source text"""
        pass


class SpeechSynthesisClient(ABC):
    """Turns script text into MP3 audio bytes"""

    name = "abstract"

    @abstractmethod
    async def synthesize(self, text: str, voice_id: str) -> bytes:
        """Synthesize narration audio for the script"""
        pass


class StubScriptClient(ScriptGenerationClient):
    """Deterministic offline script writer for tests and local runs"""

    name = "stub"

    async def generate(self, source_text: str, mode: str, origin: Optional[str]) -> str:
        sentences = [s.strip() for s in re.split(r"(?<=[.!?])\s+", source_text) if s.strip()]
        highlights = " ".join(sentences[:5])
        source_line = f" from {origin}" if origin else ""

        return "\n\n".join([
            f"HOST: Welcome to the show. Today we're digging into some {mode} material{source_line}.",
            f"HOST: Here's what stood out. {highlights}",
            "HOST: That's our episode. Thanks for listening, and see you next time.",
        ])


# MPEG-1 Layer III, 128 kbps, 44.1 kHz, no padding: 417-byte frames
_MP3_FRAME_HEADER = b"\xff\xfb\x90\x64"
_MP3_FRAME_BYTES = 417


class StubSpeechClient(SpeechSynthesisClient):
    """Produces silent MP3 frames sized roughly to the script length"""

    name = "stub"

    async def synthesize(self, text: str, voice_id: str) -> bytes:
        frame = _MP3_FRAME_HEADER + bytes(_MP3_FRAME_BYTES - len(_MP3_FRAME_HEADER))
        frame_count = max(1, min(len(text) // 20, 400))
        return frame * frame_count
