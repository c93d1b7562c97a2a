"""Pydantic schemas for inbound requests and normalized source text"""
import re
from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, PlainSerializer, WrapValidator, field_validator

from collection.text import MIN_SOURCE_CHARS

DEFAULT_VOICE = "alloy"
VOICE_RE = re.compile(r"^[a-z-]+$", re.IGNORECASE)


def _keep_submitted_url(value, handler):
    """Validate as an http(s) URL but keep the string the caller sent"""
    if isinstance(value, str):
        value = value.strip()
    handler(value)
    return str(value)


# Validated as HttpUrl but stored as submitted; HttpUrl normalization adds trailing slashes
SubmittedUrl = Annotated[HttpUrl, WrapValidator(_keep_submitted_url), PlainSerializer(str, return_type=str)]


class SourceMode(str, Enum):
    """Input kinds accepted by the pipeline"""
    TEXT = "text"
    URL = "url"
    VIDEO = "video"


class GenerationRequest(BaseModel):
    """Validated podcast generation request"""
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    mode: SourceMode
    voice: str = DEFAULT_VOICE
    content: Optional[str] = None
    url: Optional[SubmittedUrl] = None
    video_url: Optional[SubmittedUrl] = Field(default=None, alias="videoUrl")

    @field_validator("voice")
    @classmethod
    def validate_voice(cls, v: str) -> str:
        if not 2 <= len(v) <= 32:
            raise ValueError("Voice id must be between 2 and 32 characters.")
        if not VOICE_RE.fullmatch(v):
            raise ValueError("Voice id must contain only letters or hyphens.")
        return v.lower()

    @field_validator("content")
    @classmethod
    def validate_content_length(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) < MIN_SOURCE_CHARS:
            raise ValueError(f"Provide at least {MIN_SOURCE_CHARS} characters of text.")
        return v

    @field_validator("url", "video_url", mode="before")
    @classmethod
    def blank_url_as_missing(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class SourceDocument(BaseModel):
    """Plain text ready for script generation, with the URL it came from"""
    model_config = ConfigDict(frozen=True)

    text: str = Field(..., min_length=MIN_SOURCE_CHARS)
    origin: Optional[str] = None
    truncated: bool = False
