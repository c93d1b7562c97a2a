"""Data Transfer Objects for the HTTP layer"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class GenerationResponseDTO(BaseModel):
    """Successful podcast generation: script text plus base64 MP3"""
    model_config = ConfigDict(populate_by_name=True)

    script: str = Field(..., min_length=1)
    audio_base64: str = Field(..., min_length=1, alias="audioBase64")


class ErrorResponseDTO(BaseModel):
    """Single human-readable error"""
    error: str


class HealthResponseDTO(BaseModel):
    """Service layer DTO for health check responses"""
    ok: bool = True
    timestamp: Optional[str] = None
    version: Optional[str] = None
    provider: Optional[str] = None
