"""Service configuration from environment"""
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PodcastSettings(BaseSettings):
    """Runtime settings for extraction and generation providers"""
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    openai_api_key: Optional[str] = None
    openai_base_url: str = "https://api.openai.com/v1"
    generation_provider: str = "openai"

    script_model: str = "gpt-4o-mini"
    script_temperature: float = 0.7
    script_max_output_tokens: int = 1400
    speech_model: str = "gpt-4o-mini-tts"
    provider_timeout: float = 120.0

    fetch_timeout: float = 15.0
    max_source_chars: int = Field(default=24000, ge=1000)
    transcript_languages: List[str] = Field(default_factory=lambda: ["en"])

    log_level: str = "INFO"


def get_settings() -> PodcastSettings:
    """Read settings fresh from the environment"""
    return PodcastSettings()
