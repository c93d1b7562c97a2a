"""Common dependencies for FastAPI dependency injection"""
import uuid
from datetime import datetime, timezone
from typing import Optional

from fastapi import Request

from core.errors import InternalError
from service.podcast_service import PodcastPipeline


def get_trace_id() -> str:
    """
    Generate unique trace ID for request tracking.

    Returns:
        str: Unique trace ID
    """
    return f"api_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:8]}"


def get_optional_pipeline(request: Request) -> Optional[PodcastPipeline]:
    """Pipeline built at startup, or None before startup has completed"""
    return getattr(request.app.state, "pipeline", None)


def get_pipeline(request: Request) -> PodcastPipeline:
    """
    Pipeline dependency.

    Returns:
        PodcastPipeline: Pipeline assembled in the application lifespan

    Raises:
        InternalError: Application started without a pipeline
    """
    pipeline = get_optional_pipeline(request)
    if pipeline is None:
        raise InternalError("Podcast pipeline is not configured.")
    return pipeline
