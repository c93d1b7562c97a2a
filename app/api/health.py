"""Health check API endpoints"""
from typing import Optional

from fastapi import APIRouter, Depends

from app.deps.common import get_optional_pipeline
from service.dto import HealthResponseDTO
from service.health_service import get_health
from service.podcast_service import PodcastPipeline

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponseDTO)
def health_check(pipeline: Optional[PodcastPipeline] = Depends(get_optional_pipeline)) -> HealthResponseDTO:
    """
    Basic health check endpoint.

    Returns:
        HealthResponseDTO: Health status with timestamp and configured provider
    """
    return get_health(pipeline.provider if pipeline else None)
