"""Health service for basic health checks"""
import logging
from datetime import datetime, timezone
from typing import Optional

from service.dto import HealthResponseDTO

logger = logging.getLogger(__name__)

SERVICE_VERSION = "0.1.0"


def get_health(provider: Optional[str] = None) -> HealthResponseDTO:
    """
    Get basic health status.

    Args:
        provider: Name of the configured generation provider, if the pipeline is up

    Returns:
        HealthResponseDTO: Health check result
    """
    logger.debug("Health check requested")

    return HealthResponseDTO(
        ok=provider is not None,
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=SERVICE_VERSION,
        provider=provider,
    )
