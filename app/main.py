from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from app.api.health import router as health_router
from app.api.podcast import pipeline_error_handler, router as podcast_router
from core.config import get_settings
from core.errors import PipelineError
from core.logging import setup_json_logging
from service.podcast_service import build_pipeline

# Setup logging
setup_json_logging(get_settings().log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Missing credentials stop startup here rather than failing inside a request
    app.state.pipeline = build_pipeline(get_settings())
    logger.info("Podcast pipeline ready", extra={"trace_id": "system_init"})
    yield


app = FastAPI(title="Podcast Studio API", version="0.1.0", lifespan=lifespan)
app.add_exception_handler(PipelineError, pipeline_error_handler)

# Include routers
app.include_router(health_router)  # Health at root level
app.include_router(podcast_router, prefix="/api")
