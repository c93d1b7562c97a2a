"""Podcast generation API endpoint"""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.deps.common import get_pipeline, get_trace_id
from core.errors import PipelineError
from service.dto import ErrorResponseDTO, GenerationResponseDTO
from service.podcast_service import PodcastPipeline

logger = logging.getLogger(__name__)
router = APIRouter(tags=["podcast"])

ERROR_RESPONSES = {
    status: {"model": ErrorResponseDTO, "description": description}
    for status, description in (
        (400, "Invalid request payload"),
        (422, "Source material could not be derived"),
        (500, "Configuration or internal fault"),
        (502, "Upstream generation failure"),
    )
}


async def pipeline_error_handler(request: Request, exc: PipelineError) -> JSONResponse:
    """Render any PipelineError as {"error": message} with its status"""
    result = exc.to_error_result()
    headers = {}
    trace_id = getattr(request.state, "trace_id", None)
    if trace_id:
        headers["X-Trace-Id"] = trace_id
    return JSONResponse(
        status_code=result.http_status,
        content=ErrorResponseDTO(error=result.message).model_dump(),
        headers=headers,
    )


@router.post("/generate", response_model=GenerationResponseDTO, responses=ERROR_RESPONSES)
async def generate_podcast(
    request: Request,
    trace_id: str = Depends(get_trace_id),
    pipeline: PodcastPipeline = Depends(get_pipeline),
) -> JSONResponse:
    """Generate a narrated podcast from text, a web page, or a YouTube video"""
    request.state.trace_id = trace_id
    logger.info("Generate API request received", extra={"trace_id": trace_id})

    try:
        body = await request.body()
        result = await pipeline.generate(body, trace_id=trace_id)
    except PipelineError as e:
        return await pipeline_error_handler(request, e)

    logger.info("Generate API request completed", extra={
        "trace_id": trace_id,
        "chars": len(result.script),
    })

    return JSONResponse(
        content=result.to_response().model_dump(by_alias=True),
        headers={
            "X-Trace-Id": trace_id,
            "X-Source-Truncated": "true" if result.source.truncated else "false",
        },
    )
