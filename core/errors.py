"""Pipeline error taxonomy mapped to HTTP status codes"""
from dataclasses import dataclass


@dataclass(frozen=True)
class ErrorResult:
    """Single error outcome returned to the caller"""
    message: str
    http_status: int


class PipelineError(Exception):
    """Base class for every failure surfaced by the generation pipeline"""
    http_status = 500
    default_code = "PIPELINE_ERROR"

    def __init__(self, message: str, code: str = None):
        self.message = message
        self.code = code or self.default_code
        super().__init__(message)

    def to_error_result(self) -> ErrorResult:
        return ErrorResult(message=self.message, http_status=self.http_status)


class BadRequestError(PipelineError):
    """Malformed payload or unusable request fields (caller's fault)"""
    http_status = 400
    default_code = "BAD_REQUEST"


class UnprocessableSourceError(PipelineError):
    """Well-formed request whose source material could not be derived"""
    http_status = 422
    default_code = "SOURCE_UNPROCESSABLE"


class GenerationFailedError(PipelineError):
    """Upstream script generation produced nothing usable or errored"""
    http_status = 502
    default_code = "GENERATION_FAILED"


class SpeechSynthesisError(GenerationFailedError):
    """Upstream speech synthesis produced nothing usable or errored"""
    default_code = "SYNTHESIS_FAILED"


class InternalError(PipelineError):
    """Configuration, credential, or unexpected server-side fault"""
    http_status = 500
    default_code = "INTERNAL_ERROR"
