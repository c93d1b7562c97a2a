"""Errors raised while validating requests and deriving source text"""
from typing import Optional


class ValidationError(ValueError):
    """Request fields are missing or unusable; raised before any network access"""


class MissingFieldError(ValidationError):
    """The field required by the selected mode is absent"""

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"Missing required field: {field}")


class TooShortError(ValidationError):
    """Direct text input is below the minimum content length"""


class ExtractionError(Exception):
    """Source material was unreachable, empty, or otherwise unusable"""


class FetchError(ExtractionError):
    """Upstream document could not be retrieved"""

    def __init__(self, message: str, status_code: Optional[int] = None, reason: Optional[str] = None):
        self.status_code = status_code
        self.reason = reason
        super().__init__(message)


class EmptyContentError(ExtractionError):
    """Extracted text is below the minimum content length"""


class UnsupportedContentError(ExtractionError):
    """Fetched resource is not an HTML or plain-text document"""


class InvalidVideoUrlError(ExtractionError):
    """No video identifier could be recovered from the URL"""


class TranscriptUnavailableError(ExtractionError):
    """The video has no public captions or cannot be accessed"""
