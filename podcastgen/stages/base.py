"""
podcastgen Stage Base Utilities.

Responsibilities:
- SegmenterError hierarchy for pipeline control flow
- Error object builder

Invariants:
- Every error carries a stable code and the stage it was raised in
- Errors are raised synchronously; no partial results are returned
"""


def build_error(
    code: str,
    message: str,
    stage: str,
    detail: dict | None = None,
) -> dict:
    """
    Build structured error object.

    Args:
        code: Error code (e.g., "INPUT_TOO_SHORT")
        message: Human-readable error message
        stage: Stage name where error occurred
        detail: Optional additional details

    Returns:
        Structured error dictionary.
    """
    error: dict = {
        "code": code,
        "message": message,
        "stage": stage,
    }
    if detail is not None:
        error["detail"] = detail
    return error


class SegmenterError(Exception):
    """
    Base class for all segmentation failures.

    Attributes:
        stage: Stage name where the error occurred ("config" before the run)
        detail: Optional mapping with the offending values
    """

    code = "SEGMENTER_ERROR"

    def __init__(self, message: str, stage: str = "pipeline", detail: dict | None = None):
        self.stage = stage
        self.detail = detail
        super().__init__(message)

    def to_error(self) -> dict:
        """Render as a structured error object."""
        return build_error(self.code, str(self), self.stage, self.detail)


class ConfigurationError(SegmenterError):
    """Raised when parameters are rejected before the pipeline runs."""

    code = "CONFIG_INVALID"

    def __init__(self, message: str, detail: dict | None = None):
        super().__init__(message, stage="config", detail=detail)


class InsufficientDataError(SegmenterError):
    """Raised when the input is shorter than one aggregation window."""

    code = "INPUT_TOO_SHORT"
