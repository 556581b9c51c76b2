"""
Error taxonomy for the label inspection pipeline.

Every pipeline abort is a LabelPipelineError carrying the stage that failed
plus a stable error code and constant, mirroring the structured
RejectionReason reported to callers:

- ResourceAllocationError: a buffer or handle could not be allocated (fatal)
- StageFailure: a stage could not produce its expected artifact
- ValidationFailure: decoded data is internally inconsistent

VisionError is raised by vision backends when a primitive fails; stages
translate it into their own StageFailure.
"""

from typing import Optional


class LabelPipelineError(Exception):
    """Base class for every error that aborts a label-processing run.

    Attributes:
        message: Human-readable diagnostic.
        stage: Pipeline stage where the error occurred (set by the stage or
            by the orchestrator when the raiser does not know it).
        code: Error code (e.g., "LBL-E002").
        constant: String constant for programmatic checking (e.g., "LABEL_NOT_FOUND").
    """

    code = "LBL-E999"
    constant = "PIPELINE_ERROR"

    def __init__(
        self,
        message: str,
        stage=None,
        code: Optional[str] = None,
        constant: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.stage = stage
        if code is not None:
            self.code = code
        if constant is not None:
            self.constant = constant

    def __str__(self) -> str:
        if self.stage is None:
            return self.message
        stage = getattr(self.stage, "value", self.stage)
        return f"[{stage}] {self.message}"


class ResourceAllocationError(LabelPipelineError):
    """Image buffer, contour set or other handle could not be allocated."""

    code = "LBL-E000"
    constant = "ALLOCATION_FAILED"


class StageFailure(LabelPipelineError):
    """A named pipeline stage could not produce its expected artifact."""


class ImageDecodeError(StageFailure):
    """Input file is missing, unreadable, or not a valid image."""

    code = "LBL-E001"
    constant = "IMAGE_UNREADABLE"


class ValidationFailure(LabelPipelineError):
    """Decoded barcode and OCR data disagree."""


class ResourceReleasedError(RuntimeError):
    """A released resource was accessed."""


class VisionError(RuntimeError):
    """An image-processing primitive failed."""
