"""Result types of a label-processing run."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from label_inspector.common.errors import LabelPipelineError
from label_inspector.common.types import PipelineStage, RotatedRect


class DecisionStatus(Enum):
    """Decision status for a label."""

    PASS = "pass"
    REJECT = "reject"


@dataclass
class RejectionReason:
    """Structured outcome with error code and context.

    Attributes:
        code: Error code (e.g., "LBL-E002")
        constant: String constant for programmatic checking (e.g., "LABEL_NOT_FOUND")
        message: Human-readable explanation
        stage: Pipeline stage where the run stopped
        severity: "ERROR" for rejections, "INFO" for success
    """

    code: str
    constant: str
    message: str
    stage: PipelineStage
    severity: str = "ERROR"

    @classmethod
    def from_error(
        cls, error: LabelPipelineError, default_stage: PipelineStage
    ) -> "RejectionReason":
        return cls(
            code=error.code,
            constant=error.constant,
            message=error.message,
            stage=error.stage if error.stage is not None else default_stage,
        )


@dataclass
class LabelResult:
    """Final result of one label-processing run.

    Attributes:
        decision: PASS or REJECT
        barcode: Decoded barcode if the barcode stage was reached and passed
        price: OCR'd price if the price stage was reached and passed
        label_rect: Detected label pose, if localization succeeded
        rejection_reason: Stage-tagged outcome (also set on PASS)
        processing_time_ms: Total processing time in milliseconds
    """

    decision: DecisionStatus
    barcode: Optional[str]
    price: Optional[str]
    label_rect: Optional[RotatedRect]
    rejection_reason: RejectionReason
    processing_time_ms: float

    def is_pass(self) -> bool:
        return self.decision == DecisionStatus.PASS

    def is_reject(self) -> bool:
        return self.decision == DecisionStatus.REJECT

    @property
    def failed_stage(self) -> Optional[PipelineStage]:
        """Stage that aborted the run, None on PASS."""
        if self.is_pass():
            return None
        return self.rejection_reason.stage

    def get_error_message(self) -> str:
        """Get human-readable diagnostic naming the failed stage."""
        if self.is_pass():
            return "All checks passed"
        reason = self.rejection_reason
        return f"{reason.stage.value}: {reason.message}"
