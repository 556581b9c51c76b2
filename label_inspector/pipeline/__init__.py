"""Module 6: Label Pipeline.

Runs every stage on one label photograph and reports the decoded barcode and
the validated price, or the stage that rejected the label.

Example:
    >>> from label_inspector.pipeline import LabelPipeline, format_report
    >>> result = LabelPipeline().process("label.jpg")
    >>> print(format_report(result) if result.is_pass() else result.get_error_message())
"""

from .full_pipeline import LabelPipeline, format_report, main, process_label
from .types import DecisionStatus, LabelResult, RejectionReason

__all__ = [
    "DecisionStatus",
    "LabelPipeline",
    "LabelResult",
    "RejectionReason",
    "format_report",
    "main",
    "process_label",
]
