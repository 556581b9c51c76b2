"""
Label alignment.

Rotates the working image about the label center by the label angle, so the
label becomes upright and axis-aligned, then crops to the label by
installing its upright bounds as the image ROI. The image keeps its size
during rotation, so the label center stays a fixed point and the region
formulas keep working in full-image coordinates.
"""

import logging

from label_inspector.common.errors import StageFailure, VisionError
from label_inspector.common.image import Image
from label_inspector.common.types import PipelineStage, Rect, RotatedRect
from label_inspector.vision.backend import VisionBackend

logger = logging.getLogger(__name__)


class LabelAligner:
    """Produces an upright, label-cropped copy of the working image in place."""

    def __init__(self, vision: VisionBackend):
        self.vision = vision

    def align(self, image: Image, rect: RotatedRect) -> Rect:
        """
        Rotate ``image`` upright and crop it to the label.

        Args:
            image: Working image (single channel after green extraction).
            rect: Label pose from the localizer.

        Returns:
            The label ROI installed on ``image``.

        Raises:
            StageFailure: If rotation fails or the label lies outside the image.
        """
        try:
            self.vision.rotate_to_rect(image, rect)
            label_roi = image.set_roi(rect.upright_bounds())
        except (VisionError, ValueError) as e:
            logger.warning(f"Alignment failed: {e}")
            raise StageFailure(
                "Couldn't align label",
                stage=PipelineStage.ALIGN,
                code="LBL-E004",
                constant="ALIGN_FAILED",
            ) from e

        logger.info(f"Label aligned, crop {label_roi!r}")
        return label_roi
