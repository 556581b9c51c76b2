"""
Label localization.

Finds the rotated bounding rectangle of the label in the full-resolution
photograph. The label is the only bright, blue-rich area of the picture, so
after isolating the blue component it can be turned into one solid blob:

1. Blue channel extraction
2. Median smoothing (noise suppression)
3. Inversion (label becomes dark)
4. Wide mean smoothing (blur label into a blob)
5. Binary-inverse threshold at a low level (label becomes bright)
6. Dilate-then-erode closing (merge the blob)
7. External contours: exactly one is expected
8. Minimum-area rotated rectangle of that contour
"""

import logging
from contextlib import ExitStack
from typing import Optional

from label_inspector.common.config_loader import LocalizationConfig
from label_inspector.common.errors import StageFailure, VisionError
from label_inspector.common.image import Image
from label_inspector.common.types import PipelineStage, RotatedRect
from label_inspector.vision.backend import (
    Channel,
    SmoothMethod,
    ThresholdType,
    VisionBackend,
)

logger = logging.getLogger(__name__)

LABEL_NOT_FOUND = "Label not found"


class LabelLocalizer:
    """
    Locates the single label of a photograph.

    Example:
        >>> localizer = LabelLocalizer(OpenCVBackend())
        >>> rect = localizer.localize(image)
        >>> print(rect.center_x, rect.center_y, rect.angle)
    """

    def __init__(
        self,
        vision: VisionBackend,
        config: Optional[LocalizationConfig] = None,
    ):
        self.vision = vision
        self.config = config if config is not None else LocalizationConfig()

    def localize(self, image: Image) -> RotatedRect:
        """
        Find the label's rotated rectangle. ``image`` is not modified.

        Args:
            image: Color (BGR) label photograph.

        Returns:
            RotatedRect of the label in ``image`` coordinates.

        Raises:
            StageFailure: If any preprocessing step fails or the number of
                blobs left after preprocessing is not exactly one.
            ResourceAllocationError: If the working buffers cannot be allocated.
        """
        cfg = self.config

        with ExitStack() as stack:
            work = stack.enter_context(self.vision.new_image())
            contours = stack.enter_context(self.vision.new_contours())

            try:
                self.vision.clone(work, image)
                work.reset_roi()
                self.vision.extract_channel(work, Channel.BLUE)
                self.vision.smooth(work, SmoothMethod.MEDIAN, cfg.median_ksize)
                self.vision.invert(work)
                self.vision.smooth(work, SmoothMethod.MEAN, cfg.mean_ksize)
                self.vision.threshold(
                    work, ThresholdType.BINARY_INV, cfg.threshold_level
                )
                self.vision.dilate_erode(work, cfg.closing_iterations)
                self.vision.find_contours(work, contours)
            except VisionError as e:
                logger.warning(f"Localization preprocessing failed: {e}")
                raise StageFailure(
                    LABEL_NOT_FOUND,
                    stage=PipelineStage.LOCALIZE,
                    code="LBL-E002",
                    constant="LABEL_NOT_FOUND",
                ) from e

            if len(contours) != 1:
                logger.warning(
                    f"Expected exactly 1 label blob, found {len(contours)}"
                )
                raise StageFailure(
                    LABEL_NOT_FOUND,
                    stage=PipelineStage.LOCALIZE,
                    code="LBL-E002",
                    constant="LABEL_NOT_FOUND",
                )

            try:
                rect = self.vision.min_area_rect(contours[0])
            except VisionError as e:
                raise StageFailure(
                    LABEL_NOT_FOUND,
                    stage=PipelineStage.LOCALIZE,
                    code="LBL-E002",
                    constant="LABEL_NOT_FOUND",
                ) from e

        logger.info(f"Label found: {rect!r}")
        return rect
