"""Product-name and price readers.

Each reader clones the aligned label image, installs its zone as the ROI,
binarizes the zone and hands the pixels to the OCR service. The clone is
released on every exit path. A read either returns the full decoded string
or raises a StageFailure; partial text is never returned.
"""

import logging
from contextlib import ExitStack
from typing import Optional

from label_inspector.common.config_loader import (
    LayoutConfig,
    PriceConfig,
    ProductNameConfig,
)
from label_inspector.common.errors import StageFailure, VisionError
from label_inspector.common.image import Image
from label_inspector.common.types import PipelineStage, RotatedRect
from label_inspector.regions.extractor import price_region, product_name_region
from label_inspector.vision.backend import (
    THRESHOLD_OTSU,
    SmoothMethod,
    ThresholdType,
    VisionBackend,
)

from .engine import OCRMode, OCRService

logger = logging.getLogger(__name__)


class ProductNameReader:
    """Reads the product name printed in the top-left zone of the label.

    Preprocessing: Otsu binary threshold, then erosion to thin the strokes.
    """

    def __init__(
        self,
        vision: VisionBackend,
        ocr: OCRService,
        config: Optional[ProductNameConfig] = None,
        layout: Optional[LayoutConfig] = None,
    ):
        self.vision = vision
        self.ocr = ocr
        self.config = config if config is not None else ProductNameConfig()
        self.layout = layout if layout is not None else LayoutConfig()

    def read(self, image: Image, rect: RotatedRect) -> str:
        """Recognize the product name.

        Args:
            image: Aligned label image (left unmodified).
            rect: Label pose from the localizer.

        Returns:
            Recognized product-name text.

        Raises:
            StageFailure: If the zone cannot be processed or OCR fails.
        """
        with ExitStack() as stack:
            zone = stack.enter_context(self.vision.new_image())
            try:
                self.vision.clone(zone, image)
                zone.set_roi(product_name_region(rect, self.layout))
                self.vision.threshold(zone, ThresholdType.BINARY, THRESHOLD_OTSU)
                self.vision.erode(zone, self.config.erode_iterations)
                pixels = zone.pixels()
            except (VisionError, ValueError) as e:
                logger.warning(f"Product-name zone preprocessing failed: {e}")
                raise _name_unreadable() from e

            result = self.ocr.extract_text(pixels, OCRMode.TEXT)

        if not result.success or not result.text:
            raise _name_unreadable()

        logger.info(f"Product name read: '{result.text}'")
        return result.text


class PriceReader:
    """Reads the printed price.

    Preprocessing: mean smoothing, Otsu binary threshold, light closing and
    a final hard threshold before digit-only OCR.
    """

    def __init__(
        self,
        vision: VisionBackend,
        ocr: OCRService,
        config: Optional[PriceConfig] = None,
        layout: Optional[LayoutConfig] = None,
    ):
        self.vision = vision
        self.ocr = ocr
        self.config = config if config is not None else PriceConfig()
        self.layout = layout if layout is not None else LayoutConfig()

    def read(self, image: Image, rect: RotatedRect) -> str:
        """Recognize the price.

        Args:
            image: Aligned label image (left unmodified).
            rect: Label pose from the localizer.

        Returns:
            Price text, e.g. "12.45".

        Raises:
            StageFailure: If the zone cannot be processed or OCR fails.
        """
        cfg = self.config
        with ExitStack() as stack:
            zone = stack.enter_context(self.vision.new_image())
            try:
                self.vision.clone(zone, image)
                zone.set_roi(price_region(rect, self.layout))
                self.vision.smooth(zone, SmoothMethod.MEAN, cfg.mean_ksize)
                self.vision.threshold(zone, ThresholdType.BINARY, THRESHOLD_OTSU)
                self.vision.dilate_erode(zone, cfg.closing_iterations)
                self.vision.threshold(zone, ThresholdType.BINARY, cfg.hard_threshold)
                pixels = zone.pixels()
            except (VisionError, ValueError) as e:
                logger.warning(f"Price zone preprocessing failed: {e}")
                raise _price_not_found() from e

            result = self.ocr.extract_text(pixels, OCRMode.PRICE)

        if not result.success or not result.text:
            raise _price_not_found()

        logger.info(f"Price read: '{result.text}'")
        return result.text


def _name_unreadable() -> StageFailure:
    return StageFailure(
        "Couldn't read product name",
        stage=PipelineStage.VALIDATE_NAME,
        code="LBL-E005",
        constant="NAME_UNREADABLE",
    )


def _price_not_found() -> StageFailure:
    return StageFailure(
        "Price not found",
        stage=PipelineStage.READ_PRICE,
        code="LBL-E008",
        constant="PRICE_NOT_FOUND",
    )
