"""Barcode reader stage."""

import logging
from contextlib import ExitStack
from typing import Optional

from label_inspector.common.config_loader import BarcodeConfig
from label_inspector.common.errors import StageFailure
from label_inspector.common.image import Image
from label_inspector.common.types import PipelineStage
from label_inspector.vision.backend import VisionBackend

from .decoder import BarcodeDecoder

logger = logging.getLogger(__name__)


class BarcodeReader:
    """Decodes the retail barcode from the whole aligned frame."""

    def __init__(
        self,
        vision: VisionBackend,
        decoder: BarcodeDecoder,
        config: Optional[BarcodeConfig] = None,
    ):
        self.vision = vision
        self.decoder = decoder
        self.config = config if config is not None else BarcodeConfig()

    def read(self, image: Image) -> str:
        """Decode the barcode.

        Args:
            image: Aligned image (left unmodified; its ROI is ignored).

        Returns:
            Decoded digit string.

        Raises:
            StageFailure: If no symbol decodes or the symbol has the wrong length.
        """
        with ExitStack() as stack:
            frame = stack.enter_context(self.vision.new_image())
            self.vision.clone(frame, image)
            frame.reset_roi()
            result = self.decoder.decode(frame.pixels(), self.config.symbology)

        if not result.success or len(result.data) != self.config.expected_length:
            if result.success:
                logger.warning(
                    f"Barcode '{result.data}' has {len(result.data)} digits, "
                    f"expected {self.config.expected_length}"
                )
            raise StageFailure(
                "Barcode not found",
                stage=PipelineStage.READ_BARCODE,
                code="LBL-E007",
                constant="BARCODE_NOT_FOUND",
            )

        logger.info(f"Barcode read: {result.data}")
        return result.data
