"""
Full label-processing pipeline.

Orchestrates all stages for one label photograph:

    Load -> Localize -> ExtractGreenChannel -> Align -> ValidateName
         -> ReadBarcode -> ReadPrice -> ValidateProduct -> ValidatePrice -> Report

Implements fail-fast strategy: the first failing stage aborts the run with a
stage-tagged rejection. There is no retry and no skipped stage. Every image
the run acquires is released on every exit path.
"""

import argparse
import logging
import sys
import time
from contextlib import ExitStack, contextmanager
from pathlib import Path
from typing import Optional, TextIO, Union

from label_inspector import __version__
from label_inspector.alignment.processor import LabelAligner
from label_inspector.barcode.decoder import BarcodeDecoder, ZBarDecoder
from label_inspector.barcode.reader import BarcodeReader
from label_inspector.common.config_loader import Config, get_default_config, load_config
from label_inspector.common.errors import (
    LabelPipelineError,
    StageFailure,
    VisionError,
)
from label_inspector.common.image import Image
from label_inspector.common.types import PipelineStage, RotatedRect
from label_inspector.localization.processor import LabelLocalizer
from label_inspector.ocr.engine import OCRService
from label_inspector.ocr.engine_tesseract import TesseractEngine
from label_inspector.ocr.readers import PriceReader, ProductNameReader
from label_inspector.validation.validator import (
    validate_name,
    validate_price,
    validate_product,
)
from label_inspector.vision.backend import Channel, VisionBackend
from label_inspector.vision.opencv_backend import OpenCVBackend

from .types import DecisionStatus, LabelResult, RejectionReason

logger = logging.getLogger(__name__)

_STAGE_ORDER = [
    PipelineStage.LOAD,
    PipelineStage.LOCALIZE,
    PipelineStage.EXTRACT_GREEN,
    PipelineStage.ALIGN,
    PipelineStage.VALIDATE_NAME,
    PipelineStage.READ_BARCODE,
    PipelineStage.READ_PRICE,
    PipelineStage.VALIDATE_PRODUCT,
    PipelineStage.VALIDATE_PRICE,
]


class _RunState:
    """Artifacts produced so far by one run."""

    def __init__(self):
        self.stage = PipelineStage.SETUP
        self.label_rect: Optional[RotatedRect] = None
        self.barcode: Optional[str] = None
        self.price: Optional[str] = None


class LabelPipeline:
    """End-to-end pipeline for meat-label price verification.

    Args:
        config: Pre-loaded configuration. If None, loads ``config_path`` or
            the bundled default.
        config_path: Path to a YAML config file.
        vision: Image-processing backend (default: OpenCV).
        ocr: OCR service (default: Tesseract).
        barcode_decoder: Barcode decoder (default: ZBar).

    Example:
        >>> pipeline = LabelPipeline()
        >>> result = pipeline.process("label.jpg")
        >>> if result.is_pass():
        ...     print(format_report(result))
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        config_path: Optional[Path] = None,
        vision: Optional[VisionBackend] = None,
        ocr: Optional[OCRService] = None,
        barcode_decoder: Optional[BarcodeDecoder] = None,
    ):
        if config is not None:
            self.config = config
        elif config_path is not None:
            self.config = load_config(config_path)
        else:
            self.config = get_default_config()

        cfg = self.config
        self.vision = vision if vision is not None else OpenCVBackend()
        if ocr is None:
            ocr = TesseractEngine(
                cfg.ocr, text_lang=cfg.product_name.lang, price_lang=cfg.price.lang
            )
        self.ocr = ocr
        self.barcode_decoder = (
            barcode_decoder if barcode_decoder is not None else ZBarDecoder()
        )

        self.localizer = LabelLocalizer(self.vision, cfg.localization)
        self.aligner = LabelAligner(self.vision)
        self.name_reader = ProductNameReader(
            self.vision, self.ocr, cfg.product_name, cfg.layout
        )
        self.barcode_reader = BarcodeReader(
            self.vision, self.barcode_decoder, cfg.barcode
        )
        self.price_reader = PriceReader(self.vision, self.ocr, cfg.price, cfg.layout)

    @contextmanager
    def _stage(self, state: _RunState, stage: PipelineStage):
        state.stage = stage
        index = _STAGE_ORDER.index(stage) + 1
        logger.info(f"[Stage {index}/{len(_STAGE_ORDER)}] {stage.value}")
        try:
            yield
        except LabelPipelineError as e:
            if e.stage is None:
                e.stage = stage
            logger.warning(f"Pipeline REJECTED at {e.stage.value}: {e.message}")
            raise

    def process(self, image_path: Union[str, Path]) -> LabelResult:
        """Run every stage on one label photograph.

        Args:
            image_path: Path to the label photograph.

        Returns:
            LabelResult with PASS and the barcode/price, or REJECT with the
            stage that failed.
        """
        start_time = time.perf_counter()
        state = _RunState()

        logger.info("=" * 60)
        logger.info(f"Starting label pipeline: {image_path}")
        logger.info("=" * 60)

        try:
            with ExitStack() as stack:
                image = stack.enter_context(self.vision.new_image())
                aligned = stack.enter_context(self.vision.new_image())
                self._run_stages(state, Path(image_path), image, aligned)
        except LabelPipelineError as e:
            return LabelResult(
                decision=DecisionStatus.REJECT,
                barcode=state.barcode,
                price=state.price,
                label_rect=state.label_rect,
                rejection_reason=RejectionReason.from_error(e, state.stage),
                processing_time_ms=(time.perf_counter() - start_time) * 1000,
            )

        logger.info("=" * 60)
        logger.info("Pipeline PASSED - barcode and price validated")
        logger.info("=" * 60)

        return LabelResult(
            decision=DecisionStatus.PASS,
            barcode=state.barcode,
            price=state.price,
            label_rect=state.label_rect,
            rejection_reason=RejectionReason(
                code="LBL-S000",
                constant="SUCCESS",
                message="Barcode and price validated successfully",
                stage=PipelineStage.REPORT,
                severity="INFO",
            ),
            processing_time_ms=(time.perf_counter() - start_time) * 1000,
        )

    def _run_stages(
        self, state: _RunState, image_path: Path, image: Image, aligned: Image
    ) -> None:
        cfg = self.config

        with self._stage(state, PipelineStage.LOAD):
            self.vision.imread(image, image_path)

        with self._stage(state, PipelineStage.LOCALIZE):
            rect = self.localizer.localize(image)
            state.label_rect = rect

        with self._stage(state, PipelineStage.EXTRACT_GREEN):
            try:
                self.vision.extract_channel(image, Channel.GREEN)
            except VisionError as e:
                raise StageFailure(
                    "Couldn't extract green component",
                    code="LBL-E003",
                    constant="CHANNEL_EXTRACTION_FAILED",
                ) from e
            self.vision.clone(aligned, image)

        with self._stage(state, PipelineStage.ALIGN):
            self.aligner.align(aligned, rect)

        with self._stage(state, PipelineStage.VALIDATE_NAME):
            name = self.name_reader.read(aligned, rect)
            validate_name(name, cfg.product_name.expected_text)

        with self._stage(state, PipelineStage.READ_BARCODE):
            state.barcode = self.barcode_reader.read(aligned)

        with self._stage(state, PipelineStage.READ_PRICE):
            state.price = self.price_reader.read(aligned, rect)

        with self._stage(state, PipelineStage.VALIDATE_PRODUCT):
            validate_product(state.barcode, cfg.validation.expected_product_code)

        with self._stage(state, PipelineStage.VALIDATE_PRICE):
            validate_price(state.barcode, state.price)

        state.stage = PipelineStage.REPORT


def format_report(result: LabelResult, currency: str = "EUR") -> str:
    """Format the human-readable report of a passed label.

    Example:
        >>> print(format_report(result))
        Code: 2301703X5045Y
        Price: 50.45 EUR
    """
    return f"Code: {result.barcode}\nPrice: {result.price:>5} {currency}"


def process_label(
    image_path: Union[str, Path],
    config: Optional[Config] = None,
    vision: Optional[VisionBackend] = None,
    ocr: Optional[OCRService] = None,
    barcode_decoder: Optional[BarcodeDecoder] = None,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> LabelResult:
    """Process one label and emit its report.

    On PASS the report is written to ``out`` (stdout by default); on REJECT
    the stage-tagged diagnostic is written to ``err`` (stderr by default).

    Args:
        image_path: Path to the label photograph.
        config: Optional custom configuration. Uses default if None.
        vision: Optional vision backend.
        ocr: Optional OCR service.
        barcode_decoder: Optional barcode decoder.

    Returns:
        LabelResult object.
    """
    pipeline = LabelPipeline(
        config=config, vision=vision, ocr=ocr, barcode_decoder=barcode_decoder
    )
    result = pipeline.process(image_path)

    if result.is_pass():
        print(format_report(result, pipeline.config.price.currency), file=out or sys.stdout)
    else:
        print(result.get_error_message(), file=err or sys.stderr)
    return result


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="label-inspector",
        description="Verify the barcode and price printed on a meat-product label",
    )
    parser.add_argument(
        "-f", "--file", type=Path, required=True, help="Label photograph"
    )
    parser.add_argument(
        "--config", type=str, default=None, help="Configuration YAML file"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Log every pipeline stage"
    )
    parser.add_argument(
        "-v", "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def main(argv=None) -> int:
    """Command-line entry point.

    Returns:
        0 when the label passes, 1 when it is rejected.
    """
    args = _build_parser().parse_args(argv)

    if not args.file.is_file():
        print(f"label-inspector: not a regular file: {args.file}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    config = load_config(Path(args.config)) if args.config else None
    result = process_label(args.file, config=config)
    if not result.is_pass():
        return 1

    print(f"Total time: {result.processing_time_ms / 1000:5.3f} s")
    return 0


if __name__ == "__main__":
    sys.exit(main())
