"""Tesseract OCR engine wrapper for label text and prices.

This module provides a high-level interface to Tesseract OCR through
pytesseract, with two recognition modes:

- TEXT: general text in the label language (product name)
- PRICE: digits and decimal separators only, normalized to "D+.DD"

Example:
    >>> from label_inspector.ocr import TesseractEngine, OCRMode
    >>> engine = TesseractEngine(config.ocr, text_lang="spa", price_lang="eng")
    >>> result = engine.extract_text(zone, OCRMode.PRICE)
    >>> print(result.text, result.confidence)
    '12.45' 0.91
"""

import logging
import re
from typing import Optional

import cv2
import numpy as np
import pytesseract

from label_inspector.common.config_loader import OCREngineConfig

from .engine import OCREngineResult, OCRMode, OCRService

logger = logging.getLogger(__name__)

PRICE_PATTERN = re.compile(r"(\d+)[.,](\d{2})")


def normalize_price_text(text: str) -> Optional[str]:
    """Extract a currency-formatted amount from raw OCR output.

    Args:
        text: Raw Tesseract output.

    Returns:
        Amount with "." as decimal separator, or None if the text holds no
        amount with exactly two decimals.

    Example:
        >>> normalize_price_text(" 12,45 \\n")
        '12.45'
        >>> normalize_price_text("1245") is None
        True
    """
    match = PRICE_PATTERN.search("".join(text.split()))
    if match is None:
        return None
    return f"{match.group(1)}.{match.group(2)}"


class TesseractEngine(OCRService):
    """Wrapper for Tesseract OCR configured for the label zones.

    Args:
        config: OCR engine configuration.
        text_lang: Tesseract language for TEXT mode.
        price_lang: Tesseract language for PRICE mode.
    """

    def __init__(
        self,
        config: OCREngineConfig,
        text_lang: str = "spa",
        price_lang: str = "eng",
    ):
        self.config = config
        self.text_lang = text_lang
        self.price_lang = price_lang

        if config.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = config.tesseract_cmd

        # Verify Tesseract is available
        try:
            version = pytesseract.get_tesseract_version()
            logger.info(f"Tesseract engine initialized: version {version}")
        except Exception as e:
            logger.error(f"Tesseract not found or not properly configured: {e}")
            raise RuntimeError(
                "Tesseract not available. Please install Tesseract OCR.\n"
                "Linux: sudo apt-get install tesseract-ocr tesseract-ocr-spa\n"
                "MacOS: brew install tesseract tesseract-lang"
            ) from e

    def _build_config(self, mode: OCRMode) -> str:
        if mode == OCRMode.PRICE:
            return (
                f"--psm {self.config.price_psm} "
                f"-c tessedit_char_whitelist={self.config.price_whitelist}"
            )
        return f"--psm {self.config.text_psm}"

    def extract_text(self, image: np.ndarray, mode: OCRMode) -> OCREngineResult:
        """Extract text from a preprocessed label zone.

        Args:
            image: Grayscale zone as numpy array (H, W) or (H, W, 1|3).
            mode: TEXT for the product name, PRICE for the price.

        Returns:
            OCREngineResult with recognized text and confidence.
        """
        if image is None or image.size == 0:
            logger.error("Invalid image: empty or None")
            return OCREngineResult.failure()

        if image.ndim == 3:
            if image.shape[2] == 3:
                image = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
            elif image.shape[2] == 1:
                image = image[:, :, 0]
        if image.ndim != 2:
            logger.error(f"Invalid image shape: {image.shape}")
            return OCREngineResult.failure()

        lang = self.price_lang if mode == OCRMode.PRICE else self.text_lang
        tesseract_config = self._build_config(mode)
        logger.debug(f"Running Tesseract lang={lang}, config: {tesseract_config}")

        try:
            data = pytesseract.image_to_data(
                image,
                lang=lang,
                config=tesseract_config,
                output_type=pytesseract.Output.DICT,
            )
        except Exception as e:
            logger.error(f"Tesseract extraction failed: {e}", exc_info=True)
            return OCREngineResult.failure()

        words = []
        confidences = []
        for i in range(len(data["text"])):
            word = data["text"][i].strip()
            conf = float(data["conf"][i])
            # conf < 0 marks layout entries without recognized text
            if word and conf >= 0:
                words.append(word)
                confidences.append(conf / 100.0)

        if not words:
            logger.warning("Tesseract returned no valid detections")
            return OCREngineResult.failure()

        avg_confidence = float(np.mean(confidences))
        if avg_confidence < self.config.min_confidence:
            logger.warning(
                f"OCR confidence {avg_confidence:.2f} below threshold "
                f"{self.config.min_confidence:.2f}"
            )
            return OCREngineResult.failure()

        text = " ".join(words)
        if mode == OCRMode.PRICE:
            price = normalize_price_text(text)
            if price is None:
                logger.warning(f"No currency amount in OCR output '{text}'")
                return OCREngineResult.failure()
            text = price

        logger.debug(
            f"Tesseract extraction successful: text='{text}', "
            f"confidence={avg_confidence:.2f}, words={len(words)}"
        )

        return OCREngineResult(
            text=text,
            confidence=avg_confidence,
            character_confidences=confidences,
            success=True,
        )
