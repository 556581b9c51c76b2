"""OCR service interface.

The pipeline hands raw pixel data of a preprocessed label zone to an
OCRService together with a recognition mode. Engines report failure through
``OCREngineResult.success`` rather than raising, so readers decide which
pipeline stage failed.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import List

import numpy as np


class OCRMode(Enum):
    """Recognition mode requested from the engine."""

    TEXT = "text"  # General text in the label language
    PRICE = "price"  # Digits only, currency formatted (e.g. "12.45")


@dataclass
class OCREngineResult:
    """Result from OCR engine text extraction.

    Attributes:
        text: Recognized text ("" when extraction failed).
        confidence: Average confidence score (0.0-1.0).
        character_confidences: Per-word confidence scores.
        success: Whether extraction was successful.
    """

    text: str
    confidence: float
    character_confidences: List[float] = field(default_factory=list)
    success: bool = True

    @classmethod
    def failure(cls) -> "OCREngineResult":
        return cls(text="", confidence=0.0, character_confidences=[], success=False)


class OCRService(ABC):
    """Interface for OCR engines."""

    @abstractmethod
    def extract_text(self, image: np.ndarray, mode: OCRMode) -> OCREngineResult:
        """Recognize text in a (H, W) uint8 image.

        Args:
            image: Contiguous pixel data of the zone.
            mode: Recognition mode.

        Returns:
            OCREngineResult; ``success`` is False when nothing usable was read.
        """
