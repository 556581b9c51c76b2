"""
Pytest Configuration and Shared Fixtures

This file contains pytest configuration and fixtures that are available
to all test modules: synthetic label photographs drawn with OpenCV, fake
OCR and barcode services, and a vision backend that tracks (and can fail)
resource allocations.
"""

from typing import Dict, List, Optional

import cv2
import numpy as np
import pytest

from label_inspector.barcode.decoder import BarcodeDecoder, BarcodeResult
from label_inspector.common.errors import ResourceAllocationError
from label_inspector.ocr.engine import OCREngineResult, OCRMode, OCRService
from label_inspector.vision.opencv_backend import OpenCVBackend

BACKGROUND_BGR = (40, 40, 180)
LABEL_BGR = (255, 255, 255)


def draw_labels(rects, size=(600, 800)) -> np.ndarray:
    """Draw white labels ((x1, y1), (x2, y2)) on a reddish background."""
    height, width = size
    image = np.zeros((height, width, 3), dtype=np.uint8)
    image[:] = BACKGROUND_BGR
    for (x1, y1), (x2, y2) in rects:
        cv2.rectangle(image, (x1, y1), (x2, y2), LABEL_BGR, thickness=-1)
    return image


class FakeOCR(OCRService):
    """OCR service returning canned text per mode (None means failure)."""

    def __init__(self, texts: Optional[Dict[OCRMode, Optional[str]]] = None):
        self.texts = texts or {OCRMode.TEXT: "Cerdo", OCRMode.PRICE: "50.45"}
        self.calls: List[OCRMode] = []
        self.images: List[np.ndarray] = []

    def extract_text(self, image: np.ndarray, mode: OCRMode) -> OCREngineResult:
        self.calls.append(mode)
        self.images.append(image)
        text = self.texts.get(mode)
        if text is None:
            return OCREngineResult.failure()
        return OCREngineResult(text=text, confidence=0.95, character_confidences=[0.95])


class FakeBarcodeDecoder(BarcodeDecoder):
    """Barcode decoder returning a canned code (None means nothing decoded)."""

    def __init__(self, data: Optional[str] = "2301703X5045Y"):
        self.data = data
        self.calls = 0

    def decode(self, image: np.ndarray, symbology: str) -> BarcodeResult:
        self.calls += 1
        if self.data is None:
            return BarcodeResult.failure(symbology)
        return BarcodeResult(data=self.data, symbology=symbology, success=True)


class TrackingBackend(OpenCVBackend):
    """OpenCV backend recording every allocated resource.

    Args:
        fail_at: 1-based index of the allocation that raises
            ResourceAllocationError (None never fails).
    """

    def __init__(self, fail_at: Optional[int] = None):
        self.fail_at = fail_at
        self.allocations = 0
        self.resources = []

    def _track(self, resource):
        self.resources.append(resource)
        return resource

    def _allocate(self):
        self.allocations += 1
        if self.fail_at is not None and self.allocations == self.fail_at:
            raise ResourceAllocationError(
                f"Injected allocation failure #{self.allocations}"
            )

    def new_image(self, data=None):
        self._allocate()
        return self._track(super().new_image(data))

    def new_contours(self):
        self._allocate()
        return self._track(super().new_contours())

    @property
    def leaked(self):
        return [r for r in self.resources if not r.released]


@pytest.fixture
def label_bgr():
    """800x600 photograph holding one white label at (250, 200)-(550, 400)."""
    return draw_labels([((250, 200), (550, 400))])


@pytest.fixture
def label_path(tmp_path, label_bgr):
    """Synthetic label photograph written to disk as PNG."""
    path = tmp_path / "label.png"
    cv2.imwrite(str(path), label_bgr)
    return path


@pytest.fixture
def fake_ocr():
    return FakeOCR()


@pytest.fixture
def fake_decoder():
    return FakeBarcodeDecoder()


@pytest.fixture
def backend():
    return TrackingBackend()


@pytest.fixture
def make_ocr():
    """Factory for FakeOCR with custom canned text."""
    return FakeOCR


@pytest.fixture
def make_decoder():
    """Factory for FakeBarcodeDecoder with a custom code."""
    return FakeBarcodeDecoder


@pytest.fixture
def make_backend():
    """Factory for TrackingBackend with an injected allocation failure."""
    return TrackingBackend


@pytest.fixture
def write_labels(tmp_path):
    """Draw labels on a background and write the photograph to disk."""

    def _write(rects, size=(600, 800), name="labels.png"):
        path = tmp_path / name
        cv2.imwrite(str(path), draw_labels(rects, size))
        return path

    return _write
