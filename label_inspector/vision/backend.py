"""
Image-processing primitives service interface.

The pipeline core only talks to a VisionBackend, so it can run against
OpenCV in production and against fakes returning canned contours in tests.
All primitives operate in place on the image's current ROI unless noted.
"""

from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Optional, Union

import numpy as np

from label_inspector.common.image import ContourSet, Image
from label_inspector.common.types import RotatedRect

# Threshold level meaning "choose automatically with Otsu's method"
THRESHOLD_OTSU = -1


class Channel(Enum):
    """Color component of a BGR image."""

    BLUE = 0
    GREEN = 1
    RED = 2


class SmoothMethod(Enum):
    """Smoothing filter."""

    MEAN = "mean"
    MEDIAN = "median"


class ThresholdType(Enum):
    """Binary threshold polarity."""

    BINARY = "binary"
    BINARY_INV = "binary_inv"


class VisionBackend(ABC):
    """
    Interface for the image codec and image-processing primitives.

    Implementations raise ``VisionError`` when a primitive fails,
    ``ImageDecodeError`` when a file cannot be decoded and
    ``ResourceAllocationError`` when a buffer cannot be allocated.
    """

    def new_image(self, data: Optional[np.ndarray] = None) -> Image:
        """Allocate an image (1x1 placeholder when ``data`` is None)."""
        return Image(data)

    def new_contours(self) -> ContourSet:
        """Allocate an empty contour set."""
        return ContourSet()

    def clone(self, dst: Image, src: Image) -> None:
        """Deep-copy ``src`` (buffer and ROI) into ``dst``."""
        dst.copy_from(src)

    @abstractmethod
    def imread(self, image: Image, path: Union[str, Path]) -> None:
        """Decode the file at ``path`` into ``image`` (color, BGR)."""

    @abstractmethod
    def extract_channel(self, image: Image, channel: Channel) -> None:
        """Reduce a color image to one of its components."""

    @abstractmethod
    def smooth(self, image: Image, method: SmoothMethod, ksize: int) -> None:
        """Apply mean or median smoothing with a square kernel."""

    @abstractmethod
    def invert(self, image: Image) -> None:
        """Invert pixel intensities."""

    @abstractmethod
    def threshold(self, image: Image, kind: ThresholdType, level: int) -> None:
        """Binarize at ``level`` (``THRESHOLD_OTSU`` for automatic level)."""

    @abstractmethod
    def dilate(self, image: Image, iterations: int) -> None:
        """Morphological dilation with a 3x3 kernel."""

    @abstractmethod
    def erode(self, image: Image, iterations: int) -> None:
        """Morphological erosion with a 3x3 kernel."""

    def dilate_erode(self, image: Image, iterations: int) -> None:
        """Morphological closing: dilate then erode ``iterations`` times each."""
        self.dilate(image, iterations)
        self.erode(image, iterations)

    @abstractmethod
    def find_contours(self, image: Image, contours: ContourSet) -> None:
        """Extract external contours of a binary image into ``contours``."""

    @abstractmethod
    def min_area_rect(self, contour: np.ndarray) -> RotatedRect:
        """Minimum-area rotated bounding rectangle of a contour."""

    @abstractmethod
    def rotate_to_rect(self, image: Image, rect: RotatedRect) -> None:
        """Rotate the whole image about ``rect``'s center by its angle."""
