"""OpenCV implementation of the image-processing primitives service.

Every primitive works on the image's current ROI through a numpy view, so
results are written back into the backing buffer in place. OpenCV errors are
translated into VisionError so each pipeline stage can report its own
failure.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Union

import cv2
import numpy as np

from label_inspector.common.errors import (
    ImageDecodeError,
    ResourceAllocationError,
    VisionError,
)
from label_inspector.common.image import ContourSet, Image
from label_inspector.common.types import RotatedRect

from .backend import (
    THRESHOLD_OTSU,
    Channel,
    SmoothMethod,
    ThresholdType,
    VisionBackend,
)

logger = logging.getLogger(__name__)


@contextmanager
def _cv_errors(operation: str):
    """Translate OpenCV failures into VisionError."""
    try:
        yield
    except cv2.error as e:
        raise VisionError(f"{operation} failed: {e}") from e


class OpenCVBackend(VisionBackend):
    """Vision backend built on ``cv2``.

    Example:
        >>> backend = OpenCVBackend()
        >>> with backend.new_image() as img:
        ...     backend.imread(img, "label.jpg")
        ...     backend.extract_channel(img, Channel.GREEN)
    """

    def new_image(self, data: Optional[np.ndarray] = None) -> Image:
        try:
            if data is None:
                data = np.zeros((1, 1), dtype=np.uint8)
            return Image(data)
        except MemoryError as e:
            raise ResourceAllocationError("Couldn't allocate image buffer") from e

    def imread(self, image: Image, path: Union[str, Path]) -> None:
        data = cv2.imread(str(path), cv2.IMREAD_COLOR)
        if data is None or data.size == 0:
            raise ImageDecodeError(f"Couldn't read image: {path}")
        image.replace(data)
        logger.debug(f"Loaded {path}: {data.shape[1]}x{data.shape[0]}")

    def extract_channel(self, image: Image, channel: Channel) -> None:
        data = image.data
        if data.ndim != 3 or data.shape[2] < 3:
            raise VisionError(
                f"Channel extraction needs a 3-channel image, got shape {data.shape}"
            )
        image.replace(np.ascontiguousarray(data[:, :, channel.value]))

    def smooth(self, image: Image, method: SmoothMethod, ksize: int) -> None:
        src = np.ascontiguousarray(image.view())
        with _cv_errors(f"{method.value} smoothing"):
            if method == SmoothMethod.MEDIAN:
                result = cv2.medianBlur(src, ksize)
            else:
                result = cv2.blur(src, (ksize, ksize))
        image.write(result)

    def invert(self, image: Image) -> None:
        view = image.view()
        with _cv_errors("inversion"):
            result = cv2.bitwise_not(np.ascontiguousarray(view))
        image.write(result)

    def threshold(self, image: Image, kind: ThresholdType, level: int) -> None:
        src = np.ascontiguousarray(image.view())
        flags = cv2.THRESH_BINARY if kind == ThresholdType.BINARY else cv2.THRESH_BINARY_INV
        if level == THRESHOLD_OTSU:
            if src.ndim != 2:
                raise VisionError("Otsu threshold needs a single-channel image")
            flags |= cv2.THRESH_OTSU
            level = 0
        with _cv_errors("threshold"):
            _, result = cv2.threshold(src, level, 255, flags)
        image.write(result)

    def dilate(self, image: Image, iterations: int) -> None:
        if iterations <= 0:
            return
        with _cv_errors("dilation"):
            result = cv2.dilate(np.ascontiguousarray(image.view()), None, iterations=iterations)
        image.write(result)

    def erode(self, image: Image, iterations: int) -> None:
        if iterations <= 0:
            return
        with _cv_errors("erosion"):
            result = cv2.erode(np.ascontiguousarray(image.view()), None, iterations=iterations)
        image.write(result)

    def find_contours(self, image: Image, contours: ContourSet) -> None:
        src = np.ascontiguousarray(image.view())
        if src.ndim != 2:
            raise VisionError("Contour extraction needs a single-channel image")
        roi = image.roi
        offset = (roi.x, roi.y) if roi is not None else (0, 0)
        with _cv_errors("contour extraction"):
            # OpenCV 3 returns (image, contours, hierarchy), OpenCV 4 (contours, hierarchy)
            found = cv2.findContours(
                src, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE, offset=offset
            )[-2]
        contours.assign(found)
        logger.debug(f"Found {len(contours)} external contours")

    def min_area_rect(self, contour: np.ndarray) -> RotatedRect:
        with _cv_errors("minimum-area rectangle"):
            box = cv2.minAreaRect(contour)
        return RotatedRect.from_cv(box)

    def rotate_to_rect(self, image: Image, rect: RotatedRect) -> None:
        data = image.data
        height, width = data.shape[:2]
        with _cv_errors("rotation"):
            rotation = cv2.getRotationMatrix2D(
                (rect.center_x, rect.center_y), rect.angle, 1.0
            )
            rotated = cv2.warpAffine(
                data, rotation, (width, height), flags=cv2.INTER_LINEAR
            )
        image.replace(rotated)
        logger.debug(f"Rotated {width}x{height} image by {rect.angle:.2f} deg")
