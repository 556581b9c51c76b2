"""
Scoped image and contour-set resources.

Images and contour sets are acquired through a vision backend and released
deterministically on every exit path. Both are context managers, so a
multi-resource acquisition written with ``contextlib.ExitStack`` unwinds
only what was actually acquired, in reverse order.

Example:
    >>> with ExitStack() as stack:
    ...     img = stack.enter_context(backend.new_image())
    ...     tmp = stack.enter_context(backend.new_image())
    ...     backend.imread(img, "label.jpg")
"""

import logging
from typing import Iterator, List, Optional

import numpy as np

from label_inspector.common.errors import ResourceReleasedError, VisionError
from label_inspector.common.types import Rect

logger = logging.getLogger(__name__)


class Resource:
    """Base class for resources released exactly once."""

    def __init__(self):
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Release the resource. Releasing twice is a no-op."""
        if self._released:
            return
        self._on_release()
        self._released = True

    def _on_release(self) -> None:
        pass

    def _check_alive(self) -> None:
        if self._released:
            raise ResourceReleasedError(f"{type(self).__name__} was already released")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


class Image(Resource):
    """
    Owned 2D pixel buffer with an optional region of interest.

    The ROI is always clipped to the backing buffer, and ``view()`` returns a
    numpy view into the buffer, so processing applied to the view mutates
    the image in place. Operations that change the buffer shape (channel
    extraction, rotation) go through ``replace()``, which drops the ROI.

    Attributes:
        data: Full backing buffer, (H, W) or (H, W, C) uint8.
        roi: Current ROI, or None for the whole image.
    """

    def __init__(self, data: Optional[np.ndarray] = None):
        super().__init__()
        if data is None:
            data = np.zeros((1, 1), dtype=np.uint8)
        self._data = data
        self._roi: Optional[Rect] = None

    @property
    def data(self) -> np.ndarray:
        self._check_alive()
        return self._data

    @property
    def roi(self) -> Optional[Rect]:
        return self._roi

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def channels(self) -> int:
        if self.data.ndim == 2:
            return 1
        return int(self.data.shape[2])

    def set_roi(self, rect: Rect) -> Rect:
        """
        Install ``rect`` as the ROI, clipped to the buffer.

        Args:
            rect: Requested region in full-image coordinates.

        Returns:
            The ROI actually installed.

        Raises:
            VisionError: If the region lies entirely outside the buffer.
        """
        x2 = min(rect.x2, self.width)
        y2 = min(rect.y2, self.height)
        if rect.x >= x2 or rect.y >= y2:
            raise VisionError(
                f"ROI {rect} lies outside image {self.width}x{self.height}"
            )
        self._roi = Rect(x=rect.x, y=rect.y, width=x2 - rect.x, height=y2 - rect.y)
        logger.debug(f"ROI set to {self._roi}")
        return self._roi

    def reset_roi(self) -> None:
        self._roi = None

    def view(self) -> np.ndarray:
        """Get the ROI (or the whole image) as a view into the buffer."""
        data = self.data
        if self._roi is None:
            return data
        r = self._roi
        return data[r.y : r.y2, r.x : r.x2]

    def write(self, pixels: np.ndarray) -> None:
        """Store ``pixels`` into the current ROI (shape must match the view)."""
        view = self.view()
        if pixels.shape != view.shape:
            raise VisionError(
                f"Shape mismatch writing ROI: got {pixels.shape}, expected {view.shape}"
            )
        view[...] = pixels

    def replace(self, data: np.ndarray) -> None:
        """Replace the backing buffer and drop the ROI."""
        self._check_alive()
        self._data = data
        self._roi = None

    def copy_from(self, other: "Image") -> None:
        """Deep-copy ``other`` (buffer and ROI) into this image."""
        self._check_alive()
        self._data = other.data.copy()
        self._roi = other.roi

    def pixels(self) -> np.ndarray:
        """
        Raw pixel data of the ROI for handoff to OCR / barcode services.

        Returns:
            C-contiguous copy of ``view()``; stride and dimensions are
            available from the array itself.
        """
        return np.ascontiguousarray(self.view())

    def _on_release(self) -> None:
        self._data = None
        self._roi = None

    def __repr__(self) -> str:
        if self._released:
            return "Image(<released>)"
        return f"Image(shape={self._data.shape}, roi={self._roi})"


class ContourSet(Resource):
    """Ordered collection of contours produced by contour extraction."""

    def __init__(self, contours: Optional[List[np.ndarray]] = None):
        super().__init__()
        self._contours: List[np.ndarray] = list(contours or [])

    def assign(self, contours) -> None:
        self._check_alive()
        self._contours = list(contours)

    def __len__(self) -> int:
        self._check_alive()
        return len(self._contours)

    def __getitem__(self, index: int) -> np.ndarray:
        self._check_alive()
        return self._contours[index]

    def __iter__(self) -> Iterator[np.ndarray]:
        self._check_alive()
        return iter(self._contours)

    def _on_release(self) -> None:
        self._contours = []

    def __repr__(self) -> str:
        if self._released:
            return "ContourSet(<released>)"
        return f"ContourSet(size={len(self._contours)})"

