"""Image codec and image-processing primitives behind a backend interface."""

from .backend import (
    THRESHOLD_OTSU,
    Channel,
    SmoothMethod,
    ThresholdType,
    VisionBackend,
)
from .opencv_backend import OpenCVBackend

__all__ = [
    "THRESHOLD_OTSU",
    "Channel",
    "OpenCVBackend",
    "SmoothMethod",
    "ThresholdType",
    "VisionBackend",
]
