"""
Geometry value types for the label inspection pipeline.

This module provides Pydantic-based types for the measured label pose and
the axis-aligned sub-regions derived from it:

- RotatedRect: label pose as detected in the source image
- Rect: axis-aligned region used as an image ROI
- PipelineStage: the linear stage sequence errors and results are tagged with

The geometry types are immutable. Derived regions are always computed from a RotatedRect,
never by mutating one.
"""

from enum import Enum
from typing import Tuple, Union

import numpy as np
from pydantic import BaseModel, Field, field_validator, model_validator


class PipelineStage(Enum):
    """Stages of one label-processing run, in execution order."""

    SETUP = "Setup"
    LOAD = "Load"
    LOCALIZE = "Localize"
    EXTRACT_GREEN = "ExtractGreenChannel"
    ALIGN = "Align"
    VALIDATE_NAME = "ValidateName"
    READ_BARCODE = "ReadBarcode"
    READ_PRICE = "ReadPrice"
    VALIDATE_PRODUCT = "ValidateProduct"
    VALIDATE_PRICE = "ValidatePrice"
    REPORT = "Report"


class RotatedRect(BaseModel):
    """
    Rectangle with arbitrary orientation (center, size, angle).

    The angle follows the OpenCV ``minAreaRect`` convention: degrees between
    the image x-axis and the rectangle's width side. Rotating the image by
    ``angle`` about ``center`` brings the width side onto the x-axis.

    Attributes:
        center_x: X-coordinate of the center.
        center_y: Y-coordinate of the center.
        width: Length of the width side.
        height: Length of the height side.
        angle: Rotation angle in degrees.

    Example:
        >>> rect = RotatedRect(center_x=400, center_y=300, width=280, height=180, angle=0)
        >>> rect.extract()
        (400, 300, 280, 180)
    """

    model_config = {"frozen": True}

    center_x: float = Field(..., description="X-coordinate of the center")
    center_y: float = Field(..., description="Y-coordinate of the center")
    width: float = Field(..., ge=0, description="Width side length")
    height: float = Field(..., ge=0, description="Height side length")
    angle: float = Field(default=0.0, description="Rotation angle in degrees")

    @classmethod
    def from_cv(
        cls, box: Tuple[Tuple[float, float], Tuple[float, float], float]
    ) -> "RotatedRect":
        """
        Create RotatedRect from the tuple returned by ``cv2.minAreaRect``.

        The angle is normalized into (-45, 45], swapping width and height
        for every quarter turn removed.

        Args:
            box: ((cx, cy), (w, h), angle)

        Returns:
            RotatedRect instance.
        """
        (cx, cy), (w, h), angle = box
        # OpenCV >= 4.5 reports angles in (0, 90], older releases in [-90, 0)
        while angle > 45:
            angle -= 90
            w, h = h, w
        while angle <= -45:
            angle += 90
            w, h = h, w
        return cls(
            center_x=float(cx),
            center_y=float(cy),
            width=float(w),
            height=float(h),
            angle=float(angle),
        )

    def to_cv(self) -> Tuple[Tuple[float, float], Tuple[float, float], float]:
        """Convert back to the OpenCV ((cx, cy), (w, h), angle) tuple."""
        return (
            (self.center_x, self.center_y),
            (self.width, self.height),
            self.angle,
        )

    def extract(self) -> Tuple[int, int, int, int]:
        """
        Get integer (cx, cy, w, h), truncated toward zero.

        Returns:
            Tuple (cx, cy, w, h) used by the region formulas.
        """
        return (
            int(self.center_x),
            int(self.center_y),
            int(self.width),
            int(self.height),
        )

    def upright_bounds(self) -> "Rect":
        """
        Axis-aligned bounds of this rectangle once rotated upright about its center.

        Returns:
            Rect covering the label after alignment (x/y clamped to 0).
        """
        return Rect(
            x=self.center_x - self.width / 2,
            y=self.center_y - self.height / 2,
            width=max(self.width, 1),
            height=max(self.height, 1),
        )

    def __repr__(self) -> str:
        return (
            f"RotatedRect(center=({self.center_x:.1f}, {self.center_y:.1f}), "
            f"size=({self.width:.1f}, {self.height:.1f}), angle={self.angle:.1f})"
        )


class Rect(BaseModel):
    """
    Axis-aligned rectangle (x, y, width, height) in integer pixels.

    Floats are truncated toward zero. Negative ``x`` or ``y`` produced by the
    proportional region formulas are clamped to 0 rather than rejected.

    Example:
        >>> Rect(x=-12.7, y=40.9, width=100, height=20)
        Rect(x=0, y=40, width=100, height=20)
    """

    model_config = {"frozen": True}

    x: int = Field(..., ge=0, description="Left edge")
    y: int = Field(..., ge=0, description="Top edge")
    width: int = Field(..., description="Width in pixels")
    height: int = Field(..., description="Height in pixels")

    @field_validator("x", "y", mode="before")
    @classmethod
    def _clamp_origin(cls, v: Union[int, float]) -> int:
        if not isinstance(v, (int, float, np.integer, np.floating)):
            raise ValueError(f"Coordinate must be numeric, got {type(v)}")
        return max(0, int(v))

    @field_validator("width", "height", mode="before")
    @classmethod
    def _truncate(cls, v: Union[int, float]) -> int:
        if not isinstance(v, (int, float, np.integer, np.floating)):
            raise ValueError(f"Size must be numeric, got {type(v)}")
        return int(v)

    @model_validator(mode="after")
    def _validate_size(self) -> "Rect":
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Invalid rect size: width={self.width}, height={self.height}"
            )
        return self

    @property
    def x2(self) -> int:
        """Right edge (exclusive)."""
        return self.x + self.width

    @property
    def y2(self) -> int:
        """Bottom edge (exclusive)."""
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    def to_tuple(self) -> Tuple[int, int, int, int]:
        """Convert Rect to tuple (x, y, width, height)."""
        return (self.x, self.y, self.width, self.height)

    def __repr__(self) -> str:
        return f"Rect(x={self.x}, y={self.y}, width={self.width}, height={self.height})"
