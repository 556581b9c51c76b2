"""Region extraction for the fixed label layout.

Each label zone is a fixed proportion of the detected label rectangle:

    x      = cx - x_offset * w / 2
    y      = cy - y_offset * h / 2
    width  = w * width_ratio
    height = h * height_ratio

The rectangle values are taken as integers, and the result is truncated
toward zero with negative x/y clamped to 0 (see ``Rect``). These are pure
functions: the same rectangle always yields the same region.
"""

from typing import Optional

from label_inspector.common.config_loader import LayoutConfig, RegionConfig
from label_inspector.common.types import Rect, RotatedRect

_DEFAULT_LAYOUT = LayoutConfig()


def compute_region(rect: RotatedRect, region: RegionConfig) -> Rect:
    """Compute one zone of the label from its rotated rectangle.

    Args:
        rect: Label pose.
        region: Proportional offsets of the zone.

    Returns:
        Axis-aligned zone, clamped to the image origin.

    Raises:
        ValueError: If the zone has no area (degenerate rectangle).

    Example:
        >>> rect = RotatedRect(center_x=400, center_y=300, width=200, height=100)
        >>> compute_region(rect, RegionConfig(x_offset=0.33, y_offset=0.64,
        ...                                   width_ratio=0.225, height_ratio=0.15))
        Rect(x=367, y=268, width=45, height=15)
    """
    cx, cy, w, h = rect.extract()
    return Rect(
        x=cx - region.x_offset * w / 2,
        y=cy - region.y_offset * h / 2,
        width=w * region.width_ratio,
        height=h * region.height_ratio,
    )


def product_name_region(
    rect: RotatedRect, layout: Optional[LayoutConfig] = None
) -> Rect:
    """Zone holding the product name (top left of the label)."""
    layout = layout or _DEFAULT_LAYOUT
    return compute_region(rect, layout.product_name)


def price_region(rect: RotatedRect, layout: Optional[LayoutConfig] = None) -> Rect:
    """Zone holding the printed price."""
    layout = layout or _DEFAULT_LAYOUT
    return compute_region(rect, layout.price)
