"""Unit tests for label zone extraction."""

import pytest

from label_inspector.common.config_loader import LayoutConfig, RegionConfig
from label_inspector.common.types import Rect, RotatedRect
from label_inspector.regions.extractor import (
    compute_region,
    price_region,
    product_name_region,
)


@pytest.fixture
def label_rect():
    return RotatedRect(center_x=400, center_y=300, width=200, height=100, angle=3)


class TestDefaultLayout:
    """Test the calibrated zones of the supported label."""

    def test_product_name_zone(self, label_rect):
        # x = 400 - 1.05 * 100, y = 300 - 1.47 * 50
        assert product_name_region(label_rect) == Rect(x=295, y=226, width=100, height=20)

    def test_price_zone(self, label_rect):
        # x = 400 - 0.33 * 100, y = 300 - 0.64 * 50
        assert price_region(label_rect) == Rect(x=367, y=268, width=45, height=15)

    def test_fractional_rect_truncated_first(self):
        rect = RotatedRect(center_x=400.9, center_y=300.9, width=200.9, height=100.9)

        assert price_region(rect) == Rect(x=367, y=268, width=45, height=15)

    def test_angle_ignored(self, label_rect):
        upright = label_rect.model_copy(update={"angle": 0})

        assert price_region(upright) == price_region(label_rect)


class TestPurity:
    """Test regions are pure functions of the rectangle."""

    def test_idempotent(self, label_rect):
        assert product_name_region(label_rect) == product_name_region(label_rect)
        assert price_region(label_rect) == price_region(label_rect)

    def test_rect_not_mutated(self, label_rect):
        before = label_rect.model_dump()

        product_name_region(label_rect)
        price_region(label_rect)

        assert label_rect.model_dump() == before

    @pytest.mark.parametrize("cx,cy", [(0, 0), (10, 5), (52, 36)])
    def test_negative_origin_clamped_to_zero(self, cx, cy):
        rect = RotatedRect(center_x=cx, center_y=cy, width=200, height=100)

        region = product_name_region(rect)

        assert region.x == 0
        assert region.y == 0
        assert region.width == 100
        assert region.height == 20

    def test_clamp_only_affected_axis(self):
        rect = RotatedRect(center_x=50, center_y=300, width=200, height=100)

        region = product_name_region(rect)

        assert region.x == 0
        assert region.y == 226


class TestCustomLayout:
    """Test layout calibration overrides."""

    def test_layout_override(self, label_rect):
        layout = LayoutConfig(
            price=RegionConfig(x_offset=0.0, y_offset=0.0, width_ratio=0.5, height_ratio=0.5)
        )

        assert price_region(label_rect, layout) == Rect(x=400, y=300, width=100, height=50)

    def test_compute_region_negative_offset_moves_right(self, label_rect):
        region = compute_region(
            label_rect,
            RegionConfig(x_offset=-1.0, y_offset=-1.0, width_ratio=0.1, height_ratio=0.1),
        )

        assert region == Rect(x=500, y=350, width=20, height=10)

    def test_degenerate_rect_rejected(self):
        rect = RotatedRect(center_x=100, center_y=100, width=1, height=1)

        with pytest.raises(ValueError):
            price_region(rect)
