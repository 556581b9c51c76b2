"""Unit tests for geometry value types."""

import numpy as np
import pytest
from pydantic import ValidationError

from label_inspector.common.types import PipelineStage, Rect, RotatedRect


class TestRect:
    """Test axis-aligned rectangle construction."""

    def test_integer_fields(self):
        rect = Rect(x=10, y=20, width=30, height=40)

        assert rect.to_tuple() == (10, 20, 30, 40)
        assert rect.x2 == 40
        assert rect.y2 == 60
        assert rect.area == 1200

    def test_floats_truncated_toward_zero(self):
        rect = Rect(x=10.9, y=20.5, width=30.99, height=40.01)

        assert rect.to_tuple() == (10, 20, 30, 40)

    def test_negative_origin_clamped_to_zero(self):
        rect = Rect(x=-12.7, y=-0.5, width=100, height=20)

        assert rect.x == 0
        assert rect.y == 0

    def test_numpy_scalars_accepted(self):
        rect = Rect(x=np.int32(5), y=np.float64(6.7), width=np.int64(7), height=8)

        assert rect.to_tuple() == (5, 6, 7, 8)

    @pytest.mark.parametrize("width,height", [(0, 10), (10, 0), (-5, 10), (0.9, 10)])
    def test_empty_size_rejected(self, width, height):
        with pytest.raises(ValidationError):
            Rect(x=0, y=0, width=width, height=height)

    def test_non_numeric_rejected(self):
        with pytest.raises(ValidationError):
            Rect(x="left", y=0, width=10, height=10)

    def test_immutable(self):
        rect = Rect(x=1, y=2, width=3, height=4)

        with pytest.raises(ValidationError):
            rect.x = 5

    def test_repr(self):
        assert repr(Rect(x=1, y=2, width=3, height=4)) == "Rect(x=1, y=2, width=3, height=4)"


class TestRotatedRect:
    """Test rotated rectangle conversions."""

    def test_extract_truncates(self):
        rect = RotatedRect(center_x=400.8, center_y=300.2, width=280.6, height=180.9)

        assert rect.extract() == (400, 300, 280, 180)

    def test_from_cv_keeps_small_angle(self):
        rect = RotatedRect.from_cv(((400.0, 300.0), (280.0, 180.0), 10.0))

        assert rect.extract() == (400, 300, 280, 180)
        assert rect.angle == pytest.approx(10.0)

    def test_from_cv_normalizes_quarter_turn(self):
        """An upright label reported at 90 degrees comes back at 0 with sides swapped."""
        rect = RotatedRect.from_cv(((400.0, 300.0), (180.0, 280.0), 90.0))

        assert rect.angle == pytest.approx(0.0)
        assert rect.width == pytest.approx(280.0)
        assert rect.height == pytest.approx(180.0)

    def test_from_cv_normalizes_negative_angle(self):
        rect = RotatedRect.from_cv(((400.0, 300.0), (180.0, 280.0), -80.0))

        assert rect.angle == pytest.approx(10.0)
        assert rect.width == pytest.approx(280.0)
        assert rect.height == pytest.approx(180.0)

    def test_to_cv_round_trip(self):
        box = ((12.5, 30.0), (40.0, 20.0), -15.0)

        assert RotatedRect.from_cv(box).to_cv() == box

    def test_upright_bounds(self):
        rect = RotatedRect(center_x=400, center_y=300, width=280, height=180, angle=5)

        assert rect.upright_bounds() == Rect(x=260, y=210, width=280, height=180)

    def test_upright_bounds_clamped_at_border(self):
        rect = RotatedRect(center_x=50, center_y=40, width=200, height=100)

        bounds = rect.upright_bounds()

        assert (bounds.x, bounds.y) == (0, 0)

    def test_negative_size_rejected(self):
        with pytest.raises(ValidationError):
            RotatedRect(center_x=0, center_y=0, width=-1, height=10)

    def test_immutable(self):
        rect = RotatedRect(center_x=0, center_y=0, width=1, height=1)

        with pytest.raises(ValidationError):
            rect.angle = 30


def test_stage_values_name_the_stage():
    assert PipelineStage.LOCALIZE.value == "Localize"
    assert PipelineStage.EXTRACT_GREEN.value == "ExtractGreenChannel"
    assert PipelineStage.VALIDATE_PRICE.value == "ValidatePrice"
