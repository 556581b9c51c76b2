"""Label localization: find the label's rotated rectangle in the photograph."""

from .processor import LABEL_NOT_FOUND, LabelLocalizer

__all__ = ["LABEL_NOT_FOUND", "LabelLocalizer"]
