"""Label alignment: rotate the label upright and crop to it."""

from .processor import LabelAligner

__all__ = ["LabelAligner"]
