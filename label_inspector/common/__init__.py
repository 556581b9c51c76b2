"""Shared types, resources, errors and configuration."""

from label_inspector.common.config_loader import Config, get_default_config, load_config
from label_inspector.common.errors import (
    ImageDecodeError,
    LabelPipelineError,
    ResourceAllocationError,
    StageFailure,
    ValidationFailure,
    VisionError,
)
from label_inspector.common.image import ContourSet, Image
from label_inspector.common.types import PipelineStage, Rect, RotatedRect

__all__ = [
    "Config",
    "ContourSet",
    "Image",
    "ImageDecodeError",
    "LabelPipelineError",
    "PipelineStage",
    "Rect",
    "ResourceAllocationError",
    "RotatedRect",
    "StageFailure",
    "ValidationFailure",
    "VisionError",
    "get_default_config",
    "load_config",
]
