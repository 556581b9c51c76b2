"""Configuration loader with Pydantic validation for the label pipeline.

All calibration values of the single supported label layout live here:
kernel sizes and thresholds of the localization stage, the proportional
offsets of the product-name and price zones, the expected product name and
product code, and OCR / barcode engine settings.
"""

import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"


def _check_odd_kernel(v: int) -> int:
    if v < 1 or v % 2 == 0:
        raise ValueError(f"Kernel size must be a positive odd integer, got {v}")
    return v


class LocalizationConfig(BaseModel):
    """Label localization configuration.

    Attributes:
        median_ksize: Median smoothing kernel size (noise suppression)
        mean_ksize: Mean smoothing kernel size (blurs the label into a blob)
        threshold_level: Binary-inverse threshold level on the inverted image
        closing_iterations: Dilate-then-erode iterations merging the blob
    """

    median_ksize: int = 7
    mean_ksize: int = 21
    threshold_level: int = Field(default=2, ge=0, le=255)
    closing_iterations: int = Field(default=100, ge=0)

    @field_validator("median_ksize", "mean_ksize")
    @classmethod
    def _odd_kernels(cls, v: int) -> int:
        return _check_odd_kernel(v)


class RegionConfig(BaseModel):
    """Proportional offsets of one label zone relative to the label rectangle.

    The zone is ``x = cx - x_offset * w / 2``, ``y = cy - y_offset * h / 2``,
    ``width = w * width_ratio``, ``height = h * height_ratio``.
    """

    x_offset: float
    y_offset: float
    width_ratio: float = Field(..., gt=0.0)
    height_ratio: float = Field(..., gt=0.0)


class LayoutConfig(BaseModel):
    """Zone calibration of the supported label layout."""

    product_name: RegionConfig = RegionConfig(
        x_offset=1.05, y_offset=1.47, width_ratio=0.5, height_ratio=0.20
    )
    price: RegionConfig = RegionConfig(
        x_offset=0.33, y_offset=0.64, width_ratio=0.225, height_ratio=0.15
    )


class ProductNameConfig(BaseModel):
    """Product-name reader configuration.

    Attributes:
        expected_text: Literal the OCR'd name must start with
        erode_iterations: Erosion passes thinning the strokes before OCR
        lang: Tesseract language of the label text
    """

    expected_text: str = "Cerdo"
    erode_iterations: int = Field(default=1, ge=0)
    lang: str = "spa"


class PriceConfig(BaseModel):
    """Price reader configuration.

    Attributes:
        mean_ksize: Mean smoothing kernel size before Otsu threshold
        closing_iterations: Dilate-erode iterations after Otsu threshold
        hard_threshold: Final fixed binary threshold level
        lang: Tesseract language for the digit model
        currency: Currency printed in the report
    """

    mean_ksize: int = 3
    closing_iterations: int = Field(default=1, ge=0)
    hard_threshold: int = Field(default=1, ge=0, le=255)
    lang: str = "eng"
    currency: str = "EUR"

    @field_validator("mean_ksize")
    @classmethod
    def _odd_kernels(cls, v: int) -> int:
        return _check_odd_kernel(v)


class BarcodeConfig(BaseModel):
    """Barcode reader configuration.

    Attributes:
        symbology: Symbology name understood by the decoder
        expected_length: Number of digits of a decoded symbol
    """

    symbology: str = "EAN13"
    expected_length: int = Field(default=13, gt=0)


class ValidationConfig(BaseModel):
    """Cross-check configuration.

    Attributes:
        expected_product_code: Barcode prefix identifying the product
    """

    expected_product_code: str = "2301703"

    @field_validator("expected_product_code")
    @classmethod
    def _digits_only(cls, v: str) -> str:
        if not v.isdigit():
            raise ValueError(f"Product code must contain only digits, got '{v}'")
        return v


class OCREngineConfig(BaseModel):
    """OCR engine configuration.

    Attributes:
        type: Engine type (only "tesseract" supported)
        tesseract_cmd: Path to the tesseract binary (None uses PATH)
        text_psm: Page segmentation mode for the product-name zone
        price_psm: Page segmentation mode for the price zone
        price_whitelist: Characters Tesseract may emit in price mode
        min_confidence: Minimum average word confidence (0.0-1.0)
    """

    type: str = "tesseract"
    tesseract_cmd: Optional[str] = None
    text_psm: int = Field(default=7, ge=0, le=13)
    price_psm: int = Field(default=7, ge=0, le=13)
    price_whitelist: str = "0123456789.,"
    min_confidence: float = Field(default=0.0, ge=0.0, le=1.0)


class Config(BaseModel):
    """Root configuration container."""

    localization: LocalizationConfig = LocalizationConfig()
    layout: LayoutConfig = LayoutConfig()
    product_name: ProductNameConfig = ProductNameConfig()
    price: PriceConfig = PriceConfig()
    barcode: BarcodeConfig = BarcodeConfig()
    validation: ValidationConfig = ValidationConfig()
    ocr: OCREngineConfig = OCREngineConfig()


def load_config(config_path: Path) -> Config:
    """Load and validate configuration from YAML file.

    Sections missing from the file keep their defaults.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated Config object

    Raises:
        FileNotFoundError: If config file does not exist
        yaml.YAMLError: If YAML parsing fails
        pydantic.ValidationError: If configuration validation fails

    Example:
        >>> config = load_config(Path("label_inspector/common/config.yaml"))
        >>> print(config.validation.expected_product_code)
        2301703
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger.debug(f"Loading label config from {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config_dict = yaml.safe_load(f) or {}

    return Config(**config_dict)


def get_default_config() -> Config:
    """Get default configuration from the bundled config.yaml file.

    Returns:
        Config loaded from label_inspector/common/config.yaml, or the
        hardcoded defaults if the file is missing.
    """
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    logger.warning(
        f"Bundled config not found at {DEFAULT_CONFIG_PATH}, using built-in defaults"
    )
    return Config()
