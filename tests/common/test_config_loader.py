"""Unit tests for label configuration loader."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from label_inspector.common.config_loader import (
    DEFAULT_CONFIG_PATH,
    BarcodeConfig,
    Config,
    LayoutConfig,
    LocalizationConfig,
    OCREngineConfig,
    PriceConfig,
    ProductNameConfig,
    RegionConfig,
    ValidationConfig,
    get_default_config,
    load_config,
)


class TestLocalizationConfig:
    """Test LocalizationConfig model."""

    def test_default_values(self):
        """Test default localization calibration."""
        config = LocalizationConfig()
        assert config.median_ksize == 7
        assert config.mean_ksize == 21
        assert config.threshold_level == 2
        assert config.closing_iterations == 100

    @pytest.mark.parametrize("ksize", [0, 4, 20, -3])
    def test_even_or_nonpositive_kernel_rejected(self, ksize):
        """Test smoothing kernels must be positive odd sizes."""
        with pytest.raises(ValidationError):
            LocalizationConfig(mean_ksize=ksize)

    def test_threshold_out_of_range(self):
        with pytest.raises(ValidationError):
            LocalizationConfig(threshold_level=256)


class TestLayoutConfig:
    """Test zone calibration."""

    def test_default_zones(self):
        layout = LayoutConfig()
        assert layout.product_name == RegionConfig(
            x_offset=1.05, y_offset=1.47, width_ratio=0.5, height_ratio=0.20
        )
        assert layout.price == RegionConfig(
            x_offset=0.33, y_offset=0.64, width_ratio=0.225, height_ratio=0.15
        )

    def test_nonpositive_ratio_rejected(self):
        with pytest.raises(ValidationError):
            RegionConfig(x_offset=0.0, y_offset=0.0, width_ratio=0.0, height_ratio=0.1)


class TestReaderConfigs:
    """Test product-name, price, barcode and OCR sections."""

    def test_product_name_defaults(self):
        config = ProductNameConfig()
        assert config.expected_text == "Cerdo"
        assert config.erode_iterations == 1
        assert config.lang == "spa"

    def test_price_defaults(self):
        config = PriceConfig()
        assert config.mean_ksize == 3
        assert config.hard_threshold == 1
        assert config.currency == "EUR"

    def test_price_even_kernel_rejected(self):
        with pytest.raises(ValidationError):
            PriceConfig(mean_ksize=2)

    def test_barcode_defaults(self):
        config = BarcodeConfig()
        assert config.symbology == "EAN13"
        assert config.expected_length == 13

    def test_product_code_digits_only(self):
        """Test product code must be numeric."""
        assert ValidationConfig().expected_product_code == "2301703"
        with pytest.raises(ValidationError):
            ValidationConfig(expected_product_code="23O17O3")

    def test_ocr_psm_out_of_range(self):
        with pytest.raises(ValidationError):
            OCREngineConfig(text_psm=14)


class TestLoadConfig:
    """Test YAML loading."""

    def test_bundled_config_matches_defaults(self):
        """Test the bundled config.yaml carries the built-in calibration."""
        assert DEFAULT_CONFIG_PATH.exists()
        assert load_config(DEFAULT_CONFIG_PATH).model_dump() == Config().model_dump()

    def test_get_default_config(self):
        config = get_default_config()
        assert isinstance(config, Config)
        assert config.validation.expected_product_code == "2301703"

    def test_partial_override(self, tmp_path):
        """Test sections missing from the file keep their defaults."""
        path = tmp_path / "config.yaml"
        path.write_text(
            yaml.safe_dump(
                {
                    "validation": {"expected_product_code": "2301800"},
                    "layout": {
                        "price": {
                            "x_offset": 0.4,
                            "y_offset": 0.7,
                            "width_ratio": 0.3,
                            "height_ratio": 0.2,
                        }
                    },
                }
            )
        )

        config = load_config(path)

        assert config.validation.expected_product_code == "2301800"
        assert config.layout.price.x_offset == 0.4
        assert config.layout.product_name.x_offset == 1.05
        assert config.localization.closing_iterations == 100

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_config(path).model_dump() == Config().model_dump()

    def test_invalid_value_rejected(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("localization:\n  median_ksize: 8\n")

        with pytest.raises(ValidationError):
            load_config(path)

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError):
            load_config(Path("/nonexistent/label_config.yaml"))

    def test_default_config_falls_back_without_file(self, monkeypatch, tmp_path):
        monkeypatch.setattr(
            "label_inspector.common.config_loader.DEFAULT_CONFIG_PATH",
            tmp_path / "missing.yaml",
        )

        assert get_default_config().model_dump() == Config().model_dump()
