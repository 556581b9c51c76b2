"""Product-name, product-code and price cross-validation."""

from .validator import (
    EXPECTED_NAME,
    EXPECTED_PRODUCT_CODE,
    derive_price,
    is_name_match,
    is_price_match,
    is_product_match,
    validate_name,
    validate_price,
    validate_product,
)

__all__ = [
    "EXPECTED_NAME",
    "EXPECTED_PRODUCT_CODE",
    "derive_price",
    "is_name_match",
    "is_price_match",
    "is_product_match",
    "validate_name",
    "validate_price",
    "validate_product",
]
