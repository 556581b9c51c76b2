"""Proportional sub-regions of the label layout."""

from .extractor import compute_region, price_region, product_name_region

__all__ = ["compute_region", "price_region", "product_name_region"]
