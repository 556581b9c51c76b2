"""Barcode decoding of the label."""

from .decoder import BarcodeDecoder, BarcodeResult, ZBarDecoder
from .reader import BarcodeReader

__all__ = ["BarcodeDecoder", "BarcodeReader", "BarcodeResult", "ZBarDecoder"]
