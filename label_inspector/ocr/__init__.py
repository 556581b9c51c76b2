"""OCR of the label zones.

Core Components:
    - engine: OCRService interface, OCRMode, OCREngineResult
    - engine_tesseract: Tesseract implementation (pytesseract)
    - readers: product-name and price readers
"""

from .engine import OCREngineResult, OCRMode, OCRService
from .engine_tesseract import TesseractEngine, normalize_price_text
from .readers import PriceReader, ProductNameReader

__all__ = [
    "OCREngineResult",
    "OCRMode",
    "OCRService",
    "PriceReader",
    "ProductNameReader",
    "TesseractEngine",
    "normalize_price_text",
]
