"""Meat-label price verification.

Locates a price label in a photograph, aligns it, reads the product name and
the printed price with OCR, decodes the EAN-13 barcode and cross-checks the
product code and price embedded in the barcode.

Example:
    >>> from label_inspector.pipeline import process_label
    >>> result = process_label("label.jpg")
    >>> if result.is_pass():
    ...     print(result.barcode, result.price)
"""

__version__ = "0.1.0"
