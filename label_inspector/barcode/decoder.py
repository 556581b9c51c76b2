"""Barcode decoder service.

BarcodeDecoder is the interface the pipeline depends on; ZBarDecoder wraps
the ZBar library through pyzbar. pyzbar loads the native zbar library when
imported, so the import is deferred to first use.

Example:
    >>> decoder = ZBarDecoder()
    >>> result = decoder.decode(gray, "EAN13")
    >>> if result.success:
    ...     print(result.data)
    '2301703050457'
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import numpy as np

logger = logging.getLogger(__name__)


@dataclass
class BarcodeResult:
    """Result of a barcode decode.

    Attributes:
        data: Decoded digits ("" when nothing decoded).
        symbology: Symbology of the decoded symbol.
        success: Whether a symbol was decoded.
    """

    data: str
    symbology: str
    success: bool

    @classmethod
    def failure(cls, symbology: str) -> "BarcodeResult":
        return cls(data="", symbology=symbology, success=False)


class BarcodeDecoder(ABC):
    """Interface for barcode decoders."""

    @abstractmethod
    def decode(self, image: np.ndarray, symbology: str) -> BarcodeResult:
        """Decode the first symbol of ``symbology`` found in a (H, W) uint8 image."""


class ZBarDecoder(BarcodeDecoder):
    """ZBar barcode decoder (lazy-loaded pyzbar)."""

    def __init__(self):
        self._pyzbar: Optional[object] = None

    @property
    def pyzbar(self):
        """Lazy-load pyzbar on first access.

        Raises:
            ImportError: If pyzbar or the zbar shared library is missing.
        """
        if self._pyzbar is None:
            try:
                from pyzbar import pyzbar

                self._pyzbar = pyzbar
                logger.info("ZBar decoder loaded successfully")
            except ImportError as e:
                logger.error(
                    "Failed to import pyzbar. "
                    "Install with: pip install pyzbar (and the zbar shared library)"
                )
                raise ImportError(
                    "pyzbar not installed. Run: pip install pyzbar"
                ) from e
        return self._pyzbar

    def decode(self, image: np.ndarray, symbology: str) -> BarcodeResult:
        if image is None or image.size == 0:
            logger.error("Invalid image: empty or None")
            return BarcodeResult.failure(symbology)

        pyzbar = self.pyzbar
        try:
            symbol = pyzbar.ZBarSymbol[symbology]
        except KeyError as e:
            raise ValueError(f"Unknown barcode symbology: {symbology}") from e

        symbols = pyzbar.decode(image, symbols=[symbol])
        if not symbols:
            logger.warning(f"No {symbology} symbol found")
            return BarcodeResult.failure(symbology)

        data = symbols[0].data.decode("utf-8")
        logger.debug(f"Decoded {len(symbols)} symbol(s), first: {data}")
        return BarcodeResult(data=data, symbology=symbology, success=True)
