"""Cross-checks between the product name, the barcode and the printed price.

Weight/price-variable retail barcodes embed the product code in the first
seven digits and the price in digits 8-11 (EAN-13, 0-based indices):

- digit 8 non-zero: price is ``d8 d9 . d10 d11`` (two integer digits)
- digit 8 zero:     price is ``d9 . d10 d11`` (one integer digit)
"""

from label_inspector.common.errors import StageFailure, ValidationFailure
from label_inspector.common.types import PipelineStage

EXPECTED_NAME = "Cerdo"
EXPECTED_PRODUCT_CODE = "2301703"
PRICE_DIGIT_INDEX = 8


def is_name_match(text: str, expected: str = EXPECTED_NAME) -> bool:
    """Check whether the OCR'd product name starts with ``expected``."""
    return text.startswith(expected)


def validate_name(text: str, expected: str = EXPECTED_NAME) -> None:
    """Validate the OCR'd product name.

    Raises:
        StageFailure: If ``text`` does not start with ``expected``.
    """
    if not is_name_match(text, expected):
        raise StageFailure(
            f'"{expected}" not found',
            stage=PipelineStage.VALIDATE_NAME,
            code="LBL-E006",
            constant="NAME_MISMATCH",
        )


def is_product_match(bcode: str, expected: str = EXPECTED_PRODUCT_CODE) -> bool:
    """Check whether the barcode's product-code prefix equals ``expected``.

    Example:
        >>> is_product_match("2301703050457")
        True
        >>> is_product_match("2301704050457")
        False
    """
    return bcode[: len(expected)] == expected


def validate_product(bcode: str, expected: str = EXPECTED_PRODUCT_CODE) -> None:
    """Validate the product code embedded in the barcode.

    Raises:
        ValidationFailure: If the prefix differs from ``expected``.
    """
    if not is_product_match(bcode, expected):
        raise ValidationFailure(
            "Product doesn't match in barcode",
            stage=PipelineStage.VALIDATE_PRODUCT,
            code="LBL-E009",
            constant="PRODUCT_MISMATCH",
        )


def derive_price(bcode: str) -> str:
    """Derive the price embedded in a price-variable barcode.

    Args:
        bcode: Barcode digits (at least 12 characters).

    Returns:
        Price string, "DD.DD" or "D.DD".

    Raises:
        ValueError: If ``bcode`` is too short to hold a price.

    Example:
        >>> derive_price("2301703X5045Y")
        '50.45'
        >>> derive_price("230170300512")
        '5.12'
    """
    if len(bcode) < PRICE_DIGIT_INDEX + 4:
        raise ValueError(
            f"Barcode too short to hold a price: {len(bcode)} < {PRICE_DIGIT_INDEX + 4}"
        )

    d8, d9, d10, d11 = bcode[PRICE_DIGIT_INDEX : PRICE_DIGIT_INDEX + 4]
    if d8 != "0":
        return f"{d8}{d9}.{d10}{d11}"
    return f"{d9}.{d10}{d11}"


def is_price_match(bcode: str, price: str) -> bool:
    """Check whether the OCR'd price starts with the barcode price."""
    return price.startswith(derive_price(bcode))


def validate_price(bcode: str, price: str) -> None:
    """Validate the OCR'd price against the barcode price.

    Raises:
        ValidationFailure: If the prices disagree or the barcode holds no price.
    """
    try:
        matches = is_price_match(bcode, price)
    except ValueError as e:
        raise ValidationFailure(
            "Price doesn't match in barcode",
            stage=PipelineStage.VALIDATE_PRICE,
            code="LBL-E010",
            constant="PRICE_MISMATCH",
        ) from e

    if not matches:
        raise ValidationFailure(
            "Price doesn't match in barcode",
            stage=PipelineStage.VALIDATE_PRICE,
            code="LBL-E010",
            constant="PRICE_MISMATCH",
        )
