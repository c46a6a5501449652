"""Amount parsing and rounding utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re
from typing import Any, Optional

CENT = Decimal("0.01")
MILLI = Decimal("0.001")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45", "NT$123.45", "123.45 元"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    # Remove whitespace
    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols and unit suffixes
    amount_str = re.sub(r"NT\$|[$€£¥元]|kwh|km", "", amount_str, flags=re.IGNORECASE)

    # Remove thousands separators
    amount_str = amount_str.replace(",", "")

    amount_str = amount_str.strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}") from e
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount


def parse_optional_amount(amount_str: Optional[str]) -> Optional[Decimal]:
    """Parse an amount that may be left empty. Empty input gives None."""
    if amount_str is None or not str(amount_str).strip():
        return None
    return parse_amount(str(amount_str))


def to_decimal(value: Any) -> Decimal:
    """Coerce a stored numeric value to Decimal, treating missing values as 0."""
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        return Decimal(int(value))
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    try:
        return parse_amount(str(value))
    except ValueError:
        return Decimal("0")


def round2(value: Decimal) -> Decimal:
    """Round to the nearest cent, half away from zero."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def round3(value: Decimal) -> Decimal:
    """Round to three decimals, half away from zero."""
    return value.quantize(MILLI, rounding=ROUND_HALF_UP)
