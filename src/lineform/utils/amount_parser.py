"""Amount parsing utilities.

Numeric entry fields are kept as the text the user typed. They are read with
``parse_field_number``, which accepts plain decimal notation only: no
thousands separators, currency symbols or parentheses, so ``1,5`` is not a
number rather than fifteen. ``parse_or_zero`` and ``is_positive`` wrap it for
display math and classification.

``parse_amount`` is the lenient parser for amounts typed on the command line,
such as rate multipliers.
"""

from decimal import Decimal, InvalidOperation
import re
from typing import Union

AmountInput = Union[str, int, float, Decimal, None]

ZERO = Decimal("0")

# Largest magnitude accepted in an entry field.
MAX_FIELD_MAGNITUDE = Decimal("1e12")

FIELD_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


def parse_amount(amount_str: AmountInput) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string (numbers are accepted as-is)

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string is empty, cannot be parsed or is not finite
    """
    if isinstance(amount_str, Decimal):
        amount = amount_str
    elif isinstance(amount_str, (int, float)) and not isinstance(amount_str, bool):
        amount = Decimal(str(amount_str))
    else:
        if amount_str is None or not str(amount_str).strip():
            raise ValueError("Empty amount string")

        # Remove whitespace
        amount_str = str(amount_str).strip()

        # Handle parentheses notation (negative)
        is_negative = False
        if amount_str.startswith("(") and amount_str.endswith(")"):
            is_negative = True
            amount_str = amount_str[1:-1]

        # Remove currency symbols
        amount_str = re.sub(r"[$€£¥₺]", "", amount_str)

        # Remove commas
        amount_str = amount_str.replace(",", "")

        amount_str = amount_str.strip()

        try:
            amount = Decimal(amount_str)
        except (InvalidOperation, ValueError) as e:
            raise ValueError(f"Could not parse amount '{amount_str}': {e}")
        if is_negative:
            amount = -amount

    if not amount.is_finite():
        raise ValueError(f"Amount '{amount_str}' is not a finite number")
    return amount


def parse_field_number(value: AmountInput) -> Decimal:
    """Parse a numeric entry field.

    Args:
        value: Field text such as "12", "-3.5", ".5" or "1e3" (numbers are
            accepted as-is)

    Returns:
        Decimal value

    Raises:
        ValueError: If the value is empty, not plain decimal notation, not
            finite or larger in magnitude than MAX_FIELD_MAGNITUDE
    """
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        number = Decimal(str(value))
    else:
        text = str(value if value is not None else "").strip()
        if not text:
            raise ValueError("Empty number")
        if not FIELD_NUMBER_RE.match(text):
            raise ValueError(f"'{text}' is not a number")
        number = Decimal(text)

    if not number.is_finite():
        raise ValueError(f"'{value}' is not a finite number")
    if number.copy_abs() > MAX_FIELD_MAGNITUDE:
        raise ValueError(f"'{value}' is out of range")
    return number


def parse_or_zero(amount_str: AmountInput) -> Decimal:
    """Parse a field for calculation, resolving anything unparsable to 0."""
    try:
        return parse_field_number(amount_str)
    except ValueError:
        return ZERO


def is_positive(amount_str: AmountInput) -> bool:
    """Return True if the field parses to a number greater than zero."""
    return parse_or_zero(amount_str) > ZERO


def to_field_text(value: AmountInput) -> str:
    """Normalize a caller-supplied field value to the stored text form."""
    if value is None:
        return ""
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)
