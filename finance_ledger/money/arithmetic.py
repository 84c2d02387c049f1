"""
Money Arithmetic

DESIGN DECISION: All money is held as Decimal and rounded to two
places immediately after every balance mutation. Floats are only
accepted at the boundary and converted through their string form,
so 0.1 + 0.2 stays 0.30 and never drifts.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Union

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# Hard ceiling for a single amount or balance entered by the user
MAX_AMOUNT = Decimal("1000000000000000")


def to_decimal(value: Number) -> Decimal:
    """
    Convert a number to Decimal without binary float artefacts.

    Raises:
        InvalidOperation: If the value is not numeric
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise InvalidOperation(f"Not a number: {value!r}")
    if isinstance(value, float):
        return Decimal(repr(value))
    if isinstance(value, str):
        return Decimal(value.strip().replace(",", ""))
    return Decimal(value)


def round2(value: Number) -> Decimal:
    """Round to 2 decimal places, halves away from zero."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def parse_amount(value: object) -> Optional[Decimal]:
    """
    Parse user input into a rounded Decimal amount.

    Returns None for anything that is not a finite number
    (empty strings, text, booleans, NaN, infinity), and for numbers
    too large to be held to the cent.
    """
    if value is None:
        return None
    try:
        number = to_decimal(value)  # type: ignore[arg-type]
    except (InvalidOperation, TypeError, ValueError):
        return None
    if not number.is_finite():
        return None
    try:
        return round2(number)
    except InvalidOperation:
        # quantize overflows the decimal context precision
        return None


def _group_digits(digits: str, grouping: str) -> str:
    """Insert thousands separators into a string of integer digits."""
    if len(digits) <= 3:
        return digits

    head, tail = digits[:-3], digits[-3:]
    step = 2 if grouping == "indian" else 3

    groups = []
    while len(head) > step:
        groups.insert(0, head[-step:])
        head = head[:-step]
    groups.insert(0, head)

    return ",".join(groups + [tail])


def format_currency(
    amount: object,
    symbol: str = "₹",
    grouping: str = "indian",
) -> str:
    """
    Format an amount as a currency string.

    Examples:
        format_currency(123456.789)           -> "₹ 1,23,456.79"
        format_currency("abc")                -> "₹ 0.00"
        format_currency(-50, symbol="$",
                        grouping="western")   -> "$ -50.00"
    """
    value = parse_amount(amount)
    if value is None:
        value = ZERO

    sign = "-" if value < 0 else ""
    integer_part, fraction_part = f"{abs(value):.2f}".split(".")

    return f"{symbol} {sign}{_group_digits(integer_part, grouping)}.{fraction_part}"
