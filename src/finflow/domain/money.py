"""Currency parsing and INR display formatting."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from finflow.errors import ValidationError

CENTS = Decimal("0.01")
CURRENCY_SYMBOL = "₹"


def parse_amount(raw: object) -> Decimal:
    """Parse a user-supplied amount into a positive two-decimal value."""
    if isinstance(raw, bool):
        raise ValidationError("Amount must be a number")
    try:
        amount = Decimal(str(raw).strip())
    except InvalidOperation as exc:
        raise ValidationError("Amount must be a number") from exc
    if not amount.is_finite():
        raise ValidationError("Amount must be a finite number")
    if amount <= 0:
        raise ValidationError("Amount must be greater than zero")
    try:
        quantized = amount.quantize(CENTS)
    except InvalidOperation as exc:
        raise ValidationError("Amount is too large") from exc
    if amount != quantized:
        raise ValidationError("Amount can have at most two decimal places")
    return quantized


def to_decimal(value: object) -> Decimal:
    """Convert a stored numeric value without passing through float."""
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


def format_inr(amount: Decimal) -> str:
    """Format an amount as Indian rupees, e.g. ``₹1,23,456.78``."""
    rounded = amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    whole, fraction = f"{abs(rounded):.2f}".split(".")
    return f"{sign}{CURRENCY_SYMBOL}{_group_indian(whole)}.{fraction}"


def _group_indian(digits: str) -> str:
    # Last three digits form the first group; the rest are grouped in pairs.
    if len(digits) <= 3:  # noqa: PLR2004
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:  # noqa: PLR2004
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join([*pairs, tail])
