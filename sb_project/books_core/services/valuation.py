"""
Line valuation: money math for document lines.

All amounts are integer minor units. The net is rounded first and the tax
is derived from the rounded net, so every line reconciles to the øre.
"""
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, NamedTuple

from ..exceptions import ValidationError

HUNDRED = Decimal("100")


class LineValuation(NamedTuple):
    net_amount: int
    tax_amount: int
    total: int


class DocumentTotals(NamedTuple):
    subtotal: int
    tax_total: int
    total: int


def round_minor(value: Decimal, field: str = "amount") -> int:
    """Round half away from zero to a whole minor unit."""
    try:
        return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        # more digits than the decimal context can hold
        raise ValidationError(f"{field} is out of range", field=field)


def _is_integer(value) -> bool:
    # bool is an int subclass but never a valid amount
    return isinstance(value, int) and not isinstance(value, bool)


def _to_decimal(value, field):
    if isinstance(value, bool) or isinstance(value, float):
        # floats would smuggle binary rounding into money math
        raise ValidationError(f"{field} must be a decimal, not {type(value).__name__}",
                              field=field)
    try:
        number = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field} is not a number", field=field)
    if not number.is_finite():
        raise ValidationError(f"{field} must be a finite number", field=field)
    return number


def valuate(quantity, unit_price, discount=0, tax_percent=None,
            field_prefix: str = "") -> LineValuation:
    """
    Compute net, tax and total for one line.

        net   = round(quantity * unit_price) - discount   (must be >= 0)
        tax   = round(net * tax_percent / 100)
        total = net + tax

    ``tax_percent`` is the snapshot copied onto the line; None means 0.
    """
    qty = _to_decimal(quantity, f"{field_prefix}quantity")
    if qty <= 0:
        raise ValidationError("Quantity must be greater than zero",
                              field=f"{field_prefix}quantity")
    if not _is_integer(unit_price):
        raise ValidationError("Unit price must be an integer in minor units",
                              field=f"{field_prefix}unit_price")
    if not _is_integer(discount) or discount < 0:
        raise ValidationError("Discount must be a non-negative integer",
                              field=f"{field_prefix}discount")

    percent = Decimal("0") if tax_percent is None else _to_decimal(
        tax_percent, f"{field_prefix}tax_rate_percent")
    if percent < 0:
        raise ValidationError("Tax percent cannot be negative",
                              field=f"{field_prefix}tax_rate_percent")

    net = round_minor(qty * unit_price, f"{field_prefix}quantity") - discount
    if net < 0:
        raise ValidationError("Discount exceeds the line amount",
                              field=f"{field_prefix}discount")
    tax = round_minor(Decimal(net) * percent / HUNDRED,
                      f"{field_prefix}tax_rate_percent")
    return LineValuation(net_amount=net, tax_amount=tax, total=net + tax)


def summarize(valuations: Iterable[LineValuation]) -> DocumentTotals:
    """Element-wise sum, no further rounding."""
    subtotal = tax_total = total = 0
    for v in valuations:
        subtotal += v.net_amount
        tax_total += v.tax_amount
        total += v.total
    return DocumentTotals(subtotal=subtotal, tax_total=tax_total, total=total)


def valuation_of(line) -> LineValuation:
    """Read the stored valuation back from a saved line."""
    return LineValuation(line.net_amount, line.tax_amount, line.line_total)
