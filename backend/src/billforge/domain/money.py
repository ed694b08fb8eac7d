"""
Monetary formatting for display.

Amounts arrive as floats from the YAML document and leave as grouped,
two-decimal strings such as ``1,234.50``. The routine is deterministic and
independent of the process locale.

Design Decisions:
- Floats are converted through their shortest repr (``Decimal(str(x))``) so
  that 1.005 is treated as the author wrote it, not as 1.00499999...
- Rounding is half away from zero (ROUND_HALF_UP on Decimal), not banker's
- Precision grows with the amount, so large floats such as 1e30 still
  round to exact cents
- Grouping uses the format mini-language ``,`` which never consults locale
- The rendered string is re-checked against the expected numeric pattern;
  a mismatch is a formatter bug and raises FormattingInvariantError
"""

import re
from decimal import ROUND_HALF_UP, Decimal, localcontext

from .errors import FormattingInvariantError

CENT = Decimal("0.01")

MONEY_PATTERN = re.compile(r"-?\d{1,3}(?:,\d{3})*\.\d{2}")


def round_amount(amount: float | int | Decimal) -> Decimal:
    """
    Round an amount to cents, half away from zero.

    Examples:
        >>> round_amount(-0.005)
        Decimal('-0.01')
        >>> round_amount(2.675)
        Decimal('2.68')
    """
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    if not value.is_finite():
        raise FormattingInvariantError(amount, str(value))

    # quantize needs room for every integer digit plus two cents digits
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_currency(amount: float | int | Decimal) -> str:
    """
    Format an amount as a human-readable monetary value.

    Args:
        amount: Raw amount, usually a float decoded from YAML

    Returns:
        Sign, comma-grouped integer part and exactly two fraction digits,
        with no currency symbol. Negative zero renders as ``0.00``.

    Raises:
        FormattingInvariantError: If the rendered value does not match the
            expected numeric pattern (including non-finite input)
    """
    rounded = round_amount(amount)
    if rounded.is_zero():
        rounded = abs(rounded)

    rendered = f"{rounded:,.2f}"
    if not MONEY_PATTERN.fullmatch(rendered):
        raise FormattingInvariantError(amount, rendered)

    return rendered
