"""Display values: error tokens, lenient numeric coercion and number text."""

from __future__ import annotations

import math
import re
from decimal import Decimal

NAME_ERROR = "#NAME?"
REF_ERROR = "#REF!"

ERROR_TOKENS = frozenset({NAME_ERROR, REF_ERROR})

# Longest numeric prefix: sign, digits with optional fraction, optional
# exponent.  "1e" falls back to "1" because the exponent group is optional.
_LEADING_NUMBER_RE = re.compile(
    r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)",
    re.ASCII,
)


def is_error(value: str) -> bool:
    return value in ERROR_TOKENS


def to_number(text: str) -> float:
    """Coerce a display value to a number, the lenient way.

    Leading whitespace is skipped, then the longest numeric literal at the
    start of the string is used (``"12abc"`` -> 12.0).  Anything without a
    numeric prefix, error tokens included, counts as 0.
    """
    m = _LEADING_NUMBER_RE.match(text.lstrip())
    if not m:
        return 0.0
    value = float(m.group(0))
    if math.isnan(value):
        return 0.0
    return value


def format_number(value: float) -> str:
    """Render a float as sum results are shown in the grid.

    Integral values have no decimal point, other values use the shortest
    round-trip digits, and exponent notation is used only for magnitudes
    below 1e-6 or from 1e21 up (``1e+21``, ``1.5e-7``).
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    _, digit_tuple, exp = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    k = len(digits)
    n = k + exp  # value == 0.<digits> * 10**n

    if k <= n <= 21:
        text = digits + "0" * (n - k)
    elif 0 < n <= 21:
        text = f"{digits[:n]}.{digits[n:]}"
    elif -6 < n <= 0:
        text = "0." + "0" * -n + digits
    else:
        e = n - 1
        mantissa = digits if k == 1 else f"{digits[0]}.{digits[1:]}"
        text = f"{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"
    return sign + text
