"""
Deterministic numeric parsing shared by the engine and the word formatters.

Two jobs live here:
  - `parse_float()` reproduces JavaScript `parseFloat` coercion, which is the
    contract widgets were written against ("12px" -> 12, "abc" -> NaN).
  - `parse_decimal()` splits an arbitrarily large decimal string into digit
    strings. Scientific notation is expanded by shifting the decimal point
    inside the digit string, never through a float, so "1e100" keeps every
    one of its 101 digits.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from .exceptions import InvalidNumberError

# Leading numeric prefix accepted by JavaScript parseFloat
_FLOAT_PREFIX_RE = re.compile(
    r"^[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
)

# Full-string decimal literal, sign already removed
_DECIMAL_RE = re.compile(r"^(\d*)(?:\.(\d*))?(?:[eE]([+-]?\d+))?$")

# Exponents beyond this would build absurdly long digit strings
MAX_EXPONENT = 1000


@dataclass(frozen=True)
class ParsedNumber:
    """A decimal split into digit strings."""

    integer: str  # No leading zeros, "0" when empty
    decimal: str  # Fractional digits exactly as written (may be "")
    is_negative: bool

    @property
    def is_zero(self) -> bool:
        return self.integer == "0" and not self.decimal.strip("0")

    def as_decimal(self) -> Decimal:
        sign = "-" if self.is_negative else ""
        return Decimal(f"{sign}{self.integer}.{self.decimal or '0'}")


def parse_float(value: Any) -> float:
    """Coerce a value the way JavaScript `parseFloat` does.

    Returns NaN when no numeric prefix can be read. Numbers pass through.
    """
    if isinstance(value, bool) or value is None:
        return math.nan
    if isinstance(value, (int, float, Decimal)):
        return float(value)

    match = _FLOAT_PREFIX_RE.match(str(value).lstrip())
    if not match:
        return math.nan
    literal = match.group(0)
    if literal.lstrip("+-") == "Infinity":
        return -math.inf if literal.startswith("-") else math.inf
    return float(literal)


def parse_decimal(value: Any) -> ParsedNumber:
    """Split a decimal value into integer digits, fractional digits and sign.

    Accepts strings or numbers. Thousands separators (commas) and whitespace
    are removed before parsing.

    Raises:
        InvalidNumberError: If the value is not a decimal literal.
    """
    raw = str(value).strip()
    text = re.sub(r"[,\s]", "", raw)

    is_negative = text.startswith("-")
    if text[:1] in "+-":
        text = text[1:]

    match = _DECIMAL_RE.match(text)
    if not text or not match or not (match.group(1) or match.group(2)):
        raise InvalidNumberError(
            f"Not a decimal number: {raw!r}", details={"value": raw}
        )

    integer, decimal, exponent = match.group(1), match.group(2) or "", match.group(3)

    if exponent is not None:
        shift = int(exponent)
        if abs(shift) > MAX_EXPONENT:
            raise InvalidNumberError(
                f"Exponent out of range in {raw!r}",
                details={"value": raw, "max_exponent": MAX_EXPONENT},
            )
        integer, decimal = _shift_point(integer, decimal, shift)

    integer = integer.lstrip("0") or "0"
    return ParsedNumber(integer=integer, decimal=decimal, is_negative=is_negative)


def _shift_point(integer: str, decimal: str, shift: int) -> tuple[str, str]:
    """Move the decimal point `shift` places to the right (left if negative).

    Example:
        ("1", "5", 3)  -> ("1500", "")
        ("1", "5", -2) -> ("0", "015")
    """
    digits = integer + decimal
    point = len(integer) + shift

    if point <= 0:
        return "0", ("0" * -point + digits).rstrip("0")
    if point >= len(digits):
        return digits + "0" * (point - len(digits)), ""
    return digits[:point], digits[point:].rstrip("0")
