"""
core.py — Exact decimal-string arithmetic (bcadd / bcsub / bcmul)

================================================================================
DESIGN PRINCIPLES
================================================================================

1. INTERNAL REPRESENTATION
   A decimal value is a string "[-]digits[.digits]". No dedicated type.
   Magnitudes are computed on Python int (unbounded). Never floating point.

2. SINGLE COERCION POINT
   Every operand (str, int, float, Decimal) goes through normalize() first.
   normalize() never rounds: it only rewrites the caller's digits.

3. EXPLICIT SCALE
   The caller chooses how many fractional digits the result carries.
   Extra digits are TRUNCATED (never rounded), missing digits are
   padded with zeros. scale=0 drops the decimal point.

4. NO SILENT REPAIR
   Malformed operands raise InvalidOperandError, a bad scale raises
   InvalidArgumentError. The module does no sanitization and no logging.

================================================================================
WHY NOT float
================================================================================

    >>> 0.1 + 0.2
    0.30000000000000004
    >>> add("0.1", "0.2", 2)
    '0.30'

Monetary amounts arrive as strings (request bodies, aggregation results)
and must come back as strings without a single digit changing.

================================================================================
"""

from __future__ import annotations
from decimal import Decimal
from typing import Union
import math
import re


Operand = Union[str, int, float, Decimal]


# ==============================================================================
# ERRORS
# ==============================================================================

class DecimalMathError(ValueError):
    """Base class for every error raised by the arithmetic functions."""


class InvalidOperandError(DecimalMathError):
    """
    The operand is not a numeral of the form [+-]digits[.digits].

    Also raised for unsupported types (bool, None, lists, ...) and for
    non-finite numbers (NaN, inf).
    """

    def __init__(self, operand: object, reason: str = "not a decimal numeral"):
        self.operand = operand
        super().__init__(f"Invalid operand {operand!r}: {reason}")


class InvalidArgumentError(DecimalMathError):
    """An argument other than an operand (the scale) is out of range."""

    def __init__(self, argument: str, value: object, reason: str):
        self.argument = argument
        self.value = value
        super().__init__(f"Invalid {argument} {value!r}: {reason}")


# ==============================================================================
# DIGIT STRING <-> INT
# ==============================================================================

# Python refuses int <-> str conversions above a few thousand digits
# (sys.set_int_max_str_digits). Chunks keep each conversion well under it.
_CHUNK_DIGITS = 256
_CHUNK_BASE = 10 ** _CHUNK_DIGITS

_NUMERAL = re.compile(r"([+-]?)([0-9]*)(?:\.([0-9]*))?")


def _digits_to_int(digits: str) -> int:
    """Convert a run of ASCII digits (possibly empty) to a non-negative int."""
    if len(digits) <= _CHUNK_DIGITS:
        return int(digits) if digits else 0

    head = len(digits) % _CHUNK_DIGITS or _CHUNK_DIGITS
    value = int(digits[:head])
    for start in range(head, len(digits), _CHUNK_DIGITS):
        value = value * _CHUNK_BASE + int(digits[start:start + _CHUNK_DIGITS])
    return value


def _int_to_digits(value: int) -> str:
    """Convert a non-negative int to its decimal digits."""
    if value < _CHUNK_BASE:
        return str(value)

    chunks = []
    while value:
        value, chunk = divmod(value, _CHUNK_BASE)
        chunks.append(chunk)

    head = str(chunks.pop())
    return head + "".join(format(chunk, f"0{_CHUNK_DIGITS}d") for chunk in reversed(chunks))


# ==============================================================================
# COERCION
# ==============================================================================

def normalize(operand: Operand) -> str:
    """
    Canonical decimal string for an operand.

    - str: stripped of surrounding whitespace and validated, digits untouched
      ("1.50" stays "1.50", ".5" stays ".5")
    - int: str(int)
    - float: shortest round-trip repr, exponent expanded ("1e-07" -> "0.0000001")
    - Decimal: positional notation

    Callers must not pass floats whose repr has already lost precision:
    normalize() can only preserve what the float still holds.

    Raises:
        InvalidOperandError: unsupported type, non-finite number or
            malformed string.
    """
    # bool is an int subclass, but True is not a numeral
    if isinstance(operand, bool):
        raise InvalidOperandError(operand, "bool is not a number")

    if isinstance(operand, int):
        return _int_to_digits(operand) if operand >= 0 else "-" + _int_to_digits(-operand)

    if isinstance(operand, float):
        if not math.isfinite(operand):
            raise InvalidOperandError(operand, "not a finite number")
        text = repr(operand)
        if "e" in text or "E" in text:
            text = format(Decimal(text), "f")
        return text

    if isinstance(operand, Decimal):
        if not operand.is_finite():
            raise InvalidOperandError(operand, "not a finite number")
        return format(operand, "f")

    if isinstance(operand, str):
        text = operand.strip()
        match = _NUMERAL.fullmatch(text)
        if match is None or not (match.group(2) or match.group(3)):
            raise InvalidOperandError(operand)
        return text

    raise InvalidOperandError(operand, f"unsupported type {type(operand).__name__}")


def negate(operand: Operand) -> Operand:
    """
    Flip the sign of an operand without evaluating it.

    Strings: a leading "-" is removed, a leading "+" becomes "-",
    otherwise "-" is prepended. negate("0") == "-0", which parses as zero.
    Numbers are negated arithmetically.
    """
    if isinstance(operand, str):
        text = operand.strip()
        if text.startswith("-"):
            return text[1:]
        if text.startswith("+"):
            return "-" + text[1:]
        return "-" + text

    if isinstance(operand, bool) or not isinstance(operand, (int, float, Decimal)):
        raise InvalidOperandError(operand, f"unsupported type {type(operand).__name__}")

    return -operand


def _parse(operand: Operand) -> tuple[int, str, str]:
    """Split an operand into (sign, integer digits, fractional digits)."""
    # normalize() has already validated the shape
    match = _NUMERAL.fullmatch(normalize(operand))
    sign = -1 if match.group(1) == "-" else 1
    return sign, match.group(2), match.group(3) or ""


def _check_scale(scale: int) -> None:
    if isinstance(scale, bool) or not isinstance(scale, int):
        raise InvalidArgumentError("scale", scale, "must be an int")
    if scale < 0:
        raise InvalidArgumentError("scale", scale, "must be >= 0")


# ==============================================================================
# FORMATTING
# ==============================================================================

def _render(units: int, fraction_digits: int, scale: int) -> str:
    """
    Format a fixed-point value (units * 10**-fraction_digits) at `scale`.

    Fractional digits beyond `scale` are dropped (truncation toward zero),
    missing ones are zero-padded. The integer part is never empty.
    A result whose kept digits are all zero carries no sign.
    """
    negative = units < 0
    digits = _int_to_digits(abs(units)).rjust(fraction_digits + 1, "0")

    split = len(digits) - fraction_digits
    int_part = digits[:split]
    frac_part = digits[split:]

    frac_part = frac_part[:scale].ljust(scale, "0")

    if negative and int_part.strip("0") == "" and frac_part.strip("0") == "":
        negative = False

    result = f"{int_part}.{frac_part}" if scale > 0 else int_part
    return "-" + result if negative else result


# ==============================================================================
# ARITHMETIC
# ==============================================================================

def add(left: Operand, right: Operand, scale: int = 0) -> str:
    """
    Exact sum of two decimal operands, with `scale` fractional digits.

    Fractional parts are right-padded to the same width, so the sum is a
    single integer operation; a fractional overflow carries into the
    integer part by construction.

    Examples:
        add("1.5", "2.5")        -> "4"
        add("1.5", "2.5", 2)     -> "4.00"
        add("0.999", "0.001", 2) -> "1.00"
        add("1.999", "0", 1)     -> "1.9"   (truncated, not rounded)

    Raises:
        InvalidOperandError: malformed operand
        InvalidArgumentError: negative or non-int scale
    """
    _check_scale(scale)

    left_sign, left_int, left_frac = _parse(left)
    right_sign, right_int, right_frac = _parse(right)

    width = max(len(left_frac), len(right_frac))
    left_units = left_sign * _digits_to_int(left_int + left_frac.ljust(width, "0"))
    right_units = right_sign * _digits_to_int(right_int + right_frac.ljust(width, "0"))

    return _render(left_units + right_units, width, scale)


def sub(left: Operand, right: Operand, scale: int = 0) -> str:
    """
    Exact difference left - right. Delegates to add() with `right` negated.

        sub("5", "5")         -> "0"     (never "-0")
        sub("10", "0.01", 2)  -> "9.99"
    """
    return add(left, negate(right), scale)


def mul(left: Operand, right: Operand, scale: int = 0) -> str:
    """
    Exact product of two decimal operands, with `scale` fractional digits.

    The decimal points are removed, the digit strings multiplied as
    integers, and the point re-inserted left_scale + right_scale digits
    from the right.

        mul("1.25", "4", 2)   -> "5.00"
        mul("0.1", "0.2", 4)  -> "0.0200"
    """
    _check_scale(scale)

    left_sign, left_int, left_frac = _parse(left)
    right_sign, right_int, right_frac = _parse(right)

    product = (
        left_sign * _digits_to_int(left_int + left_frac)
        * right_sign * _digits_to_int(right_int + right_frac)
    )

    return _render(product, len(left_frac) + len(right_frac), scale)


# Names of the API family these functions imitate
bcadd = add
bcsub = sub
bcmul = mul
