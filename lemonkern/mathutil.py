"""Integer helpers: rounding, wrapping absolute values and 64-bit arithmetic."""

from __future__ import annotations

import math

_MASK8 = 0xFF
_MASK16 = 0xFFFF
_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF

_LOG_ERROR = 1.0
_LOG_ITERATIONS = 0xFF
_LOG_PRECISION = 0.0000001


def _signed(value: int, bits: int) -> int:
    """Interpret the low ``bits`` of ``value`` as a two's complement integer."""
    mask = (1 << bits) - 1
    value &= mask
    if value >> (bits - 1):
        value -= 1 << bits
    return value


def _wrapping_abs(value: int, bits: int) -> int:
    value = _signed(value, bits)
    return _signed(-value if value < 0 else value, bits)


def round32(x: int, y: int) -> int:
    """Round ``x`` up to the next multiple of the power of two ``y`` (32-bit)."""
    y &= _MASK32
    return ((x + y - 1) & _MASK32) & (~(y - 1) & _MASK32)


def abs32(x: int) -> int:
    """Absolute value of a 32-bit integer; the minimum value wraps to itself."""
    return _wrapping_abs(x, 32)


def abs16(x: int) -> int:
    """Absolute value of a 16-bit integer; the minimum value wraps to itself."""
    return _wrapping_abs(x, 16)


def abs8(x: int) -> int:
    """Absolute value of an 8-bit integer; the minimum value wraps to itself."""
    return _wrapping_abs(x, 8)


def number_text_suffix(i: int) -> str:
    """Ordinal suffix for ``i``: "st", "nd", "rd" or "th"."""
    if 9 < i < 20:
        return "th"
    last = math.fmod(i, 10)
    return {1: "st", 2: "nd", 3: "rd"}.get(int(last), "th")


def log_approx(base: float, number: float) -> float:
    """Approximate the logarithm of ``number`` in ``base`` by stepwise search."""
    value = 1.0
    error = _LOG_ERROR
    for _ in range(_LOG_ITERATIONS):
        if math.pow(base, value + error) > number:
            error *= 0.1
            if error < _LOG_PRECISION:
                return value
            continue
        value += error
    return value


def _require_nonzero(a: int, name: str) -> None:
    if a == 0:
        raise ValueError(f"{name} is undefined for zero")


def clz32(a: int) -> int:
    """Number of leading zero bits in a non-zero 32-bit value."""
    a &= _MASK32
    _require_nonzero(a, "clz32")
    return 32 - a.bit_length()


def clz64(a: int) -> int:
    """Number of leading zero bits in a non-zero 64-bit value."""
    a &= _MASK64
    _require_nonzero(a, "clz64")
    return 64 - a.bit_length()


def ctz32(a: int) -> int:
    """Number of trailing zero bits in a non-zero 32-bit value."""
    a &= _MASK32
    _require_nonzero(a, "ctz32")
    return (a & -a).bit_length() - 1


def ctz64(a: int) -> int:
    """Number of trailing zero bits in a non-zero 64-bit value."""
    a &= _MASK64
    _require_nonzero(a, "ctz64")
    return (a & -a).bit_length() - 1


def ffs64(a: int) -> int:
    """One-based index of the lowest set bit, or 0 when ``a`` is zero."""
    a &= _MASK64
    return ctz64(a) + 1 if a else 0


def popcount32(a: int) -> int:
    """Number of set bits in a 32-bit value."""
    return bin(a & _MASK32).count("1")


def popcount64(a: int) -> int:
    """Number of set bits in a 64-bit value."""
    return bin(a & _MASK64).count("1")


def shl64(a: int, b: int) -> int:
    """Shift a signed 64-bit value left; the shift count is taken modulo 64."""
    return _signed(a << (b & 63), 64)


def ashr64(a: int, b: int) -> int:
    """Arithmetic right shift of a signed 64-bit value (count modulo 64)."""
    return _signed(a, 64) >> (b & 63)


def lshr64(a: int, b: int) -> int:
    """Logical right shift of a 64-bit value (count modulo 64)."""
    return (a & _MASK64) >> (b & 63)


def abs64(a: int) -> int:
    """Absolute value of a signed 64-bit integer; the minimum wraps to itself."""
    return _wrapping_abs(a, 64)


def udivmod64(a: int, b: int) -> tuple[int, int]:
    """Unsigned 64-bit division returning ``(quotient, remainder)``."""
    a &= _MASK64
    b &= _MASK64
    if b == 0:
        raise ZeroDivisionError("64-bit division by zero")
    return divmod(a, b)


def div64(a: int, b: int) -> int:
    """Signed 64-bit division truncating toward zero."""
    a = _signed(a, 64)
    b = _signed(b, 64)
    quotient, _ = udivmod64(abs(a), abs(b))
    if (a ^ b) < 0:
        quotient = -quotient
    return _signed(quotient, 64)


def mod64(a: int, b: int) -> int:
    """Signed 64-bit remainder; it takes the sign of the dividend."""
    a = _signed(a, 64)
    b = _signed(b, 64)
    _, remainder = udivmod64(abs(a), abs(b))
    if a < 0:
        remainder = -remainder
    return _signed(remainder, 64)