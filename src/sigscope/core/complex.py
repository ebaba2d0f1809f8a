"""Immutable complex number value type.

:class:`Complex` mirrors the builtin :class:`complex` closely enough to be
mixed with it in arithmetic, but exposes named operations and a polar
constructor.  The spectral and filter modules accept either representation.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

Number = Union["Complex", complex, float, int]


@dataclass(frozen=True)
class Complex:
    """Complex value ``real + j*imag``."""

    real: float = 0.0
    imag: float = 0.0

    @classmethod
    def from_polar(cls, magnitude: float, phase: float) -> "Complex":
        """Return ``magnitude * e^(j*phase)``."""

        return cls(magnitude * math.cos(phase), magnitude * math.sin(phase))

    @classmethod
    def coerce(cls, value: Number) -> "Complex":
        """Convert ``value`` to :class:`Complex`."""

        if isinstance(value, Complex):
            return value
        c = complex(value)
        return cls(c.real, c.imag)

    def add(self, other: Number) -> "Complex":
        o = Complex.coerce(other)
        return Complex(self.real + o.real, self.imag + o.imag)

    def subtract(self, other: Number) -> "Complex":
        o = Complex.coerce(other)
        return Complex(self.real - o.real, self.imag - o.imag)

    def multiply(self, other: Number) -> "Complex":
        o = Complex.coerce(other)
        return Complex(
            self.real * o.real - self.imag * o.imag,
            self.real * o.imag + self.imag * o.real,
        )

    def divide(self, other: Number) -> "Complex":
        """Return ``self / other``; ``ZeroDivisionError`` if ``other`` is zero."""

        o = Complex.coerce(other)
        denom = o.real * o.real + o.imag * o.imag
        if denom == 0:
            raise ZeroDivisionError("complex division by zero")
        return Complex(
            (self.real * o.real + self.imag * o.imag) / denom,
            (self.imag * o.real - self.real * o.imag) / denom,
        )

    def magnitude(self) -> float:
        return math.hypot(self.real, self.imag)

    def phase(self) -> float:
        return math.atan2(self.imag, self.real)

    def conjugate(self) -> "Complex":
        return Complex(self.real, -self.imag)

    # Operator protocol -----------------------------------------------------

    def __add__(self, other: Number) -> "Complex":
        return self.add(other)

    __radd__ = __add__

    def __sub__(self, other: Number) -> "Complex":
        return self.subtract(other)

    def __rsub__(self, other: Number) -> "Complex":
        return Complex.coerce(other).subtract(self)

    def __mul__(self, other: Number) -> "Complex":
        return self.multiply(other)

    __rmul__ = __mul__

    def __truediv__(self, other: Number) -> "Complex":
        return self.divide(other)

    def __rtruediv__(self, other: Number) -> "Complex":
        return Complex.coerce(other).divide(self)

    def __neg__(self) -> "Complex":
        return Complex(-self.real, -self.imag)

    def __abs__(self) -> float:
        return self.magnitude()

    def __complex__(self) -> complex:
        return complex(self.real, self.imag)


__all__ = ["Complex", "Number"]
