import math

import pytest

from sigscope.core.complex import Complex


def test_arithmetic():
    a = Complex(1, 2)
    b = Complex(3, -1)
    assert a.add(b) == Complex(4, 1)
    assert a.subtract(b) == Complex(-2, 3)
    assert a.multiply(b) == Complex(5, 5)
    assert a + 1 == Complex(2, 2)
    assert 2 * a == Complex(2, 4)
    q = a / b
    assert complex(q) == pytest.approx(complex(1, 2) / complex(3, -1))


def test_polar_round_trip():
    z = Complex.from_polar(2.0, math.pi / 3)
    assert z.magnitude() == pytest.approx(2.0)
    assert z.phase() == pytest.approx(math.pi / 3)
    assert z.conjugate().phase() == pytest.approx(-math.pi / 3)


def test_division_by_zero():
    with pytest.raises(ZeroDivisionError):
        Complex(1, 1).divide(0)


def test_value_semantics():
    assert Complex(1, 1) == Complex(1.0, 1.0)
    assert abs(Complex(3, 4)) == 5.0
    assert Complex.coerce(2j) == Complex(0, 2)
