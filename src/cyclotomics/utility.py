# -----------------------------------------------------------------------------
#  Utility functions
# -----------------------------------------------------------------------------

from __future__ import annotations

import math
import numbers
import sys
from fractions import Fraction
from functools import lru_cache

import gmpy2
from sympy import factorint

_MPFR = type(gmpy2.mpfr(0))
_MPZ = type(gmpy2.mpz(0))
_MPQ = type(gmpy2.mpq(0, 1))

# --- Errors -------------------------------------------------------------------


class CyclotomicError(Exception):
    pass


class UserInputError(CyclotomicError):
    pass


class DomainError(CyclotomicError, ArithmeticError):
    """Operation undefined for the given element (e.g. inverting zero)."""


class PrecisionAssertion(CyclotomicError, AssertionError):
    """Internal invariant of an exact computation was violated."""


class ConsistencyWarning(RuntimeWarning):
    """Ill-conditioned floating computation; the result is a best estimate."""


# --- Number theory ------------------------------------------------------------


@lru_cache(maxsize=4096)
def _factor_cached(n: int) -> tuple[tuple[int, int], ...]:
    return tuple(sorted(factorint(n).items()))


def factor(n: int) -> dict[int, int]:
    """Return the {prime: exponent} map of n >= 1 (empty for n == 1)."""
    if n < 1:
        raise ValueError(f"factor: expected a positive integer, got {n}")
    return dict(_factor_cached(int(n)))


def totient_from_fac(fac: dict[int, int]) -> int:
    # φ(p^a) = p^(a-1) * (p-1)
    phi = 1
    for p, a in fac.items():
        phi *= (p - 1) * p ** (a - 1)
    return phi


def inverse_mod(a: int, m: int) -> int:
    """Inverse of a modulo m (m >= 1); inverse_mod(a, 1) == 0."""
    if m == 1:
        return 0
    return int(gmpy2.invert(a, m))


def balanced_mod(x: int, m: int) -> int:
    """Representative of x mod m in (-m/2, m/2]; m odd gives a symmetric range."""
    r = x % m
    if 2 * r > m:
        r -= m
    return r


# --- Coefficient kinds ----------------------------------------------------------


def is_exact(x: object) -> bool:
    """True for int, Fraction, mpz, mpq (anything registered as numbers.Rational)."""
    return isinstance(x, (numbers.Rational, _MPZ, _MPQ))


def is_integral(x: object) -> bool:
    return isinstance(x, (numbers.Integral, _MPZ))


def machine_eps(x: object = None) -> float:
    """
    Machine epsilon of a floating value's type. mpfr values use their own
    precision; everything else falls back to the IEEE double epsilon.
    """
    if isinstance(x, _MPFR):
        return float(gmpy2.mpfr(2) ** (1 - x.precision))
    return sys.float_info.epsilon


def exact_inverse(x):
    """1/x keeping exact types exact (int -> Fraction, mpz -> mpq)."""
    if x == 0:
        raise ZeroDivisionError("inverse of zero")
    return true_div(1, x)


def true_div(a, b):
    """a / b without leaving the rationals when both operands are integers."""
    if is_integral(a) and is_integral(b):
        if isinstance(a, int) and isinstance(b, int):
            return Fraction(a, b)
        return gmpy2.mpq(a, b)
    return a / b


def trunc_div(a, b):
    """a / b rounded towards zero; int, mpz and float inputs keep their type."""
    if is_integral(a) and is_integral(b):
        q = gmpy2.t_div(a, b)
        return int(q) if isinstance(a, int) and isinstance(b, int) else q
    q = math.trunc(true_div(a, b))
    return float(q) if isinstance(a, float) or isinstance(b, float) else q
