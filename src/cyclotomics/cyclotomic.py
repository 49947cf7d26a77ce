# -----------------------------------------------------------------------------
#  cyclotomic.py
#  The Cyclotomic number: a conductor n and coefficients of powers of ζ_n
# -----------------------------------------------------------------------------

from __future__ import annotations

import cmath
import math
import numbers
from collections.abc import Iterator, Mapping
from typing import Any

from cyclotomics.runtime import CFG
from cyclotomics.storage import CoeffStore, DenseCoeffs, SparseCoeffs, new_store
from cyclotomics.utility import true_div


def _default_sparse() -> bool:
    return str(CFG("STORAGE.DEFAULT", "dense")).strip().lower() == "sparse"


class Cyclotomic:
    """
    a = Σ c_e ζ_n^e  for e in [0, n).

    >>> Cyclotomic(5, [0, 1, 1, 1, 1]) == -1
    True

    Coefficients may be int, Fraction, float or the gmpy2 numeric types.
    Operators return new instances; normalform(), set_zero(), set_one()
    and item assignment mutate in place.
    """

    __slots__ = ("_n", "coeffs")

    def __init__(self, n: int, coeffs: Any = None, *, sparse: bool | None = None):
        if isinstance(n, bool) or not isinstance(n, numbers.Integral) or n < 1:
            raise ValueError(f"conductor must be a positive integer, got {n!r}")
        n = int(n)
        self._n = n

        if isinstance(coeffs, (DenseCoeffs, SparseCoeffs)):
            if coeffs.size != n:
                raise ValueError(f"store of size {coeffs.size} does not match conductor {n}")
            if sparse is None or sparse == coeffs.is_sparse:
                self.coeffs: CoeffStore = coeffs
            else:
                self.coeffs = coeffs.to_sparse() if sparse else coeffs.to_dense()
            return

        if sparse is None:
            sparse = True if isinstance(coeffs, Mapping) else _default_sparse()

        self.coeffs = new_store(n, sparse=sparse)
        if coeffs is None:
            return
        if isinstance(coeffs, Mapping):
            for e, c in coeffs.items():
                k = e % n
                self.coeffs[k] = self.coeffs[k] + c
            return
        values = list(coeffs)
        if len(values) != n:
            raise ValueError(f"expected {n} coefficients, got {len(values)}")
        for e, c in enumerate(values):
            if c != 0:
                self.coeffs[e] = c

    # --- construction ---------------------------------------------------------

    @classmethod
    def from_scalar(cls, x: Any) -> Cyclotomic:
        if isinstance(x, complex):
            return cls(4, [x.real, x.imag, 0, 0])
        return cls(1, [x])

    def similar(self, n: int | None = None, *, sparse: bool | None = None) -> Cyclotomic:
        """A zero element of conductor n (default: ours) with our storage kind."""
        return Cyclotomic(self._n if n is None else n,
                          new_store(self._n if n is None else n,
                                    sparse=self.is_sparse if sparse is None else sparse))

    def copy(self) -> Cyclotomic:
        return Cyclotomic(self._n, self.coeffs.copy())

    __copy__ = copy

    def dense(self) -> Cyclotomic:
        return Cyclotomic(self._n, self.coeffs.to_dense())

    def sparse(self) -> Cyclotomic:
        return Cyclotomic(self._n, self.coeffs.to_sparse())

    def set_zero(self) -> Cyclotomic:
        self.coeffs.zero()
        return self

    def set_one(self) -> Cyclotomic:
        self.coeffs.zero()
        self.coeffs[0] = 1
        return self

    # --- basic queries --------------------------------------------------------

    @property
    def conductor(self) -> int:
        return self._n

    @property
    def is_sparse(self) -> bool:
        return self.coeffs.is_sparse

    def degree(self) -> int:
        return self._n

    def __getitem__(self, e: int) -> Any:
        return self.coeffs[e % self._n]

    def __setitem__(self, e: int, v: Any) -> None:
        self.coeffs[e % self._n] = v

    def exps_coeffs(self) -> Iterator[tuple[int, Any]]:
        """Nonzero (exponent, coefficient) pairs, ascending in exponent."""
        return self.coeffs.items()

    __iter__ = exps_coeffs

    def exponents(self) -> list[int]:
        return list(self.coeffs.keys())

    def values(self) -> list[Any]:
        return [c for _, c in self.coeffs.items()]

    def nterms(self) -> int:
        return sum(1 for _ in self.coeffs.keys())

    # --- normal form & embedding ----------------------------------------------

    def is_normalized(self) -> bool:
        return _nf.is_normalized(self)

    def normalform(self) -> Cyclotomic:
        return _nf.normalform(self)

    def embed(self, m: int) -> Cyclotomic:
        return _nf.embed(self, m)

    def reduced_embedding(self) -> Cyclotomic:
        return _nf.reduced_embedding(self)

    # --- Galois ---------------------------------------------------------------

    def conj(self, k: int = -1) -> Cyclotomic:
        return _arith.conj(self, k)

    def galois_conj(self, k: int = -1) -> Cyclotomic:
        return _arith.galois_conj(self, k)

    def inv(self) -> Cyclotomic:
        return _arith.inv(self)

    # --- ring operators -------------------------------------------------------

    def __neg__(self) -> Cyclotomic:
        return _arith.neg(self)

    def __pos__(self) -> Cyclotomic:
        return self.copy()

    def __add__(self, other: Any) -> Cyclotomic:
        other = _coerce(other, allow_real=True)
        if other is NotImplemented:
            return NotImplemented
        if isinstance(other, Cyclotomic):
            return _arith.add(self, other)
        return _arith.add_scalar(self, other)

    def __radd__(self, other: Any) -> Cyclotomic:
        return self.__add__(other)

    def __sub__(self, other: Any) -> Cyclotomic:
        other = _coerce(other, allow_real=True)
        if other is NotImplemented:
            return NotImplemented
        if isinstance(other, Cyclotomic):
            return _arith.sub(self, other)
        return _arith.sub_scalar(self, other)

    def __rsub__(self, other: Any) -> Cyclotomic:
        other = _coerce(other, allow_real=True)
        if other is NotImplemented:
            return NotImplemented
        if isinstance(other, Cyclotomic):
            return _arith.sub(other, self)
        return _arith.rsub_scalar(other, self)

    def __mul__(self, other: Any) -> Cyclotomic:
        other = _coerce(other, allow_real=True)
        if other is NotImplemented:
            return NotImplemented
        if isinstance(other, Cyclotomic):
            return _arith.mul(self, other)
        return _arith.mul_scalar(self, other)

    def __rmul__(self, other: Any) -> Cyclotomic:
        return self.__mul__(other)

    def __truediv__(self, other: Any) -> Cyclotomic:
        other = _coerce(other, allow_real=True)
        if other is NotImplemented:
            return NotImplemented
        if isinstance(other, Cyclotomic):
            return _arith.div(self, other)
        return _arith.div_scalar(self, other)

    def __rtruediv__(self, other: Any) -> Cyclotomic:
        other = _coerce(other, allow_real=True)
        if other is NotImplemented:
            return NotImplemented
        if isinstance(other, Cyclotomic):
            return _arith.div(other, self)
        return _arith.mul_scalar(_arith.inv(self), other)

    def __floordiv__(self, other: Any) -> Cyclotomic:
        if isinstance(other, numbers.Real):
            return _arith.floordiv_scalar(self, other)
        return NotImplemented

    def __pow__(self, k: Any) -> Cyclotomic:
        if isinstance(k, bool) or not isinstance(k, numbers.Integral):
            return NotImplemented
        return _arith.power(self, int(k))

    # --- comparison & hashing -------------------------------------------------

    def __eq__(self, other: Any) -> bool:
        other = _coerce(other, allow_real=False)
        if other is NotImplemented:
            return NotImplemented
        return _pred.equals(self, other)

    def __hash__(self) -> int:
        return _pred.cyclotomic_hash(self)

    def __bool__(self) -> bool:
        return not _pred.is_zero(self)

    def is_zero(self) -> bool:
        return _pred.is_zero(self)

    def is_one(self) -> bool:
        return _pred.is_one(self)

    def is_real(self) -> bool:
        return _pred.is_real(self)

    def isclose(self, x: Any, *, rel_tol: float | None = None, abs_tol: float = 0.0) -> bool:
        return _pred.isclose(self, x, rel_tol=rel_tol, abs_tol=abs_tol)

    # --- conversions ----------------------------------------------------------

    def __complex__(self) -> complex:
        n = self._n
        total = 0j
        for e, c in self.coeffs.items():
            total += complex(c) * cmath.exp(2j * math.pi * e / n)
        return total

    def __float__(self) -> float:
        return _pred.to_float(self)

    @property
    def real(self) -> Cyclotomic:
        """(a + conj(a)) / 2"""
        return _arith.div_scalar(_arith.add(self, _arith.conj(self)), 2)

    @property
    def imag(self) -> Cyclotomic:
        """(a - conj(a)) / 2i"""
        minus_half_i = Cyclotomic(4, {1: true_div(-1, 2)})
        return _arith.mul(_arith.sub(self, _arith.conj(self)), minus_half_i)

    def __repr__(self) -> str:
        return f"Cyclotomic({self._n}, {dict(self.coeffs.items())!r})"

    def __str__(self) -> str:
        return format_cyclotomic(self)


def _coerce(x: Any, *, allow_real: bool) -> Any:
    """
    Bring an operand into a form the operators understand: Cyclotomics pass
    through, complex scalars become conductor-4 elements, real scalars stay
    scalars (or become conductor-1 elements when allow_real is False).
    """
    if isinstance(x, Cyclotomic):
        return x
    if isinstance(x, numbers.Real):
        return x if allow_real else Cyclotomic.from_scalar(x)
    if isinstance(x, numbers.Complex):
        return Cyclotomic.from_scalar(complex(x))
    return NotImplemented


def E(n: int, k: int = 1, *, sparse: bool | None = None) -> Cyclotomic:
    """ζ_n^k as a Cyclotomic of conductor n."""
    out = Cyclotomic(n, sparse=sparse)
    out[k] = 1
    return out


def zero(n: int = 1, *, sparse: bool | None = None) -> Cyclotomic:
    return Cyclotomic(n, sparse=sparse)


def one(n: int = 1, *, sparse: bool | None = None) -> Cyclotomic:
    return Cyclotomic(n, sparse=sparse).set_one()


# operator implementations live in sibling modules that import Cyclotomic
from cyclotomics import arithmetic as _arith  # noqa: E402
from cyclotomics import normalform as _nf  # noqa: E402
from cyclotomics import predicates as _pred  # noqa: E402
from cyclotomics.fmt import format_cyclotomic  # noqa: E402
