# -----------------------------------------------------------------------------
#  predicates.py
#  Equality, hashing and predicates consistent with the normal form
# -----------------------------------------------------------------------------

from __future__ import annotations

import cmath
import math
from typing import Any

from cyclotomics.arithmetic import conj
from cyclotomics.cyclotomic import Cyclotomic
from cyclotomics.normalform import embed, normalform, reduced_embedding
from cyclotomics.utility import is_exact, machine_eps


def equals(a: Cyclotomic, b: Cyclotomic) -> bool:
    """
    Field equality. Both operands are brought to normal form in place when
    their raw coefficients differ.
    """
    if a.conductor == b.conductor:
        if a.coeffs == b.coeffs:
            return True
        normalform(a)
        normalform(b)
        return a.coeffs == b.coeffs

    m = math.lcm(a.conductor, b.conductor)
    return equals(embed(a, m), embed(b, m))


def cyclotomic_hash(a: Cyclotomic) -> int:
    """
    Hash of the minimal embedding of a. Expensive, but equality of elements
    implies equality of hashes across conductors; rational elements hash
    like the plain number they equal.
    """
    b = reduced_embedding(a)
    if b.conductor == 1:
        return hash(b[0])
    return hash((Cyclotomic, b.conductor, frozenset(b.exps_coeffs())))


def is_zero(a: Cyclotomic) -> bool:
    if not any(True for _ in a.coeffs.keys()):
        return True
    normalform(a)
    return not any(True for _ in a.coeffs.keys())


def is_one(a: Cyclotomic) -> bool:
    b = reduced_embedding(a)
    if b.conductor != 1:
        return False
    return b[0] == 1


def is_real(a: Cyclotomic) -> bool:
    return equals(a, conj(a)) or reduced_embedding(a).conductor == 1


def _eps_of(a: Cyclotomic, x: Any = None) -> float:
    # complex(a) is evaluated in double precision, so its epsilon is a floor
    candidates = [machine_eps()]
    candidates += [machine_eps(c) for _, c in a.exps_coeffs() if not is_exact(c)]
    if x is not None and not is_exact(x):
        candidates.append(machine_eps(x))
    return max(candidates)


def isclose(a: Cyclotomic, x: Any, *, rel_tol: float | None = None, abs_tol: float = 0.0) -> bool:
    """
    Approximate comparison of the complex value of a with the number x.

    The default relative tolerance is sqrt(eps) per term for floating
    coefficients and eps per term for exact ones.
    """
    if isinstance(x, Cyclotomic):
        x = complex(x)
    if rel_tol is None:
        terms = max(1, a.nterms())
        floating = any(not is_exact(c) for _, c in a.exps_coeffs())
        eps = _eps_of(a, x)
        rel_tol = 0.0 if abs_tol > 0 else (math.sqrt(eps) if floating else eps) * terms
    return cmath.isclose(complex(a), complex(x), rel_tol=rel_tol, abs_tol=abs_tol)


def to_float(a: Cyclotomic) -> float:
    b = reduced_embedding(a)
    if b.conductor == 1:
        return float(b[0])
    z = complex(b)
    if abs(z.imag) > math.sqrt(_eps_of(b)) * max(1.0, abs(z)):
        raise ValueError(f"{a!r} is not real (imaginary part {z.imag})")
    return z.real
