# -----------------------------------------------------------------------------
#  arithmetic.py
#  Ring structure, scalar operations, Galois conjugation and inversion
# -----------------------------------------------------------------------------

from __future__ import annotations

import math
import warnings
from typing import Any

from cyclotomics.basis import conductor_ctx
from cyclotomics.cyclotomic import Cyclotomic
from cyclotomics.normalform import embed, normalform, reduced_embedding
from cyclotomics.runtime import CFG, trace
from cyclotomics.storage import DenseCoeffs
from cyclotomics.utility import (
    ConsistencyWarning,
    DomainError,
    PrecisionAssertion,
    exact_inverse,
    is_exact,
    machine_eps,
    true_div,
    trunc_div,
)

# --- in-place kernels ------------------------------------------------------------
# `out` must have the conductor of the operands. Pointwise kernels read all
# their inputs before writing, so any aliasing between out and the operands
# is harmless. mul_into, conj_into and inv_into substitute a fresh buffer
# when out is an operand; always use their return value.


def _check_conductors(*xs: Cyclotomic) -> None:
    n = xs[0].conductor
    if any(x.conductor != n for x in xs[1:]):
        raise ValueError(f"conductor mismatch: {[x.conductor for x in xs]}")


def _assign(out: Cyclotomic, updates: list[tuple[int, Any]]) -> Cyclotomic:
    out.coeffs.zero()
    for e, v in updates:
        out.coeffs[e] = v
    return out


def add_into(out: Cyclotomic, a: Cyclotomic, b: Cyclotomic) -> Cyclotomic:
    _check_conductors(out, a, b)
    exps = set(a.coeffs.keys()) | set(b.coeffs.keys())
    return _assign(out, [(e, a.coeffs[e] + b.coeffs[e]) for e in exps])


def sub_into(out: Cyclotomic, a: Cyclotomic, b: Cyclotomic) -> Cyclotomic:
    _check_conductors(out, a, b)
    exps = set(a.coeffs.keys()) | set(b.coeffs.keys())
    return _assign(out, [(e, a.coeffs[e] - b.coeffs[e]) for e in exps])


def scale_into(out: Cyclotomic, a: Cyclotomic, c: Any) -> Cyclotomic:
    _check_conductors(out, a)
    return _assign(out, [(e, v * c) for e, v in a.exps_coeffs()])


def mul_into(out: Cyclotomic, a: Cyclotomic, b: Cyclotomic) -> Cyclotomic:
    """
    out = a·b by the bilinear convolution over nonzero terms. Accumulation
    always happens in a dense buffer; a sparse out receives a copy of it.
    """
    _check_conductors(out, a, b)
    if out.is_sparse:
        buf = mul_into(Cyclotomic(out.conductor, DenseCoeffs(out.conductor)), a, b)
        out.coeffs.copy_from(buf.coeffs)
        return out

    if out is a or out is b:
        out = out.similar()
    out.coeffs.zero()

    n = out.conductor
    data = out.coeffs
    bterms = list(b.exps_coeffs())
    for ae, ac in a.exps_coeffs():
        for be, bc in bterms:
            k = (ae + be) % n
            data[k] = data[k] + ac * bc
    return out


def conj_into(out: Cyclotomic, a: Cyclotomic, k: int = -1) -> Cyclotomic:
    """out = image of a under ζ -> ζ^k; terms meeting on one exponent add up."""
    _check_conductors(out, a)
    if out is a:
        out = a.similar()
    out.coeffs.zero()
    n = out.conductor
    for e, c in a.exps_coeffs():
        f = (k * e) % n
        out.coeffs[f] = out.coeffs[f] + c
    return out


# --- ring structure --------------------------------------------------------------


def _matched(a: Cyclotomic, b: Cyclotomic) -> tuple[Cyclotomic, Cyclotomic]:
    if a.conductor == b.conductor:
        return a, b
    m = math.lcm(a.conductor, b.conductor)
    return embed(a, m), embed(b, m)


def add(a: Cyclotomic, b: Cyclotomic) -> Cyclotomic:
    a, b = _matched(a, b)
    return add_into(a.similar(), a, b)


def sub(a: Cyclotomic, b: Cyclotomic) -> Cyclotomic:
    a, b = _matched(a, b)
    return sub_into(a.similar(), a, b)


def mul(a: Cyclotomic, b: Cyclotomic) -> Cyclotomic:
    a, b = _matched(a, b)
    return mul_into(a.similar(), a, b)


def neg(a: Cyclotomic) -> Cyclotomic:
    return scale_into(a.similar(), a, -1)


def power(a: Cyclotomic, k: int) -> Cyclotomic:
    """a**k by repeated squaring; negative k goes through inv."""
    if k < 0:
        return power(inv(a), -k)
    result = a.similar().set_one()
    base = a.copy()
    while k:
        if k & 1:
            result = mul_into(result, result, base)
        k >>= 1
        if k:
            base = mul_into(base, base, base)
    return result


# --- scalars ---------------------------------------------------------------------


def add_scalar(a: Cyclotomic, r: Any) -> Cyclotomic:
    out = a.copy()
    out[0] = out[0] + r
    return out


def sub_scalar(a: Cyclotomic, r: Any) -> Cyclotomic:
    out = a.copy()
    out[0] = out[0] - r
    return out


def rsub_scalar(r: Any, a: Cyclotomic) -> Cyclotomic:
    out = neg(a)
    out[0] = out[0] + r
    return out


def mul_scalar(a: Cyclotomic, c: Any) -> Cyclotomic:
    return scale_into(a.similar(), a, c)


def div_scalar(a: Cyclotomic, c: Any) -> Cyclotomic:
    if c == 0:
        raise ZeroDivisionError("division of a cyclotomic by zero")
    out = a.similar()
    return _assign(out, [(e, true_div(v, c)) for e, v in a.exps_coeffs()])


def floordiv_scalar(a: Cyclotomic, c: Any) -> Cyclotomic:
    """Coefficient-wise division of the normal form of a, truncated towards zero."""
    if c == 0:
        raise ZeroDivisionError("division of a cyclotomic by zero")
    normalform(a)
    out = a.similar()
    return _assign(out, [(e, trunc_div(v, c)) for e, v in a.exps_coeffs()])


# --- Galois action ---------------------------------------------------------------


def conj(a: Cyclotomic, k: int = -1) -> Cyclotomic:
    """
    Return the k-th conjugate of a, the image of a under ζ_n -> ζ_n^k.

    If k is co-prime to the conductor of a the map is a Galois automorphism.
    The default k = -1 is the standard complex conjugation.
    """
    return conj_into(a.similar(), a, k)


def galois_conj(a: Cyclotomic, k: int = -1) -> Cyclotomic:
    if math.gcd(k, a.conductor) != 1:
        raise DomainError(
            f"ζ -> ζ^{k} is not an automorphism of Q(ζ_{a.conductor}): gcd({k}, {a.conductor}) != 1"
        )
    return conj(a, k)


def _is_floating(a: Cyclotomic) -> bool:
    return any(not is_exact(c) for _, c in a.exps_coeffs())


def inv_into(out: Cyclotomic, a: Cyclotomic) -> Cyclotomic:
    """
    out = a^-1 as the product of the non-trivial Galois conjugates of a divided
    by the norm of a:

        Π_{σ ∈ Gal(Q(ζ_n)/Q)} σ(a) = N(a) ∈ Q,   hence   a^-1 = Π_{σ≠id} σ(a) / N(a).

    a is rescaled by the inverse of its largest coefficient first, which only
    matters for the conditioning of floating coefficients.
    """
    _check_conductors(out, a)
    n = a.conductor
    terms = list(a.exps_coeffs())
    if not terms:
        raise DomainError("inverse of zero is undefined")

    floating = _is_floating(a)
    lead = max(abs(c) for _, c in terms)
    ilead = exact_inverse(lead)
    if floating:
        eps = max(machine_eps(c) for _, c in terms)
        if CFG("INVERSION.WARN_ILL_CONDITIONED", True) and (lead < eps or ilead < eps):
            warnings.warn(
                f"inverting element with ill-conditioned lead coefficient {lead}",
                ConsistencyWarning,
                stacklevel=3,
            )
    else:
        eps = 0.0

    scaled = mul_scalar(a, ilead)
    ctx = conductor_ctx(n)

    # dense scratch buffers reused through the conjugate loop
    acc = Cyclotomic(n, DenseCoeffs(n)).set_one()
    tmp = Cyclotomic(n, DenseCoeffs(n))
    tmp2 = Cyclotomic(n, DenseCoeffs(n))

    conjugates = 0
    for i in range(2, n):
        if conjugates == ctx.phi - 1:
            break
        if any(math.gcd(i, pk) > 1 for pk, _ in ctx.prime_powers):
            continue
        conjugates += 1
        conj_into(tmp, scaled, i)
        mul_into(tmp2, acc, tmp)
        acc.coeffs.copy_from(tmp2.coeffs)

    # acc = Π_{σ≠id} σ(scaled), so scaled·acc is its norm
    norm = reduced_embedding(mul_into(tmp2, acc, scaled))

    if floating:
        if norm.conductor == 1:
            norm_value = norm[0]
            residue = 0.0
        else:
            z = complex(norm)
            norm_value, residue = z.real, abs(z.imag)
        # the residue is read off complex(norm), a double-precision value
        tol = math.sqrt(max(eps, machine_eps())) * n * float(CFG("INVERSION.IMAG_TOL_FACTOR", 1.0))
        if residue > tol:
            warnings.warn(
                f"norm should be real, but it has imaginary part of magnitude {residue}",
                ConsistencyWarning,
                stacklevel=3,
            )
    else:
        if norm.conductor != 1:
            raise PrecisionAssertion(
                f"norm of an element of conductor {n} reduced to conductor {norm.conductor}, expected 1"
            )
        norm_value = norm[0]

    if norm_value == 0:
        raise DomainError("inverse of zero is undefined")

    trace("inv", f"n={n} conjugates={conjugates} norm={norm_value}")

    factor = exact_inverse(norm_value) * ilead
    if out is a:
        out = a.similar()
    return _assign(out, [(e, v * factor) for e, v in acc.exps_coeffs()])


def inv(a: Cyclotomic) -> Cyclotomic:
    return inv_into(a.similar(), a)


def div(a: Cyclotomic, b: Cyclotomic) -> Cyclotomic:
    return mul(a, inv(b))
