# -----------------------------------------------------------------------------
#  normalform.py
#  Reduction to the Zumbroich basis, embedding between conductors
# -----------------------------------------------------------------------------

from __future__ import annotations

from typing import Any

from cyclotomics.basis import conductor_ctx
from cyclotomics.cyclotomic import Cyclotomic
from cyclotomics.runtime import trace
from cyclotomics.storage import DenseCoeffs
from cyclotomics.utility import factor


def is_normalized(a: Cyclotomic, basis: frozenset[int] | None = None) -> bool:
    """Check if a is already in normal form with respect to the given basis."""
    if basis is None:
        basis = conductor_ctx(a.conductor).basis
    for e in a.coeffs.keys():
        if e not in basis:
            return False
    return True


def normalform(a: Cyclotomic) -> Cyclotomic:
    """
    Rewrite a in place so that only Zumbroich basis exponents are nonzero.

    For every prime p | n the relation  Σ_{i<p} ζ^(e + i·n/p) = 0  moves the
    coefficient of a non-basis exponent onto its p-1 relatives (one relative
    ζ^(e + n/2) when p = 2). The relatives of a p-reduction keep all other
    prime components of e, so one pass per prime suffices. The work is done
    in a scratch buffer and copied into a at the end.
    """
    ctx = conductor_ctx(a.conductor)
    if is_normalized(a, ctx.basis):
        return a

    buf = DenseCoeffs(a.conductor)
    buf.copy_from(a.coeffs)
    for part in ctx.parts:
        for e, c in list(buf.items()):
            if part.in_basis(e):
                continue
            for f in part.relatives(e):
                buf[f] = buf[f] - c
            buf[e] = 0

    a.coeffs.copy_from(buf)
    trace("normalform", f"n={a.conductor} terms={a.nterms()}")
    return a


def embed(a: Cyclotomic, m: int) -> Cyclotomic:
    """
    Re-express a at conductor m. When conductor(a) divides m the exponents
    are scaled by m/conductor(a); the result is equal to a but not normalized.
    Otherwise a is first reduced to its minimal conductor.
    """
    n = a.conductor
    if m == n:
        return a
    if m < 1:
        raise ValueError(f"conductor must be a positive integer, got {m}")
    if m % n != 0:
        b = reduced_embedding(a)
        if m % b.conductor != 0:
            raise ValueError(f"cannot embed an element of conductor {b.conductor} into conductor {m}")
        return embed(b, m)

    k = m // n
    out = a.similar(m)
    for e, c in a.exps_coeffs():
        out.coeffs[e * k] = c
    return out


def _shrink(coeffs: dict[int, Any], n: int, p: int, nu: int) -> dict[int, Any] | None:
    """
    Coefficients at conductor n/p of the normal-form element `coeffs`
    (conductor n), or None when it does not live in Q(ζ_(n/p)).
    """
    if nu > 1 or p == 2:
        if any(e % p for e in coeffs):
            return None
        return {e // p: c for e, c in coeffs.items()}

    # p || n: Q(ζ_(n/p))-elements spread -c over the p-1 basis relatives of
    # every exponent e0 divisible by p
    q = n // p
    classes: dict[int, list[tuple[int, Any]]] = {}
    for e, c in coeffs.items():
        classes.setdefault(e % q, []).append((e, c))

    out: dict[int, Any] = {}
    for r, members in classes.items():
        if len(members) != p - 1:
            return None
        c = members[0][1]
        if any(v != c for _, v in members[1:]):
            return None
        e0 = next(f for f in (r + i * q for i in range(p)) if f % p == 0)
        out[e0 // p] = -c
    return out


def reduced_embedding(a: Cyclotomic) -> Cyclotomic:
    """
    Return a at the smallest conductor it embeds from, as a new element in
    normal form. a itself is brought to normal form as a side effect.
    """
    normalform(a)
    n = a.conductor
    coeffs = dict(a.exps_coeffs())

    shrunk = True
    while shrunk and n > 1:
        shrunk = False
        for p, nu in factor(n).items():
            smaller = _shrink(coeffs, n, p, nu)
            if smaller is not None:
                coeffs, n = smaller, n // p
                shrunk = True
                break

    out = a.similar(n)
    for e, c in coeffs.items():
        out.coeffs[e] = c
    return out
