# -----------------------------------------------------------------------------
#  basis.py
#  Zumbroich basis and per-conductor data, memoized by conductor
# -----------------------------------------------------------------------------

from __future__ import annotations

from functools import cache
from itertools import product

from cyclotomics.context import ConductorCtx, PrimePart
from cyclotomics.runtime import trace
from cyclotomics.utility import factor, inverse_mod, totient_from_fac


def _digit_sets(p: int, nu: int) -> list[range]:
    """J_(k,p) for k = 0 .. nu-1."""
    if p == 2:
        return [range(0, 1)] + [range(0, 2)] * (nu - 1)
    h = (p - 1) // 2
    return [range(1, p)] + [range(-h, h + 1)] * (nu - 1)


def _prime_contributions(n: int, p: int, nu: int) -> list[int]:
    """All sums  sum_k j_k * n / p^(k+1)  with j_k in J_(k,p)."""
    steps = [n // p ** (k + 1) for k in range(nu)]
    return [sum(j * s for j, s in zip(js, steps)) for js in product(*_digit_sets(p, nu))]


def _zumbroich_plain(n: int, fac: dict[int, int]) -> frozenset[int]:
    if n == 1:
        return frozenset({0})
    per_prime = [_prime_contributions(n, p, nu) for p, nu in sorted(fac.items())]
    return frozenset(sum(choice) % n for choice in product(*per_prime))


@cache
def conductor_ctx(n: int) -> ConductorCtx:
    """
    Everything the arithmetic needs to know about the conductor n:
    factorization, φ(n), the Zumbroich basis and the prime-power parts.
    Entries are immutable once published.
    """
    if n < 1:
        raise ValueError(f"conductor must be a positive integer, got {n}")
    fac = factor(n)
    parts = []
    for p, nu in sorted(fac.items()):
        pk = p ** nu
        cofactor = n // pk
        parts.append(PrimePart(p=p, nu=nu, pk=pk, cofactor=cofactor,
                               cofactor_inv=inverse_mod(cofactor, pk), n=n))
    basis = _zumbroich_plain(n, fac)
    phi = totient_from_fac(fac)
    trace("basis", f"n={n} phi={phi} parts={[(q.p, q.nu) for q in parts]}")
    return ConductorCtx(n=n, phi=phi, basis=basis, parts=tuple(parts))


def zumbroich_basis(n: int) -> frozenset[int]:
    return conductor_ctx(n).basis


def prime_power_decomposition(n: int) -> tuple[tuple[int, int], ...]:
    """((p**nu, n // p**nu), ...) for the primes p dividing n, ascending in p."""
    return conductor_ctx(n).prime_powers


def is_basis_exponent(e: int, n: int) -> bool:
    return (e % n) in conductor_ctx(n).basis
