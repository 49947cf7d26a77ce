from __future__ import annotations

from dataclasses import dataclass

from cyclotomics.utility import balanced_mod


@dataclass(frozen=True)
class PrimePart:
    """
    The p-primary part of a conductor n = p**nu * cofactor.

    An exponent e is read through its p-adic component s = e * cofactor**-1
    (mod p**nu), written in Zumbroich digits j_0 p^(nu-1) + ... + j_(nu-1).
    Only the leading digit j_0 decides basis membership.
    """
    p: int
    nu: int
    pk: int                 # p**nu
    cofactor: int           # n // p**nu
    cofactor_inv: int       # cofactor**-1 mod p**nu
    n: int

    def leading_digit(self, e: int) -> int:
        s = (e * self.cofactor_inv) % self.pk
        low = self.pk // self.p
        if self.p == 2:
            return s // low
        r = balanced_mod(s, low)
        return ((s - r) // low) % self.p

    def in_basis(self, e: int) -> bool:
        j0 = self.leading_digit(e)
        # J_(0,2) = {0}; J_(0,p) = {1, ..., p-1} for odd p
        return j0 == 0 if self.p == 2 else j0 != 0

    def relatives(self, e: int) -> list[int]:
        """Exponents f with zeta^e = -sum(zeta^f); all of them pass in_basis."""
        step = self.n // self.p
        if self.p == 2:
            return [(e + step) % self.n]
        return [(e + i * step) % self.n for i in range(1, self.p)]


@dataclass(frozen=True)
class ConductorCtx:
    n: int
    phi: int
    basis: frozenset[int]
    parts: tuple[PrimePart, ...] = ()

    @property
    def prime_powers(self) -> tuple[tuple[int, int], ...]:
        return tuple((part.pk, part.cofactor) for part in self.parts)

    def in_basis(self, e: int) -> bool:
        return all(part.in_basis(e) for part in self.parts)
