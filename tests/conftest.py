# tests/conftest.py
from __future__ import annotations

import random
from fractions import Fraction

import pytest

from cyclotomics import runtime
from cyclotomics.cyclotomic import Cyclotomic

CONDUCTORS = (1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 12, 15, 16, 18, 20, 21, 24, 45)


# ---------- helpers -----------------------------------------------------------


def random_cyclotomic(rng: random.Random, n: int | None = None, *, terms: int = 4,
                      rational: bool = False, sparse: bool | None = None) -> Cyclotomic:
    """A few random integer (or small rational) terms at a random conductor."""
    if n is None:
        n = rng.choice(CONDUCTORS)
    coeffs: dict[int, object] = {}
    for _ in range(terms):
        e = rng.randrange(n)
        c = rng.randint(-5, 5)
        if rational:
            c = Fraction(c, rng.randint(1, 4))
        coeffs[e] = coeffs.get(e, 0) + c
    return Cyclotomic(n, coeffs, sparse=bool(sparse))


# ---------- fixtures ----------------------------------------------------------


@pytest.fixture(autouse=True)
def fresh_runtime():
    """Every test starts from an empty profile and leaves no settings behind."""
    token = runtime._current_runtime.set(runtime.Runtime())
    yield
    runtime._current_runtime.reset(token)


@pytest.fixture
def rng():
    return random.Random(20240607)
