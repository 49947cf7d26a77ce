# tests/test_arithmetic.py
"""
Ring structure, scalar operations, Galois action and inversion.
"""

from __future__ import annotations

import warnings
from fractions import Fraction

import gmpy2
import pytest
from conftest import random_cyclotomic

from cyclotomics import ConsistencyWarning, Cyclotomic, DomainError, E, PrecisionAssertion, one, zero
from cyclotomics import APPLY, arithmetic
from cyclotomics.arithmetic import conj, conj_into, galois_conj, inv, mul_into, power

SEEDS = range(15)


def _triple(rng, seed):
    rng.seed(seed)
    return random_cyclotomic(rng), random_cyclotomic(rng), random_cyclotomic(rng, sparse=True)


# ---------- ring axioms -------------------------------------------------------


@pytest.mark.parametrize("seed", SEEDS)
def test_addition_axioms(rng, seed):
    a, b, c = _triple(rng, seed)
    assert a + (b + c) == (a + b) + c
    assert a + b == b + a
    assert a + (-a) == zero()
    assert (a - b) + b == a


@pytest.mark.parametrize("seed", SEEDS)
def test_multiplication_axioms(rng, seed):
    a, b, c = _triple(rng, seed)
    assert a * (b * c) == (a * b) * c
    assert a * b == b * a
    assert a * (b + c) == a * b + a * c
    assert a * one() == a


def test_mixed_conductors_embed_to_lcm():
    s = E(4) + E(6)
    assert s.conductor == 12
    p = E(4) * E(6)
    assert p == E(12, 5)


def test_negation_and_subtraction():
    a = Cyclotomic(5, [1, 2, 0, 0, 3])
    assert dict((-a).exps_coeffs()) == {0: -1, 1: -2, 4: -3}
    assert (a - a).is_zero()


# ---------- scalars -----------------------------------------------------------


def test_scalar_addition_touches_constant_term_only():
    a = E(7)
    b = a + 3
    assert dict(b.exps_coeffs()) == {0: 3, 1: 1}
    assert dict((3 + a).exps_coeffs()) == {0: 3, 1: 1}
    assert dict((a - 2).exps_coeffs()) == {0: -2, 1: 1}
    assert dict((2 - a).exps_coeffs()) == {0: 2, 1: -1}
    assert dict(a.exps_coeffs()) == {1: 1}


def test_scalar_multiplication_and_division():
    a = Cyclotomic(5, [0, 2, 0, 4, 0])
    assert dict((a * 3).exps_coeffs()) == {1: 6, 3: 12}
    assert dict((3 * a).exps_coeffs()) == {1: 6, 3: 12}
    half = a / 4
    assert dict(half.exps_coeffs()) == {1: Fraction(1, 2), 3: 1}
    assert isinstance(half[1], Fraction)
    assert dict((a / 2.0).exps_coeffs()) == {1: 1.0, 3: 2.0}
    with pytest.raises(ZeroDivisionError):
        a / 0


def test_floor_division_truncates_normal_form():
    assert Cyclotomic(1, [5]) // 2 == 2
    a = Cyclotomic(3, {0: 5})
    q = a // 2
    # 5 = -5ζ - 5ζ² in the basis; -5/2 truncates to -2
    assert dict(q.exps_coeffs()) == {1: -2, 2: -2}
    assert q == 2
    assert Cyclotomic(5, {0: 7.0}) // 2 == 3
    assert Cyclotomic(5, {0: gmpy2.mpz(7)}) // 2 == 3


@pytest.mark.parametrize("n", [2, 3, 4, 5, 7, 9])
@pytest.mark.parametrize("c, d", [(3, 2), (-7, 2), (10, -3), (5, 1)])
def test_floor_division_of_constant_independent_of_conductor(n, c, d):
    assert Cyclotomic(1, [c]) // d == Cyclotomic(n, {0: c}) // d


def test_complex_scalars_promote_to_conductor_4():
    a = E(4) + 1j
    assert a == 2 * E(4)
    assert (E(3) * (1 + 0j)) == E(3)


# ---------- multiplication kernel ---------------------------------------------


def test_mul_into_substitutes_fresh_buffer_when_aliased():
    a = Cyclotomic(6, [1, 1, 0, 0, 0, 2])
    expected = a * a.copy()
    snapshot = a.copy()
    out = mul_into(a, a, a)
    assert out is not a
    assert out == expected
    assert a.coeffs == snapshot.coeffs


def test_mul_into_sparse_output_accumulates_densely():
    a = Cyclotomic(6, {0: 1, 1: 1, 5: 2})
    expected = a.dense() * a.dense()
    out = mul_into(a, a, a)
    assert out is a
    assert out.is_sparse
    assert out == expected


def test_sparse_and_dense_products_agree(rng):
    for seed in SEEDS:
        rng.seed(seed)
        a = random_cyclotomic(rng, 12, terms=6)
        b = random_cyclotomic(rng, 12, terms=6)
        dense = a.dense() * b.dense()
        sparse = a.sparse() * b.sparse()
        assert sparse.is_sparse and not dense.is_sparse
        assert sparse.coeffs == dense.coeffs


def test_power():
    assert E(5) ** 5 == 1
    assert E(5) ** 0 == 1
    assert E(5) ** -1 == E(5, 4)
    a = 1 + E(3)
    assert a ** 3 == a * a * a


# ---------- Galois action -----------------------------------------------------


@pytest.mark.parametrize("seed", SEEDS)
def test_complex_conjugation_is_involution(rng, seed):
    rng.seed(seed)
    a = random_cyclotomic(rng)
    assert conj(conj(a)) == a
    assert (a * conj(a)).is_real()


def test_conj_maps_exponents():
    assert conj(E(7, 2)) == E(7, 5)
    assert conj(E(7, 2), 3) == E(7, 6)
    # ζ -> ζ^2 on Q(ζ_4) is not injective: i and -i meet at -1
    assert dict(conj(Cyclotomic(4, {1: 1, 3: 1}), 2).exps_coeffs()) == {2: 2}


def test_conj_into_aliased():
    a = Cyclotomic(5, [0, 1, 2, 0, 0])
    out = conj_into(a, a, -1)
    assert out is not a
    assert out == Cyclotomic(5, [0, 0, 0, 2, 1])


def test_galois_conj_requires_coprime_power():
    assert galois_conj(E(9), 2) == E(9, 2)
    with pytest.raises(DomainError):
        galois_conj(E(6), 2)


def test_conjugation_is_ring_homomorphism(rng):
    for seed in SEEDS:
        rng.seed(seed)
        a = random_cyclotomic(rng, 15)
        b = random_cyclotomic(rng, 15)
        for k in (2, 4, 7, 14):
            assert galois_conj(a * b, k) == galois_conj(a, k) * galois_conj(b, k)
            assert galois_conj(a + b, k) == galois_conj(a, k) + galois_conj(b, k)


# ---------- inversion ---------------------------------------------------------


def test_inverse_of_one_plus_zeta7():
    a = 1 + E(7)
    b = inv(a)
    assert b * a == 1
    assert all(isinstance(c, Fraction) for _, c in b.exps_coeffs())


def test_small_inverses():
    assert inv(1 + E(3)) == -E(3)
    assert inv(1 + E(4)) == (1 - E(4)) / 2
    assert inv(E(5)) == E(5, 4)
    assert inv(Cyclotomic(1, [4])) == Fraction(1, 4)


@pytest.mark.parametrize("seed", SEEDS)
def test_inverse_random_exact(rng, seed):
    rng.seed(seed)
    a = random_cyclotomic(rng, rational=True)
    if a.is_zero():
        pytest.skip("zero element drawn")
    assert inv(a) * a == 1
    assert a / a == 1


def test_inverse_gmpy2_coefficients():
    a = Cyclotomic(5, {0: gmpy2.mpz(2), 1: gmpy2.mpz(1)})
    b = inv(a)
    assert all(isinstance(c, type(gmpy2.mpq(1, 2))) for _, c in b.exps_coeffs())
    assert a * b == 1


def test_inverse_floating():
    a = Cyclotomic(5, [1.0, 0.5, 0.0, -0.25, 0.0])
    with warnings.catch_warnings():
        warnings.simplefilter("error", ConsistencyWarning)
        b = inv(a)
    assert (a * b).isclose(1)
    assert (b * a).isclose(1.0, abs_tol=1e-12)


def test_inverse_of_zero_is_domain_error():
    with pytest.raises(DomainError):
        inv(zero(7))
    with pytest.raises(DomainError):
        inv(Cyclotomic(5, [1, 1, 1, 1, 1]))
    with pytest.raises(DomainError):
        1 / zero(3)


def test_inverse_leaves_input_untouched():
    a = Cyclotomic(6, [1, 0, 0, 1, 0, 0])
    snapshot = a.copy()
    with pytest.raises(DomainError):
        inv(a)  # 1 + ζ_6^3 = 1 - 1 = 0
    assert a.coeffs == snapshot.coeffs


def test_ill_conditioned_lead_warns():
    a = Cyclotomic(3, [0.0, 1e17, 0.0])
    with pytest.warns(ConsistencyWarning, match="lead"):
        b = inv(a)
    assert (a * b).isclose(1)


def test_ill_conditioned_warning_can_be_disabled():
    APPLY({"INVERSION": {"WARN_ILL_CONDITIONED": False}})
    a = Cyclotomic(3, [0.0, 1e17, 0.0])
    with warnings.catch_warnings():
        warnings.simplefilter("error", ConsistencyWarning)
        inv(a)


def test_imaginary_norm_residue_warns(rng):
    # a dense floating element at a large conductor loses the reality of its norm
    a = Cyclotomic(63, [rng.uniform(-1.0, 1.0) for _ in range(63)])
    with pytest.warns(ConsistencyWarning, match="imaginary"):
        inv(a)


def test_exact_norm_off_the_rationals_is_fatal(monkeypatch):
    monkeypatch.setattr(arithmetic, "reduced_embedding", lambda x: E(3))
    with pytest.raises(PrecisionAssertion):
        inv(1 + E(7))


def test_division_of_cyclotomics():
    a = E(5) + 2
    b = 1 - E(5, 2)
    assert (a / b) * b == a
    assert (3 / b) * b == 3
