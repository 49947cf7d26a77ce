from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

# Version
try:
    __version__ = _pkg_version("cyclotomics")
except PackageNotFoundError:
    __version__ = "0+unknown"

# Public API re-exports (cyclotomic first: it wires up the operator modules)
from .cyclotomic import Cyclotomic, E, one, zero
from .arithmetic import conj, galois_conj, inv
from .basis import conductor_ctx, prime_power_decomposition, zumbroich_basis
from .config import has_profile, list_all_profiles, load_settings
from .normalform import embed, is_normalized, normalform, reduced_embedding
from .predicates import is_one, is_real, is_zero, isclose
from .runtime import APPLY, CFG
from .utility import ConsistencyWarning, CyclotomicError, DomainError, PrecisionAssertion, UserInputError

__all__ = [
    "APPLY",
    "CFG",
    "ConsistencyWarning",
    "Cyclotomic",
    "CyclotomicError",
    "DomainError",
    "E",
    "PrecisionAssertion",
    "UserInputError",
    "__version__",
    "conductor_ctx",
    "conj",
    "embed",
    "galois_conj",
    "has_profile",
    "inv",
    "is_normalized",
    "is_one",
    "is_real",
    "is_zero",
    "isclose",
    "list_all_profiles",
    "load_settings",
    "normalform",
    "one",
    "prime_power_decomposition",
    "reduced_embedding",
    "zero",
    "zumbroich_basis",
]
