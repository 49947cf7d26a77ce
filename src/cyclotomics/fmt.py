# src/cyclotomics/fmt.py
from __future__ import annotations

from fractions import Fraction
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    # Type-only; no runtime import → avoids circulars
    from cyclotomics.cyclotomic import Cyclotomic

_SUBSCRIPTS = str.maketrans("0123456789", "₀₁₂₃₄₅₆₇₈₉")
_SUPERSCRIPTS = str.maketrans("0123456789", "⁰¹²³⁴⁵⁶⁷⁸⁹")


def format_coefficient(c: Any) -> str:
    """Fractions as p/q, integral floats without the trailing .0."""
    if isinstance(c, Fraction):
        return str(c.numerator) if c.denominator == 1 else f"{c.numerator}/{c.denominator}"
    if isinstance(c, float) and c.is_integer():
        return str(int(c))
    return str(c)


def format_root(n: int, e: int) -> str:
    """ζₙᵉ, e.g. ζ₅³; the exponent is omitted for e == 1."""
    root = "ζ" + str(n).translate(_SUBSCRIPTS)
    return root if e == 1 else root + str(e).translate(_SUPERSCRIPTS)


def format_cyclotomic(a: Cyclotomic) -> str:
    """
    Render a as a sum of terms in ascending exponent, e.g.
    '1 + ζ₅ - 2·ζ₅³'. The zero element renders as '0'.
    """
    n = a.conductor
    parts: list[str] = []
    for e, c in a.exps_coeffs():
        negative = c < 0
        mag = -c if negative else c
        if e == 0:
            body = format_coefficient(mag)
        elif mag == 1:
            body = format_root(n, e)
        else:
            body = f"{format_coefficient(mag)}·{format_root(n, e)}"
        if not parts:
            parts.append(f"-{body}" if negative else body)
        else:
            parts.append(f" - {body}" if negative else f" + {body}")
    return "".join(parts) if parts else "0"
