"""
Mix derivation

Derives the water/cement ratio and the "1 : x : y" mix ratio string from a
mix design, in either of the two input modes:

- kg/m3: absolute masses, w/c = water / cement
- ratio: parts relative to cement plus an explicit w/c ratio

Bad numbers never raise here. Zero, missing or non-numeric cement (or a
non-numeric component) gives the empty result ``(0.0, "")`` so the form
and the stored row can still be produced.
"""

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from numbers import Real
from typing import Any, List, Optional


@dataclass(frozen=True)
class DerivedMixValues:
    wc_ratio: float
    mix_ratio_string: str

    @property
    def is_empty(self) -> bool:
        return self.mix_ratio_string == ""


EMPTY_RESULT = DerivedMixValues(wc_ratio=0.0, mix_ratio_string="")


def coerce_number(value: Any) -> Optional[float]:
    """
    Convert a number or numeric-looking text to a finite float.

    Returns None for None, blank text, non-numeric text, booleans, NaN and
    infinities.

    >>> coerce_number(" 350 ")
    350.0
    >>> coerce_number("abc") is None
    True
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (Real, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(number):
        return None
    return number


def format_ratio(value: float) -> str:
    """
    Two-decimal fixed point, rounding half away from zero.

    Rounds the shortest decimal form of the float, so 1.005 gives "1.01".
    """
    try:
        quantized = Decimal(repr(float(value))).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # beyond Decimal precision, e.g. 1e300
        return f"{value:.2f}"
    if quantized == 0:
        quantized = abs(quantized)  # no "-0.00"
    return f"{quantized:.2f}"


def _is_supplied(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def _build_mix_string(cement: float, parts: List[float], trailing: Optional[float] = None) -> str:
    terms = [format_ratio(part / cement) for part in parts]
    if trailing is not None:
        terms.append(format_ratio(trailing))
    return " : ".join(["1"] + terms)


def _coerce_components(cement: Any, required: List[Any], medium: Any) -> Optional[tuple]:
    """Coerce inputs, returning None when the empty result applies."""
    c = coerce_number(cement)
    if c is None or c <= 0:
        return None

    values = [coerce_number(v) for v in required]
    if any(v is None for v in values):
        return None

    m = None
    if _is_supplied(medium):
        m = coerce_number(medium)
        if m is None:
            return None

    return c, values, m


def derive_from_mass(
    cement: Any,
    water: Any,
    fine: Any,
    coarse: Any,
    medium: Any = None,
    *,
    include_water_term: bool = False,
) -> DerivedMixValues:
    """
    Derive values from kg/m3 quantities.

    >>> derive_from_mass(350, 175, 700, 1100)
    DerivedMixValues(wc_ratio=0.5, mix_ratio_string='1 : 2.00 : 3.14')
    """
    coerced = _coerce_components(cement, [water, fine, coarse], medium)
    if coerced is None:
        return EMPTY_RESULT

    c, (w, f, co), m = coerced
    wc_ratio = w / c
    parts = [f, co] if m is None else [f, m, co]
    return DerivedMixValues(
        wc_ratio=wc_ratio,
        mix_ratio_string=_build_mix_string(c, parts, wc_ratio if include_water_term else None),
    )


def derive_from_ratio(
    cement: Any,
    fine: Any,
    coarse: Any,
    water_cement_ratio: Any,
    medium: Any = None,
    *,
    include_water_term: bool = False,
) -> DerivedMixValues:
    """
    Derive values from parts relative to cement.

    The w/c ratio is an input in this mode and is returned unchanged.

    >>> derive_from_ratio(1, 2, 4, 0.45)
    DerivedMixValues(wc_ratio=0.45, mix_ratio_string='1 : 2.00 : 4.00')
    """
    coerced = _coerce_components(cement, [fine, coarse, water_cement_ratio], medium)
    if coerced is None:
        return EMPTY_RESULT

    c, (f, co, wcr), m = coerced
    parts = [f, co] if m is None else [f, m, co]
    return DerivedMixValues(
        wc_ratio=wcr,
        mix_ratio_string=_build_mix_string(c, parts, wcr if include_water_term else None),
    )
