"""Trend factors applied on top of resampled variations."""
from __future__ import annotations

from typing import List

import numpy as np

from .country import CountryStructure
from .cpibase import VarCPIBase
from .errors import ShapeMismatch


def apply_trend(cs: CountryStructure, trend) -> CountryStructure:
    """Scale every month's gross variation by the matching trend factor.

    ``v' = ((1 + v / 100) * trend[t] - 1) * 100``, with ``trend`` indexed over
    the whole structure. ``trend`` must cover at least ``cs.periods`` months.
    """
    trend = np.asarray(trend, dtype=cs.dtype)
    if trend.ndim != 1 or trend.size < cs.periods:
        raise ShapeMismatch(f"Trend of {trend.size} factors is shorter than {cs.periods} periods")
    bases: List[VarCPIBase] = []
    offset = 0
    for base in cs.bases:
        factors = trend[offset : offset + base.periods, np.newaxis]
        v = ((1 + base.v / 100) * factors - 1) * 100
        bases.append(VarCPIBase(v, base.w, base.dates, base.baseindex))
        offset += base.periods
    return cs.with_bases(bases)
