"""Resampling methods for monthly CPI variations.

Every method implements :meth:`ResampleFunction.draw_matrix`, which takes a
periods x items matrix and an explicit ``numpy.random.Generator``. Applying
the method to a :class:`VarCPIBase` or a :class:`CountryStructure` is handled
once in the base class, as is the parametric (expected value) counterpart.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional, Type, Union

import numpy as np
import pandas as pd

from .country import CountryStructure
from .cpibase import VarCPIBase
from .errors import UnsupportedInputLength

logger = logging.getLogger(__name__)

MONTHS = 12

Resampleable = Union[np.ndarray, VarCPIBase, CountryStructure]


def _check_rng(rng) -> np.random.Generator:
    if not isinstance(rng, np.random.Generator):
        raise TypeError("Resampling needs an explicit numpy.random.Generator")
    return rng


def month_average(vmat: np.ndarray, periods: Optional[int] = None) -> np.ndarray:
    """Per item, the mean of each calendar-month slot across years.

    Row ``t`` of the result holds the average of rows ``t % 12``, ``t % 12 + 12``,
    ... of ``vmat``. ``periods`` extends (or shortens) the result cyclically.
    """
    vmat = np.asarray(vmat)
    n = vmat.shape[0]
    periods = n if periods is None else int(periods)
    slots = min(MONTHS, n)
    if periods > slots and slots < MONTHS:
        raise UnsupportedInputLength(f"Need a full year of data to extend {n} periods to {periods}")
    means = np.empty((slots,) + vmat.shape[1:], dtype=vmat.dtype)
    for m in range(slots):
        means[m] = vmat[m::MONTHS].mean(axis=0)
    return means[np.arange(periods) % MONTHS]


def _next_month(date: pd.Timestamp) -> pd.Timestamp:
    return (pd.Period(date, freq="M") + 1).to_timestamp(how="start")


def _rebuild(
    cs: CountryStructure, fn: Callable[[VarCPIBase, pd.Timestamp], VarCPIBase]
) -> CountryStructure:
    bases: List[VarCPIBase] = []
    start = cs.start_date
    for base in cs.bases:
        new_base = fn(base, start)
        if new_base.periods != base.periods:
            logger.debug(
                f"Base starting {base.start_date:%Y-%m} went from {base.periods} to {new_base.periods} periods"
            )
        bases.append(new_base)
        start = _next_month(new_base.final_date)
    return cs.with_bases(bases)


class ResampleFunction(ABC):
    """Base class of the resampling methods."""

    name = "Resampling method"

    @abstractmethod
    def draw_matrix(self, vmat: np.ndarray, rng: np.random.Generator) -> np.ndarray:
        """Return a resampled copy of ``vmat`` with at least as many rows."""

    def parametric_matrix(self, vmat: np.ndarray) -> np.ndarray:
        """Expected value of :meth:`draw_matrix` draws; month averages by default."""
        return month_average(vmat)

    def resample_base(
        self, base: VarCPIBase, rng: np.random.Generator, start=None
    ) -> VarCPIBase:
        """Resample one base, rebuilding its dates from its start date."""
        return base.replace_v(self.draw_matrix(base.v, _check_rng(rng)), start)

    def resample_structure(self, cs: CountryStructure, rng: np.random.Generator) -> CountryStructure:
        """Resample every base independently; blocks never cross bases."""
        _check_rng(rng)
        return _rebuild(cs, lambda base, start: self.resample_base(base, rng, start))

    def __call__(self, obj: Resampleable, rng: np.random.Generator):
        if isinstance(obj, CountryStructure):
            return self.resample_structure(obj, rng)
        if isinstance(obj, VarCPIBase):
            return self.resample_base(obj, rng)
        return self.draw_matrix(np.asarray(obj), _check_rng(rng))

    def parametric(self, obj: Resampleable):
        """Parametric variations of a matrix, base or country structure."""
        if isinstance(obj, CountryStructure):
            return _rebuild(obj, lambda base, start: base.replace_v(self.parametric_matrix(base.v), start))
        if isinstance(obj, VarCPIBase):
            return obj.replace_v(self.parametric_matrix(obj.v))
        return self.parametric_matrix(np.asarray(obj))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def scramblevar(vmat: np.ndarray, rng: np.random.Generator, inplace: bool = False) -> np.ndarray:
    """Permute every column of ``vmat`` within each calendar-month slot.

    With ``inplace=True`` the caller's matrix is overwritten.
    """
    _check_rng(rng)
    out = vmat if inplace else np.array(vmat, copy=True)
    for m in range(min(MONTHS, out.shape[0])):
        out[m::MONTHS] = rng.permuted(out[m::MONTHS], axis=0)
    return out


class ScrambleVarMonths(ResampleFunction):
    """Scramble each item's values among the same calendar months."""

    name = "Month-wise scramble"

    def draw_matrix(self, vmat: np.ndarray, rng: np.random.Generator) -> np.ndarray:
        return scramblevar(vmat, rng)


class ResampleSBB(ResampleFunction):
    """Stationary block bootstrap (Politis and Romano).

    Block lengths are geometric with mean ``block_length``; blocks start at a
    uniformly drawn row and wrap around the end of the sample. Rows are copied
    whole, so items keep their joint behaviour inside a block.
    """

    def __init__(self, block_length: float = 36):
        if block_length < 1:
            raise ValueError("Expected block length must be at least 1")
        self.block_length = block_length
        self.name = f"Stationary block bootstrap (expected block length {block_length})"

    def draw_block_lengths(self, n: int, rng: np.random.Generator) -> np.ndarray:
        """Geometric block lengths until they cover ``n`` rows; the last one is not truncated."""
        lengths: List[int] = []
        total = 0
        while total < n:
            length = int(rng.geometric(1.0 / self.block_length))
            lengths.append(length)
            total += length
        return np.array(lengths, dtype=np.intp)

    def draw_indices(self, n: int, rng: np.random.Generator) -> np.ndarray:
        """Row indices of one bootstrap sample of length ``n``."""
        _check_rng(rng)
        lengths = self.draw_block_lengths(n, rng)
        starts = rng.integers(n, size=lengths.size)
        idx = np.empty(n, dtype=np.intp)
        pos = 0
        for start, length in zip(starts, lengths):
            take = min(int(length), n - pos)
            idx[pos : pos + take] = (start + np.arange(take)) % n
            pos += take
        return idx

    def draw_matrix(self, vmat: np.ndarray, rng: np.random.Generator) -> np.ndarray:
        vmat = np.asarray(vmat)
        return vmat[self.draw_indices(vmat.shape[0], rng)]

    def __repr__(self) -> str:
        return f"ResampleSBB({self.block_length})"


class ResampleGSBB(ResampleFunction):
    """Generalized seasonal block bootstrap.

    Fixed-length blocks; a block placed at output row ``t`` starts at an input
    row of the same calendar month as ``t``.
    """

    def __init__(self, block_length: int = 12):
        if int(block_length) < 1:
            raise ValueError("Block length must be at least 1")
        self.block_length = int(block_length)
        self.name = f"Generalized seasonal block bootstrap (block length {self.block_length})"

    def draw_indices(self, n_in: int, n_out: int, rng: np.random.Generator) -> np.ndarray:
        _check_rng(rng)
        b = self.block_length
        if n_in < b + MONTHS - 1:
            raise UnsupportedInputLength(
                f"Blocks of {b} periods need at least {b + MONTHS - 1} observations, got {n_in}"
            )
        idx = np.empty(n_out, dtype=np.intp)
        for pos in range(0, n_out, b):
            candidates = np.arange(pos % MONTHS, n_in - b + 1, MONTHS)
            start = candidates[rng.integers(candidates.size)]
            take = min(b, n_out - pos)
            idx[pos : pos + take] = start + np.arange(take)
        return idx

    def draw_matrix(self, vmat: np.ndarray, rng: np.random.Generator) -> np.ndarray:
        vmat = np.asarray(vmat)
        n = vmat.shape[0]
        return vmat[self.draw_indices(n, n, rng)]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.block_length})"


class ResampleGSBBMod(ResampleGSBB):
    """Seasonal block bootstrap extending 120 observations to 300 periods.

    Blocks are 25 periods long. The parametric series repeats the month
    averages of the input over the 300 periods.
    """

    INPUT_PERIODS = 120
    OUTPUT_PERIODS = 300

    def __init__(self):
        super().__init__(25)
        self.name = "Modified generalized seasonal block bootstrap (25 periods, 300 horizon)"

    def _check_length(self, vmat: np.ndarray) -> None:
        if vmat.shape[0] != self.INPUT_PERIODS:
            raise UnsupportedInputLength(
                f"{self.name} needs exactly {self.INPUT_PERIODS} observations, got {vmat.shape[0]}"
            )

    def draw_matrix(self, vmat: np.ndarray, rng: np.random.Generator) -> np.ndarray:
        vmat = np.asarray(vmat)
        self._check_length(vmat)
        return vmat[self.draw_indices(self.INPUT_PERIODS, self.OUTPUT_PERIODS, rng)]

    def parametric_matrix(self, vmat: np.ndarray) -> np.ndarray:
        vmat = np.asarray(vmat)
        self._check_length(vmat)
        return month_average(vmat, self.OUTPUT_PERIODS)

    def __repr__(self) -> str:
        return "ResampleGSBBMod()"


RESAMPLE_METHODS: Dict[str, Type[ResampleFunction]] = {
    "scramble": ScrambleVarMonths,
    "sbb": ResampleSBB,
    "gsbb": ResampleGSBB,
    "gsbb_mod": ResampleGSBBMod,
}

BLOCK_METHODS = ("sbb", "gsbb")


def get_resample_function(name: str, block_length: Optional[float] = None) -> ResampleFunction:
    """Build a resampling method from its configuration name."""
    try:
        cls = RESAMPLE_METHODS[name]
    except KeyError:
        raise ValueError(f"Unknown resampling method '{name}'") from None
    if block_length is None:
        return cls()
    if name not in BLOCK_METHODS:
        raise ValueError(f"Resampling method '{name}' does not take a block length")
    return cls(block_length)
