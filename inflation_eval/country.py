"""Country structures: consecutive CPI bases of one country."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple

import numpy as np
import pandas as pd

from .cpibase import VarCPIBase, month_dates
from .errors import CPIDataError, EmptyRange, IndexOutOfRange, ShapeMismatch

logger = logging.getLogger(__name__)

UNIFORM = "uniform"
MIXED = "mixed"


def _layout(base: VarCPIBase) -> Tuple[int, bool]:
    return base.items, base.has_vector_base


def _month(date) -> pd.Timestamp:
    return pd.Period(date, freq="M").to_timestamp(how="start")


@dataclass(frozen=True, eq=False)
class CountryStructure:
    """Ordered CPI bases covering one gap-free monthly history.

    ``kind`` tags the structure as ``"uniform"`` when every base has the same
    item count and base-index form, and ``"mixed"`` otherwise. Operations do
    not depend on the tag.
    """

    bases: Tuple[VarCPIBase, ...]
    kind: str = ""

    def __post_init__(self) -> None:
        bases = tuple(self.bases)
        if not bases:
            raise CPIDataError("A country structure needs at least one base")
        dtypes = {base.dtype for base in bases}
        if len(dtypes) > 1:
            raise TypeError(f"Bases mix element types: {sorted(str(d) for d in dtypes)}")
        # Concatenated dates must still be consecutive months.
        month_dates(pd.DatetimeIndex(np.concatenate([base.dates.values for base in bases])))

        uniform = len({_layout(base) for base in bases}) == 1
        kind = self.kind or (UNIFORM if uniform else MIXED)
        if kind == UNIFORM and not uniform:
            raise ShapeMismatch("Bases of a uniform structure must share their item layout")
        if kind not in (UNIFORM, MIXED):
            raise ValueError(f"Unknown structure kind '{kind}'")
        object.__setattr__(self, "bases", bases)
        object.__setattr__(self, "kind", kind)

    @classmethod
    def uniform(cls, *bases: VarCPIBase) -> "CountryStructure":
        return cls(bases, UNIFORM)

    @classmethod
    def mixed(cls, *bases: VarCPIBase) -> "CountryStructure":
        return cls(bases, MIXED)

    def with_bases(self, bases: Sequence[VarCPIBase]) -> "CountryStructure":
        """Same kind of structure over new bases."""
        return CountryStructure(tuple(bases), self.kind)

    @property
    def dtype(self) -> np.dtype:
        return self.bases[0].dtype

    @property
    def periods(self) -> int:
        return sum(base.periods for base in self.bases)

    @property
    def infl_periods(self) -> int:
        """Periods with a year-over-year inflation figure."""
        return max(self.periods - 11, 0)

    @property
    def dates(self) -> pd.DatetimeIndex:
        return self.bases[0].dates.append([base.dates for base in self.bases[1:]])

    @property
    def infl_dates(self) -> pd.DatetimeIndex:
        return self.dates[11:]

    @property
    def start_date(self) -> pd.Timestamp:
        return self.bases[0].start_date

    @property
    def final_date(self) -> pd.Timestamp:
        return self.bases[-1].final_date

    def __len__(self) -> int:
        return len(self.bases)

    def __iter__(self) -> Iterator[VarCPIBase]:
        return iter(self.bases)

    def __getitem__(self, key):
        if isinstance(key, (int, np.integer)):
            n = len(self.bases)
            if not -n <= key < n:
                raise IndexOutOfRange(f"Base {key} out of range for {n} bases")
            return self.bases[key]
        if isinstance(key, slice):
            if key.step is not None:
                raise ValueError("Date slices do not take a step")
            return self.slice(key.start, key.stop) if key.start is not None else self.slice(key.stop)
        return self.slice(key)

    def slice(self, *dates) -> "CountryStructure":
        """Copy restricted to a date range.

        ``slice(final_date)`` keeps everything up to ``final_date``;
        ``slice(start_date, final_date)`` keeps the inclusive range. Bases
        outside the range are dropped and straddling bases trimmed.
        """
        if len(dates) == 1:
            start, final = self.start_date, dates[0]
        elif len(dates) == 2:
            start, final = dates
        else:
            raise TypeError("slice() takes a final date or a start and a final date")
        start = self.start_date if start is None else _month(start)
        final = self.final_date if final is None else _month(final)

        trimmed: List[VarCPIBase] = []
        for base in self.bases:
            mask = (base.dates >= start) & (base.dates <= final)
            if not mask.any():
                continue
            rows = np.flatnonzero(mask)
            trimmed.append(base.slice_rows(int(rows[0]), int(rows[-1]) + 1))
        if not trimmed:
            raise EmptyRange(f"No periods between {start:%Y-%m} and {final:%Y-%m}")
        logger.debug(
            f"Sliced structure to {start:%Y-%m}..{final:%Y-%m}: {len(trimmed)} of {len(self.bases)} bases"
        )
        return self.with_bases(trimmed)

    def __repr__(self) -> str:
        bases = ", ".join(repr(base) for base in self.bases)
        return f"CountryStructure(kind={self.kind!r}, bases=({bases}))"
