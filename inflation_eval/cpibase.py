"""Containers for one CPI base: variations or indices, item weights and dates."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np
import pandas as pd

from . import transforms as tf
from .errors import CPIDataError, ShapeMismatch, UnknownItem

BaseIndex = Union[float, np.ndarray]


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr = np.array(arr, copy=True)
    arr.setflags(write=False)
    return arr


def _matrix(values, dtype=None) -> np.ndarray:
    arr = np.asarray(values, dtype=dtype)
    if not np.issubdtype(arr.dtype, np.floating):
        arr = arr.astype(float)
    if arr.ndim != 2:
        raise ShapeMismatch(f"Expected a periods x items matrix, got {arr.ndim} dimensions")
    return arr


def month_dates(dates) -> pd.DatetimeIndex:
    """Normalize dates to month starts and check they are consecutive months."""
    if isinstance(dates, pd.PeriodIndex):
        index = dates.to_timestamp(how="start")
    else:
        index = pd.DatetimeIndex(pd.to_datetime(dates))
    index = index.to_period("M").to_timestamp(how="start")
    ordinals = np.asarray(index.year * 12 + index.month)
    if ordinals.size > 1 and not np.all(np.diff(ordinals) == 1):
        raise CPIDataError("Dates must be strictly increasing consecutive months")
    return index


def _read_frames(
    df: pd.DataFrame,
    gb: pd.DataFrame,
    date_col: str,
    code_col: str,
    weight_col: str,
) -> Tuple[np.ndarray, np.ndarray, pd.DatetimeIndex]:
    data = df.set_index(date_col) if date_col in df.columns else df
    codes = list(gb[code_col])
    missing = [code for code in codes if code not in data.columns]
    if missing:
        raise UnknownItem(f"Weights reference items without data: {missing}")
    weighted = set(codes)
    unweighted = [col for col in data.columns if col not in weighted]
    if unweighted or len(codes) != data.shape[1]:
        raise ShapeMismatch(
            f"Index table has {data.shape[1]} items but weights table has {len(codes)}"
        )
    ipc = data[codes].to_numpy(dtype=float)
    w = gb[weight_col].to_numpy(dtype=float)
    return ipc, w, month_dates(data.index)


class _CPIBaseMixin:
    """Validation and accessors shared by the CPI base containers."""

    w: np.ndarray
    dates: pd.DatetimeIndex
    baseindex: BaseIndex

    def _init_common(self, data: np.ndarray) -> None:
        periods, items = data.shape
        w = np.asarray(self.w, dtype=data.dtype)
        if w.ndim != 1 or w.shape[0] != items:
            raise ShapeMismatch(f"Got {w.size} weights for {items} items")
        if np.any(w < 0):
            raise CPIDataError("Item weights must be non-negative")
        dates = month_dates(self.dates)
        if len(dates) != periods:
            raise ShapeMismatch(f"Got {len(dates)} dates for {periods} periods")
        base = np.asarray(self.baseindex, dtype=data.dtype)
        if base.ndim == 0:
            baseindex: BaseIndex = float(base)
        elif base.shape == (items,):
            baseindex = _readonly(base)
        else:
            raise ShapeMismatch(f"Base index of shape {base.shape} does not match {items} items")
        object.__setattr__(self, "w", _readonly(w))
        object.__setattr__(self, "dates", dates)
        object.__setattr__(self, "baseindex", baseindex)

    @property
    def _data(self) -> np.ndarray:
        raise NotImplementedError

    @property
    def periods(self) -> int:
        return int(self._data.shape[0])

    @property
    def items(self) -> int:
        return int(self._data.shape[1])

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    @property
    def start_date(self) -> pd.Timestamp:
        return self.dates[0]

    @property
    def final_date(self) -> pd.Timestamp:
        return self.dates[-1]

    @property
    def date_range(self) -> Tuple[pd.Timestamp, pd.Timestamp]:
        return self.start_date, self.final_date

    @property
    def has_vector_base(self) -> bool:
        return isinstance(self.baseindex, np.ndarray)

    def __repr__(self) -> str:
        span = f"{self.start_date:%Y-%m}..{self.final_date:%Y-%m}" if self.periods else "empty"
        return (
            f"{type(self).__name__}(periods={self.periods}, items={self.items}, "
            f"dates={span}, dtype={self.dtype})"
        )


@dataclass(frozen=True, eq=False, repr=False)
class VarCPIBase(_CPIBaseMixin):
    """Month-over-month variations (periods in rows, items in columns)."""

    v: np.ndarray
    w: np.ndarray
    dates: pd.DatetimeIndex
    baseindex: BaseIndex = 100.0

    def __post_init__(self) -> None:
        v = _matrix(self.v)
        self._init_common(v)
        object.__setattr__(self, "v", _readonly(v))

    @property
    def _data(self) -> np.ndarray:
        return self.v

    @classmethod
    def from_frames(
        cls,
        df: pd.DataFrame,
        gb: pd.DataFrame,
        baseindex: BaseIndex = 100.0,
        date_col: str = "date",
        code_col: str = "code",
        weight_col: str = "weight",
    ) -> "VarCPIBase":
        """Build from an index table and a weights table."""
        ipc, w, dates = _read_frames(df, gb, date_col, code_col, weight_col)
        return cls(tf.to_variation(ipc, baseindex), w, dates, baseindex)

    def replace_v(self, v: np.ndarray, start=None) -> "VarCPIBase":
        """New base with variations ``v`` and dates extrapolated from ``start``.

        ``v`` may have a different number of rows; dates are never reused from
        this base.
        """
        v = _matrix(v, dtype=self.dtype)
        first = self.start_date if start is None else start
        return VarCPIBase(v, self.w, tf.get_dates(first, v.shape[0]), self.baseindex)

    def slice_rows(self, start: int, stop: int) -> "VarCPIBase":
        return VarCPIBase(self.v[start:stop], self.w, self.dates[start:stop], self.baseindex)

    def to_index(self) -> "IndexCPIBase":
        return IndexCPIBase(tf.to_index(self.v, self.baseindex), self.w, self.dates, self.baseindex)


@dataclass(frozen=True, eq=False, repr=False)
class IndexCPIBase(_CPIBaseMixin):
    """Price index levels (periods in rows, items in columns).

    The base period itself is not a row; it is given by ``baseindex``.
    """

    ipc: np.ndarray
    w: np.ndarray
    dates: pd.DatetimeIndex
    baseindex: BaseIndex = 100.0

    def __post_init__(self) -> None:
        ipc = _matrix(self.ipc)
        self._init_common(ipc)
        object.__setattr__(self, "ipc", _readonly(ipc))

    @property
    def _data(self) -> np.ndarray:
        return self.ipc

    @classmethod
    def from_frames(
        cls,
        df: pd.DataFrame,
        gb: pd.DataFrame,
        baseindex: BaseIndex = 100.0,
        date_col: str = "date",
        code_col: str = "code",
        weight_col: str = "weight",
    ) -> "IndexCPIBase":
        ipc, w, dates = _read_frames(df, gb, date_col, code_col, weight_col)
        return cls(ipc, w, dates, baseindex)

    def to_variation(self) -> VarCPIBase:
        return VarCPIBase(tf.to_variation(self.ipc, self.baseindex), self.w, self.dates, self.baseindex)


@dataclass(frozen=True, eq=False, repr=False)
class FullCPIBase(_CPIBaseMixin):
    """Index levels and their variations side by side."""

    ipc: np.ndarray
    v: np.ndarray
    w: np.ndarray
    dates: pd.DatetimeIndex
    baseindex: BaseIndex = 100.0

    def __post_init__(self) -> None:
        ipc = _matrix(self.ipc)
        v = _matrix(self.v, dtype=ipc.dtype)
        if v.shape != ipc.shape:
            raise ShapeMismatch(f"Index matrix {ipc.shape} and variations {v.shape} differ")
        self._init_common(ipc)
        object.__setattr__(self, "ipc", _readonly(ipc))
        object.__setattr__(self, "v", _readonly(v))

    @property
    def _data(self) -> np.ndarray:
        return self.ipc

    @classmethod
    def from_frames(
        cls,
        df: pd.DataFrame,
        gb: pd.DataFrame,
        baseindex: BaseIndex = 100.0,
        date_col: str = "date",
        code_col: str = "code",
        weight_col: str = "weight",
    ) -> "FullCPIBase":
        ipc, w, dates = _read_frames(df, gb, date_col, code_col, weight_col)
        return cls(ipc, tf.to_variation(ipc, baseindex), w, dates, baseindex)

    def to_var(self) -> VarCPIBase:
        return VarCPIBase(self.v, self.w, self.dates, self.baseindex)

    def to_index_base(self) -> IndexCPIBase:
        return IndexCPIBase(self.ipc, self.w, self.dates, self.baseindex)
