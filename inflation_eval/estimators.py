"""Inflation measures computed from CPI bases and country structures."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Type, Union

import numpy as np

from . import transforms as tf
from .country import CountryStructure
from .cpibase import VarCPIBase


class InflationFunction(ABC):
    """Base class of the inflation measures.

    Subclasses implement :meth:`measure`, the monthly variation of the
    measure over one base. Calling the function on a base or a structure
    gives the year-over-year trajectory, one value per month from the
    twelfth month on.
    """

    name = "Inflation measure"

    @abstractmethod
    def measure(self, base: VarCPIBase) -> np.ndarray:
        """Monthly variation of the measure, one value per period of ``base``."""

    def monthly(self, obj: Union[VarCPIBase, CountryStructure]) -> np.ndarray:
        if isinstance(obj, CountryStructure):
            return np.concatenate([self.measure(base) for base in obj.bases])
        return self.measure(obj)

    def __call__(self, obj: Union[VarCPIBase, CountryStructure]) -> np.ndarray:
        # Bases are chained into a single index, so the trajectory is continuous across regimes.
        idx = tf.to_index(self.monthly(obj))
        return tf.annual_change(idx)[11:]

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class InflationSimpleMean(InflationFunction):
    """Unweighted mean of the item variations."""

    name = "Simple mean"

    def measure(self, base: VarCPIBase) -> np.ndarray:
        return base.v.mean(axis=1)


class InflationWeightedMean(InflationFunction):
    """Weighted mean of the item variations, weights normalized to one."""

    name = "Weighted mean"

    def measure(self, base: VarCPIBase) -> np.ndarray:
        total = base.w.sum()
        if total <= 0:
            raise ValueError("Weighted mean needs at least one positive weight")
        return base.v @ (base.w / total)


INFLATION_METHODS: Dict[str, Type[InflationFunction]] = {
    "simple_mean": InflationSimpleMean,
    "weighted_mean": InflationWeightedMean,
}


def get_inflation_function(name: str) -> InflationFunction:
    try:
        return INFLATION_METHODS[name]()
    except KeyError:
        raise ValueError(f"Unknown inflation measure '{name}'") from None
