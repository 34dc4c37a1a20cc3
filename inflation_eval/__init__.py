"""Simulation tools for evaluating measures of underlying inflation."""
from . import (
    config,
    country,
    cpibase,
    errors,
    estimators,
    hashing,
    metrics,
    resample,
    simulate,
    transforms,
    trends,
    validate,
)
from .country import CountryStructure
from .cpibase import FullCPIBase, IndexCPIBase, VarCPIBase
from .errors import (
    CPIDataError,
    EmptyRange,
    IndexOutOfRange,
    ShapeMismatch,
    UnknownItem,
    UnsupportedInputLength,
)
from .estimators import InflationFunction, InflationSimpleMean, InflationWeightedMean
from .resample import (
    ResampleFunction,
    ResampleGSBB,
    ResampleGSBBMod,
    ResampleSBB,
    ScrambleVarMonths,
)

__all__ = [
    "config",
    "country",
    "cpibase",
    "errors",
    "estimators",
    "hashing",
    "metrics",
    "resample",
    "simulate",
    "transforms",
    "trends",
    "validate",
    "CountryStructure",
    "FullCPIBase",
    "IndexCPIBase",
    "VarCPIBase",
    "CPIDataError",
    "EmptyRange",
    "IndexOutOfRange",
    "ShapeMismatch",
    "UnknownItem",
    "UnsupportedInputLength",
    "InflationFunction",
    "InflationSimpleMean",
    "InflationWeightedMean",
    "ResampleFunction",
    "ResampleGSBB",
    "ResampleGSBBMod",
    "ResampleSBB",
    "ScrambleVarMonths",
]
