"""Configuration validation utilities."""
from __future__ import annotations

from numbers import Real
from typing import Dict, List

import pandas as pd

from .estimators import INFLATION_METHODS
from .resample import BLOCK_METHODS, RESAMPLE_METHODS


def _is_number(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def validate_config(cfg: Dict) -> List[str]:
    """Human-readable problems with ``cfg``; never raises on malformed values."""
    warnings: List[str] = []

    nsim = cfg.get("nsim")
    if not _is_number(nsim):
        warnings.append(f"Number of simulations must be a number, got {nsim!r}.")
    elif nsim <= 0:
        warnings.append("Number of simulations must be positive.")

    max_workers = cfg.get("max_workers", 1)
    if not _is_number(max_workers):
        warnings.append(f"Worker count must be a number, got {max_workers!r}.")
    elif max_workers <= 0:
        warnings.append("Worker count must be positive.")

    if not _is_number(cfg.get("seed_base", 0)):
        warnings.append(f"Seed base must be an integer, got {cfg.get('seed_base')!r}.")

    resample = cfg.get("resample") or {}
    method = resample.get("method")
    if method not in RESAMPLE_METHODS:
        warnings.append(f"Unknown resampling method '{method}'.")
    block_length = resample.get("block_length")
    if block_length is not None:
        if method not in BLOCK_METHODS:
            warnings.append(f"Resampling method '{method}' ignores the block length.")
        elif not _is_number(block_length):
            warnings.append(f"Block length must be a number, got {block_length!r}.")
        elif block_length < 1:
            warnings.append("Block length must be at least 1.")

    inflation = cfg.get("inflation") or {}
    if inflation.get("method") not in INFLATION_METHODS:
        warnings.append(f"Unknown inflation measure '{inflation.get('method')}'.")

    trend = cfg.get("trend")
    if trend is not None:
        if isinstance(trend, (str, bytes)) or not hasattr(trend, "__iter__"):
            warnings.append("Trend must be a list of factors.")
        elif not all(_is_number(factor) for factor in trend):
            warnings.append("Trend factors must be numbers.")
        elif any(factor <= 0 for factor in trend):
            warnings.append("Trend factors should be positive.")

    final_date = cfg.get("final_date")
    if final_date is not None:
        try:
            pd.Period(final_date, freq="M")
        except (TypeError, ValueError):
            warnings.append(f"Final date '{final_date}' is not a valid YYYY-MM month.")

    return warnings
